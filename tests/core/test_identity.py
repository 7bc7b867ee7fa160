import hashlib
import re

import pytest

from tref.identity import (
    generate_id,
    is_block_id,
    normalize_block_id,
    parse_block_id,
    sha256_hex,
    verify_id,
)
from tref.publisher import create_draft, publish

CREATED = "2025-01-06T12:00:00Z"
ID_RE = re.compile(r"^sha256:[0-9a-f]{64}$")


def _draft(content: str = "Hello", **meta) -> dict:
    return {
        "v": 1,
        "content": content,
        "meta": {"created": CREATED, "license": "MIT", **meta},
    }


def test_sha256_hex_matches_known_vector():
    assert sha256_hex("test") == "9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08"


def test_sha256_hex_is_64_lowercase_hex_chars():
    digest = sha256_hex("anything")
    assert len(digest) == 64
    assert digest == digest.lower()


def test_generate_id_format():
    assert ID_RE.match(generate_id(_draft()))


def test_generate_id_hashes_the_canonical_draft():
    canonical = '{"content":"Hello","meta":{"created":"2025-01-06T12:00:00Z","license":"MIT"},"v":1}'
    expected = "sha256:" + hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    assert generate_id(_draft()) == expected


def test_generate_id_is_deterministic():
    assert generate_id(_draft()) == generate_id(_draft())


def test_generate_id_ignores_key_order():
    reordered = {
        "meta": {"license": "MIT", "created": CREATED},
        "content": "Hello",
        "v": 1,
    }
    assert generate_id(reordered) == generate_id(_draft())


def test_generate_id_differs_for_different_content():
    assert generate_id(_draft("Hello")) != generate_id(_draft("Hello!"))


def test_generate_id_changes_on_metadata_only_change():
    assert generate_id(_draft()) != generate_id(_draft(author="someone"))


def test_generate_id_changes_on_reference_change():
    with_ref = {**_draft(), "refs": [{"type": "search", "query": "tref blocks"}]}
    assert generate_id(with_ref) != generate_id(_draft())


def test_generate_id_treats_absent_and_empty_refs_alike():
    assert generate_id({**_draft(), "refs": []}) == generate_id(_draft())


def test_generate_id_ignores_existing_id_field():
    with_id = {**_draft(), "id": "sha256:" + "a" * 64}
    assert generate_id(with_id) == generate_id(_draft())


def test_generate_id_same_for_model_and_mapping():
    draft = create_draft("Hello", license="MIT", created=CREATED)
    assert generate_id(draft) == generate_id(_draft())


def test_verify_id_true_for_published_block():
    block = publish(_draft())
    assert verify_id(block)
    assert verify_id(block.to_dict())


def test_verify_id_false_for_tampered_content():
    block = publish(_draft())
    tampered = {**block.to_dict(), "content": block.content + "x"}
    assert not verify_id(tampered)


def test_verify_id_false_for_tampered_metadata():
    block = publish(_draft())
    data = block.to_dict()
    data["meta"] = {**data["meta"], "license": "CC0-1.0"}
    assert not verify_id(data)


def test_verify_id_false_for_wrong_id():
    assert not verify_id({**_draft(), "id": "sha256:" + "0" * 64})


def test_verify_id_false_for_missing_or_non_string_id():
    assert not verify_id(_draft())
    assert not verify_id({**_draft(), "id": 12345})


def test_verify_id_false_for_malformed_input():
    assert not verify_id(None)
    assert not verify_id("sha256:abc")
    assert not verify_id(42)
    assert not verify_id({"id": "sha256:" + "0" * 64, "content": 7})
    assert not verify_id({"id": "sha256:" + "0" * 64, "content": "x", "bad": object()})


def test_verify_id_false_for_deeply_nested_input():
    nested = {}
    for _ in range(5000):
        nested = {"k": nested}
    assert not verify_id({"id": "sha256:" + "0" * 64, "content": "x", "meta": nested})


def test_block_id_helpers():
    digest = sha256_hex("test")
    assert is_block_id("sha256:" + digest)
    assert not is_block_id(digest)
    assert not is_block_id("sha256:" + digest + "\n")
    assert not is_block_id("sha256:" + digest.upper())
    assert parse_block_id("sha256:" + digest) == digest
    assert parse_block_id(digest) == digest
    assert normalize_block_id(digest) == "sha256:" + digest


def test_parse_block_id_rejects_garbage():
    with pytest.raises(ValueError):
        parse_block_id("sha256:xyz")
