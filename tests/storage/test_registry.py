import json
from concurrent.futures import ThreadPoolExecutor

import pytest

from tref.errors import RegistryError
from tref.identity import sha256_hex
from tref.storage.registry import (
    REGISTRY_FILE,
    Registry,
    RegistryEntry,
    add_to_registry,
    get_registry_stats,
    is_registered,
    list_registered,
    load_registry,
    remove_from_registry,
    save_registry,
)


def _id(seed: str) -> str:
    return "sha256:" + sha256_hex(seed)


def test_load_registry_missing_file_is_empty(tmp_path):
    registry = load_registry(tmp_path)
    assert registry.v == 1
    assert registry.blocks == []


def test_add_to_registry_writes_index(tmp_path):
    assert add_to_registry(_id("a"), tmp_path, added="2025-01-06T12:00:00.000Z")
    data = json.loads((tmp_path / REGISTRY_FILE).read_text(encoding="utf-8"))
    assert data == {"v": 1, "blocks": [{"id": _id("a"), "added": "2025-01-06T12:00:00.000Z"}]}


def test_add_to_registry_skips_duplicates(tmp_path):
    assert add_to_registry(_id("a"), tmp_path)
    assert not add_to_registry(_id("a"), tmp_path)
    assert list_registered(tmp_path) == [_id("a")]


def test_add_to_registry_normalizes_bare_hex(tmp_path):
    add_to_registry(sha256_hex("a"), tmp_path)
    assert list_registered(tmp_path) == [_id("a")]
    assert is_registered(sha256_hex("a"), tmp_path)


def test_add_to_registry_rejects_bad_id(tmp_path):
    with pytest.raises(ValueError):
        add_to_registry("sha256:bogus", tmp_path)


def test_add_to_registry_rejects_bad_timestamp(tmp_path):
    with pytest.raises(RegistryError):
        add_to_registry(_id("a"), tmp_path, added="garbage")
    assert list_registered(tmp_path) == []


def test_list_registered_keeps_order(tmp_path):
    for seed in ["c", "a", "b"]:
        add_to_registry(_id(seed), tmp_path)
    assert list_registered(tmp_path) == [_id("c"), _id("a"), _id("b")]


def test_is_registered(tmp_path):
    add_to_registry(_id("a"), tmp_path)
    assert is_registered(_id("a"), tmp_path)
    assert not is_registered(_id("b"), tmp_path)


def test_remove_from_registry(tmp_path):
    add_to_registry(_id("a"), tmp_path)
    add_to_registry(_id("b"), tmp_path)
    assert remove_from_registry(_id("a"), tmp_path)
    assert not remove_from_registry(_id("a"), tmp_path)
    assert list_registered(tmp_path) == [_id("b")]


def test_registry_stats(tmp_path):
    assert get_registry_stats(tmp_path).count == 0
    assert get_registry_stats(tmp_path).oldest is None

    add_to_registry(_id("mid"), tmp_path, added="2025-03-01T00:00:00.000Z")
    add_to_registry(_id("new"), tmp_path, added="2025-06-01T00:00:00.000Z")
    add_to_registry(_id("old"), tmp_path, added="2025-01-01T00:00:00+00:00")

    stats = get_registry_stats(tmp_path)
    assert stats.count == 3
    assert stats.oldest == "2025-01-01T00:00:00+00:00"
    assert stats.newest == "2025-06-01T00:00:00.000Z"


def test_save_and_load_registry(tmp_path):
    registry = Registry(blocks=[RegistryEntry(id=_id("a"), added="2025-01-06T12:00:00Z")])
    path = save_registry(registry, tmp_path / "nested")
    assert path.name == REGISTRY_FILE
    assert load_registry(tmp_path / "nested") == registry


def test_invalid_registry_json_raises(tmp_path):
    (tmp_path / REGISTRY_FILE).write_text("{broken", encoding="utf-8")
    with pytest.raises(RegistryError):
        load_registry(tmp_path)


def test_invalid_registry_shape_raises(tmp_path):
    (tmp_path / REGISTRY_FILE).write_text(json.dumps({"v": 2, "entries": []}), encoding="utf-8")
    with pytest.raises(RegistryError):
        add_to_registry(_id("a"), tmp_path)


def test_concurrent_adds_do_not_lose_entries(tmp_path):
    ids = [_id(str(i)) for i in range(40)]
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda block_id: add_to_registry(block_id, tmp_path), ids + ids))
    assert results.count(True) == len(ids)
    assert sorted(list_registered(tmp_path)) == sorted(ids)
