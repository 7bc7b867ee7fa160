import pytest

from tref.canonical import canonicalize, identity_payload
from tref.publisher import create_draft


def test_canonicalize_sorts_keys():
    assert canonicalize({"z": 1, "a": 2, "m": 3}) == '{"a":2,"m":3,"z":1}'


def test_canonicalize_sorts_nested_keys():
    value = {"b": {"d": 1, "c": 2}, "a": {"y": {"k": True, "j": None}}}
    assert canonicalize(value) == '{"a":{"y":{"j":null,"k":true}},"b":{"c":2,"d":1}}'


def test_canonicalize_keeps_array_order():
    assert canonicalize({"a": [3, 1, 2]}) == '{"a":[3,1,2]}'


def test_canonicalize_sorts_keys_inside_array_objects():
    assert canonicalize([{"b": 1, "a": 2}, {"d": 3, "c": 4}]) == '[{"a":2,"b":1},{"c":4,"d":3}]'


def test_canonicalize_has_no_whitespace():
    encoded = canonicalize({"key": "value", "list": [1, 2, {"x": "y"}]})
    assert " " not in encoded
    assert "\n" not in encoded


def test_canonicalize_keeps_non_ascii_text():
    assert canonicalize({"text": "Grüße, 世界"}) == '{"text":"Grüße, 世界"}'


def test_canonicalize_is_insertion_order_independent():
    first = {"meta": {"license": "MIT", "created": "2025-01-06T12:00:00Z"}, "content": "x", "v": 1}
    second = {"v": 1, "content": "x", "meta": {"created": "2025-01-06T12:00:00Z", "license": "MIT"}}
    assert canonicalize(first) == canonicalize(second)


def test_canonicalize_nested_change_changes_encoding():
    assert canonicalize({"a": {"b": [1, {"c": 1}]}}) != canonicalize({"a": {"b": [1, {"c": 2}]}})


def test_canonicalize_writes_integral_floats_as_integers():
    assert canonicalize({"a": 1.0, "b": 1.5}) == '{"a":1,"b":1.5}'


def test_canonicalize_handles_empty_containers_and_scalars():
    assert canonicalize({}) == "{}"
    assert canonicalize([]) == "[]"
    assert canonicalize({"a": {}, "b": []}) == '{"a":{},"b":[]}'
    assert canonicalize("text") == '"text"'
    assert canonicalize(None) == "null"


def test_canonicalize_rejects_nan():
    with pytest.raises(ValueError):
        canonicalize({"a": float("nan")})


@pytest.mark.parametrize("value", [{True: 1}, {1: "a", "1": "b"}, {"a": {None: 1}}])
def test_canonicalize_rejects_non_string_keys(value):
    with pytest.raises(TypeError):
        canonicalize(value)


def test_identity_payload_removes_id_nulls_and_empty_refs():
    payload = identity_payload(
        {
            "v": 1,
            "id": "sha256:" + "0" * 64,
            "content": "x",
            "meta": {"created": "2025-01-06T12:00:00Z", "license": "MIT", "author": None},
            "refs": [],
            "parent": None,
        }
    )
    assert payload == {
        "v": 1,
        "content": "x",
        "meta": {"created": "2025-01-06T12:00:00Z", "license": "MIT"},
    }


def test_identity_payload_accepts_models():
    draft = create_draft("x", license="MIT", created="2025-01-06T12:00:00Z")
    assert identity_payload(draft) == {
        "v": 1,
        "content": "x",
        "meta": {"created": "2025-01-06T12:00:00Z", "license": "MIT"},
    }


def test_identity_payload_rejects_non_mappings():
    with pytest.raises(TypeError):
        identity_payload(["not", "a", "block"])
