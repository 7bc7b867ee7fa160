"""
Canonical JSON encoding used as the input to block identity.

Two semantically equal values (same keys, same values, any insertion order)
always encode to the same string, and any nested change changes it.

Rules:
- object keys sorted at every nesting level
- arrays keep element order (order is semantic)
- no insignificant whitespace
- non-ASCII characters are emitted as-is (UTF-8 once encoded), not escaped
- integral floats are written as integers (``1.0`` encodes as ``1``)
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel


def _normalize(value: Any) -> Any:
    if isinstance(value, Mapping):
        normalized = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"Object keys must be strings, got {type(key).__name__}")
            normalized[key] = _normalize(item)
        return normalized
    if isinstance(value, (list, tuple)):
        return [_normalize(item) for item in value]
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def canonicalize(value: Any) -> str:
    """Return the canonical JSON encoding of a JSON-compatible value.

    Raises ``TypeError``/``ValueError`` for values JSON cannot represent
    (arbitrary objects, non-string object keys, NaN, infinities), and
    ``RecursionError`` for values nested deeper than the interpreter's
    recursion limit.
    """
    return json.dumps(
        _normalize(value),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def _drop_nulls(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _drop_nulls(item) for key, item in value.items() if item is not None}
    if isinstance(value, (list, tuple)):
        return [_drop_nulls(item) for item in value]
    return value


def identity_payload(value: BaseModel | Mapping[str, Any]) -> dict[str, Any]:
    """Prepare a draft or block for hashing.

    Removes ``id`` (an id cannot be part of its own input), null-valued
    object members and an empty ``refs`` list, so that absent and empty
    optional fields hash identically.
    """
    if isinstance(value, BaseModel):
        data = value.model_dump(mode="json", by_alias=True, exclude_none=True)
    elif isinstance(value, Mapping):
        data = dict(value)
    else:
        raise TypeError(f"Expected a mapping or model, got {type(value).__name__}")

    data.pop("id", None)
    payload = _drop_nulls(data)
    if payload.get("refs") in ([], ()):
        del payload["refs"]
    return payload
