"""
Content-addressed identity for TREF blocks.

ID = "sha256:" + hex(SHA-256(UTF-8(canonicalize(draft without id))))

The whole draft is hashed, not only ``content``: metadata, references,
lineage and origin are all covered, so editing any of them yields a new id.
"""

from __future__ import annotations

import hashlib
import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from .canonical import canonicalize, identity_payload

ID_PREFIX = "sha256:"
BLOCK_ID_PATTERN = re.compile(r"^sha256:[0-9a-f]{64}$")


def sha256_hex(data: str) -> str:
    """Lowercase hex SHA-256 digest of the UTF-8 bytes of ``data``."""
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def generate_id(value: BaseModel | Mapping[str, Any]) -> str:
    """Compute the block id for a draft (or a block, whose ``id`` is ignored)."""
    return ID_PREFIX + sha256_hex(canonicalize(identity_payload(value)))


def verify_id(block: Any) -> bool:
    """Check that ``block.id`` equals the id recomputed from its other fields.

    Never raises: malformed input is reported as ``False``.
    """
    if isinstance(block, BaseModel):
        data = block.model_dump(mode="json", by_alias=True, exclude_none=True)
    elif isinstance(block, Mapping):
        data = block
    else:
        return False

    block_id = data.get("id")
    if not isinstance(block_id, str) or not isinstance(data.get("content"), str):
        return False

    try:
        expected = generate_id(data)
    except (TypeError, ValueError, RecursionError):
        return False
    return block_id == expected


def is_block_id(value: Any) -> bool:
    return isinstance(value, str) and BLOCK_ID_PATTERN.fullmatch(value) is not None


def parse_block_id(value: str) -> str:
    """Return the bare hex digest of a block id.

    Accepts either ``sha256:<hex>`` or the bare hex form.
    """
    candidate = value if value.startswith(ID_PREFIX) else ID_PREFIX + value
    if not is_block_id(candidate):
        raise ValueError(f"Not a block id: {value!r}")
    return candidate[len(ID_PREFIX):]


def normalize_block_id(value: str) -> str:
    """Return ``value`` in the ``sha256:<hex>`` form."""
    return ID_PREFIX + parse_block_id(value)
