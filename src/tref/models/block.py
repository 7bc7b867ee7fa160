"""
Data models for TREF blocks.

A block is the atomic, self-contained unit of knowledge: content, metadata,
references and lineage. A draft is the same thing before it has an id.

INVARIANTS:
-----------
1. ``v`` is always 1.
2. Blocks are immutable. A content change produces a NEW block with a new id.
3. ``id`` is derived from every other field (see ``tref.identity``) and is
   never part of its own hash input.
4. ``parent`` is a weak reference: a lookup key into whatever store the
   caller uses. It is never dereferenced here.
5. Optional fields are omitted, not serialized as null, so that the
   canonical encoding stays clean.
"""

from __future__ import annotations

from typing import Annotated, Any, Optional

from pydantic import BaseModel, Field

from .references import Reference, UrlStr
from .timestamps import IsoTimestamp

DEFAULT_LICENSE = "CC-BY-4.0"
TREF_VERSION = 1

BlockId = Annotated[str, Field(pattern=r"^sha256:[0-9a-f]{64}$")]


class Meta(BaseModel):
    """Block metadata. ``created`` and ``license`` are required."""

    created: IsoTimestamp
    license: str
    author: Optional[str] = None
    modified: Optional[IsoTimestamp] = None
    lang: Optional[str] = Field(default=None, pattern=r"^[A-Za-z]{2}$")  # ISO 639-1

    model_config = {
        "extra": "forbid",
        "frozen": True,
    }


class Origin(BaseModel):
    """Where a block is canonically published."""

    url: UrlStr
    title: Optional[str] = None

    model_config = {
        "extra": "forbid",
        "frozen": True,
    }


class Draft(BaseModel):
    """
    A block without its id (pre-publication form).

    Drafts are transient: created for one ``publish``/``derive`` call and
    consumed by the identity generator.
    """

    # Strict int: "1", true and 1.0 are not version 1.
    v: int = Field(strict=True, ge=TREF_VERSION, le=TREF_VERSION)
    content: str = Field(min_length=1)
    meta: Meta
    refs: tuple[Reference, ...] = ()
    parent: Optional[BlockId] = None
    origin: Optional[Origin] = None

    model_config = {
        "extra": "forbid",
        "frozen": True,
    }

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict with optional fields (and empty ``refs``) omitted."""
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        if not data.get("refs"):
            data.pop("refs", None)
        return data


class Block(Draft):
    """A published block: a draft plus its content-addressed id."""

    id: BlockId

    def to_draft(self) -> Draft:
        data = self.to_dict()
        del data["id"]
        return Draft.model_validate(data)
