"""
Error taxonomy for TREF blocks.

Two failure kinds matter to callers and are kept apart because the
remediation differs:

- StructuralError: the candidate is not a well-formed Draft/Block/Reference.
  Fix the shape.
- IntegrityError: the block is well-formed but its ``id`` does not match the
  hash of its canonical encoding. Re-publish (or distrust the file).

Storage failures (missing files, permissions) are ordinary ``OSError``s and
are not wrapped.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """
    Specific structural failure classification.

    Collaborators use the kind to present actionable messages instead of a
    single generic "invalid block".
    """

    NOT_AN_OBJECT = "not_an_object"
    INVALID_VERSION = "invalid_version"
    MISSING_CONTENT = "missing_content"
    INVALID_META = "invalid_meta"
    INVALID_REFERENCE = "invalid_reference"
    INVALID_ID = "invalid_id"
    INVALID_PARENT = "invalid_parent"
    INVALID_ORIGIN = "invalid_origin"
    UNKNOWN_FIELD = "unknown_field"


class TrefError(Exception):
    """Base class for all errors raised by this package."""


class StructuralError(TrefError, ValueError):
    """Candidate is not a well-formed draft, block or reference."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        issues: Optional[list[dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.issues = issues or []

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class InvalidDraft(StructuralError):
    """Raised by ``publish``/``create_draft`` when the draft is malformed."""

    @classmethod
    def from_error(cls, error: StructuralError) -> "InvalidDraft":
        return cls(error.kind, error.message, error.issues)


class InvalidSource(StructuralError):
    """Raised by ``derive`` when the source block is malformed."""

    @classmethod
    def from_error(cls, error: StructuralError) -> "InvalidSource":
        return cls(error.kind, error.message, error.issues)


class IntegrityError(TrefError):
    """Structurally valid block whose id does not match its content hash."""

    def __init__(self, block_id: str, expected_id: str):
        super().__init__("ID does not match content hash")
        self.block_id = block_id
        self.expected_id = expected_id


class RegistryError(TrefError):
    """Registry index file exists but is not a valid index."""
