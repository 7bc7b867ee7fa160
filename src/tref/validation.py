"""
Structural validation for drafts and blocks.

Pydantic does the field-level checking; this module is the boundary where
its ``ValidationError`` is translated into a ``StructuralError`` with a
specific ``ErrorKind``, so callers never see pydantic internals.

Structural validity of ``id`` (its format) is checked here. Whether the id
matches the content hash is a separate question answered by
``tref.identity.verify_id``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import ErrorKind, StructuralError
from .models.block import Block, Draft
from .models.results import Result

ModelT = TypeVar("ModelT", Draft, Block)

_KIND_BY_FIELD = {
    "v": ErrorKind.INVALID_VERSION,
    "content": ErrorKind.MISSING_CONTENT,
    "meta": ErrorKind.INVALID_META,
    "refs": ErrorKind.INVALID_REFERENCE,
    "id": ErrorKind.INVALID_ID,
    "parent": ErrorKind.INVALID_PARENT,
    "origin": ErrorKind.INVALID_ORIGIN,
}


def _classify(error: dict[str, Any]) -> ErrorKind:
    loc = error.get("loc") or ()
    if not loc:
        return ErrorKind.NOT_AN_OBJECT
    if error.get("type") == "extra_forbidden" and len(loc) == 1:
        return ErrorKind.UNKNOWN_FIELD
    return _KIND_BY_FIELD.get(str(loc[0]), ErrorKind.UNKNOWN_FIELD)


def _describe(error: dict[str, Any]) -> str:
    path = ".".join(str(part) for part in error.get("loc") or ())
    message = error.get("msg", "invalid value")
    return f"{path}: {message}" if path else message


def structural_error_from(exc: ValidationError) -> StructuralError:
    """Translate a pydantic ``ValidationError`` into a ``StructuralError``.

    The kind comes from the first failing field; the message lists every
    failure.
    """
    issues = exc.errors(include_url=False)
    kind = _classify(issues[0]) if issues else ErrorKind.NOT_AN_OBJECT
    message = "; ".join(_describe(issue) for issue in issues) or str(exc)
    return StructuralError(kind, message, issues)


def _as_payload(candidate: Any) -> Any:
    if isinstance(candidate, BaseModel):
        return candidate.model_dump(mode="json", by_alias=True, exclude_none=True)
    return candidate


def _validate(model: type[ModelT], candidate: Any) -> Result[ModelT]:
    if type(candidate) is model:
        return Result.ok(candidate)
    try:
        return Result.ok(model.model_validate(_as_payload(candidate)))
    except ValidationError as exc:
        return Result.fail(structural_error_from(exc))


def validate_draft(candidate: Any) -> Result[Draft]:
    """Check that ``candidate`` is a well-formed draft.

    An ``id`` member, if present, is ignored: it is derived and never part
    of a draft.
    """
    if isinstance(candidate, Block):
        return Result.ok(candidate.to_draft())
    if isinstance(candidate, Mapping) and "id" in candidate:
        candidate = {key: value for key, value in candidate.items() if key != "id"}
    return _validate(Draft, candidate)


def validate_block(candidate: Any) -> Result[Block]:
    """Check that ``candidate`` is a well-formed block (id format included)."""
    return _validate(Block, candidate)


def parse_draft(candidate: Any) -> Draft:
    return validate_draft(candidate).unwrap()


def parse_block(candidate: Any) -> Block:
    """Parse a block, raising ``StructuralError`` when it is malformed."""
    return validate_block(candidate).unwrap()


def safe_parse_block(candidate: Any) -> Result[Block]:
    """Parse a block without raising."""
    return validate_block(candidate)


def is_valid_block(candidate: Any) -> bool:
    return validate_block(candidate).success
