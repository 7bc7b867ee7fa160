"""
Publisher: the block lifecycle operations collaborators call.

Draft -> Block (``publish``) happens exactly once per logical block.
Block -> Block (``derive``) always yields a NEW block; the source is never
touched. Every function here is pure: no I/O, no logging, no shared state.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Optional

from pydantic import BaseModel

from .errors import ErrorKind, IntegrityError, InvalidDraft, InvalidSource
from .identity import generate_id, verify_id
from .models.block import DEFAULT_LICENSE, TREF_VERSION, Block, Draft
from .models.references import Reference, parse_reference
from .models.results import FailureKind, ValidationReport
from .models.timestamps import Timestamp, coerce_timestamp
from .validation import parse_block, validate_block, validate_draft


def _ref_payload(ref: Reference | Mapping[str, Any]) -> Any:
    if isinstance(ref, BaseModel):
        return ref.model_dump(mode="json", by_alias=True, exclude_none=True)
    return ref


def create_draft(
    content: str,
    *,
    author: Optional[str] = None,
    license: Optional[str] = None,
    lang: Optional[str] = None,
    refs: Optional[Iterable[Reference | Mapping[str, Any]]] = None,
    parent: Optional[str] = None,
    origin: Optional[Mapping[str, Any]] = None,
    created: Optional[Timestamp] = None,
) -> Draft:
    """
    Build a draft from content and options.

    ``meta.created`` is stamped with the current UTC time unless ``created``
    is given. Only supplied options end up in the draft; ``refs`` is set only
    when non-empty.

    Raises:
        InvalidDraft: content is empty or an option is malformed.
    """
    if not isinstance(content, str) or not content:
        raise InvalidDraft(ErrorKind.MISSING_CONTENT, "content: must be a non-empty string")

    meta: dict[str, Any] = {
        "created": coerce_timestamp(created),
        "license": license if license is not None else DEFAULT_LICENSE,
    }
    if author is not None:
        meta["author"] = author
    if lang is not None:
        meta["lang"] = lang

    payload: dict[str, Any] = {
        "v": TREF_VERSION,
        "content": content,
        "meta": meta,
    }
    ref_list = [_ref_payload(ref) for ref in refs or ()]
    if ref_list:
        payload["refs"] = ref_list
    if parent is not None:
        payload["parent"] = parent
    if origin is not None:
        payload["origin"] = dict(origin)

    result = validate_draft(payload)
    if not result.success:
        raise InvalidDraft.from_error(result.error)
    return result.data


def publish(draft: Draft | Mapping[str, Any]) -> Block:
    """
    Turn a draft into a block by attaching its content-addressed id.

    Raises:
        InvalidDraft: carrying the specific structural error kind.
    """
    result = validate_draft(draft)
    if not result.success:
        raise InvalidDraft.from_error(result.error)

    valid_draft = result.data
    block_id = generate_id(valid_draft)
    return Block.model_validate({**valid_draft.to_dict(), "id": block_id})


def derive(
    source: Block | Mapping[str, Any],
    new_content: str,
    *,
    author: Optional[str] = None,
    additional_refs: Optional[Iterable[Reference | Mapping[str, Any]]] = None,
    created: Optional[Timestamp] = None,
) -> Block:
    """
    Publish a new block derived from ``source``.

    The child inherits license, language and references (source refs first,
    then ``additional_refs``, order preserved) and records ``source.id`` as
    its parent. Author defaults to the source author. ``meta.modified`` and
    ``origin`` describe the source itself and are not inherited.

    Raises:
        InvalidSource: ``source`` is not a well-formed block.
        InvalidDraft: the new content or added refs are malformed.
    """
    result = validate_block(source)
    if not result.success:
        raise InvalidSource.from_error(result.error)
    parent = result.data

    try:
        extra_refs = [parse_reference(ref) for ref in additional_refs or ()]
    except ValueError as exc:
        raise InvalidDraft(ErrorKind.INVALID_REFERENCE, f"additional_refs: {exc}") from exc

    draft = create_draft(
        new_content,
        author=author if author is not None else parent.meta.author,
        license=parent.meta.license,
        lang=parent.meta.lang,
        refs=[*parent.refs, *extra_refs],
        parent=parent.id,
        created=created,
    )
    return publish(draft)


def validate(candidate: Any) -> ValidationReport:
    """
    Check structure, then id integrity. Never raises.
    """
    result = validate_block(candidate)
    if not result.success:
        return ValidationReport(
            valid=False,
            error=f"Invalid block structure: {result.error.message}",
            kind=FailureKind.STRUCTURAL,
        )

    if not verify_id(result.data):
        return ValidationReport(
            valid=False,
            error="ID does not match content hash",
            kind=FailureKind.INTEGRITY,
        )
    return ValidationReport(valid=True)


def check_integrity(candidate: Any) -> Block:
    """
    Throwing counterpart of ``validate``.

    Raises:
        StructuralError: the candidate is malformed.
        IntegrityError: the id does not match the content hash.
    """
    block = parse_block(candidate)
    expected = generate_id(block)
    if block.id != expected:
        raise IntegrityError(block.id, expected)
    return block
