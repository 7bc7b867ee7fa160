"""
Result types returned by the non-throwing entry points.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

from ..errors import StructuralError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a safe parse.

    Exactly one of ``data`` (on success) or ``error`` (on failure) is set.
    """

    success: bool
    data: Optional[T] = None
    error: Optional[StructuralError] = None

    @classmethod
    def ok(cls, data: T) -> "Result[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: StructuralError) -> "Result[T]":
        return cls(success=False, error=error)

    def unwrap(self) -> T:
        """Return the parsed value or raise the carried error."""
        if not self.success:
            raise self.error
        return self.data


class FailureKind(str, Enum):
    STRUCTURAL = "structural"
    INTEGRITY = "integrity"


class ValidationReport(BaseModel):
    """
    Result of ``validate``: structural check followed by id verification.
    """

    valid: bool = Field(description="True only when structure and id hash both check out.")
    error: Optional[str] = Field(
        default=None,
        description="Human-readable reason when the block is not valid.",
    )
    kind: Optional[FailureKind] = Field(
        default=None,
        description="Whether the failure is structural (fix the shape) or integrity (re-publish).",
    )
