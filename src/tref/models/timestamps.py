"""ISO-8601 timestamp helpers shared by the block and reference models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Optional, Union

from pydantic import AfterValidator

Timestamp = Union[str, datetime]


def format_timestamp(value: datetime) -> str:
    """Render a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC.

    Naive datetimes are taken to be UTC already.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def utc_now() -> str:
    return format_timestamp(datetime.now(timezone.utc))


def coerce_timestamp(value: Optional[Timestamp]) -> str:
    """Return ``value`` as a timestamp string, or the current time if None."""
    if value is None:
        return utc_now()
    if isinstance(value, datetime):
        return format_timestamp(value)
    return value


def is_iso_timestamp(value: str) -> bool:
    try:
        datetime.fromisoformat(value)
    except ValueError:
        return False
    return True


def check_iso_timestamp(value: str) -> str:
    """Accept ISO-8601 strings unchanged."""
    if not is_iso_timestamp(value):
        raise ValueError(f"not an ISO-8601 timestamp: {value!r}")
    return value


IsoTimestamp = Annotated[str, AfterValidator(check_iso_timestamp)]


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 string into an aware UTC datetime (naive means UTC)."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
