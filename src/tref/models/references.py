"""
Reference model: where the knowledge in a block came from.

Tagged union discriminated by ``type``. Each variant forbids fields of the
others, so a reference can never mix two shapes.

- url:     classic web link
- archive: preserved snippet, survives link rot
- search:  query that refinds the source
- hash:    integrity proof of external content (not block identity)
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union
from urllib.parse import urlparse

from pydantic import AfterValidator, BaseModel, Field, TypeAdapter, model_validator

from .timestamps import IsoTimestamp, Timestamp, coerce_timestamp

HASH_HEX_LENGTHS = {
    "sha256": 64,
    "sha384": 96,
    "sha512": 128,
}


class ReferenceType(str, Enum):
    URL = "url"
    ARCHIVE = "archive"
    SEARCH = "search"
    HASH = "hash"


def _check_url(value: str) -> str:
    parsed = urlparse(value)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"not an absolute URL: {value!r}")
    return value


UrlStr = Annotated[str, AfterValidator(_check_url)]


class _Reference(BaseModel):
    model_config = {
        "extra": "forbid",
        "frozen": True,
        "populate_by_name": True,
    }


class UrlReference(_Reference):
    type: Literal["url"] = "url"
    url: UrlStr
    title: Optional[str] = None
    accessed: Optional[IsoTimestamp] = None


class ArchiveReference(_Reference):
    type: Literal["archive"] = "archive"
    snippet: str
    from_: Optional[UrlStr] = Field(default=None, alias="from")
    archived: Optional[IsoTimestamp] = None
    context: Optional[str] = None


class SearchReference(_Reference):
    type: Literal["search"] = "search"
    query: str
    engine: Optional[str] = None
    expect: Optional[str] = None


class HashReference(_Reference):
    type: Literal["hash"] = "hash"
    alg: Literal["sha256", "sha384", "sha512"]
    value: str = Field(pattern=r"^[0-9a-fA-F]+$")
    of: Optional[str] = None

    @model_validator(mode="after")
    def _check_digest_length(self) -> "HashReference":
        expected = HASH_HEX_LENGTHS[self.alg]
        if len(self.value) != expected:
            raise ValueError(
                f"{self.alg} digest must be {expected} hex characters, got {len(self.value)}"
            )
        return self


Reference = Annotated[
    Union[UrlReference, ArchiveReference, SearchReference, HashReference],
    Field(discriminator="type"),
]

_reference_adapter = TypeAdapter(Reference)


def parse_reference(data: object) -> Reference:
    """Validate one reference payload (raises pydantic ``ValidationError``)."""
    if isinstance(data, (UrlReference, ArchiveReference, SearchReference, HashReference)):
        return data
    return _reference_adapter.validate_python(data)


def create_url_reference(
    url: str,
    title: Optional[str] = None,
    accessed: Optional[Timestamp] = None,
) -> UrlReference:
    return UrlReference(url=url, title=title, accessed=coerce_timestamp(accessed))


def create_archive_reference(
    snippet: str,
    from_url: Optional[str] = None,
    context: Optional[str] = None,
    archived: Optional[Timestamp] = None,
) -> ArchiveReference:
    """Preserve a snippet of a source so it survives the link dying."""
    return ArchiveReference(
        snippet=snippet,
        from_=from_url,
        context=context,
        archived=coerce_timestamp(archived),
    )


def create_search_reference(
    query: str,
    engine: Optional[str] = None,
    expect: Optional[str] = None,
) -> SearchReference:
    return SearchReference(query=query, engine=engine, expect=expect)


def create_hash_reference(
    value: str,
    alg: Literal["sha256", "sha384", "sha512"] = "sha256",
    of: Optional[str] = None,
) -> HashReference:
    return HashReference(alg=alg, value=value, of=of)
