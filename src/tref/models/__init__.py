from .block import (
    DEFAULT_LICENSE,
    TREF_VERSION,
    Block,
    BlockId,
    Draft,
    Meta,
    Origin,
)
from .references import (
    ArchiveReference,
    HashReference,
    Reference,
    ReferenceType,
    SearchReference,
    UrlReference,
    create_archive_reference,
    create_hash_reference,
    create_search_reference,
    create_url_reference,
    parse_reference,
)
from .results import Result, ValidationReport

__all__ = [
    "DEFAULT_LICENSE",
    "TREF_VERSION",
    "Block",
    "BlockId",
    "Draft",
    "Meta",
    "Origin",
    "ArchiveReference",
    "HashReference",
    "Reference",
    "ReferenceType",
    "SearchReference",
    "UrlReference",
    "create_archive_reference",
    "create_hash_reference",
    "create_search_reference",
    "create_url_reference",
    "parse_reference",
    "Result",
    "ValidationReport",
]
