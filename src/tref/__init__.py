"""
Public API for the TREF package.

Content-addressed knowledge blocks: canonical encoding, SHA-256 identity,
structural validation and the publish / derive / validate lifecycle.
"""

from .canonical import canonicalize
from .errors import (
    ErrorKind,
    IntegrityError,
    InvalidDraft,
    InvalidSource,
    RegistryError,
    StructuralError,
    TrefError,
)
from .identity import generate_id, sha256_hex, verify_id
from .models import (
    ArchiveReference,
    Block,
    Draft,
    HashReference,
    Meta,
    Origin,
    Result,
    SearchReference,
    UrlReference,
    ValidationReport,
    create_archive_reference,
    create_hash_reference,
    create_search_reference,
    create_url_reference,
)
from .publisher import check_integrity, create_draft, derive, publish, validate
from .validation import (
    is_valid_block,
    parse_block,
    parse_draft,
    safe_parse_block,
    validate_block,
    validate_draft,
)

__all__ = [
    "canonicalize",
    "generate_id",
    "sha256_hex",
    "verify_id",
    "create_draft",
    "publish",
    "derive",
    "validate",
    "check_integrity",
    "parse_block",
    "parse_draft",
    "safe_parse_block",
    "validate_block",
    "validate_draft",
    "is_valid_block",
    "Block",
    "Draft",
    "Meta",
    "Origin",
    "ArchiveReference",
    "HashReference",
    "SearchReference",
    "UrlReference",
    "create_archive_reference",
    "create_hash_reference",
    "create_search_reference",
    "create_url_reference",
    "Result",
    "ValidationReport",
    "ErrorKind",
    "TrefError",
    "StructuralError",
    "InvalidDraft",
    "InvalidSource",
    "IntegrityError",
    "RegistryError",
]
