"""Storage collaborators: block files, publish layout and registry index."""

from .io import (
    TREF_EXTENSION,
    TREF_JSON_EXTENSION,
    TREF_MIME_TYPE,
    block_path,
    exists,
    export_block,
    load,
    load_by_id,
    load_raw,
    save,
    serialize_block,
)
from .registry import (
    REGISTRY_FILE,
    Registry,
    RegistryEntry,
    RegistryStats,
    add_to_registry,
    get_registry_stats,
    is_registered,
    list_registered,
    load_registry,
    remove_from_registry,
    save_registry,
)

__all__ = [
    "TREF_EXTENSION",
    "TREF_JSON_EXTENSION",
    "TREF_MIME_TYPE",
    "block_path",
    "exists",
    "export_block",
    "load",
    "load_by_id",
    "load_raw",
    "save",
    "serialize_block",
    "REGISTRY_FILE",
    "Registry",
    "RegistryEntry",
    "RegistryStats",
    "add_to_registry",
    "get_registry_stats",
    "is_registered",
    "list_registered",
    "load_registry",
    "remove_from_registry",
    "save_registry",
]
