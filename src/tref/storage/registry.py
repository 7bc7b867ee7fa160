"""
Registry index of published blocks.

``<publish_dir>/published.json`` holds ``{"v": 1, "blocks": [{"id", "added"}]}``
and answers "does this id exist" and "list all ids" without scanning the
publish directory.

Mutations (check-then-append, remove) are read-modify-write cycles on one
shared file. They run inside a per-directory lock and the index is replaced
atomically, so concurrent publishers in one process never lose entries and
readers never see a half-written file. Cross-process locking is out of
scope.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Literal, Optional, Union

from loguru import logger
from pydantic import BaseModel, Field, ValidationError
from strif import atomic_output_file

from ..errors import RegistryError
from ..identity import normalize_block_id
from ..models.timestamps import IsoTimestamp, Timestamp, coerce_timestamp, parse_timestamp

REGISTRY_FILE = "published.json"

PathLike = Union[str, Path]

_locks: dict[Path, threading.Lock] = {}
_locks_guard = threading.Lock()


class RegistryEntry(BaseModel):
    id: str = Field(description="Block id (sha256:<hex>).")
    added: IsoTimestamp = Field(description="ISO-8601 timestamp when the id was registered.")


class Registry(BaseModel):
    v: Literal[1] = 1
    blocks: list[RegistryEntry] = Field(default_factory=list)

    def contains(self, block_id: str) -> bool:
        return any(entry.id == block_id for entry in self.blocks)


class RegistryStats(BaseModel):
    count: int = 0
    oldest: Optional[str] = None
    newest: Optional[str] = None


def registry_path(publish_dir: PathLike) -> Path:
    return Path(publish_dir) / REGISTRY_FILE


def _lock_for(publish_dir: PathLike) -> threading.Lock:
    key = Path(publish_dir).resolve()
    with _locks_guard:
        return _locks.setdefault(key, threading.Lock())


def load_registry(publish_dir: PathLike) -> Registry:
    """
    Read the index. A missing file is an empty registry.

    Raises:
        RegistryError: the file exists but is not a valid index.
    """
    path = registry_path(publish_dir)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Registry()

    try:
        return Registry.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise RegistryError(f"Invalid registry format in {path}: {exc}") from exc


def save_registry(registry: Registry, publish_dir: PathLike) -> Path:
    """Write the index (pretty-printed), replacing any previous file atomically."""
    path = registry_path(publish_dir)
    with atomic_output_file(str(path), make_parents=True) as temp_path:
        Path(temp_path).write_text(
            json.dumps(registry.model_dump(mode="json"), indent=2),
            encoding="utf-8",
        )
    return path


def add_to_registry(
    block_id: str,
    publish_dir: PathLike,
    *,
    added: Optional[Timestamp] = None,
) -> bool:
    """
    Register a block id. Returns False if it was already registered.
    """
    block_id = normalize_block_id(block_id)
    try:
        entry = RegistryEntry(id=block_id, added=coerce_timestamp(added))
    except ValidationError as exc:
        raise RegistryError(f"Invalid registry timestamp: {added!r}") from exc
    with _lock_for(publish_dir):
        registry = load_registry(publish_dir)
        if registry.contains(block_id):
            logger.debug(f"Already registered: {block_id}")
            return False
        registry.blocks.append(entry)
        save_registry(registry, publish_dir)
    logger.info(f"Registered {block_id}")
    return True


def is_registered(block_id: str, publish_dir: PathLike) -> bool:
    return load_registry(publish_dir).contains(normalize_block_id(block_id))


def list_registered(publish_dir: PathLike) -> list[str]:
    """All registered ids, in registration order."""
    return [entry.id for entry in load_registry(publish_dir).blocks]


def remove_from_registry(block_id: str, publish_dir: PathLike) -> bool:
    """Unregister a block id. Returns False if it was not registered."""
    block_id = normalize_block_id(block_id)
    with _lock_for(publish_dir):
        registry = load_registry(publish_dir)
        remaining = [entry for entry in registry.blocks if entry.id != block_id]
        if len(remaining) == len(registry.blocks):
            return False
        registry.blocks = remaining
        save_registry(registry, publish_dir)
    logger.info(f"Unregistered {block_id}")
    return True


def get_registry_stats(publish_dir: PathLike) -> RegistryStats:
    registry = load_registry(publish_dir)
    if not registry.blocks:
        return RegistryStats()

    ordered = sorted(registry.blocks, key=lambda entry: parse_timestamp(entry.added))
    return RegistryStats(
        count=len(registry.blocks),
        oldest=ordered[0].added,
        newest=ordered[-1].added,
    )
