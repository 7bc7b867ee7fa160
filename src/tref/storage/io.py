"""
File I/O for TREF blocks.

On-disk format: one block serialized as JSON text, in a ``.tref`` file
(``.tref.json`` is accepted as an explicit alternative). The publish
directory fans blocks out by the first two hex characters of their hash:

    <publish_dir>/<hh>/<hash>.tref
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union

from strif import atomic_output_file

from .. import publisher
from ..identity import parse_block_id
from ..logging import logger
from ..models.block import Block
from ..validation import parse_block

TREF_EXTENSION = ".tref"
TREF_JSON_EXTENSION = ".tref.json"
TREF_MIME_TYPE = "application/vnd.tref+json"

PathLike = Union[str, Path]


def is_tref_path(path: PathLike) -> bool:
    name = str(path)
    return name.endswith(TREF_EXTENSION) or name.endswith(TREF_JSON_EXTENSION)


def serialize_block(block: Block, *, pretty: bool = False) -> str:
    """JSON text for a block file (compact unless ``pretty``)."""
    data = block.to_dict()
    if pretty:
        return json.dumps(data, ensure_ascii=False, indent=2)
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def _write(path: Path, text: str) -> None:
    with atomic_output_file(str(path), make_parents=True) as temp_path:
        Path(temp_path).write_text(text, encoding="utf-8")


def save(
    block: Block,
    path: PathLike,
    *,
    pretty: bool = False,
    validate: bool = True,
) -> Path:
    """
    Write a block to ``path``, appending ``.tref`` unless the path already
    ends in ``.tref`` or ``.tref.json``. Returns the path written.

    Raises:
        StructuralError / IntegrityError: ``validate`` is on and the block
            does not check out.
    """
    if validate:
        block = publisher.check_integrity(block)

    target = Path(path)
    if not is_tref_path(target):
        target = target.with_name(target.name + TREF_EXTENSION)

    _write(target, serialize_block(block, pretty=pretty))
    logger.debug(f"Saved block {block.id} to {target}")
    return target


def load_raw(path: PathLike) -> Any:
    """Read and decode the JSON in a block file without checking it."""
    return json.loads(Path(path).read_text(encoding="utf-8"))


def load(path: PathLike, *, validate: bool = True) -> Block:
    """
    Load a block from a file.

    The structure is always checked. With ``validate`` (the default) the id
    is verified as well.

    Raises:
        FileNotFoundError: the file does not exist.
        json.JSONDecodeError: the file is not JSON.
        StructuralError: the JSON is not a block.
        IntegrityError: ``validate`` is on and the id does not match.
    """
    data = load_raw(path)
    if validate:
        return publisher.check_integrity(data)
    return parse_block(data)


def block_path(block_id: str, publish_dir: PathLike) -> Path:
    """Location of a block inside the publish directory.

    Accepts ``sha256:<hex>`` or bare hex.
    """
    digest = parse_block_id(block_id)
    return Path(publish_dir) / digest[:2] / f"{digest}{TREF_EXTENSION}"


def export_block(block: Block, publish_dir: PathLike, *, pretty: bool = False) -> Path:
    """
    Write a verified block into the publish directory layout.

    Raises:
        StructuralError / IntegrityError: the block does not check out.
    """
    block = publisher.check_integrity(block)
    target = block_path(block.id, publish_dir)
    _write(target, serialize_block(block, pretty=pretty))
    logger.info(f"Exported {block.id} to {target}")
    return target


def exists(block_id: str, publish_dir: PathLike) -> bool:
    return block_path(block_id, publish_dir).is_file()


def load_by_id(block_id: str, publish_dir: PathLike, *, validate: bool = True) -> Block:
    """Load a block from the publish directory by its id."""
    return load(block_path(block_id, publish_dir), validate=validate)
