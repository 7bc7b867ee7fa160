"""
Command line entry point for TREF.
"""

from __future__ import annotations

import argparse
import json
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from loguru import logger as loguru_logger
from pydantic import ValidationError

from .config import Settings, get_settings
from .errors import TrefError
from .identity import normalize_block_id
from .logging import configure_logging, logger
from .models.block import Block
from .models.references import parse_reference
from .models.results import FailureKind
from .publisher import create_draft, derive, publish, validate
from .storage import (
    add_to_registry,
    export_block,
    get_registry_stats,
    is_registered,
    list_registered,
    load,
    load_by_id,
    load_raw,
    serialize_block,
)
from .storage.io import is_tref_path

_CONTENT_PREVIEW = 50


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tref",
        description="TREF CLI: publish, derive and validate content-addressed knowledge blocks.",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print the installed TREF version and exit.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log to stderr (-v for INFO, -vv for DEBUG).",
    )
    parser.add_argument(
        "--log-level",
        help="Explicit log level (overrides -v and TREF_LOG_LEVEL).",
    )
    parser.add_argument(
        "--dir",
        help="Publish directory (default: TREF_PUBLISH_DIR or ./published).",
    )
    subparsers = parser.add_subparsers(dest="command")

    publish_cmd = subparsers.add_parser("publish", help="Create and publish a new block.")
    publish_cmd.add_argument("content", nargs="*", help="Block content (joined with spaces).")
    source = publish_cmd.add_mutually_exclusive_group()
    source.add_argument("--stdin", action="store_true", help="Read content from stdin.")
    source.add_argument("-f", "--file", help="Read content from a file.")
    publish_cmd.add_argument("--refs", help="References as a JSON array.")
    publish_cmd.add_argument("--license", help="License identifier (default: TREF_DEFAULT_LICENSE or CC-BY-4.0).")
    publish_cmd.add_argument("--author", help="Author name.")
    publish_cmd.add_argument("--lang", help="Two-letter language code.")
    publish_cmd.add_argument("--pretty", action="store_true", help="Print the whole block as JSON.")

    derive_cmd = subparsers.add_parser("derive", help="Derive a new block from a parent.")
    derive_cmd.add_argument("parent", help="Parent id (sha256:<hex> or <hex>) or a .tref file.")
    derive_cmd.add_argument("content", nargs="+", help="New content (joined with spaces).")
    derive_cmd.add_argument("--refs", help="Additional references as a JSON array.")
    derive_cmd.add_argument("--author", help="Author of the derived block.")
    derive_cmd.add_argument("--pretty", action="store_true", help="Print the whole block as JSON.")

    validate_cmd = subparsers.add_parser("validate", help="Validate a .tref file.")
    validate_cmd.add_argument("file", help="Path to the block file.")

    list_cmd = subparsers.add_parser("list", help="List all published blocks.")
    list_cmd.add_argument("--pretty", action="store_true", help="Print a count header.")

    info_cmd = subparsers.add_parser("info", help="Show block details.")
    info_cmd.add_argument("id", help="Block id.")

    cat_cmd = subparsers.add_parser("cat", help="Print block content.")
    cat_cmd.add_argument("id", help="Block id.")
    cat_cmd.add_argument("--pretty", action="store_true", help="Print the whole block as JSON.")
    return parser


def _resolve_log_level(args: argparse.Namespace) -> str | None:
    if args.log_level:
        return args.log_level
    if args.verbose >= 2:
        return "DEBUG"
    if args.verbose == 1:
        return "INFO"
    return None


def _parse_refs(parser: argparse.ArgumentParser, raw: str | None) -> list:
    if raw is None:
        return []
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        parser.error(f"Failed to parse --refs JSON: {exc}")
    if not isinstance(payload, list):
        parser.error("--refs must be a JSON array")
    try:
        return [parse_reference(item) for item in payload]
    except ValidationError as exc:
        parser.error(f"Invalid --refs: {exc}")


def _print_block(block: Block, pretty: bool) -> None:
    if pretty:
        print(serialize_block(block, pretty=True))
    else:
        print(block.id)


def _cmd_publish(parser: argparse.ArgumentParser, args: argparse.Namespace, settings: Settings) -> int:
    if args.stdin:
        content = sys.stdin.read().strip()
    elif args.file:
        content = Path(args.file).read_text(encoding="utf-8")
    elif args.content:
        content = " ".join(args.content)
    else:
        parser.error("publish requires content, --stdin or --file")

    refs = _parse_refs(parser, args.refs)
    draft = create_draft(
        content,
        author=args.author,
        license=args.license or settings.default_license,
        lang=args.lang,
        refs=refs,
    )
    block = publish(draft)
    export_block(block, settings.publish_dir)
    add_to_registry(block.id, settings.publish_dir)
    _print_block(block, args.pretty)
    return 0


def _cmd_derive(parser: argparse.ArgumentParser, args: argparse.Namespace, settings: Settings) -> int:
    if is_tref_path(args.parent):
        parent = load(args.parent)
    else:
        parent = load_by_id(normalize_block_id(args.parent), settings.publish_dir)

    refs = _parse_refs(parser, args.refs)
    block = derive(parent, " ".join(args.content), author=args.author, additional_refs=refs)
    export_block(block, settings.publish_dir)
    add_to_registry(block.id, settings.publish_dir)
    _print_block(block, args.pretty)
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    try:
        data = load_raw(args.file)
    except json.JSONDecodeError as exc:
        print("✗ Malformed TREF block", file=sys.stderr)
        print(f"  Not valid JSON: {exc}", file=sys.stderr)
        return 1

    report = validate(data)
    if report.valid:
        content = data["content"]
        preview = content[:_CONTENT_PREVIEW] + ("..." if len(content) > _CONTENT_PREVIEW else "")
        print("✓ Valid TREF block")
        print(f"  ID: {data['id']}")
        print(f"  Content: {preview}")
        return 0

    if report.kind == FailureKind.INTEGRITY:
        print("✗ TREF block failed integrity check", file=sys.stderr)
        print(f"  {report.error}", file=sys.stderr)
        print("  The content was changed after publishing; re-publish to get a new ID.", file=sys.stderr)
    else:
        print("✗ Malformed TREF block", file=sys.stderr)
        print(f"  {report.error}", file=sys.stderr)
    return 1


def _cmd_list(args: argparse.Namespace, settings: Settings) -> int:
    ids = list_registered(settings.publish_dir)
    if not ids:
        print("No published blocks")
        return 0

    if args.pretty:
        stats = get_registry_stats(settings.publish_dir)
        print(f"Published blocks: {stats.count}")
        print("")
        for block_id in ids:
            print(f"  {block_id}")
    else:
        for block_id in ids:
            print(block_id)
    return 0


def _load_registered(block_id: str, settings: Settings) -> Block | None:
    block_id = normalize_block_id(block_id)
    if not is_registered(block_id, settings.publish_dir):
        print(f"Error: Block not found: {block_id}", file=sys.stderr)
        return None
    return load_by_id(block_id, settings.publish_dir)


def _cmd_info(args: argparse.Namespace, settings: Settings) -> int:
    block = _load_registered(args.id, settings)
    if block is None:
        return 1

    print(f"ID:       {block.id}")
    print(f"Version:  {block.v}")
    print(f"Created:  {block.meta.created}")
    if block.meta.modified:
        print(f"Modified: {block.meta.modified}")
    print(f"License:  {block.meta.license}")
    if block.meta.author:
        print(f"Author:   {block.meta.author}")
    if block.parent:
        print(f"Parent:   {block.parent}")
    if block.refs:
        print(f"Refs:     {len(block.refs)} reference(s)")
    print(f"Content:  {len(block.content)} chars")
    return 0


def _cmd_cat(args: argparse.Namespace, settings: Settings) -> int:
    block = _load_registered(args.id, settings)
    if block is None:
        return 1

    if args.pretty:
        print(serialize_block(block, pretty=True))
    else:
        print(block.content)
    return 0


def _drop_loguru_default_sink() -> None:
    # The CLI owns stderr; configure_logging adds the only sink it needs.
    try:
        loguru_logger.remove(0)
    except ValueError:
        pass


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()
    _drop_loguru_default_sink()
    configure_logging(_resolve_log_level(args) or settings.log_level)

    if args.version:
        try:
            print(version("tref"))
        except PackageNotFoundError:
            print("tref (not installed)")
        return 0

    if args.dir:
        settings = settings.model_copy(update={"publish_dir": Path(args.dir)})
    logger.debug(f"Publish directory: {settings.publish_dir}")

    try:
        if args.command == "publish":
            return _cmd_publish(parser, args, settings)
        if args.command == "derive":
            return _cmd_derive(parser, args, settings)
        if args.command == "validate":
            return _cmd_validate(args)
        if args.command == "list":
            return _cmd_list(args, settings)
        if args.command == "info":
            return _cmd_info(args, settings)
        if args.command == "cat":
            return _cmd_cat(args, settings)
    except (TrefError, OSError, ValueError) as exc:
        logger.info(f"{args.command} failed: {exc!r}")
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
