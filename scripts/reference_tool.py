#!/usr/bin/env python3
"""Parse, format, and batch-check reference strings.

Usage:
    python3 scripts/reference_tool.py parse BA-AAAACD-AAAAAEGF
    python3 scripts/reference_tool.py format --type BA --company-space-id 35 --object-id 1125
    python3 scripts/reference_tool.py check --input refs.txt > results.jsonl
    python3 scripts/reference_tool.py types

Structured JSON output goes to stdout; human messages go to stderr.
Exit codes: 0 all references valid, 1 at least one invalid, 2 usage error.
"""
from __future__ import annotations

import argparse
import logging
import sys
from collections import Counter
from pathlib import Path
from typing import Any, TextIO

from px_reference.errors import ReferenceCodecError
from px_reference.serialization import (
    dumps,
    parse_result_to_dict,
    reference_from_dict,
    reference_to_dict,
)
from px_reference.types import TYPE_TABLE, FieldSlot

log = logging.getLogger("reference_tool")

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_USAGE = 2


class InputError(ValueError):
    """Raised when CLI input is invalid."""


def dump_json(obj: Any, *, pretty: bool = True) -> None:
    sys.stdout.buffer.write(dumps(obj, pretty=pretty))
    sys.stdout.buffer.write(b"\n")
    sys.stdout.flush()


def _u64(raw: str) -> int:
    try:
        value = int(raw, 0)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer: {raw!r}") from exc
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return value


def read_reference_lines(handle: TextIO) -> list[str]:
    """Non-blank, stripped lines from a reference list."""
    return [line.strip() for line in handle if line.strip()]


def _read_lines(path: Path | None) -> list[str]:
    source = "stdin" if path is None else str(path)
    try:
        if path is None:
            return read_reference_lines(sys.stdin)
        if not path.exists() or not path.is_file():
            raise InputError(f"--input does not exist or is not a file: {path}")
        with path.open("r", encoding="utf-8") as handle:
            return read_reference_lines(handle)
    except UnicodeDecodeError as exc:
        raise InputError(f"{source} is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise InputError(f"cannot read {source}: {exc}") from exc


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_parse(args: argparse.Namespace) -> int:
    results = [parse_result_to_dict(text) for text in args.references]
    dump_json(results, pretty=args.pretty)
    invalid = sum(1 for row in results if not row["valid"])
    if invalid:
        log.info("%d of %d references invalid", invalid, len(results))
    return EXIT_INVALID if invalid else EXIT_OK


def cmd_format(args: argparse.Namespace) -> int:
    payload: dict[str, Any] = {"reference_type": args.type}
    for slot in FieldSlot:
        payload[slot.attribute] = getattr(args, slot.attribute)
    try:
        reference = reference_from_dict(payload)
    except ReferenceCodecError as exc:
        log.error("%s", exc)
        return EXIT_USAGE
    except ValueError as exc:
        log.error("fields do not match type %s: %s", args.type, exc)
        return EXIT_USAGE
    row = reference_to_dict(reference)
    log.debug("formatted %s", row["reference"])
    dump_json(row, pretty=args.pretty)
    return EXIT_OK


def cmd_check(args: argparse.Namespace) -> int:
    try:
        lines = _read_lines(args.input)
    except InputError as exc:
        log.error("%s", exc)
        return EXIT_USAGE

    outcomes: Counter[str] = Counter()
    for text in lines:
        row = parse_result_to_dict(text)
        outcomes["valid" if row["valid"] else row["error"]["kind"]] += 1
        dump_json(row, pretty=False)

    invalid = len(lines) - outcomes["valid"]
    log.info("checked %d references: %d valid, %d invalid", len(lines), outcomes["valid"], invalid)
    for kind, count in sorted(outcomes.items()):
        if kind != "valid":
            log.info("  %s: %d", kind, count)
    return EXIT_INVALID if invalid else EXIT_OK


def cmd_types(args: argparse.Namespace) -> int:
    rows = [
        {
            "name": layout.reference_type.name,
            "tag": layout.tag,
            "slots": [slot.attribute for slot in layout.slots],
            "width": layout.width,
            "provisional": layout.reference_type.provisional,
        }
        for layout in TYPE_TABLE
    ]
    dump_json(rows, pretty=args.pretty)
    return EXIT_OK


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Parse, format, and check reference strings.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    parser.add_argument(
        "--compact", dest="pretty", action="store_false",
        help="Single-line JSON output",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_parse = sub.add_parser("parse", help="Parse one or more reference strings")
    p_parse.add_argument("references", nargs="+")
    p_parse.set_defaults(func=cmd_parse)

    p_format = sub.add_parser("format", help="Format a reference from its fields")
    p_format.add_argument("--type", required=True, help="Two-letter type tag, e.g. BA")
    for slot in FieldSlot:
        p_format.add_argument(
            "--" + slot.attribute.replace("_", "-"),
            dest=slot.attribute, type=_u64, default=None,
            help=f"{slot.label} (decimal or 0x-prefixed)",
        )
    p_format.set_defaults(func=cmd_format)

    p_check = sub.add_parser("check", help="Check one reference per line, emitting JSONL")
    p_check.add_argument(
        "--input", type=Path, default=None,
        help="File with one reference per line (default: stdin)",
    )
    p_check.set_defaults(func=cmd_check)

    p_types = sub.add_parser("types", help="List known reference types")
    p_types.set_defaults(func=cmd_types)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
