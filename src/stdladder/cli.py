"""
Command-line interface for stdladder.

    stdladder classify --macros dump.txt
    cc -dM -E - </dev/null | stdladder classify --macros -
    stdladder classify --snapshot snapshot.yaml --format header
    stdladder classify --example hp-acc-cpp98 --format json
    stdladder ladder CPP
    stdladder table --table overrides.yaml

A table override can also be given through the STDLADDER_TABLE
environment variable.
"""

import argparse
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from stdladder import __version__
from stdladder.backends import generate_header, to_compiler_flags
from stdladder.examples import build_example_snapshots, get_example_snapshot
from stdladder.ladders import LADDERS
from stdladder.macros import parse_macro_dump
from stdladder.model import ClassificationResult, LanguageFamily, StdLadderError
from stdladder.quirks import DEFAULT_TABLE, QuirksTable, load_table, table_to_yaml
from stdladder.resolver import classify
from stdladder.serialization import result_to_json, result_to_yaml, snapshot_from_yaml

logger = logging.getLogger(__name__)

TABLE_ENV_VAR = "STDLADDER_TABLE"

FORMATS = ["text", "json", "yaml", "header", "flags"]


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="stdladder",
        description="Classify the C/C++ language standard a toolchain conforms to",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    classify_parser = subparsers.add_parser("classify", help="Classify a snapshot")
    source = classify_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--macros", help="Predefined-macro dump file ('-' for stdin)")
    source.add_argument("--snapshot", help="Snapshot YAML/JSON file ('-' for stdin)")
    source.add_argument("--example", choices=sorted(build_example_snapshots()), help="Built-in example snapshot")
    classify_parser.add_argument("--family", help="Override language family (C, CPP, none)")
    classify_parser.add_argument("--vendor", help="Override vendor identifier")
    classify_parser.add_argument("--table", type=Path, help="Quirks table YAML overriding the defaults")
    classify_parser.add_argument("--format", "-f", choices=FORMATS, default="text", help="Output format")
    classify_parser.add_argument("--prefix", default="STANDARD_", help="Macro prefix for header/flags output")

    ladder_parser = subparsers.add_parser("ladder", help="Print the built-in revision ladders")
    ladder_parser.add_argument("family", nargs="?", help="C or CPP (default: both)")

    table_parser = subparsers.add_parser("table", help="Print the effective quirks table")
    table_parser.add_argument("--table", type=Path, help="Quirks table YAML overriding the defaults")

    return parser


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def resolve_table(path: Optional[Path]) -> QuirksTable:
    """Table from --table, else from $STDLADDER_TABLE, else the default."""
    if path is None and os.environ.get(TABLE_ENV_VAR):
        path = Path(os.environ[TABLE_ENV_VAR])
    if path is None:
        return DEFAULT_TABLE
    return load_table(path)


def format_result(result: ClassificationResult) -> str:
    lines = [
        f"Family:      {result.family.value}",
        f"Resolved:    {result.resolved_name}",
        f"At least:    {', '.join(result.at_least_names) or '-'}",
        f"Source:      {result.source.value}{' (precise)' if result.precise else ''}",
    ]
    if result.dialects:
        lines.append(f"Dialects:    {', '.join(sorted(result.dialects))}")
    if result.excluded_capabilities:
        lines.append(f"Excludes:    {', '.join(sorted(c.value for c in result.excluded_capabilities))}")
    if result.applied_quirk:
        lines.append(f"Quirk:       {result.applied_quirk}")
    return "\n".join(lines) + "\n"


def cmd_classify(args: argparse.Namespace) -> int:
    table = resolve_table(args.table)

    if args.macros is not None:
        snapshot = parse_macro_dump(_read_input(args.macros))
    elif args.snapshot is not None:
        snapshot = snapshot_from_yaml(_read_input(args.snapshot))
    else:
        snapshot = get_example_snapshot(args.example)

    if args.vendor is not None:
        snapshot = replace(snapshot, vendor_id=args.vendor)

    family = LanguageFamily.coerce(args.family) if args.family is not None else None
    result = classify(snapshot, family, table=table)

    if args.format == "json":
        print(result_to_json(result))
    elif args.format == "yaml":
        sys.stdout.write(result_to_yaml(result))
    elif args.format == "header":
        sys.stdout.write(generate_header(result, args.prefix))
    elif args.format == "flags":
        print(" ".join(to_compiler_flags(result, args.prefix)))
    else:
        sys.stdout.write(format_result(result))
    return 0


def cmd_ladder(args: argparse.Namespace) -> int:
    if args.family is not None:
        families = [LanguageFamily.coerce(args.family)]
    else:
        families = list(LADDERS)
    for family in families:
        ladder = LADDERS.get(family)
        if ladder is None:
            print(f"{family.value}: no ladder")
            continue
        print(f"{family.value} (base indicator {ladder.base_flag}):")
        for rev in ladder:
            threshold = rev.threshold if rev.threshold is not None else "-"
            aliases = f" ({', '.join(rev.aliases)})" if rev.aliases else ""
            print(f"  {rev.name:<8} {threshold:>8}  {rev.description or ''}{aliases}")
    return 0


def cmd_table(args: argparse.Namespace) -> int:
    sys.stdout.write(table_to_yaml(resolve_table(args.table)))
    return 0


COMMANDS = {
    "classify": cmd_classify,
    "ladder": cmd_ladder,
    "table": cmd_table,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 2

    try:
        return COMMANDS[args.command](args)
    except (StdLadderError, FileNotFoundError, ValueError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
