"""Command line entry point for the table compiler."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import tomllib
from dataclasses import replace
from pathlib import Path

from tablegen.compiler import TableCompiler
from tablegen.config import CompilerConfig

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="tablegen",
        description="Compile annotated struct definitions into table source",
    )
    parser.add_argument(
        "source",
        type=Path,
        help="Path to the file containing struct definitions",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Write output to this file instead of stdout",
    )
    parser.add_argument(
        "--interface-path",
        default=None,
        help="Path of the table interface module in generated code",
    )
    parser.add_argument(
        "--primary-type",
        action="append",
        dest="primary_types",
        default=None,
        metavar="TYPE",
        help="Type allowed to be promoted to primary (repeatable; replaces the default list)",
    )
    parser.add_argument(
        "--default-primary-type",
        default=None,
        help="Primary type emitted for tables without a promoted primary",
    )
    parser.add_argument(
        "-s", "--struct",
        action="append",
        dest="structs",
        default=None,
        metavar="NAME",
        help="Only compile the named struct (repeatable)",
    )
    parser.add_argument(
        "--describe",
        action="store_true",
        help="Output the assembled table structures as JSON instead of source",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="TOML configuration file (default: tablegen.toml or pyproject.toml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def load_config(args: argparse.Namespace) -> CompilerConfig:
    """Load configuration and apply command line overrides."""
    config = CompilerConfig.load(args.config)
    if args.interface_path:
        config = replace(config, interface_path=args.interface_path)
    if args.primary_types:
        config = replace(config, primary_types=frozenset(args.primary_types))
    if args.default_primary_type:
        config = replace(config, default_primary_type=args.default_primary_type)
    return config


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.source.exists():
        print(f"Error: File not found: {args.source}", file=sys.stderr)
        return 1
    if args.config is not None and not args.config.exists():
        print(f"Error: Config file not found: {args.config}", file=sys.stderr)
        return 1

    try:
        config = load_config(args)
    except tomllib.TOMLDecodeError as e:
        print(f"Error: Invalid config file: {e}", file=sys.stderr)
        return 1
    logger.debug("Using %s", config)

    compiler = TableCompiler(config)
    try:
        result = compiler.compile(args.source.read_text(encoding="utf-8"), only=args.structs)
    except SyntaxError as e:
        print(f"Error: {args.source}: {e}", file=sys.stderr)
        return 1

    for error in result.errors:
        print(f"Error: {args.source}: {error}", file=sys.stderr)

    if args.describe:
        output = json.dumps([t.structure.to_dict() for t in result.tables], indent=2) + "\n"
    else:
        output = result.code

    if args.output is not None:
        args.output.write_text(output, encoding="utf-8")
        logger.debug("Wrote %d table(s) to %s", len(result.tables), args.output)
    else:
        sys.stdout.write(output)

    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
