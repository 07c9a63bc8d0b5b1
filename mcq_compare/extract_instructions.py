#!/usr/bin/env python3
"""
Extract Instructions - summarize the SYSTEM_INSTRUCTIONS of every prompt type.

Reads one generation script per type, evaluates its SYSTEM_INSTRUCTIONS
string, splits it into sentences and writes which sentences all types share
and which are specific to each type.

Usage:
    python -m mcq_compare.extract_instructions
    python -m mcq_compare.extract_instructions --source-dir ../jiji-compe2 --types 1-10
    python -m mcq_compare.extract_instructions --terminators "." -o summary.json

Exit status is 1 when any type's script could not be read or parsed. When no
type yields any instruction text the run aborts without writing output.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from mcq_compare.build_articles import write_json
from mcq_compare.config import load_settings, parse_type_ids
from mcq_compare.errors import BatchReport, ConfigError, NoExtractableTextError
from mcq_compare.instruction_extractor import extract_instructions
from mcq_compare.logging_config import configure_logging
from mcq_compare.sources import load_instruction_texts, sources_from_template

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    settings = load_settings()
    parser = argparse.ArgumentParser(
        description="Split prompt SYSTEM_INSTRUCTIONS into common and type-specific sentences.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--source-dir",
        type=Path,
        default=Path(settings.instruction_dir),
        help=f"Directory holding the generation scripts (default: {settings.instruction_dir})",
    )
    parser.add_argument(
        "--types",
        default=",".join(settings.type_ids),
        help="Type ids to read, e.g. '1,7,9' or '1-10'",
    )
    parser.add_argument(
        "--template",
        default=settings.instruction_template,
        help="Script filename template with a '{type}' placeholder",
    )
    parser.add_argument(
        "--variable",
        default=settings.instruction_variable,
        help="Name of the module-level string holding the instructions",
    )
    parser.add_argument(
        "--terminators",
        default=settings.terminators,
        help="Characters that end a sentence",
    )
    parser.add_argument(
        "--relative-to",
        type=Path,
        default=Path.cwd(),
        help="Base directory for the source paths recorded in the output (default: cwd)",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=Path(settings.instruction_output),
        help=f"Output file (default: {settings.instruction_output})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    parser.set_defaults(log_level=settings.log_level)
    return parser


def main(argv: list[str] | None = None) -> int:
    try:
        parser = build_parser()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    args = parser.parse_args(argv)
    configure_logging(args.log_level, verbose=args.verbose, quiet=args.quiet)

    try:
        type_ids = parse_type_ids(args.types)
        sources = sources_from_template(args.source_dir, args.template, type_ids)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if not args.terminators:
        print("Error: --terminators must not be empty", file=sys.stderr)
        return 2

    report = BatchReport()
    texts = load_instruction_texts(
        sources, report, variable=args.variable, relative_to=args.relative_to
    )

    try:
        summary = extract_instructions(texts, terminators=args.terminators)
    except NoExtractableTextError as e:
        logger.error("%s Aborting.", e)
        return 1

    write_json(summary.to_dict(), args.output)
    print(f"Wrote instruction summary for {len(summary.types)} types to {args.output}")

    if report.has_failures:
        logger.error("Finished with errors (%s)", report.summary())
    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())
