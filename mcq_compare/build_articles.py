#!/usr/bin/env python3
"""
Build Articles - merge per-type MCQ record files into one articles.json.

Each prompt type writes its own record file (one article with its generated
questions per line). This script groups the records by news_item_id (falling
back to id) and writes one entry per article, holding the descriptive fields
of its first occurrence and the questions of every type under "type<N>".

Usage:
    python -m mcq_compare.build_articles
    python -m mcq_compare.build_articles --data-dir public/data --types 1,7,9
    python -m mcq_compare.build_articles --discover --allow-missing -o merged.json
    python -m mcq_compare.build_articles --policy last

Exit status is 1 when a declared source could not be read or parsed (the
partial result is still written), 0 otherwise.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from mcq_compare.config import load_settings, parse_type_ids
from mcq_compare.errors import BatchReport, ConfigError
from mcq_compare.logging_config import configure_logging
from mcq_compare.models import ArticleBundle
from mcq_compare.record_merger import MergePolicy, merge_records
from mcq_compare.sources import (
    TypeSource,
    discover_type_sources,
    load_record_streams,
    sources_from_template,
)

logger = logging.getLogger(__name__)


def build_bundle(
    sources: Sequence[TypeSource],
    policy: MergePolicy = MergePolicy.FIRST_WRITE,
    report: BatchReport | None = None,
) -> ArticleBundle:
    """Read, merge and package a list of TypeSource inputs."""
    if report is None:
        report = BatchReport()
    streams = load_record_streams(sources, report)
    articles = merge_records(streams, policy=policy, report=report)
    return ArticleBundle(types=[source.type_id for source in sources], articles=articles)


def write_json(data: dict[str, Any], output_file: Path) -> None:
    """Write an artifact as indented UTF-8 JSON, creating parent directories."""
    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")


def build_parser() -> argparse.ArgumentParser:
    settings = load_settings()
    parser = argparse.ArgumentParser(
        description="Merge per-type MCQ record files into a single articles.json.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=Path(settings.data_dir),
        help=f"Directory holding the per-type files (default: {settings.data_dir})",
    )
    parser.add_argument(
        "--types",
        default=",".join(settings.type_ids),
        help="Type ids to merge, in priority order, e.g. '1,7,9' or '1-10'",
    )
    parser.add_argument(
        "--template",
        default=settings.record_template,
        help="Filename template with a '{type}' placeholder",
    )
    parser.add_argument(
        "--discover",
        action="store_true",
        help="Use every record file in --data-dir whose name contains type<N>",
    )
    parser.add_argument(
        "--policy",
        choices=[policy.value for policy in MergePolicy],
        default=MergePolicy.FIRST_WRITE.value,
        help="Descriptive field precedence: first record wins, or last non-null wins",
    )
    parser.add_argument(
        "--allow-missing",
        action="store_true",
        help="Treat missing type files as warnings instead of failures",
    )
    parser.add_argument("-o", "--output", type=Path, help="Output file (default: <data-dir>/articles.json)")
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

    if args.discover:
        sources = discover_type_sources(args.data_dir)
    else:
        try:
            type_ids = parse_type_ids(args.types)
            sources = sources_from_template(args.data_dir, args.template, type_ids)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2

    if not sources:
        print(f"Error: No type sources found in {args.data_dir}", file=sys.stderr)
        return 1

    report = BatchReport(allow_missing=args.allow_missing)
    bundle = build_bundle(sources, policy=MergePolicy(args.policy), report=report)

    output_file = args.output or args.data_dir / "articles.json"
    write_json(bundle.to_dict(), output_file)
    print(f"Wrote {bundle.article_count} articles to {output_file}")

    if report.has_failures:
        logger.error("Finished with errors (%s)", report.summary())
    else:
        logger.info("Finished (%s)", report.summary())
    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())
