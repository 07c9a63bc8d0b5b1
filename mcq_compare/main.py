#!/usr/bin/env python3
"""
MCQ Compare Explorer

A CLI tool for browsing merged articles and the questions each prompt type
generated for them, side by side.

Usage:
    python -m mcq_compare.main list <articles.json>           Page through articles
    python -m mcq_compare.main show <articles.json> <key>     Show one article per type
    python -m mcq_compare.main stats <articles.json>          Show per-type statistics

Pass --instructions <summary.json> to label each type with its type-specific
instructions.
"""

from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import Any, Sequence, TypeVar

from mcq_compare.config import load_settings
from mcq_compare.errors import ConfigError
from mcq_compare.instruction_extractor import prompt_summary
from mcq_compare.logging_config import configure_logging
from mcq_compare.models import Article, ArticleBundle, InstructionSummary
from mcq_compare.record_merger import SORT_KEYS, sort_articles

logger = logging.getLogger(__name__)

T = TypeVar("T")


def load_bundle(filename: str) -> ArticleBundle:
    """Load a merged-articles artifact."""
    with open(filename, "r", encoding="utf-8") as f:
        return ArticleBundle.from_dict(json.load(f))


def load_instructions(filename: str | None) -> InstructionSummary | None:
    """Load an instruction summary; None when no file was given or it is unreadable."""
    if not filename:
        return None
    try:
        with open(filename, "r", encoding="utf-8") as f:
            return InstructionSummary.from_dict(json.load(f))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring instruction summary %s: %s", filename, e)
        return None


def display_text(value: Any, default: str = "") -> str:
    """Render a record field as text; records may hold numbers or None."""
    return default if value is None or value == "" else str(value)


def truncate(text: str, max_len: int = 50) -> str:
    """Truncate text with ellipsis."""
    if len(text) <= max_len:
        return text
    return text[:max_len - 3] + "..."


def paginate(items: Sequence[T], page: int, page_size: int) -> tuple[list[T], int, int]:
    """Slice one page out of items.

    Args:
        items: Everything to page through.
        page: 1-based page number; clamped into the valid range.
        page_size: Items per page.

    Returns:
        (page_items, page, total_pages). There is always at least one page.
    """
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    total_pages = max(math.ceil(len(items) / page_size), 1)
    page = min(max(page, 1), total_pages)
    start = (page - 1) * page_size
    return list(items[start:start + page_size]), page, total_pages


def find_article(bundle: ArticleBundle, key: str) -> Article | None:
    """Look an article up by news_item_id or id (compared as strings)."""
    for article in bundle.articles:
        if key in (str(article.key), str(article.news_item_id), str(article.id)):
            return article
    return None


def get_article_summary(article: Article, types: list[str]) -> dict[str, Any]:
    """Extract summary information from an article."""
    counts = {
        type_id: len(article.question_types[f"type{type_id}"])
        for type_id in types
        if f"type{type_id}" in article.question_types
    }
    return {
        'key': str(article.key),
        'headline': display_text(article.headline, '(untitled)'),
        'date_time': display_text(article.date_time, '-'),
        'provider_id': display_text(article.provider_id, '-'),
        'counts': counts,
    }


def format_type_section(
    type_id: str,
    questions: list[dict[str, Any]],
    summary: InstructionSummary | None,
) -> list[str]:
    """Render the questions one prompt type produced for an article."""
    lines = []
    header = f"--- Type {type_id}: "
    header += f"{len(questions)} questions" if questions else "no data"
    lines.append(header)

    instruction_set = summary.types.get(type_id) if summary else None
    prompt = prompt_summary(instruction_set)
    if prompt:
        lines.append(f"    prompt: {' / '.join(prompt)}")

    for i, qa in enumerate(questions, start=1):
        lines.append(f"  Q{i}. {qa.get('question', '')}")
        for j, choice in enumerate(qa.get('choices') or [], start=1):
            lines.append(f"      {j}) {choice}")

    if instruction_set is not None and questions:
        lines.append(f"    source: {instruction_set.source}")
    return lines


# ============== Commands ==============

def cmd_list(args):
    """Page through articles with per-type question counts."""
    bundle = load_bundle(args.file)
    articles = sort_articles(bundle.articles, by=args.sort)
    page_items, page, total_pages = paginate(articles, args.page, args.page_size)

    header = f"{'#':<5} {'KEY':<20} {'DATE':<20} {'PROVIDER':<10} {'QUESTIONS':<24} {'HEADLINE'}"
    print("-" * len(header))
    print(header)
    print("-" * len(header))

    first_index = (page - 1) * args.page_size
    for offset, article in enumerate(page_items):
        summary = get_article_summary(article, bundle.types)
        counts = ' '.join(
            f"{type_id}:{summary['counts'].get(type_id, '-')}" for type_id in bundle.types
        )
        print(f"{first_index + offset + 1:<5} {truncate(summary['key'], 18):<20} "
              f"{truncate(summary['date_time'], 19):<20} {truncate(summary['provider_id'], 9):<10} "
              f"{truncate(counts, 23):<24} {truncate(summary['headline'], 60)}")

    print("-" * len(header))
    print(f"Page {page} / {total_pages} ({bundle.article_count} articles)")


def cmd_show(args):
    """Show one article with a section per prompt type."""
    bundle = load_bundle(args.file)
    article = find_article(bundle, args.key)
    if article is None:
        print(f"Error: Article '{args.key}' not found", file=sys.stderr)
        sys.exit(1)

    summary = load_instructions(args.instructions)

    print(f"[{article.key}] {display_text(article.headline, '(untitled)')}")
    if article.sub_headline:
        print(display_text(article.sub_headline))
    meta = [text for text in map(display_text, (article.provider_id, article.date_time)) if text]
    if meta:
        print(" | ".join(meta))
    print("=" * 60)

    if article.content:
        for paragraph in display_text(article.content).split("\n"):
            if paragraph.strip():
                print(paragraph)
    else:
        print("(no content)")
    print()

    for type_id in bundle.types:
        for line in format_type_section(type_id, article.questions_for(f"type{type_id}"), summary):
            print(line)
        print()


def cmd_stats(args):
    """Show per-type coverage statistics."""
    bundle = load_bundle(args.file)
    summary = load_instructions(args.instructions)
    total = bundle.article_count

    print("=" * 60)
    print("ARTICLE STATISTICS")
    print("=" * 60)
    print(f"  Generated at:            {bundle.generated_at or 'N/A'}")
    print(f"  Total articles:          {total:,}")
    complete = sum(
        1 for article in bundle.articles
        if all(f"type{type_id}" in article.question_types for type_id in bundle.types)
    )
    print(f"  Covered by every type:   {complete:,}")

    print(f"\n{'TYPE':<6} {'ARTICLES':>9} {'QUESTIONS':>10} {'AVG':>6}")
    for type_id in bundle.types:
        label = f"type{type_id}"
        covered = [a for a in bundle.articles if label in a.question_types]
        questions = sum(len(a.question_types[label]) for a in covered)
        print(f"{type_id:<6} {len(covered):>9,} {questions:>10,} {questions / max(1, len(covered)):>6.1f}")

    if summary is not None:
        print(f"\nCommon instructions: {len(summary.common)}")
        for sentence in summary.common:
            print(f"  - {truncate(sentence, 70)}")
    print("=" * 60)


def main(argv: list[str] | None = None) -> None:
    try:
        settings = load_settings()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    parser = argparse.ArgumentParser(
        description="MCQ Compare Explorer - browse merged articles and their questions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    list_parser = subparsers.add_parser('list', help='Page through articles')
    list_parser.add_argument('file', help='articles.json produced by build_articles')
    list_parser.add_argument('-p', '--page', type=int, default=1, help='Page number (default: 1)')
    list_parser.add_argument('--page-size', type=int, default=settings.page_size,
                             help=f'Articles per page (default: {settings.page_size})')
    list_parser.add_argument('--sort', choices=SORT_KEYS, default='date',
                             help='Newest first (date) or merge order (order)')
    list_parser.set_defaults(func=cmd_list)

    show_parser = subparsers.add_parser('show', help='Show one article')
    show_parser.add_argument('file', help='articles.json produced by build_articles')
    show_parser.add_argument('key', help='news_item_id or id of the article')
    show_parser.add_argument('--instructions', help='Instruction summary JSON')
    show_parser.set_defaults(func=cmd_show)

    stats_parser = subparsers.add_parser('stats', help='Show per-type statistics')
    stats_parser.add_argument('file', help='articles.json produced by build_articles')
    stats_parser.add_argument('--instructions', help='Instruction summary JSON')
    stats_parser.set_defaults(func=cmd_stats)

    args = parser.parse_args(argv)
    configure_logging(settings.log_level, verbose=args.verbose)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if not Path(args.file).exists():
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        sys.exit(1)

    if getattr(args, 'page_size', 1) < 1:
        print("Error: --page-size must be at least 1", file=sys.stderr)
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
