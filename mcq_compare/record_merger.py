"""
Merge type-labeled record streams into one Article per stable identifier.

Each prompt type produces its own file of records, and the same news article
shows up in several of them. Merging walks the streams in the order given,
creates an Article the first time a key is seen and from then on only
attaches that stream's questions under its type label.
"""

from __future__ import annotations

import logging
from enum import Enum
from operator import attrgetter
from typing import Any, Iterable

from mcq_compare.data_formats.schema_normalizer import (
    ARTICLE_FIELDS,
    normalize_questions,
    stable_key,
)
from mcq_compare.errors import BatchReport
from mcq_compare.models import Article

logger = logging.getLogger(__name__)

SORT_KEYS = ("order", "date")


class MergePolicy(str, Enum):
    """How descriptive fields react to a later record with the same key."""

    # The first record seen for a key fixes every descriptive field.
    FIRST_WRITE = "first"
    # A later non-null value replaces the stored one; nulls keep the prior value.
    LAST_WRITE_COALESCE = "last"


def _coalesce(article: Article, record: dict[str, Any]) -> None:
    for name in ARTICLE_FIELDS:
        value = record.get(name)
        if value is not None:
            setattr(article, name, value)


def merge_records(
    streams: Iterable[tuple[str, Iterable[Any]]],
    policy: MergePolicy = MergePolicy.FIRST_WRITE,
    report: BatchReport | None = None,
) -> list[Article]:
    """Merge labeled record streams into articles.

    Args:
        streams: (type_label, records) pairs, consumed in the given order.
        policy: Precedence rule for descriptive fields that differ between
                sources for one key.
        report: Receives malformed-record and missing-key issues. A fresh
                report is used when omitted.

    Returns:
        Articles in first-occurrence order across all streams.

    Examples:
        >>> articles = merge_records([
        ...     ("A", [{"id": "x1", "headline": "H"}]),
        ...     ("B", [{"id": "x1", "questions": []}]),
        ... ])
        >>> articles[0].headline, sorted(articles[0].question_types)
        ('H', ['B'])
    """
    if report is None:
        report = BatchReport()

    articles: dict[Any, Article] = {}
    next_order = 0

    for label, records in streams:
        for position, record in enumerate(records, start=1):
            where = f"{label} record {position}"

            if not isinstance(record, dict):
                report.record_malformed(
                    where, f"expected an object, got {type(record).__name__}"
                )
                continue

            key = stable_key(record)
            if key is None:
                report.key_missing(where)
                continue
            if isinstance(key, bool) or not isinstance(key, (str, int)):
                report.record_malformed(where, f"unusable stable id {key!r}")
                continue

            article = articles.get(key)
            if article is None:
                article = Article.from_record(key, record, order=next_order)
                articles[key] = article
                next_order += 1
            elif policy is MergePolicy.LAST_WRITE_COALESCE:
                _coalesce(article, record)

            questions = record.get("questions")
            if questions is None:
                continue
            try:
                article.question_types[label] = normalize_questions(questions)
            except ValueError as e:
                report.record_malformed(where, f"questions dropped: {e}")

    logger.debug("Merged %d articles", len(articles))
    return sorted(articles.values(), key=attrgetter("order"))


def _sort_text(value: Any) -> str:
    # Loosely typed records can carry numbers where text is expected.
    return "" if value is None else str(value)


def sort_articles(articles: Iterable[Article], by: str = "order") -> list[Article]:
    """Order articles for presentation.

    Args:
        articles: Merged articles.
        by: "order" keeps first-occurrence order; "date" puts the newest
            date_time first and breaks ties by headline.

    Raises:
        ValueError: If by is not a known sort key.
    """
    if by not in SORT_KEYS:
        raise ValueError(f"Unknown sort key '{by}'. Choose from: {', '.join(SORT_KEYS)}")

    ordered = sorted(articles, key=attrgetter("order"))
    if by == "date":
        ordered.sort(key=lambda a: _sort_text(a.headline))
        ordered.sort(key=lambda a: _sort_text(a.date_time), reverse=True)
    return ordered
