"""
Data models for merged articles and extracted instructions.

Both artifacts are built once per batch run. The dataclasses here serialize to
the JSON shapes the comparison viewer reads (camelCase top-level keys,
questionTypes keyed by "type<N>").
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from mcq_compare.data_formats.schema_normalizer import ARTICLE_FIELDS, stable_key


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a 'Z' suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class Article:
    """One news article merged from every type-labeled source that mentions it.

    Descriptive fields are optional because any source may omit them. The
    question payloads are keyed by type label; a label is absent, never None,
    when its source had nothing for this article.
    """

    key: Any
    news_item_id: Any = None
    id: Any = None
    headline: str | None = None
    sub_headline: str | None = None
    content: str | None = None
    date_time: str | None = None
    provider_id: str | None = None
    first_created: str | None = None
    question_types: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    # First-occurrence position within a merge run; never serialized.
    order: int = field(default=0, repr=False, compare=False)

    @classmethod
    def from_record(cls, key: Any, record: dict[str, Any], order: int = 0) -> "Article":
        values = {name: record.get(name) for name in ARTICLE_FIELDS}
        return cls(key=key, order=order, **values)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Article":
        """Rebuild an article from its serialized form (articles.json)."""
        article = cls.from_record(stable_key(data), data)
        article.question_types = dict(data.get("questionTypes") or {})
        return article

    def descriptive_fields(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in ARTICLE_FIELDS}

    def questions_for(self, label: str) -> list[dict[str, Any]]:
        return self.question_types.get(label) or []

    def to_dict(self) -> dict[str, Any]:
        data = self.descriptive_fields()
        data["questionTypes"] = {
            label: questions for label, questions in self.question_types.items()
        }
        return data


@dataclass
class ArticleBundle:
    """The merged-articles artifact."""

    types: list[str]
    articles: list[Article]
    generated_at: str = field(default_factory=utc_timestamp)

    @property
    def article_count(self) -> int:
        return len(self.articles)

    def to_dict(self) -> dict[str, Any]:
        return {
            "generatedAt": self.generated_at,
            "types": list(self.types),
            "articleCount": self.article_count,
            "articles": [article.to_dict() for article in self.articles],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ArticleBundle":
        articles = [Article.from_dict(item) for item in data.get("articles") or []]
        for order, article in enumerate(articles):
            article.order = order
        return cls(
            types=[str(t) for t in data.get("types") or []],
            articles=articles,
            generated_at=data.get("generatedAt") or "",
        )


@dataclass
class InstructionSet:
    """The instruction text of one prompt type, split into sentences.

    Attributes:
        type_id: Type number as a string ("1".."10").
        source: Where the text came from (a path, relative when possible).
        text: The full raw instruction text.
        sentences: All sentences in original order.
        specific: Sentences not shared by every type, in original order.
    """

    type_id: str
    source: str
    text: str
    sentences: list[str]
    specific: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "systemInstructions": list(self.sentences),
            "typeSpecificInstructions": list(self.specific),
            "fullText": self.text,
        }

    @classmethod
    def from_dict(cls, type_id: str, data: dict[str, Any]) -> "InstructionSet":
        return cls(
            type_id=type_id,
            source=data.get("source") or "",
            text=data.get("fullText") or "",
            sentences=list(data.get("systemInstructions") or []),
            specific=list(data.get("typeSpecificInstructions") or []),
        )


@dataclass
class InstructionSummary:
    """The extracted-instructions artifact."""

    common: list[str]
    types: dict[str, InstructionSet]
    generated_at: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> dict[str, Any]:
        return {
            "generatedAt": self.generated_at,
            "commonInstructions": list(self.common),
            "types": {type_id: item.to_dict() for type_id, item in self.types.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InstructionSummary":
        types = {
            str(type_id): InstructionSet.from_dict(str(type_id), item)
            for type_id, item in (data.get("types") or {}).items()
        }
        return cls(
            common=list(data.get("commonInstructions") or []),
            types=types,
            generated_at=data.get("generatedAt") or "",
        )
