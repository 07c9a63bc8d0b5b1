"""
Field rules for loosely shaped article records.

Records coming from different MCQ runs are loosely shaped: any descriptive
field may be absent, the stable identifier lives in 'news_item_id' or, for
older exports, in 'id', and the questions payload may be missing entirely.
"""

from __future__ import annotations

from typing import Any

# Descriptive fields carried from the first record of an article
ARTICLE_FIELDS: tuple[str, ...] = (
    "news_item_id",
    "id",
    "headline",
    "sub_headline",
    "content",
    "date_time",
    "provider_id",
    "first_created",
)

# Field names tried, in order, for the stable identifier
KEY_FIELDS: tuple[str, ...] = ("news_item_id", "id")


def stable_key(record: dict[str, Any]) -> Any:
    """Return the identifier that unifies records about the same article.

    'news_item_id' wins when it is truthy, otherwise 'id'. Empty strings and
    zero count as absent.

    Returns:
        The key, or None if the record has none.
    """
    for name in KEY_FIELDS:
        value = record.get(name)
        if value:
            return value
    return None


def normalize_questions(value: Any) -> list[dict[str, Any]]:
    """Validate a questions payload.

    Each question keeps all of its keys; 'question' and 'choices' are
    guaranteed to exist afterwards.

    Raises:
        ValueError: If the payload is not a list of objects.
    """
    if not isinstance(value, list):
        raise ValueError(f"questions must be a list (got {type(value).__name__})")

    questions = []
    for i, item in enumerate(value):
        if not isinstance(item, dict):
            raise ValueError(
                f"question at index {i} is not an object (got {type(item).__name__})"
            )
        question = item.copy()
        question.setdefault("question", "")
        if question.get("choices") is None:
            question["choices"] = []
        questions.append(question)
    return questions
