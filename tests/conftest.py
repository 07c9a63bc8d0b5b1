"""Pytest configuration and shared fixtures for mcq_compare tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

RECORD_TEMPLATE = "news_mcq3_with_gemma3_type{type}_sample50.jsonl"
SCRIPT_TEMPLATE = "append_news_mcq3_with_gemma3_type{type}.py"


def write_jsonl(path: Path, records: list[dict[str, Any]]) -> None:
    """Helper to write records to a JSONL file."""
    with open(path, 'w', encoding='utf-8') as f:
        for record in records:
            f.write(json.dumps(record, ensure_ascii=False) + '\n')


def read_json(path: Path) -> Any:
    """Helper to read a JSON artifact."""
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def write_instruction_script(path: Path, *parts: str, variable: str = "SYSTEM_INSTRUCTIONS") -> None:
    """Helper to write a generation script holding a parenthesized string literal."""
    literals = "\n".join(f"    {json.dumps(part, ensure_ascii=False)}" for part in parts)
    path.write_text(
        "import json\n\n"
        f"{variable} = (\n{literals}\n)\n\n"
        "def main():\n"
        "    return json.dumps({'system': SYSTEM_INSTRUCTIONS})\n",
        encoding='utf-8',
    )


def make_question(text: str, *choices: str) -> dict[str, Any]:
    return {"question": text, "choices": list(choices) or ["A", "B", "C", "D"]}


@pytest.fixture
def article_record() -> Callable[..., dict[str, Any]]:
    """Factory for a full article record as written by an MCQ run."""

    def _make(news_item_id: str = "n-001", **overrides: Any) -> dict[str, Any]:
        record = {
            "news_item_id": news_item_id,
            "id": f"id-{news_item_id}",
            "headline": f"Headline {news_item_id}",
            "sub_headline": None,
            "content": "First paragraph.\nSecond paragraph.",
            "date_time": "2024-05-01T09:00:00",
            "provider_id": "jiji",
            "first_created": "2024-05-01T08:55:00",
            "questions": [make_question(f"What happened in {news_item_id}?")],
        }
        record.update(overrides)
        return record

    return _make


@pytest.fixture
def type_data_dir(tmp_path, article_record) -> Path:
    """Data directory with type1, type7 and type9 record files.

    n-001 appears in every type, n-002 only in type1 and type9, n-003 only
    in type7.
    """
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    write_jsonl(data_dir / RECORD_TEMPLATE.format(type=1), [
        article_record("n-001"),
        article_record("n-002", date_time="2024-05-02T09:00:00"),
    ])
    write_jsonl(data_dir / RECORD_TEMPLATE.format(type=7), [
        article_record("n-003", date_time="2024-04-30T09:00:00"),
        article_record("n-001", headline="Rewritten headline"),
    ])
    write_jsonl(data_dir / RECORD_TEMPLATE.format(type=9), [
        article_record("n-002", questions=[make_question("Q9a"), make_question("Q9b")]),
        article_record("n-001"),
    ])
    return data_dir


@pytest.fixture
def instruction_dir(tmp_path) -> Path:
    """Directory with generation scripts for types 1, 2 and 3."""
    script_dir = tmp_path / "scripts"
    script_dir.mkdir()
    write_instruction_script(
        script_dir / SCRIPT_TEMPLATE.format(type=1),
        "あなたは試験作成者です。",
        "記事に基づいて問題を作成してください。",
        "選択肢は4つです。",
    )
    write_instruction_script(
        script_dir / SCRIPT_TEMPLATE.format(type=2),
        "あなたは試験作成者です。",
        "数字に関する問題を作成してください！",
        "選択肢は4つです。",
    )
    write_instruction_script(
        script_dir / SCRIPT_TEMPLATE.format(type=3),
        "あなたは試験作成者です。",
        "選択肢は4つです。",
        "人物に関する問題ですか？",
    )
    return script_dir
