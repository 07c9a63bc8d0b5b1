"""
JSON Lines records: one article, with the questions one prompt type generated
for it, per line. This is what the MCQ generation runs write.
"""

from __future__ import annotations

import json
from typing import Any, Iterator

from mcq_compare.data_formats.base import DataLoader, ErrorCallback


class JSONLLoader(DataLoader):
    """Reads .jsonl record files line by line."""

    @property
    def format_name(self) -> str:
        return "jsonl"

    @property
    def supported_extensions(self) -> list[str]:
        return [".jsonl"]

    def load_bytes(
        self,
        data: bytes,
        on_error: ErrorCallback | None = None,
    ) -> Iterator[dict[str, Any]]:
        """Parse raw JSONL content, skipping blank lines.

        Each line is decoded on its own, so a line with invalid UTF-8, invalid
        JSON, or JSON that is not an object is reported to on_error with its
        1-based line number and the other lines still load. Without on_error
        the first bad line raises instead.
        """
        for line_number, raw in enumerate(data.split(b"\n"), start=1):
            try:
                line = raw.decode("utf-8-sig").strip()
                if not line:
                    continue
                record = json.loads(line)
                if not isinstance(record, dict):
                    raise ValueError(
                        f"expected a JSON object, got {type(record).__name__}"
                    )
            except ValueError as e:
                if on_error is None:
                    raise
                on_error(line_number, e)
                continue
            yield record
