"""
JSON format data loader.

This module provides the JSONLoader class for loading JSON files that contain
either an array of objects or a single object.
"""

from __future__ import annotations

import json
from typing import Any, Iterator

from mcq_compare.data_formats.base import DataLoader, ErrorCallback


class JSONLoader(DataLoader):
    """Data loader for JSON format.

    JSON files can contain either:
    - An array of objects: [{...}, {...}, ...]
    - A single object: {...}

    A single object is treated as a list with one element.

    Attributes:
        format_name: Returns 'json'.
        supported_extensions: Returns ['.json'].
    """

    @property
    def format_name(self) -> str:
        """Return the format name."""
        return "json"

    @property
    def supported_extensions(self) -> list[str]:
        """Return supported file extensions."""
        return [".json"]

    def _parse(self, data: Any, on_error: ErrorCallback | None) -> list[dict[str, Any]]:
        """Turn decoded JSON into a list of records.

        Raises:
            ValueError: If the JSON is not an object or array of objects, or an
                        array item is not an object and on_error is None.
        """
        if isinstance(data, dict):
            return [data]

        if not isinstance(data, list):
            raise ValueError(
                f"JSON file must contain an object or array of objects (got {type(data).__name__})"
            )

        records = []
        for i, item in enumerate(data):
            if isinstance(item, dict):
                records.append(item)
                continue
            error = ValueError(
                f"JSON array item at index {i} is not an object (got {type(item).__name__})"
            )
            if on_error is None:
                raise error
            on_error(i, error)
        return records

    def load_bytes(
        self,
        data: bytes,
        on_error: ErrorCallback | None = None,
    ) -> Iterator[dict[str, Any]]:
        """Load records from raw JSON content.

        Non-object array items are reported to on_error and skipped.

        Raises:
            ValueError: If the content is not valid JSON (json.JSONDecodeError)
                        or not an object/array.
        """
        decoded = json.loads(data.decode("utf-8-sig"))
        yield from self._parse(decoded, on_error)
