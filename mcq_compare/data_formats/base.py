"""
Common interface of the record loaders.

Batch runs read every source into memory concurrently first and parse it
afterwards, so a loader works on the complete raw content of one file.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Iterator

# Called with the position of the bad record (1-based line number for JSONL,
# zero-based row index otherwise) and the parse error.
ErrorCallback = Callable[[int, Exception], None]


class DataLoader(ABC):
    """A record format: JSONL, JSON or Parquet."""

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Short format name ('jsonl', 'json', 'parquet')."""

    @property
    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """Lower-case file extensions, dot included."""

    @abstractmethod
    def load_bytes(
        self,
        data: bytes,
        on_error: ErrorCallback | None = None,
    ) -> Iterator[dict[str, Any]]:
        """Parse records out of the complete content of a file.

        Args:
            data: Raw file content.
            on_error: Receives (position, error) for every record that cannot
                      be parsed, which is then skipped. When None, the first
                      bad record raises.

        Yields:
            Each parseable record.

        Raises:
            ValueError: If the content as a whole is not in this format.
        """
