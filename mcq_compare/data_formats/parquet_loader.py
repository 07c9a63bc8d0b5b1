"""
Parquet records, for MCQ runs exported from a dataframe instead of written
as JSONL. The questions column is a list of structs.
"""

from __future__ import annotations

from typing import Any, Iterator

import pyarrow as pa
import pyarrow.parquet as pq

from mcq_compare.data_formats.base import DataLoader, ErrorCallback


def _to_python(value: Any) -> Any:
    """Unwrap Arrow scalars, recursing into lists and structs."""
    if hasattr(value, "as_py"):
        return value.as_py()
    if isinstance(value, list):
        return [_to_python(item) for item in value]
    if isinstance(value, dict):
        return {k: _to_python(v) for k, v in value.items()}
    return value


class ParquetLoader(DataLoader):
    """Reads .parquet record files one batch at a time."""

    @property
    def format_name(self) -> str:
        return "parquet"

    @property
    def supported_extensions(self) -> list[str]:
        return [".parquet", ".pq"]

    def load_bytes(
        self,
        data: bytes,
        on_error: ErrorCallback | None = None,
    ) -> Iterator[dict[str, Any]]:
        """Rows of in-memory Parquet content.

        The schema types every row, so no single row can fail to parse and
        on_error is never called.

        Raises:
            pyarrow.ArrowInvalid: If the content is not Parquet (a ValueError).
        """
        parquet_file = pq.ParquetFile(pa.BufferReader(data))
        for batch in parquet_file.iter_batches():
            columns = batch.to_pydict()
            for i in range(batch.num_rows):
                yield {name: _to_python(values[i]) for name, values in columns.items()}
