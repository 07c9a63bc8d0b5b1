"""
Pick the loader for a record file from its extension, or from its first bytes
when the extension says nothing.
"""

from __future__ import annotations

from pathlib import Path

from mcq_compare.data_formats.base import DataLoader
from mcq_compare.data_formats.json_loader import JSONLoader
from mcq_compare.data_formats.jsonl_loader import JSONLLoader
from mcq_compare.data_formats.parquet_loader import ParquetLoader

LOADER_CLASSES: dict[str, type[DataLoader]] = {
    "jsonl": JSONLLoader,
    "json": JSONLoader,
    "parquet": ParquetLoader,
}

SUPPORTED_FORMATS = frozenset(LOADER_CLASSES)

# Extension -> format name, from what each loader declares
EXTENSION_MAP: dict[str, str] = {
    extension: format_name
    for format_name, loader_class in LOADER_CLASSES.items()
    for extension in loader_class().supported_extensions
}


def sniff_format(head: bytes) -> str | None:
    """Guess the format from the first bytes of a file.

    Returns:
        "parquet", "json", "jsonl", or None if the content gives no hint.
    """
    if head.startswith(b"PAR1"):
        return "parquet"

    text = head.decode("utf-8-sig", errors="ignore").lstrip()
    if text.startswith("["):
        return "json"
    if text.startswith("{"):
        return "jsonl"
    return None


def detect_format(filename: str, head: bytes = b"") -> str:
    """Detect the format of a record file from its name, else its first bytes.

    Args:
        filename: Name or path of the file; only the extension is looked at.
        head: Leading bytes of the content, sniffed when the extension is
              not a known one.

    Raises:
        ValueError: If neither the extension nor the content gives a format.

    Examples:
        >>> detect_format("news_mcq3_with_gemma3_type1_sample50.jsonl")
        'jsonl'
        >>> detect_format("run_type1", b'[{"id": 1}]')
        'json'
    """
    format_name = EXTENSION_MAP.get(Path(filename).suffix.lower()) or sniff_format(head)
    if format_name is None:
        raise ValueError(
            f"Cannot determine format for '{filename}'. "
            f"Supported extensions: {', '.join(sorted(EXTENSION_MAP))}"
        )
    return format_name


def get_loader_for_format(format_name: str) -> DataLoader:
    """Instantiate the loader registered for format_name.

    Raises:
        ValueError: If the format name is not supported.
    """
    try:
        loader_class = LOADER_CLASSES[format_name]
    except KeyError:
        raise ValueError(
            f"Unsupported format '{format_name}'. "
            f"Supported formats: {', '.join(sorted(SUPPORTED_FORMATS))}"
        ) from None
    return loader_class()


def get_loader(filename: str, head: bytes = b"") -> DataLoader:
    """Loader for a record file, chosen by extension or content.

    Raises:
        ValueError: If the format cannot be determined.
    """
    return get_loader_for_format(detect_format(filename, head))
