"""
Directory scanning utilities for discovering type-labeled record files.

MCQ runs write one file per prompt type, with the type number embedded in the
filename (news_mcq3_with_gemma3_type7_sample50.jsonl).
"""

from __future__ import annotations

import re
from pathlib import Path

from mcq_compare.data_formats.format_detector import EXTENSION_MAP

# Supported file extensions (derived from EXTENSION_MAP)
SUPPORTED_EXTENSIONS = frozenset(EXTENSION_MAP.keys())

TYPE_PATTERN = re.compile(r"type(\d+)", re.IGNORECASE)


def parse_type_id(filename: str) -> str | None:
    """Extract the type number from a filename.

    Examples:
        >>> parse_type_id("news_mcq3_with_gemma3_type10_sample50.jsonl")
        '10'
        >>> parse_type_id("articles.json") is None
        True
    """
    match = TYPE_PATTERN.search(filename)
    return match.group(1) if match else None


def discover_data_files(directory: str) -> list[dict]:
    """
    Discover all type-labeled data files in a directory.

    Args:
        directory: Path to the directory to scan.

    Returns:
        List of dicts ordered by type number, with:
        - path: absolute path to file
        - name: filename
        - format: detected format (jsonl, json, parquet)
        - type_id: type number as a string
    """
    dir_path = Path(directory)
    files = []

    # Check extensions case-insensitively (glob patterns are case-sensitive on Linux)
    try:
        entries = list(dir_path.iterdir())
    except OSError:
        return []

    for file_path in entries:
        if not file_path.is_file():
            continue

        ext_lower = file_path.suffix.lower()
        if ext_lower not in SUPPORTED_EXTENSIONS:
            continue

        type_id = parse_type_id(file_path.name)
        if type_id is None:
            continue

        files.append({
            "path": str(file_path.absolute()),
            "name": file_path.name,
            "format": EXTENSION_MAP[ext_lower],
            "type_id": type_id,
        })

    return sorted(files, key=lambda f: (int(f["type_id"]), f["name"].lower()))
