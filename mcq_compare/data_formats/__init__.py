"""
Data formats module for multi-format record loading.

This module provides a unified interface for loading MCQ record streams from
JSONL, JSON, and Parquet files.

Usage:
    from mcq_compare.data_formats import get_loader, stable_key

    name = "news_mcq3_with_gemma3_type1_sample50.jsonl"
    with open(name, "rb") as f:
        data = f.read()
    for record in get_loader(name, data[:1024]).load_bytes(data):
        print(stable_key(record))
"""

from mcq_compare.data_formats.base import DataLoader, ErrorCallback
from mcq_compare.data_formats.directory_loader import (
    SUPPORTED_EXTENSIONS,
    discover_data_files,
    parse_type_id,
)
from mcq_compare.data_formats.format_detector import (
    EXTENSION_MAP,
    LOADER_CLASSES,
    SUPPORTED_FORMATS,
    detect_format,
    get_loader,
    get_loader_for_format,
    sniff_format,
)
from mcq_compare.data_formats.json_loader import JSONLoader
from mcq_compare.data_formats.jsonl_loader import JSONLLoader
from mcq_compare.data_formats.parquet_loader import ParquetLoader
from mcq_compare.data_formats.schema_normalizer import (
    ARTICLE_FIELDS,
    KEY_FIELDS,
    normalize_questions,
    stable_key,
)

__all__ = [
    # Base class
    "DataLoader",
    "ErrorCallback",
    # Format detection
    "detect_format",
    "sniff_format",
    "get_loader",
    "get_loader_for_format",
    "EXTENSION_MAP",
    "LOADER_CLASSES",
    "SUPPORTED_FORMATS",
    # Directory scanning
    "discover_data_files",
    "parse_type_id",
    "SUPPORTED_EXTENSIONS",
    # Schema normalization
    "ARTICLE_FIELDS",
    "KEY_FIELDS",
    "normalize_questions",
    "stable_key",
    # Loaders
    "JSONLLoader",
    "JSONLoader",
    "ParquetLoader",
]
