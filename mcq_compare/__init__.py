"""
mcq_compare - prepare news articles and per-type MCQ output for side-by-side comparison.
"""

from mcq_compare.errors import (
    BatchReport,
    ConfigError,
    MalformedRecordError,
    MCQCompareError,
    MissingKeyError,
    MissingSourceError,
    NoExtractableTextError,
)
from mcq_compare.instruction_extractor import (
    common_sentences,
    extract_instructions,
    read_system_instructions,
    split_sentences,
)
from mcq_compare.models import Article, ArticleBundle, InstructionSet, InstructionSummary
from mcq_compare.record_merger import MergePolicy, merge_records, sort_articles

__version__ = "0.1.0"

__all__ = [
    "Article",
    "ArticleBundle",
    "BatchReport",
    "ConfigError",
    "InstructionSet",
    "InstructionSummary",
    "MCQCompareError",
    "MalformedRecordError",
    "MergePolicy",
    "MissingKeyError",
    "MissingSourceError",
    "NoExtractableTextError",
    "common_sentences",
    "extract_instructions",
    "merge_records",
    "read_system_instructions",
    "sort_articles",
    "split_sentences",
]
