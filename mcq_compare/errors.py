"""
Error taxonomy and batch issue reporting.

Recoverable problems (a missing source, a malformed line, a record without a
stable identifier) are logged and counted on a BatchReport while the batch
keeps going. Only NoExtractableTextError aborts a run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


class MCQCompareError(Exception):
    """Base class for all errors raised by mcq_compare."""


class MissingSourceError(MCQCompareError):
    """A declared input could not be read."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        self.reason = reason
        message = f"Cannot read source '{path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MalformedRecordError(MCQCompareError):
    """A line, record or source text failed to parse."""


class MissingKeyError(MCQCompareError):
    """A record carried neither news_item_id nor id."""


class NoExtractableTextError(MCQCompareError):
    """Not a single type yielded instruction sentences."""


class ConfigError(MCQCompareError):
    """An environment setting has an unusable value."""


@dataclass
class BatchReport:
    """Counters for the recoverable issues of one batch run.

    Attributes:
        missing_sources: Paths that could not be read.
        failed_sources: Paths that were read but could not be parsed as a whole.
        malformed_records: Number of skipped lines/records.
        missing_keys: Number of records dropped for lack of a stable identifier.
        allow_missing: Treat missing sources as warnings only.
        issues: Every issue in the order it was met, as an exception instance.
    """

    missing_sources: list[str] = field(default_factory=list)
    failed_sources: list[str] = field(default_factory=list)
    malformed_records: int = 0
    missing_keys: int = 0
    allow_missing: bool = False
    issues: list[MCQCompareError] = field(default_factory=list)

    def source_missing(self, path: str, reason: str) -> None:
        self.missing_sources.append(path)
        self.issues.append(MissingSourceError(path, reason))
        if self.allow_missing:
            logger.warning("Skipping missing source %s (%s)", path, reason)
        else:
            logger.error("Failed to read %s: %s", path, reason)

    def source_failed(self, path: str, reason: str) -> None:
        self.failed_sources.append(path)
        self.issues.append(MalformedRecordError(f"{path}: {reason}"))
        logger.error("Failed to parse %s: %s", path, reason)

    def record_malformed(self, where: str, reason: str) -> None:
        self.malformed_records += 1
        self.issues.append(MalformedRecordError(f"{where}: {reason}"))
        logger.warning("Skipping malformed record in %s: %s", where, reason)

    def key_missing(self, where: str) -> None:
        self.missing_keys += 1
        self.issues.append(MissingKeyError(f"{where}: no news_item_id or id"))
        logger.warning("Skipping record without stable id in %s", where)

    @property
    def has_failures(self) -> bool:
        """True when a whole source was lost in a way the caller must see."""
        if self.failed_sources:
            return True
        return bool(self.missing_sources) and not self.allow_missing

    @property
    def exit_code(self) -> int:
        return 1 if self.has_failures else 0

    def summary(self) -> str:
        return (
            f"missing sources: {len(self.missing_sources)}, "
            f"failed sources: {len(self.failed_sources)}, "
            f"malformed records: {self.malformed_records}, "
            f"missing keys: {self.missing_keys}"
        )
