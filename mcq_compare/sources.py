"""
Type-labeled input sources and how they are read.

All inputs of a batch are read concurrently as independent I/O; parsing and
merging then happen sequentially in the caller's source order, so the order
in which reads finish never influences the result.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Sequence

import aiofiles

from mcq_compare.data_formats import discover_data_files, get_loader
from mcq_compare.errors import BatchReport, MalformedRecordError
from mcq_compare.instruction_extractor import DEFAULT_VARIABLE, read_system_instructions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypeSource:
    """One input file produced for a single prompt type."""

    type_id: str
    path: Path

    @property
    def label(self) -> str:
        """Key under which this type's questions are stored on an article."""
        return f"type{self.type_id}"


def sources_from_template(
    directory: str | Path,
    template: str,
    type_ids: Iterable[str],
) -> list[TypeSource]:
    """Declare one source per type id by filling '{type}' in template.

    Examples:
        >>> sources_from_template("data", "run_type{type}.jsonl", ["1", "7"])[1].path
        PosixPath('data/run_type7.jsonl')
    """
    if "{type}" not in template:
        raise ValueError(f"Template '{template}' has no '{{type}}' placeholder")
    return [
        TypeSource(type_id=str(type_id), path=Path(directory) / template.format(type=type_id))
        for type_id in type_ids
    ]


def discover_type_sources(directory: str | Path) -> list[TypeSource]:
    """Find every supported record file whose name carries a type number."""
    return [
        TypeSource(type_id=item["type_id"], path=Path(item["path"]))
        for item in discover_data_files(str(directory))
    ]


async def _read_bytes(path: Path) -> bytes:
    async with aiofiles.open(path, "rb") as f:
        return await f.read()


async def read_sources_async(paths: Sequence[Path]) -> list[bytes | OSError]:
    """Read every path concurrently.

    Returns:
        One entry per path, in the given order: the file content, or the
        OSError that prevented reading it.
    """
    results = await asyncio.gather(
        *(_read_bytes(Path(path)) for path in paths),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException) and not isinstance(result, OSError):
            raise result
    return list(results)


def read_sources(paths: Sequence[Path]) -> list[bytes | OSError]:
    """Blocking wrapper around read_sources_async."""
    return asyncio.run(read_sources_async(list(paths)))


def _reason(error: OSError) -> str:
    return error.strerror or str(error)


def load_record_streams(
    sources: Sequence[TypeSource],
    report: BatchReport,
) -> list[tuple[str, list[dict[str, Any]]]]:
    """Read and parse every record source.

    Unreadable sources and sources that do not parse as a whole are reported
    and left out; malformed records inside a source are reported and skipped.

    Returns:
        (label, records) pairs in source order, ready for merge_records.
    """
    contents = read_sources([source.path for source in sources])
    streams = []

    for source, content in zip(sources, contents):
        path = str(source.path)
        if isinstance(content, OSError):
            report.source_missing(path, _reason(content))
            continue

        def on_error(position: int, error: Exception, name: str = source.path.name) -> None:
            report.record_malformed(f"{name}:{position}", str(error))

        try:
            loader = get_loader(source.path.name, content[:1024])
            records = list(loader.load_bytes(content, on_error))
        except ValueError as e:
            report.source_failed(path, str(e))
            continue

        logger.info("Loaded %d records for %s from %s", len(records), source.label, path)
        streams.append((source.label, records))

    return streams


def source_reference(path: Path, relative_to: str | Path | None = None) -> str:
    """Path as it should appear in artifacts: relative to a base when possible."""
    if relative_to is None:
        return str(path)
    try:
        return os.path.relpath(path, relative_to)
    except ValueError:
        return str(path)


def load_instruction_texts(
    sources: Sequence[TypeSource],
    report: BatchReport,
    variable: str = DEFAULT_VARIABLE,
    relative_to: str | Path | None = None,
) -> dict[str, tuple[str, str]]:
    """Read each type's generation script and pull out its instruction string.

    Returns:
        type_id -> (source_reference, text) for every source that could be
        read and parsed, in source order.
    """
    contents = read_sources([source.path for source in sources])
    texts: dict[str, tuple[str, str]] = {}

    for source, content in zip(sources, contents):
        path = str(source.path)
        if isinstance(content, OSError):
            report.source_missing(path, _reason(content))
            continue
        try:
            text = read_system_instructions(content.decode("utf-8-sig"), variable)
        except UnicodeDecodeError as e:
            report.source_failed(path, f"not UTF-8 text: {e}")
            continue
        except MalformedRecordError as e:
            report.source_failed(path, str(e))
            continue
        texts[source.type_id] = (source_reference(source.path, relative_to), text)

    return texts
