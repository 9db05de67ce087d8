#!/usr/bin/env python3
"""
Merging a new daily record into a serialized stats dataset.

A dataset holds at most one record per date. Merging a record whose date is
already present replaces that record where it stands; any other date is
appended. Running the same merge twice yields the same output.
"""

import json
import logging
import posixpath
from typing import Any, Dict, List, Optional

from .exceptions import ConfigurationError, StatsFileCorruptError
from .models import CSV_HEADERS, DailyRecord

SUPPORTED_FORMATS = ("json", "csv")
CSV_HEADER_LINE = ",".join(CSV_HEADERS)

logger = logging.getLogger(__name__)


def validate_format(fmt: str) -> str:
    """Return the normalized format or raise ConfigurationError."""
    normalized = (fmt or "").strip().lower()
    if normalized not in SUPPORTED_FORMATS:
        raise ConfigurationError(f'Unsupported format "{fmt}". Please choose either "json" or "csv".')
    return normalized


def stats_file_path(directory: str, owner: str, repository: str, fmt: str) -> str:
    """Location of the stats file inside the storage repository."""
    return posixpath.normpath(posixpath.join(directory, owner, repository, f"stats.{fmt}"))


def _load_json(existing: str) -> List[Dict[str, Any]]:
    try:
        data = json.loads(existing)
    except json.JSONDecodeError as e:
        raise StatsFileCorruptError(f"Existing stats file is not valid JSON: {e}") from e

    if not isinstance(data, list) or not all(isinstance(entry, dict) for entry in data):
        raise StatsFileCorruptError("Existing stats file must be a JSON array of objects")
    return data


def merge_json(existing: Optional[str], record: DailyRecord) -> str:
    entries = _load_json(existing) if existing and existing.strip() else []
    new_entry = record.to_dict()

    for index, entry in enumerate(entries):
        if entry.get("date") == record.date:
            logger.info(f"Replacing existing entry for {record.date}")
            entries[index] = new_entry
            break
    else:
        entries.append(new_entry)

    return json.dumps(entries, indent=2)


def merge_csv(existing: Optional[str], record: DailyRecord) -> str:
    lines = []
    if existing:
        lines = [line.rstrip("\r") for line in existing.split("\n") if line.strip()]

    if not lines:
        lines = [CSV_HEADER_LINE]
    elif lines[0].strip() != CSV_HEADER_LINE:
        raise StatsFileCorruptError(f"Existing stats file has an unexpected CSV header: {lines[0]!r}")

    new_line = record.to_csv_line()

    # Data rows start with their ISO date, the header row never does.
    for index, line in enumerate(lines):
        if line.startswith(record.date):
            logger.info(f"Replacing existing entry for {record.date}")
            lines[index] = new_line
            break
    else:
        lines.append(new_line)

    return "\n".join(lines)


def merge(existing: Optional[str], fmt: str, record: DailyRecord) -> str:
    """
    Merge ``record`` into the existing serialized dataset.

    Args:
        existing: Current file content, or None when no file exists yet
        fmt: "json" or "csv"
        record: Record to add or replace

    Returns:
        The full serialized dataset.

    Raises:
        ConfigurationError: If the format is not supported.
        StatsFileCorruptError: If existing content cannot be parsed.
    """
    fmt = validate_format(fmt)
    if existing is None:
        logger.info("No existing stats file, creating a new dataset")

    if fmt == "json":
        return merge_json(existing, record)
    return merge_csv(existing, record)
