#!/usr/bin/env python3
"""
Command-line interface for repo-stats.
"""

import argparse
import json
import os
import sys
from datetime import date
from typing import Optional

from .app import configure_logging, run_update
from .exceptions import StatsError
from .merger import merge
from .models import DailyRecord

UPDATE_OPTIONS = ('owner', 'repository', 'branch', 'directory', 'format', 'base_branch', 'storage_repository')


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', expected YYYY-MM-DD")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="repo-stats",
        description="Daily GitHub repository stats snapshot"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=os.environ.get("LOG_LEVEL", "INFO"),
        help="Set logging level (default: INFO)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Update command
    update_parser = subparsers.add_parser("update", help="Collect yesterday's stats and commit them")
    update_parser.add_argument("--owner", help="Owner of the repository to measure")
    update_parser.add_argument("--repository", help="Name of the repository to measure")
    update_parser.add_argument("--branch", help="Branch the stats file is committed to")
    update_parser.add_argument("--directory", help="Root directory of the stats file (default: ./data)")
    update_parser.add_argument("--format", help="Stats file format: json or csv (default: json)")
    update_parser.add_argument("--base-branch", help="Branch a missing target branch is created from (default: main)")
    update_parser.add_argument("--storage-repository", help="owner/name of the repository holding the stats file")
    update_parser.add_argument(
        "--date",
        type=_iso_date,
        help="Reference date; stats are recorded for the day before (default: today, UTC)"
    )
    update_parser.add_argument("--dry-run", action="store_true", help="Collect and merge without committing")

    # Merge command
    merge_parser = subparsers.add_parser("merge", help="Merge a record into a local stats file")
    merge_parser.add_argument("file", help="Path of the stats file; created if missing")
    merge_parser.add_argument("--format", required=True, help="json or csv")
    merge_parser.add_argument("--record-json", required=True, help="Record as a JSON object")

    return parser


def merge_local_file(path: str, fmt: str, record_json: str) -> None:
    """Merge one record into a stats file on disk."""
    record = DailyRecord.from_dict(json.loads(record_json))

    existing = None
    if os.path.exists(path):
        with open(path, encoding='utf-8') as f:
            existing = f.read()

    content = merge(existing, fmt, record)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(content)


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "update":
        overrides = {name: getattr(args, name) for name in UPDATE_OPTIONS}
        try:
            success, _ = run_update(overrides, reference_date=args.date, dry_run=args.dry_run)
            return 0 if success else 1
        except KeyboardInterrupt:
            print("\nOperation cancelled by user")
            return 130
    elif args.command == "merge":
        try:
            merge_local_file(args.file, args.format, args.record_json)
            return 0
        except (StatsError, ValueError, KeyError, TypeError, OSError) as e:
            print(f"Merge failed: {e}", file=sys.stderr)
            return 1
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
