#!/usr/bin/env python3
"""
Repository Daily Stats Snapshot

Collects yesterday's traffic, clone, star, commit and contributor numbers for a
GitHub repository, merges them into a stats file kept in a repository, and
commits the result back to a branch.
"""

import logging
import os
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Mapping, Optional, Tuple

from .collector import MetricsCollector
from .config import StatsConfig, load_config
from .github_client import GitHubClient
from .merger import merge
from .models import DailyRecord
from .publisher import Publisher

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

OUTPUT_LABELS = {
    'stargazers': 'Total Stargazers',
    'commits': 'Total Commits',
    'contributors': 'Total Contributors',
    'traffic_views': 'Total Views Yesterday',
    'traffic_uniques': 'Total Unique Views Yesterday',
    'clones_count': 'Total Clones Yesterday',
    'clones_uniques': 'Total Unique Clones Yesterday',
}


def configure_logging(level: str = 'INFO') -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def previous_day(reference_date: Optional[date] = None) -> str:
    """ISO date of the day before ``reference_date`` (today in UTC by default)."""
    if reference_date is None:
        reference_date = datetime.now(timezone.utc).date()
    return (reference_date - timedelta(days=1)).isoformat()


def write_outputs(outputs: Dict[str, int], output_file: Optional[str]) -> None:
    """Append ``name=value`` lines to the GitHub Actions output file, if any."""
    if not output_file:
        return
    with open(output_file, 'a', encoding='utf-8') as f:
        for name, value in outputs.items():
            f.write(f"{name}={value}\n")


class StatsUpdater:
    """Runs the collect, merge and publish steps for one repository."""

    def __init__(self, config: StatsConfig, client: GitHubClient):
        """
        Initialize the updater.

        Args:
            config: Settings for this run
            client: GitHub API client authenticated with the configured token
        """
        self.config = config
        self.client = client
        self.collector = MetricsCollector(client, config.owner, config.repository)
        self.publisher = Publisher(client, config.storage_owner, config.storage_repo, config.base_branch)
        self.logger = logging.getLogger(__name__)

    def build_record(self, day: str) -> DailyRecord:
        stats, traffic, clones = self.collector.collect(day)
        return DailyRecord.from_metrics(day, stats, traffic, clones)

    def log_results(self, record: DailyRecord) -> None:
        for name, value in record.outputs().items():
            self.logger.info(f"{OUTPUT_LABELS[name]}: {value}")

    def update(self, day: str, dry_run: bool = False) -> DailyRecord:
        """
        Collect metrics for ``day`` and commit the merged stats file.

        With ``dry_run`` nothing is written; the merged content is logged instead.
        """
        config = self.config
        record = self.build_record(day)
        self.log_results(record)

        path = config.file_path
        if not dry_run:
            self.publisher.ensure_branch(config.branch)

        self.logger.info(f"Reading {path} from {config.storage_owner}/{config.storage_repo}@{config.branch}")
        existing = self.publisher.read_file(path, config.branch)
        content = merge(existing, config.format, record)

        if dry_run:
            self.logger.info(f"Dry run, not committing. Merged {path}:\n{content}")
            return record

        self.publisher.publish(config.branch, path, content, config.commit_message)
        return record


def run_update(overrides: Optional[Mapping[str, Optional[str]]] = None,
               reference_date: Optional[date] = None,
               dry_run: bool = False,
               env: Optional[Mapping[str, str]] = None,
               client: Optional[GitHubClient] = None) -> Tuple[bool, str]:
    """Runs one stats update and reports ``(success, message)``."""
    logger = logging.getLogger(__name__)
    env = os.environ if env is None else env
    try:
        config = load_config(overrides, env)
        if client is None:
            client = GitHubClient(config.token, config.api_url)

        day = previous_day(reference_date)
        record = StatsUpdater(config, client).update(day, dry_run=dry_run)
        write_outputs(record.outputs(), env.get('GITHUB_OUTPUT'))

        logger.info("Update successful")
        return True, "Update successful"
    except Exception as e:
        logger.error(f"Action failed with error: {e}")
        return False, str(e)


def main() -> int:
    """Main entry point of the application."""
    configure_logging(os.environ.get('LOG_LEVEL', 'INFO'))
    try:
        success, _ = run_update()
        return 0 if success else 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
