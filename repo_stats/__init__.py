"""
Repository Daily Stats Snapshot

Records a daily snapshot of a GitHub repository's stars, commits, contributors,
traffic and clones into a JSON or CSV file committed to a branch.
"""

__version__ = "1.0.0"

from .app import StatsUpdater, run_update
from .collector import MetricsCollector
from .merger import merge
from .models import DailyRecord, RepoStats, TrafficCount
from .publisher import Publisher

__all__ = [
    "StatsUpdater",
    "run_update",
    "MetricsCollector",
    "merge",
    "DailyRecord",
    "RepoStats",
    "TrafficCount",
    "Publisher",
]
