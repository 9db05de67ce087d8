#!/usr/bin/env python3
"""
Data models for daily repository statistics.

Contains the core data classes used throughout the application.
"""

import datetime
from dataclasses import dataclass, fields
from typing import Any, Dict, List


CSV_HEADERS: List[str] = [
    'date', 'stargazers', 'commits', 'contributors',
    'traffic_views', 'traffic_uniques', 'clones_count', 'clones_uniques',
]


@dataclass
class TrafficCount:
    """Represents the view or clone count for a single day."""
    count: int
    uniques: int

    def __str__(self) -> str:
        return f"{self.count} ({self.uniques} unique)"

    @classmethod
    def from_github_entry(cls, entry: Dict[str, Any]) -> 'TrafficCount':
        """Create a TrafficCount from a GitHub traffic API entry."""
        return cls(entry["count"], entry["uniques"])

    @classmethod
    def empty(cls) -> 'TrafficCount':
        return cls(0, 0)


@dataclass
class RepoStats:
    """Cumulative totals read from the repository's default branch."""
    stargazer_count: int
    commit_count: int
    contributors_count: int


@dataclass
class DailyRecord:
    """One day's snapshot of repository metrics."""
    date: str
    stargazers: int
    commits: int
    contributors: int
    traffic_views: int
    traffic_uniques: int
    clones_count: int
    clones_uniques: int

    def __post_init__(self):
        if not isinstance(self.date, str) or len(self.date) != 10:
            raise ValueError(f"date must be an ISO day (YYYY-MM-DD), got {self.date!r}")
        try:
            datetime.date.fromisoformat(self.date)
        except ValueError:
            raise ValueError(f"date must be an ISO day (YYYY-MM-DD), got {self.date!r}") from None

        for header in CSV_HEADERS[1:]:
            value = getattr(self, header)
            # bool is an int subclass but never a count
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"{header} must be a non-negative integer, got {value!r}")

    @classmethod
    def from_metrics(cls, date: str, stats: RepoStats, traffic: TrafficCount,
                     clones: TrafficCount) -> 'DailyRecord':
        """Combine collected metrics into the record stored for ``date``."""
        return cls(
            date=date,
            stargazers=stats.stargazer_count,
            commits=stats.commit_count,
            contributors=stats.contributors_count,
            traffic_views=traffic.count,
            traffic_uniques=traffic.uniques,
            clones_count=clones.count,
            clones_uniques=clones.uniques,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DailyRecord':
        return cls(**{f.name: data[f.name] for f in fields(cls)})

    def to_dict(self) -> Dict[str, Any]:
        """Return the record as a dict in stored field order."""
        return {header: getattr(self, header) for header in CSV_HEADERS}

    def to_csv_line(self) -> str:
        return ','.join(str(getattr(self, header)) for header in CSV_HEADERS)

    def outputs(self) -> Dict[str, int]:
        """Return the reported output values (every field except the date)."""
        return {header: getattr(self, header) for header in CSV_HEADERS[1:]}
