#!/usr/bin/env python3
"""
Metrics collection for a single repository.

Fetches one day's traffic and clone counts plus the cumulative star, commit
and contributor totals of the default branch.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Tuple

from .github_client import GitHubClient
from .models import RepoStats, TrafficCount

REPO_STATS_QUERY = """
query($owner: String!, $name: String!, $first: Int!) {
  repository(owner: $owner, name: $name) {
    stargazerCount
    defaultBranchRef {
      target {
        ... on Commit {
          history(first: $first) {
            totalCount
            nodes {
              author {
                user {
                  login
                }
              }
            }
          }
        }
      }
    }
  }
}
"""


def select_day(entries: List[Dict], date: str) -> TrafficCount:
    """Pick the entry whose timestamp falls on ``date``, or zero counts."""
    for entry in entries:
        if entry.get("timestamp", "").split("T")[0] == date:
            return TrafficCount.from_github_entry(entry)
    return TrafficCount.empty()


def count_contributors(nodes: List[Dict]) -> int:
    """Count distinct author logins, skipping commits with no linked user."""
    logins = set()
    for node in nodes:
        user = (node.get("author") or {}).get("user")
        if user and user.get("login"):
            logins.add(user["login"])
    return len(logins)


class MetricsCollector:
    """Collects daily metrics for one repository."""

    def __init__(self, client: GitHubClient, owner: str, repository: str, history_depth: int = 100):
        """
        Initialize the collector.

        Args:
            client: GitHub API client
            owner: Account or organization owning the repository
            repository: Repository name
            history_depth: Number of recent commits scanned for contributors
        """
        self.client = client
        self.owner = owner
        self.repository = repository
        self.history_depth = history_depth
        self.logger = logging.getLogger(__name__)

    def traffic(self, date: str) -> TrafficCount:
        """Views recorded on ``date``."""
        views = self.client.get_views(self.owner, self.repository)
        self.logger.debug(f"Fetched {len(views)} view entries for {self.owner}/{self.repository}")
        return select_day(views, date)

    def clones(self, date: str) -> TrafficCount:
        """Clones recorded on ``date``."""
        clones = self.client.get_clones(self.owner, self.repository)
        self.logger.debug(f"Fetched {len(clones)} clone entries for {self.owner}/{self.repository}")
        return select_day(clones, date)

    def repo_stats(self) -> RepoStats:
        """Star count, default branch commit count and recent contributor count."""
        data = self.client.graphql(REPO_STATS_QUERY, {
            "owner": self.owner,
            "name": self.repository,
            "first": self.history_depth,
        })
        repository = data["repository"]

        branch_ref = repository.get("defaultBranchRef")
        if not branch_ref:
            self.logger.warning(f"{self.owner}/{self.repository} has no default branch; reporting zero commits")
            return RepoStats(repository["stargazerCount"], 0, 0)

        history = branch_ref["target"]["history"]
        return RepoStats(
            stargazer_count=repository["stargazerCount"],
            commit_count=history["totalCount"],
            contributors_count=count_contributors(history["nodes"]),
        )

    def collect(self, date: str) -> Tuple[RepoStats, TrafficCount, TrafficCount]:
        """Run all three lookups concurrently and wait for every one of them."""
        self.logger.info(f"Collecting metrics for {self.owner}/{self.repository} on {date}")

        with ThreadPoolExecutor(max_workers=3) as executor:
            traffic_future = executor.submit(self.traffic, date)
            clones_future = executor.submit(self.clones, date)
            stats_future = executor.submit(self.repo_stats)

            traffic = traffic_future.result()
            clones = clones_future.result()
            stats = stats_future.result()

        return stats, traffic, clones
