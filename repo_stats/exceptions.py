#!/usr/bin/env python3
"""
Exceptions raised while collecting, merging and publishing repository stats.
"""

from typing import Optional


class StatsError(Exception):
    """Base exception for all stats update errors."""
    pass


class ConfigurationError(StatsError, ValueError):
    """Raised when required settings are missing or invalid."""
    pass


class GitHubAPIError(StatsError):
    """Raised when the GitHub API returns an error or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(GitHubAPIError):
    """Raised when the GitHub API answers 404 for a resource."""

    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class StatsFileCorruptError(StatsError):
    """Raised when an existing stats file exists but cannot be parsed."""
    pass
