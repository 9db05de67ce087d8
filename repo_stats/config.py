#!/usr/bin/env python3
"""
Configuration for a stats update run.

Values are read from command-line overrides first, then GitHub Actions
``INPUT_*`` variables, then plain environment variables.
"""

import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

from .exceptions import ConfigurationError
from .github_client import DEFAULT_API_URL
from .merger import stats_file_path, validate_format

# name -> (action input, environment fallback, default)
SETTINGS: Dict[str, Tuple[str, str, Optional[str]]] = {
    'token': ('github-token', 'GITHUB_TOKEN', None),
    'owner': ('owner', 'STATS_OWNER', None),
    'repository': ('repository', 'STATS_REPOSITORY', None),
    'branch': ('branch', 'STATS_BRANCH', None),
    'directory': ('directory', 'STATS_DIRECTORY', './data'),
    'format': ('format', 'STATS_FORMAT', 'json'),
    'base_branch': ('base-branch', 'STATS_BASE_BRANCH', 'main'),
}


@dataclass
class StatsConfig:
    """Settings for one run."""
    token: str
    owner: str
    repository: str
    branch: str
    directory: str
    format: str
    base_branch: str = 'main'
    storage_owner: str = ''
    storage_repo: str = ''
    api_url: str = DEFAULT_API_URL

    def __post_init__(self):
        if not self.storage_owner or not self.storage_repo:
            self.storage_owner = self.owner
            self.storage_repo = self.repository

    @property
    def file_path(self) -> str:
        return stats_file_path(self.directory, self.owner, self.repository, self.format)

    @property
    def commit_message(self) -> str:
        return f"Update stats file for {self.owner}/{self.repository}"


def get_input(name: str, env: Mapping[str, str]) -> Optional[str]:
    """Read a GitHub Actions input the way the runner exposes it."""
    value = env.get(f"INPUT_{name.replace(' ', '_').upper()}", '').strip()
    return value or None


def _parse_storage_repository(value: Optional[str]) -> Tuple[str, str]:
    if not value:
        return '', ''
    owner, _, repo = value.partition('/')
    if not owner or not repo:
        raise ConfigurationError(f"GITHUB_REPOSITORY must look like 'owner/name', got '{value}'")
    return owner, repo


def load_config(overrides: Optional[Mapping[str, Optional[str]]] = None,
                env: Optional[Mapping[str, str]] = None) -> StatsConfig:
    """
    Build a StatsConfig from overrides and the environment.

    Args:
        overrides: Values taking precedence over the environment (e.g. CLI args)
        env: Environment mapping, defaults to os.environ

    Raises:
        ConfigurationError: If a required value is missing or the format is unsupported.
    """
    env = os.environ if env is None else env
    overrides = overrides or {}

    values = {}
    for name, (input_name, env_name, default) in SETTINGS.items():
        value = overrides.get(name) or get_input(input_name, env) or env.get(env_name, '').strip() or default
        if not value:
            raise ConfigurationError(
                f"Missing required setting '{name}'. Set INPUT_{input_name.upper()} or {env_name}."
            )
        values[name] = value

    values['format'] = validate_format(values['format'])

    storage_owner, storage_repo = _parse_storage_repository(
        overrides.get('storage_repository') or env.get('GITHUB_REPOSITORY', '').strip()
    )

    return StatsConfig(
        storage_owner=storage_owner,
        storage_repo=storage_repo,
        api_url=env.get('GITHUB_API_URL', '').strip() or DEFAULT_API_URL,
        **values
    )
