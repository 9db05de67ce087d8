"""
Shared pytest fixtures for repo-stats tests.

Provides sample records, canned GitHub API payloads and a mocked client so no
test touches the network.
"""

import json
from unittest.mock import MagicMock

import pytest

from repo_stats.github_client import GitHubClient
from repo_stats.models import DailyRecord


@pytest.fixture
def first_record():
    """Record already stored in the sample dataset."""
    return DailyRecord(
        date='2024-09-01',
        stargazers=5,
        commits=15,
        contributors=2,
        traffic_views=50,
        traffic_uniques=10,
        clones_count=7,
        clones_uniques=3,
    )


@pytest.fixture
def new_record():
    """Record produced by a run on 2024-09-03."""
    return DailyRecord(
        date='2024-09-02',
        stargazers=10,
        commits=100,
        contributors=2,
        traffic_views=84,
        traffic_uniques=1,
        clones_count=10,
        clones_uniques=1,
    )


@pytest.fixture
def existing_json(first_record):
    return json.dumps([first_record.to_dict()])


@pytest.fixture
def graphql_data():
    """GraphQL ``data`` payload with two distinct contributors."""
    return {
        "repository": {
            "stargazerCount": 10,
            "defaultBranchRef": {
                "target": {
                    "history": {
                        "totalCount": 100,
                        "nodes": [
                            {"author": {"user": {"login": "contributor1"}}},
                            {"author": {"user": {"login": "contributor2"}}},
                        ]
                    }
                }
            }
        }
    }


@pytest.fixture
def mock_client(graphql_data):
    """GitHubClient mock answering like a healthy repository."""
    client = MagicMock(spec=GitHubClient)
    client.get_views.return_value = [
        {"timestamp": "2024-09-01T00:00:00Z", "count": 20, "uniques": 4},
        {"timestamp": "2024-09-02T00:00:00Z", "count": 84, "uniques": 1},
    ]
    client.get_clones.return_value = [
        {"timestamp": "2024-09-02T00:00:00Z", "count": 10, "uniques": 1},
    ]
    client.graphql.return_value = graphql_data
    client.get_ref.return_value = {"object": {"sha": "fake-sha"}}
    client.get_commit.return_value = {"tree": {"sha": "fake-tree-sha"}}
    client.create_blob.return_value = {"sha": "fake-blob-sha"}
    client.create_tree.return_value = {"sha": "fake-new-tree-sha"}
    client.create_commit.return_value = {"sha": "fake-new-commit-sha"}
    client.update_ref.return_value = {}
    client.create_ref.return_value = {}
    return client
