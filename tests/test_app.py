"""
End-to-end tests for app.py with a mocked GitHub client.
"""

import base64
import json
from datetime import date

import pytest

from repo_stats.app import StatsUpdater, previous_day, run_update, write_outputs
from repo_stats.config import load_config
from repo_stats.exceptions import NotFoundError

REFERENCE_DATE = date(2024, 9, 3)


@pytest.fixture
def env(tmp_path):
    return {
        "INPUT_GITHUB-TOKEN": "fake-token",
        "INPUT_OWNER": "fake-owner",
        "INPUT_REPOSITORY": "fake-repo",
        "INPUT_BRANCH": "stats",
        "INPUT_DIRECTORY": "./data",
        "INPUT_FORMAT": "json",
        "GITHUB_REPOSITORY": "fake-owner/fake-repo",
        "GITHUB_OUTPUT": str(tmp_path / "outputs.txt"),
    }


def encoded(text):
    return {"type": "file", "encoding": "base64", "content": base64.b64encode(text.encode()).decode()}


def committed_content(mock_client):
    return mock_client.create_blob.call_args[0][2]


class TestPreviousDay:

    def test_day_before_reference(self):
        assert previous_day(date(2024, 9, 2)) == "2024-09-01"

    def test_crosses_year_boundary(self):
        assert previous_day(date(2025, 1, 1)) == "2024-12-31"


class TestWriteOutputs:

    def test_appends_name_value_lines(self, tmp_path):
        path = tmp_path / "out"
        path.write_text("existing=1\n")

        write_outputs({"stargazers": 10, "commits": 100}, str(path))

        assert path.read_text() == "existing=1\nstargazers=10\ncommits=100\n"

    def test_no_output_file(self):
        write_outputs({"stargazers": 10}, None)


class TestRunUpdate:

    def test_appends_record_to_existing_json(self, env, mock_client, existing_json, first_record, new_record):
        mock_client.get_content.return_value = encoded(existing_json)

        success, _ = run_update(reference_date=REFERENCE_DATE, env=env, client=mock_client)

        assert success
        data = json.loads(committed_content(mock_client))
        assert data == [first_record.to_dict(), new_record.to_dict()]
        mock_client.get_content.assert_called_once_with(
            "fake-owner", "fake-repo", "data/fake-owner/fake-repo/stats.json", ref="stats"
        )
        mock_client.create_commit.assert_called_once_with(
            "fake-owner", "fake-repo", "Update stats file for fake-owner/fake-repo",
            "fake-new-tree-sha", ["fake-sha"]
        )
        mock_client.update_ref.assert_called_once_with(
            "fake-owner", "fake-repo", "heads/stats", "fake-new-commit-sha"
        )

    def test_reports_outputs(self, env, mock_client, tmp_path):
        mock_client.get_content.side_effect = NotFoundError("missing")

        run_update(reference_date=REFERENCE_DATE, env=env, client=mock_client)

        lines = (tmp_path / "outputs.txt").read_text().splitlines()
        assert lines == [
            "stargazers=10",
            "commits=100",
            "contributors=2",
            "traffic_views=84",
            "traffic_uniques=1",
            "clones_count=10",
            "clones_uniques=1",
        ]

    def test_empty_traffic_reports_zero(self, env, mock_client, tmp_path):
        mock_client.get_views.return_value = []
        mock_client.get_clones.return_value = []
        mock_client.get_content.side_effect = NotFoundError("missing")

        success, _ = run_update(reference_date=REFERENCE_DATE, env=env, client=mock_client)

        assert success
        outputs = dict(line.split("=") for line in (tmp_path / "outputs.txt").read_text().splitlines())
        assert outputs["traffic_views"] == "0"
        assert outputs["traffic_uniques"] == "0"
        assert outputs["clones_count"] == "0"
        assert outputs["clones_uniques"] == "0"

    def test_missing_file_creates_csv_dataset(self, env, mock_client, new_record):
        env["INPUT_FORMAT"] = "csv"
        mock_client.get_content.side_effect = NotFoundError("missing")

        success, _ = run_update(reference_date=REFERENCE_DATE, env=env, client=mock_client)

        assert success
        assert committed_content(mock_client).split("\n") == [
            "date,stargazers,commits,contributors,traffic_views,traffic_uniques,clones_count,clones_uniques",
            new_record.to_csv_line(),
        ]

    def test_missing_branch_is_created_before_commit(self, env, mock_client):
        mock_client.get_ref.side_effect = [
            NotFoundError("no branch"),
            {"object": {"sha": "main-sha"}},
            {"object": {"sha": "main-sha"}},
        ]
        mock_client.get_content.side_effect = NotFoundError("missing")

        success, _ = run_update(reference_date=REFERENCE_DATE, env=env, client=mock_client)

        assert success
        mock_client.create_ref.assert_called_once_with("fake-owner", "fake-repo", "refs/heads/stats", "main-sha")
        mock_client.get_commit.assert_called_once_with("fake-owner", "fake-repo", "main-sha")

    def test_unsupported_format_fails_before_any_call(self, env, mock_client):
        env["INPUT_FORMAT"] = "xml"

        success, message = run_update(reference_date=REFERENCE_DATE, env=env, client=mock_client)

        assert not success
        assert "Unsupported format" in message
        assert mock_client.mock_calls == []

    def test_corrupt_file_is_not_overwritten(self, env, mock_client):
        mock_client.get_content.return_value = encoded("{broken")

        success, message = run_update(reference_date=REFERENCE_DATE, env=env, client=mock_client)

        assert not success
        assert "not valid JSON" in message
        mock_client.create_blob.assert_not_called()
        mock_client.update_ref.assert_not_called()

    def test_collection_failure_aborts_run(self, env, mock_client, tmp_path):
        mock_client.graphql.side_effect = NotFoundError("no repository")

        success, _ = run_update(reference_date=REFERENCE_DATE, env=env, client=mock_client)

        assert not success
        mock_client.create_blob.assert_not_called()
        assert not (tmp_path / "outputs.txt").exists()

    def test_stats_stored_in_workflow_repository(self, env, mock_client):
        env["GITHUB_REPOSITORY"] = "store/stats-repo"
        mock_client.get_content.side_effect = NotFoundError("missing")

        run_update(reference_date=REFERENCE_DATE, env=env, client=mock_client)

        mock_client.get_views.assert_called_once_with("fake-owner", "fake-repo")
        mock_client.update_ref.assert_called_once_with(
            "store", "stats-repo", "heads/stats", "fake-new-commit-sha"
        )


class TestStatsUpdater:

    def test_dry_run_writes_nothing(self, env, mock_client, new_record):
        mock_client.get_content.side_effect = NotFoundError("missing")
        updater = StatsUpdater(load_config(env=env), mock_client)

        record = updater.update("2024-09-02", dry_run=True)

        assert record == new_record
        mock_client.create_ref.assert_not_called()
        mock_client.create_blob.assert_not_called()
        mock_client.update_ref.assert_not_called()
