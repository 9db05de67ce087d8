#!/usr/bin/env python3
"""
Writing the stats file back to the storage repository as a commit.
"""

import base64
import binascii
import logging
from typing import Optional

from .exceptions import NotFoundError, StatsFileCorruptError
from .github_client import GitHubClient


class Publisher:
    """Commits files to a branch of the storage repository through the Git data API."""

    def __init__(self, client: GitHubClient, owner: str, repo: str, base_branch: str = "main"):
        """
        Initialize the publisher.

        Args:
            client: GitHub API client
            owner: Owner of the repository the stats file lives in
            repo: Name of the repository the stats file lives in
            base_branch: Branch new branches are created from
        """
        self.client = client
        self.owner = owner
        self.repo = repo
        self.base_branch = base_branch
        self.logger = logging.getLogger(__name__)

    def ensure_branch(self, branch: str) -> bool:
        """
        Make sure ``branch`` exists, creating it from the base branch tip.

        Returns:
            True if the branch was created, False if it already existed.
        """
        try:
            self.client.get_ref(self.owner, self.repo, f"heads/{branch}")
            return False
        except NotFoundError:
            self.logger.info(f"Branch '{branch}' not found, creating it from '{self.base_branch}'")

        base_ref = self.client.get_ref(self.owner, self.repo, f"heads/{self.base_branch}")
        base_sha = base_ref["object"]["sha"]
        self.client.create_ref(self.owner, self.repo, f"refs/heads/{branch}", base_sha)
        self.logger.info(f"Branch '{branch}' created from '{self.base_branch}' at {base_sha}")
        return True

    def read_file(self, path: str, branch: str) -> Optional[str]:
        """Return the decoded file content, or None if the file does not exist."""
        try:
            data = self.client.get_content(self.owner, self.repo, path, ref=branch)
        except NotFoundError:
            self.logger.info(f"{path} not found on '{branch}'")
            return None

        if isinstance(data, list) or data.get("type", "file") != "file":
            raise StatsFileCorruptError(f"{path} on '{branch}' is not a file")
        # Files over 1 MB come back without inline content.
        if data.get("encoding") == "none":
            raise StatsFileCorruptError(f"{path} on '{branch}' is too large to read through the contents API")
        try:
            return base64.b64decode(data.get("content", "")).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise StatsFileCorruptError(f"{path} on '{branch}' could not be decoded: {e}") from e

    def publish(self, branch: str, path: str, content: str, message: str) -> str:
        """
        Commit ``content`` at ``path`` on top of the current branch tip.

        The ref update is not forced, so it only succeeds as a fast-forward
        from the commit read at the start.

        Returns:
            SHA of the new commit.
        """
        ref = self.client.get_ref(self.owner, self.repo, f"heads/{branch}")
        parent_sha = ref["object"]["sha"]

        commit = self.client.get_commit(self.owner, self.repo, parent_sha)
        base_tree_sha = commit["tree"]["sha"]

        blob = self.client.create_blob(self.owner, self.repo, content)

        tree = self.client.create_tree(self.owner, self.repo, base_tree_sha, [{
            "path": path,
            "mode": "100644",
            "type": "blob",
            "sha": blob["sha"],
        }])

        new_commit = self.client.create_commit(self.owner, self.repo, message, tree["sha"], [parent_sha])

        self.client.update_ref(self.owner, self.repo, f"heads/{branch}", new_commit["sha"])
        self.logger.info(f"Committed {path} to '{branch}' as {new_commit['sha']}")
        return new_commit["sha"]
