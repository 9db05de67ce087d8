#!/usr/bin/env python3
"""
Thin GitHub REST and GraphQL client used by the collector and publisher.

Every call goes through a ``requests.Session`` carrying the token, one per
thread since the collector issues lookups from a thread pool. HTTP 404 is reported as ``NotFoundError`` so callers can tell a missing
resource apart from any other failure, which is raised as ``GitHubAPIError``.
"""

import logging
import threading
from typing import Any, Dict, List, Optional

import requests

from .exceptions import GitHubAPIError, NotFoundError

DEFAULT_API_URL = "https://api.github.com"
REQUEST_TIMEOUT = 30


class GitHubClient:
    """Wrapper around the GitHub endpoints needed to record daily stats."""

    def __init__(self, token: str, api_url: str = DEFAULT_API_URL):
        """
        Initialize the client.

        Args:
            token: GitHub Personal Access Token or workflow token
            api_url: Base URL of the REST API (GitHub Enterprise hosts differ)
        """
        self.api_url = api_url.rstrip("/")
        self.headers = {
            "Authorization": f"token {token}",
            "Accept": "application/vnd.github.v3+json"
        }
        self._local = threading.local()
        self.logger = logging.getLogger(__name__)

    @property
    def session(self) -> requests.Session:
        """Session for the calling thread; sessions are not shared between threads."""
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(self.headers)
            self._local.session = session
        return session

    @session.setter
    def session(self, value: requests.Session) -> None:
        self._local.session = value

    def _request(self, method: str, path: str, **kwargs) -> Any:
        """Send a request and return the decoded JSON body."""
        url = f"{self.api_url}{path}"

        try:
            response = self.session.request(method, url, timeout=REQUEST_TIMEOUT, **kwargs)
            if response.status_code == 404:
                raise NotFoundError(f"{method} {path} returned 404")
            response.raise_for_status()
            return response.json() if response.content else {}

        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            self.logger.error(f"GitHub API error for {method} {path}: {e}")
            raise GitHubAPIError(str(e), status_code=status) from e
        except requests.RequestException as e:
            self.logger.error(f"Error calling {method} {path}: {e}")
            raise GitHubAPIError(str(e)) from e

    # Traffic

    def get_views(self, owner: str, repo: str, per: str = "day") -> List[Dict]:
        """Fetch the per-day traffic view series."""
        data = self._request("GET", f"/repos/{owner}/{repo}/traffic/views", params={"per": per})
        return data.get("views", [])

    def get_clones(self, owner: str, repo: str, per: str = "day") -> List[Dict]:
        """Fetch the per-day clone series."""
        data = self._request("GET", f"/repos/{owner}/{repo}/traffic/clones", params={"per": per})
        return data.get("clones", [])

    # GraphQL

    def graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict:
        """Execute a GraphQL query and return its ``data`` member."""
        payload = {"query": query}
        if variables:
            payload["variables"] = variables

        result = self._request("POST", "/graphql", json=payload)
        if result.get("errors"):
            messages = "; ".join(err.get("message", str(err)) for err in result["errors"])
            self.logger.error(f"GraphQL query failed: {messages}")
            raise GitHubAPIError(f"GraphQL query failed: {messages}")
        return result.get("data") or {}

    # Contents

    def get_content(self, owner: str, repo: str, path: str, ref: Optional[str] = None) -> Dict:
        params = {"ref": ref} if ref else None
        return self._request("GET", f"/repos/{owner}/{repo}/contents/{path}", params=params)

    # Git data

    def get_ref(self, owner: str, repo: str, ref: str) -> Dict:
        """Read a ref such as ``heads/main``."""
        return self._request("GET", f"/repos/{owner}/{repo}/git/ref/{ref}")

    def create_ref(self, owner: str, repo: str, ref: str, sha: str) -> Dict:
        return self._request("POST", f"/repos/{owner}/{repo}/git/refs", json={"ref": ref, "sha": sha})

    def update_ref(self, owner: str, repo: str, ref: str, sha: str, force: bool = False) -> Dict:
        return self._request("PATCH", f"/repos/{owner}/{repo}/git/refs/{ref}",
                             json={"sha": sha, "force": force})

    def get_commit(self, owner: str, repo: str, commit_sha: str) -> Dict:
        return self._request("GET", f"/repos/{owner}/{repo}/git/commits/{commit_sha}")

    def create_blob(self, owner: str, repo: str, content: str, encoding: str = "utf-8") -> Dict:
        return self._request("POST", f"/repos/{owner}/{repo}/git/blobs",
                             json={"content": content, "encoding": encoding})

    def create_tree(self, owner: str, repo: str, base_tree: str, tree: List[Dict]) -> Dict:
        return self._request("POST", f"/repos/{owner}/{repo}/git/trees",
                             json={"base_tree": base_tree, "tree": tree})

    def create_commit(self, owner: str, repo: str, message: str, tree: str, parents: List[str]) -> Dict:
        return self._request("POST", f"/repos/{owner}/{repo}/git/commits",
                             json={"message": message, "tree": tree, "parents": parents})
