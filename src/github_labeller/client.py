"""GitHub API client wrapper.

Listing goes through PyGithub so pagination is handled by `PaginatedList`;
label writes go straight to the REST API over a `requests.Session` so the
update path can address a label by its URL-encoded name without an extra
lookup.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import requests
from github import Auth, Github

from github_labeller.labels import Label

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.github.com"


class GitHubClient:
    """Small wrapper around PyGithub and the labels REST endpoints."""

    def __init__(
        self,
        *,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        github_api: Github | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")

        self._rest_base_url = base_url.rstrip("/")
        self._github = github_api or Github(auth=Auth.Token(token), base_url=self._rest_base_url)
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "github-labeller",
            }
        )

    def _labels_url(self, *, owner: str, repo: str, name: str | None = None) -> str:
        url = f"{self._rest_base_url}/repos/{owner}/{repo}/labels"
        if name is not None:
            url += "/" + quote(name, safe="")
        return url

    def list_labels(self, owner: str, repo: str) -> list[dict[str, Any]]:
        """Return every label of a repository (all pages)."""

        logger.debug("Listing labels", extra={"owner": owner, "repo": repo})
        gh_repo = self._github.get_repo(f"{owner}/{repo}", lazy=True)
        return [
            {"name": label.name, "color": label.color, "description": label.description}
            for label in gh_repo.get_labels()
        ]

    def list_repos(self, owner: str) -> list[str]:
        """Return the names of every repository owned by a user or organization."""

        logger.debug("Listing repositories", extra={"owner": owner})
        return [repo.name for repo in self._github.get_user(owner).get_repos()]

    def create_label(self, owner: str, repo: str, label: Label) -> dict[str, Any]:
        url = self._labels_url(owner=owner, repo=repo)
        resp = self._session.post(url, json=label.payload(), timeout=30)
        resp.raise_for_status()
        data: dict[str, Any] = resp.json()
        logger.info("Label created", extra={"owner": owner, "repo": repo, "label": label.name})
        return data

    def update_label(self, owner: str, repo: str, name: str, label: Label) -> dict[str, Any]:
        url = self._labels_url(owner=owner, repo=repo, name=name)
        resp = self._session.patch(url, json=label.payload(), timeout=30)
        resp.raise_for_status()
        data: dict[str, Any] = resp.json()
        logger.info("Label updated", extra={"owner": owner, "repo": repo, "label": name})
        return data

    def close(self) -> None:
        self._session.close()
        self._github.close()
