"""Test configuration and fixtures."""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock

import pytest

from github_labeller.client import GitHubClient
from github_labeller.events import LabelAdded
from github_labeller.labels import Label


def _created(owner: str, repo: str, label: Label) -> dict[str, Any]:
    return {"name": label.name, "color": label.color, "repository": f"{owner}/{repo}"}


def _updated(owner: str, repo: str, name: str, label: Label) -> dict[str, Any]:
    return {**_created(owner, repo, label), "updated": name}


@pytest.fixture
def github() -> Mock:
    """A GitHub client double: empty repositories, successful writes."""
    client = Mock(spec=GitHubClient)
    client.list_labels.return_value = []
    client.list_repos.return_value = []
    client.create_label.side_effect = _created
    client.update_label.side_effect = _updated
    return client


@pytest.fixture
def added() -> list[LabelAdded]:
    """Collects 'added' events; pass `added.append` as a listener."""
    return []
