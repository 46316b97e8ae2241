"""Unit tests for create-vs-update reconciliation (mocked client)."""

from __future__ import annotations

import asyncio
from unittest.mock import Mock

import pytest
import requests

from github_labeller.events import LabelAdded, ProgressChannel
from github_labeller.labels import Label
from github_labeller.reconciler import (
    UpsertAction,
    add_to_repo,
    check_repo,
    plan_upsert,
)

BUG = Label("bug", "d73a4a")
FEATURE = Label("feature", "0e8a16")


def test_plan_upsert_routes_by_exact_name() -> None:
    known = frozenset({"bug", "Docs"})

    assert plan_upsert(BUG, known) is UpsertAction.UPDATE
    assert plan_upsert(FEATURE, known) is UpsertAction.CREATE
    assert plan_upsert(Label("docs", "fff"), known) is UpsertAction.CREATE


def test_check_repo_creates_missing_and_updates_existing(
    github: Mock, added: list[LabelAdded]
) -> None:
    github.list_labels.return_value = [{"name": "bug", "color": "ffffff"}, {"name": "wontfix"}]

    async def scenario() -> list:
        channel = ProgressChannel()
        channel.on_added(added.append)
        return await check_repo(github, channel, "acme", "widgets", [BUG, FEATURE])

    outcomes = asyncio.run(scenario())

    github.list_labels.assert_called_once_with("acme", "widgets")
    github.update_label.assert_called_once_with("acme", "widgets", "bug", BUG)
    github.create_label.assert_called_once_with("acme", "widgets", FEATURE)
    assert [o.label for o in outcomes] == [BUG, FEATURE]
    assert outcomes[0].data is not None and outcomes[0].data["updated"] == "bug"
    assert sorted(e.label.name for e in added) == ["bug", "feature"]


def test_check_repo_propagates_existing_labels_failure(github: Mock) -> None:
    github.list_labels.side_effect = requests.HTTPError("404 Not Found")

    async def scenario() -> None:
        await check_repo(github, ProgressChannel(), "acme", "missing", [BUG])

    with pytest.raises(requests.HTTPError):
        asyncio.run(scenario())

    github.create_label.assert_not_called()


def test_write_failure_is_reported_and_does_not_stop_siblings(
    github: Mock, added: list[LabelAdded]
) -> None:
    error = requests.HTTPError("422 Validation Failed")

    def create(owner: str, repo: str, label: Label) -> dict:
        if label.name == "bug":
            raise error
        return {"name": label.name}

    github.create_label.side_effect = create

    async def scenario() -> list:
        channel = ProgressChannel()
        channel.on_added(added.append)
        return await add_to_repo(github, channel, "acme", "widgets", [BUG, FEATURE], frozenset())

    outcomes = asyncio.run(scenario())

    assert outcomes[0].error is error
    assert outcomes[0].data is None
    assert outcomes[1].ok
    assert outcomes[1].data == {"name": "feature"}

    by_name = {e.label.name: e for e in added}
    assert by_name["bug"].error is error
    assert by_name["feature"].error is None
    assert by_name["feature"].data == {"name": "feature"}


def test_duplicate_labels_are_each_applied(github: Mock, added: list[LabelAdded]) -> None:
    async def scenario() -> list:
        channel = ProgressChannel()
        channel.on_added(added.append)
        return await add_to_repo(
            github, channel, "acme", "widgets", [BUG, Label("bug", "0000ff")], frozenset({"bug"})
        )

    outcomes = asyncio.run(scenario())

    assert len(outcomes) == 2
    assert github.update_label.call_count == 2
    assert len(added) == 2
