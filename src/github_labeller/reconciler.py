"""Per-repository reconciliation: decide create vs update and apply labels."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from github_labeller.events import LabelAdded, ProgressChannel
from github_labeller.fanout import fan_out
from github_labeller.labels import Label

logger = logging.getLogger(__name__)


class LabelsApi(Protocol):
    """The subset of the GitHub client the pipeline depends on."""

    def list_labels(self, owner: str, repo: str) -> list[dict[str, Any]]: ...

    def list_repos(self, owner: str) -> list[str]: ...

    def create_label(self, owner: str, repo: str, label: Label) -> dict[str, Any]: ...

    def update_label(
        self, owner: str, repo: str, name: str, label: Label
    ) -> dict[str, Any]: ...


class UpsertAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"


@dataclass(frozen=True, slots=True)
class LabelOutcome:
    owner: str
    repo: str
    label: Label
    data: dict[str, Any] | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def plan_upsert(label: Label, known_names: frozenset[str]) -> UpsertAction:
    # Names are compared exactly; GitHub may treat case differently but we do not.
    return UpsertAction.UPDATE if label.name in known_names else UpsertAction.CREATE


async def upsert_label(
    client: LabelsApi,
    owner: str,
    repo: str,
    label: Label,
    known_names: frozenset[str],
) -> dict[str, Any]:
    action = plan_upsert(label, known_names)
    if action is UpsertAction.UPDATE:
        return await asyncio.to_thread(client.update_label, owner, repo, label.name, label)
    return await asyncio.to_thread(client.create_label, owner, repo, label)


async def add_to_repo(
    client: LabelsApi,
    channel: ProgressChannel,
    owner: str,
    repo: str,
    labels: Sequence[Label],
    known_names: frozenset[str],
) -> list[LabelOutcome]:
    """Upsert every label concurrently, emitting one event per completion."""

    async def _one(label: Label) -> LabelOutcome:
        data: dict[str, Any] | None = None
        error: Exception | None = None
        try:
            data = await upsert_label(client, owner, repo, label, known_names)
        except Exception as e:
            logger.warning(
                "Failed to apply label",
                extra={"owner": owner, "repo": repo, "label": label.name, "error": str(e)},
            )
            error = e
        channel.emit(LabelAdded(owner=owner, repo=repo, label=label, error=error, data=data))
        return LabelOutcome(owner=owner, repo=repo, label=label, data=data, error=error)

    outcomes = await fan_out(_one(label) for label in labels)
    results: list[LabelOutcome] = []
    for label, outcome in zip(labels, outcomes):
        if outcome.value is not None:
            results.append(outcome.value)
        else:
            # The channel was closed before this upsert finished.
            results.append(LabelOutcome(owner=owner, repo=repo, label=label, error=outcome.error))
    return results


async def fetch_known_names(client: LabelsApi, owner: str, repo: str) -> frozenset[str]:
    existing = await asyncio.to_thread(client.list_labels, owner, repo)
    return frozenset(str(item["name"]) for item in existing)


async def check_repo(
    client: LabelsApi,
    channel: ProgressChannel,
    owner: str,
    repo: str,
    labels: Sequence[Label],
) -> list[LabelOutcome]:
    """Fetch existing label names for one repository, then upsert `labels`.

    Errors from the existing-labels fetch propagate; the caller decides whether
    that aborts the whole run or just this repository.
    """

    known_names = await fetch_known_names(client, owner, repo)
    logger.info(
        "Reconciling repository",
        extra={
            "owner": owner,
            "repo": repo,
            "existing": len(known_names),
            "requested": len(labels),
        },
    )
    return await add_to_repo(client, channel, owner, repo, labels, known_names)
