"""Label sync pipeline.

The pipeline is linear: resolve labels (explicit, then the source repository's
labels appended) -> resolve targets (one repository, or every repository of an
owner) -> reconcile each repository. Two channels report on a run:

- a `ProgressChannel` that receives one `LabelAdded` event per upsert attempt
- a single terminal `SyncResult` (or an exception when the run aborts)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import cast

from github_labeller.client import DEFAULT_BASE_URL, GitHubClient
from github_labeller.errors import LabellerError
from github_labeller.events import AddedListener, LabelAdded, ProgressChannel
from github_labeller.fanout import fan_out, first_failure
from github_labeller.labels import Label, normalize_label
from github_labeller.reconciler import LabelOutcome, LabelsApi, check_repo
from github_labeller.targets import parse_source, parse_target

logger = logging.getLogger(__name__)

RawLabel = Label | Mapping[str, object]


@dataclass(frozen=True, slots=True)
class LabelRequest:
    """What to apply and where. Never mutated; later phases build new values from it."""

    labels: tuple[RawLabel, ...]
    target: str
    source: str | None = None

    @property
    def is_noop(self) -> bool:
        return not self.labels and not self.source


@dataclass(frozen=True, slots=True)
class RepoOutcome:
    owner: str
    repo: str
    labels: list[LabelOutcome] = field(default_factory=list)
    # Set when the existing-labels fetch for this repository failed.
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and all(item.ok for item in self.labels)


@dataclass(frozen=True, slots=True)
class SyncResult:
    repos: list[RepoOutcome]

    @property
    def errors(self) -> list[Exception]:
        """Every failure, in input order: repositories first, then their labels."""

        found: list[Exception] = []
        for repo in self.repos:
            if repo.error is not None:
                found.append(repo.error)
            found.extend(item.error for item in repo.labels if item.error is not None)
        return found

    @property
    def first_error(self) -> Exception | None:
        for repo in self.repos:
            error = repo.error or first_failure(repo.labels)
            if error is not None:
                return error
        return None

    @property
    def ok(self) -> bool:
        return self.first_error is None


DoneCallback = Callable[[Exception | None, SyncResult | None], None]


async def resolve_labels(request: LabelRequest, client: LabelsApi) -> list[Label]:
    """Normalize explicit labels, then fetch and append the source repository's labels.

    Explicit labels are validated before the source is fetched, so a malformed
    entry never costs a network call. Duplicates by name are kept.
    """

    labels = [normalize_label(raw, index) for index, raw in enumerate(request.labels)]
    if request.source is None:
        return labels

    source = parse_source(request.source)
    logger.info("Fetching source labels", extra={"source": str(source)})
    fetched = await asyncio.to_thread(client.list_labels, source.owner, cast(str, source.repo))

    # Source labels follow the explicit ones; indices continue across both.
    offset = len(labels)
    labels.extend(normalize_label(raw, offset + index) for index, raw in enumerate(fetched))
    return labels


async def resolve_targets(
    target: str,
    labels: list[Label],
    client: LabelsApi,
    channel: ProgressChannel,
) -> SyncResult:
    parsed = parse_target(target)

    if parsed.repo is not None:
        # A single explicit repository: a failed prerequisite fetch aborts the run.
        outcomes = await check_repo(client, channel, parsed.owner, parsed.repo, labels)
        repo = RepoOutcome(owner=parsed.owner, repo=parsed.repo, labels=outcomes)
        return SyncResult(repos=[repo])

    logger.info("Listing repositories", extra={"owner": parsed.owner})
    repo_names = await asyncio.to_thread(client.list_repos, parsed.owner)
    logger.info(
        "Applying labels to repositories",
        extra={"owner": parsed.owner, "repositories": len(repo_names), "labels": len(labels)},
    )

    per_repo = await fan_out(
        check_repo(client, channel, parsed.owner, name, labels) for name in repo_names
    )
    repos: list[RepoOutcome] = []
    for name, outcome in zip(repo_names, per_repo):
        if outcome.error is not None:
            logger.warning(
                "Skipping repository",
                extra={"owner": parsed.owner, "repo": name, "error": str(outcome.error)},
            )
        repos.append(
            RepoOutcome(
                owner=parsed.owner,
                repo=name,
                labels=outcome.value or [],
                error=outcome.error,
            )
        )
    return SyncResult(repos=repos)


async def sync_labels(
    request: LabelRequest,
    client: LabelsApi | None,
    channel: ProgressChannel,
) -> SyncResult | None:
    """Run the whole pipeline for one request.

    Returns:
        None for a request with neither labels nor a source (no client calls are
        made), otherwise the aggregated per-repository result.

    Raises:
        LabelValidationError: a label is missing its name or color.
        TargetError: the target or source string is unusable.
        Exception: whatever the client raises for a failed prerequisite fetch
            (source labels, repository listing, or the existing labels of a
            single explicit repository).
    """

    if request.is_noop:
        logger.info("Nothing to do: no labels and no source repository")
        return None
    if client is None:
        raise ValueError("A GitHub client is required")

    parse_target(request.target)
    labels = await resolve_labels(request, client)
    result = await resolve_targets(request.target, labels, client, channel)

    logger.info(
        "Label sync finished",
        extra={
            "target": request.target,
            "repositories": len(result.repos),
            "failures": len(result.errors),
        },
    )
    return result


def callback_args(result: SyncResult | None) -> tuple[Exception | None, SyncResult | None]:
    """Arguments for a completion callback.

    Only a repository whose existing labels could not be fetched fills the error
    slot; label write failures stay in the result and the progress events.
    """

    if result is None:
        return None, None
    return first_failure(result.repos), result


class LabelSyncRun:
    """Handle on an in-flight sync: progress events plus one terminal result."""

    def __init__(self, channel: ProgressChannel, task: asyncio.Task[SyncResult | None]) -> None:
        self._channel = channel
        self._task = task

    def on_added(self, listener: AddedListener) -> None:
        self._channel.on_added(listener)

    def events(self) -> AsyncIterator[LabelAdded]:
        return self._channel.__aiter__()

    async def result(self) -> SyncResult | None:
        return await self._task

    def add_done_callback(self, callback: DoneCallback) -> None:
        """Call `callback(error, result)` exactly once when the run finishes."""

        def _done(task: asyncio.Task[SyncResult | None]) -> None:
            if task.cancelled():
                callback(LabellerError("Label sync was cancelled"), None)
                return
            error = task.exception()
            if error is not None:
                callback(cast(Exception, error), None)
                return
            callback(*callback_args(task.result()))

        self._task.add_done_callback(_done)


def start_sync(
    labels: Iterable[RawLabel],
    *,
    repo: str,
    token: str = "",
    source: str | None = None,
    client: LabelsApi | None = None,
    base_url: str = DEFAULT_BASE_URL,
) -> LabelSyncRun:
    """Start a sync on the running event loop and return its handle.

    Listeners registered on the handle before the caller next yields to the
    loop see every event of the run.
    """

    request = LabelRequest(labels=tuple(labels), target=repo, source=source)
    channel = ProgressChannel()

    owned: GitHubClient | None = None
    if client is None and not request.is_noop:
        owned = GitHubClient(token=token, base_url=base_url)
        client = owned

    async def _drive() -> SyncResult | None:
        try:
            return await sync_labels(request, client, channel)
        finally:
            channel.close()
            if owned is not None:
                owned.close()

    return LabelSyncRun(channel, asyncio.create_task(_drive()))


def run(
    labels: Iterable[RawLabel],
    *,
    repo: str,
    token: str = "",
    source: str | None = None,
    callback: DoneCallback | None = None,
    on_added: AddedListener | None = None,
    client: LabelsApi | None = None,
    base_url: str = DEFAULT_BASE_URL,
) -> SyncResult | None:
    """Blocking entry point.

    With a `callback`, the outcome is reported through it exactly once
    (aborts included) instead of being raised.
    """

    async def _main() -> SyncResult | None:
        sync_run = start_sync(
            labels, repo=repo, token=token, source=source, client=client, base_url=base_url
        )
        if on_added is not None:
            sync_run.on_added(on_added)
        return await sync_run.result()

    try:
        result = asyncio.run(_main())
    except Exception as e:
        if callback is None:
            raise
        callback(e, None)
        return None

    if callback is not None:
        callback(*callback_args(result))
    return result
