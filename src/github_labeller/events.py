"""Progress events emitted while labels are applied."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from typing import Any, cast

from github_labeller.labels import Label

logger = logging.getLogger(__name__)

_CLOSED = object()


@dataclass(frozen=True, slots=True)
class LabelAdded:
    """One finished upsert attempt, successful or not.

    `(owner, repo, label)` identifies which requested upsert completed; the
    channel is shared by every concurrently running repository and label.
    """

    owner: str
    repo: str
    label: Label
    error: Exception | None
    data: dict[str, Any] | None

    @property
    def ok(self) -> bool:
        return self.error is None


AddedListener = Callable[[LabelAdded], None]


class ProgressChannel:
    """Shared 'added' channel: synchronous listeners plus a single-pass async stream.

    Events are delivered in completion order. The stream is unbounded and has
    no backpressure; it ends once `close()` has been called and drained.
    """

    def __init__(self) -> None:
        self._listeners: list[AddedListener] = []
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._closed = False
        self._iterating = False

    @property
    def closed(self) -> bool:
        return self._closed

    def on_added(self, listener: AddedListener) -> None:
        self._listeners.append(listener)

    def emit(self, event: LabelAdded) -> None:
        if self._closed:
            raise RuntimeError("Cannot emit on a closed progress channel")
        logger.debug(
            "Label upsert finished",
            extra={
                "owner": event.owner,
                "repo": event.repo,
                "label": event.label.name,
                "ok": event.ok,
            },
        )
        self._queue.put_nowait(event)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                # Listener errors never reach the upsert outcome.
                logger.exception(
                    "Progress listener failed",
                    extra={"owner": event.owner, "repo": event.repo, "label": event.label.name},
                )

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    async def __aiter__(self) -> AsyncIterator[LabelAdded]:
        if self._iterating:
            raise RuntimeError("Progress channel can only be iterated once")
        self._iterating = True
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield cast(LabelAdded, item)
