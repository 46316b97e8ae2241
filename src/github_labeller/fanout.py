"""Concurrent fan-out of independent tasks with per-task outcomes.

All tasks are started at once and awaited together. A failing task never
cancels its siblings; its exception is captured in the matching `Outcome`.
Results come back in input order regardless of completion order.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Iterable
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

T = TypeVar("T")


class HasError(Protocol):
    @property
    def error(self) -> Exception | None: ...


@dataclass(frozen=True, slots=True)
class Outcome(Generic[T]):
    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def _capture(awaitable: Awaitable[T]) -> Outcome[T]:
    try:
        return Outcome(value=await awaitable)
    except Exception as e:
        return Outcome(error=e)


async def fan_out(awaitables: Iterable[Awaitable[T]]) -> list[Outcome[T]]:
    """Run every awaitable concurrently and collect one outcome per input."""

    tasks = [asyncio.ensure_future(_capture(aw)) for aw in awaitables]
    if not tasks:
        return []
    return list(await asyncio.gather(*tasks))


def first_failure(outcomes: Iterable[HasError]) -> Exception | None:
    """Return the first error by input order, or None if every task succeeded."""

    for outcome in outcomes:
        if outcome.error is not None:
            return outcome.error
    return None
