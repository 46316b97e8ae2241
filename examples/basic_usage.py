#!/usr/bin/env python3
"""Programmatic label sync example.

This demonstrates using the labeller components directly:

* load settings from `.env`
* start a sync on an event loop and stream progress events
* inspect the aggregated result

The target is passed as an argument (not read from `.env`).
"""

from __future__ import annotations

import argparse
import asyncio
from typing import Sequence

from github_labeller.config import LabellerSettings
from github_labeller.labeller import start_sync
from github_labeller.logging import configure_logging


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Apply labels (programmatic example).")
    parser.add_argument("--repo", required=True, help='Target, "owner/repo" or "owner"')
    parser.add_argument("--source", default=None, help='Copy labels from "owner/repo" (optional)')
    return parser.parse_args(argv)


async def _sync(args: argparse.Namespace, settings: LabellerSettings) -> int:
    sync_run = start_sync(
        [{"name": "needs-triage", "color": "#ededed"}],
        repo=args.repo,
        source=args.source,
        token=settings.github_token,
        base_url=settings.github_base_url,
    )

    async for event in sync_run.events():
        status = "ok" if event.ok else f"failed ({event.error})"
        print(f"{event.owner}/{event.repo} {event.label.name}: {status}")

    result = await sync_run.result()
    if result is None:
        return 0
    print(f"Repositories processed: {len(result.repos)}; failures: {len(result.errors)}")
    return 0 if result.ok else 1


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = LabellerSettings()
    configure_logging(settings.log_level)

    return asyncio.run(_sync(args, settings))


if __name__ == "__main__":
    raise SystemExit(main())
