"""CLI entrypoint for github-labeller."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from github_labeller import __version__
from github_labeller.config import LabellerSettings
from github_labeller.errors import LabellerError
from github_labeller.events import LabelAdded
from github_labeller.labeller import run
from github_labeller.logging import configure_logging

logger = logging.getLogger(__name__)


def _parse_label_flag(value: str) -> dict[str, str]:
    name, sep, color = value.rpartition(":")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"Expected NAME:COLOR, got {value!r}")
    return {"name": name, "color": color}


def _load_labels_file(path: Path) -> list[dict[str, object]]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list) or not all(isinstance(item, dict) for item in raw):
        raise ValueError(f"{path} must contain a JSON list of label objects")
    return raw


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="github-labeller",
        description="Create or update GitHub labels on one repository or all of an owner's",
    )
    parser.add_argument("--version", action="version", version=f"github-labeller {__version__}")
    parser.add_argument(
        "--repo",
        "--repository",
        dest="repository",
        required=True,
        help="Target in the form 'owner/repo', or 'owner' for all of the owner's repositories",
    )
    parser.add_argument(
        "--source",
        default=None,
        help="Copy the labels of this repository ('owner/repo') in addition to explicit ones",
    )
    parser.add_argument(
        "--labels-file",
        type=Path,
        default=None,
        help="JSON file with a list of {\"name\": ..., \"color\": ...} objects",
    )
    parser.add_argument(
        "--label",
        dest="labels",
        action="append",
        type=_parse_label_flag,
        default=[],
        metavar="NAME:COLOR",
        help="A label to apply, e.g. 'bug:#d73a4a' (repeatable)",
    )
    parser.add_argument(
        "--token",
        default=None,
        help="GitHub token (defaults to LABELLER_GITHUB_TOKEN)",
    )
    return parser


def _print_added(event: LabelAdded) -> None:
    status = "ok" if event.ok else f"error: {event.error}"
    print(f"{event.owner}/{event.repo}: {event.label.name} {status}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.token:
            settings = LabellerSettings(github_token=args.token)
        else:
            settings = LabellerSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    labels: list[dict[str, object]] = []
    if args.labels_file is not None:
        try:
            labels.extend(_load_labels_file(args.labels_file))
        except (OSError, ValueError) as e:
            print(f"Cannot read labels file: {e}", file=sys.stderr)
            return 2
    labels.extend(args.labels)

    try:
        result = run(
            labels,
            repo=args.repository,
            token=settings.github_token,
            source=args.source,
            on_added=_print_added,
            base_url=settings.github_base_url,
        )
    except LabellerError as e:
        logger.error(str(e))
        print(str(e), file=sys.stderr)
        return 1
    except Exception:
        logger.exception("Label sync failed")
        return 1

    if result is None:
        print("Nothing to do: pass --label, --labels-file or --source")
        return 0

    for repo in result.repos:
        if repo.error is not None:
            print(f"{repo.owner}/{repo.repo}: skipped ({repo.error})", file=sys.stderr)
    return 0 if result.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
