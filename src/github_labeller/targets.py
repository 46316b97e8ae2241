"""Parsing of 'owner' / 'owner/repo' target strings."""

from __future__ import annotations

from dataclasses import dataclass

from github_labeller.errors import TargetError


@dataclass(frozen=True, slots=True)
class Target:
    """Where labels are applied.

    `repo is None` means every repository owned by `owner`.
    """

    owner: str
    repo: str | None = None

    @property
    def is_owner_only(self) -> bool:
        return self.repo is None

    def __str__(self) -> str:
        return self.owner if self.repo is None else f"{self.owner}/{self.repo}"


def parse_target(value: str) -> Target:
    if not value:
        raise TargetError("Target must be an owner or an 'owner/repo' string")
    parts = value.split("/")
    if len(parts) == 2:
        return Target(owner=parts[0], repo=parts[1])
    # Anything else (including 'a/b/c') is treated as a raw owner name.
    return Target(owner=value)


def parse_source(value: str) -> Target:
    """Parse the repository labels are copied from; it must name one repo."""

    target = parse_target(value)
    if target.repo is None or not target.owner or not target.repo:
        raise TargetError(f"Source repository must look like 'owner/repo', got: {value!r}")
    return target
