"""Exceptions raised by the labeller pipeline."""

from __future__ import annotations


class LabellerError(Exception):
    """Base class for errors raised by github-labeller itself."""


class LabelValidationError(LabellerError, ValueError):
    """A requested label is missing its name or color."""

    def __init__(self, index: int, field: str) -> None:
        super().__init__(f"Missing {field} for label: {index}")
        self.index = index
        self.field = field


class TargetError(LabellerError, ValueError):
    """A repository string cannot be used where an explicit 'owner/repo' is required."""
