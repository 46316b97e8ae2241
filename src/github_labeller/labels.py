"""Label values and normalization.

Labels arrive in loose shapes: hand-written JSON, CLI flags, or the raw
objects GitHub returns for an existing repository. Everything is normalized
into a `Label` before any network call so that a single malformed entry
aborts the run up front.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from github_labeller.errors import LabelValidationError


@dataclass(frozen=True, slots=True)
class Label:
    name: str
    color: str

    def payload(self) -> dict[str, str]:
        """Body sent to the create/update label endpoints."""

        return {"name": self.name, "color": self.color}


def _text(value: object) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def normalize_label(raw: Label | Mapping[str, object], index: int) -> Label:
    """Validate one label, accepting `label` as an alias for `name`.

    Raises:
        LabelValidationError: if the name or color is missing.
    """

    if isinstance(raw, Label):
        name, color = raw.name, raw.color
    else:
        name = _text(raw.get("name")) or _text(raw.get("label"))
        color = _text(raw.get("color"))

    if color.startswith("#"):
        color = color[1:]

    if not name:
        raise LabelValidationError(index, "name")
    if not color:
        raise LabelValidationError(index, "color")
    return Label(name=name, color=color)


def normalize_labels(raw_labels: Sequence[Label | Mapping[str, object]]) -> list[Label]:
    return [normalize_label(raw, index) for index, raw in enumerate(raw_labels)]
