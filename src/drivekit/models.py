# models.py
"""Data models shared by the pipelines, the backends, and the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple


# region ImageResource
@dataclass(frozen=True)
class ImageResource:
    """An image file pulled from a folder: its file name and raw bytes."""

    name: str
    content: bytes

    def __repr__(self) -> str:
        # Don't dump image bytes into the log.
        return f"ImageResource(name={self.name!r}, size={len(self.content)})"


# endregion


# region ConfigTableRow
class ConfigTableRow(NamedTuple):
    """One flattened report row: which section, which key, and its value ("" if absent)."""

    section: str
    key: str
    value: str


# endregion


# region Outcome
class OutcomeStatus(Enum):
    """How a pipeline run ended."""

    SUCCESS = "success"
    NO_ITEMS = "no_items"  # ran fine, but there was nothing to copy/report
    INVALID_INPUT = "invalid_input"
    FAILED = "failed"

    @property
    def is_ok(self) -> bool:
        return self in (OutcomeStatus.SUCCESS, OutcomeStatus.NO_ITEMS)


@dataclass
class PipelineOutcome:
    """
    What a pipeline run reports back to the user.

    `count` is images placed (images-to-deck) or data rows written
    (config-report). `target` is the resource that was written to, if any.
    """

    pipeline: str
    status: OutcomeStatus
    message: str
    count: int = 0
    target: str | None = None

    @property
    def exit_code(self) -> int:
        return 0 if self.status.is_ok else 1


# endregion
