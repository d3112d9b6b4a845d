"""Interfaces for the external systems the pipelines talk to.

The pipelines only see these Protocols. `backends.local` implements them
with files on disk and python-pptx; `backends.google` implements them with
the Drive, Sheets, and Slides-as-pptx round trip.
"""

from __future__ import annotations

import logging
import re
from typing import Protocol, Sequence, runtime_checkable

from drivekit.models import ImageResource

log = logging.getLogger("drivekit")


# region Protocols
@runtime_checkable
class Workbook(Protocol):
    """A spreadsheet: read single cells, replace whole sheets."""

    def read_cell(self, row: int, col: int, sheet: str | None = None) -> str:
        """Value of the 1-based (row, col) cell as a string; "" when empty. sheet=None means the first sheet."""
        ...

    def write_table(self, sheet_name: str, rows: Sequence[Sequence[str]]) -> None:
        """Create the sheet if needed, clear it, and write rows starting at A1."""
        ...


@runtime_checkable
class FolderSource(Protocol):
    def list_files_by_type(self, folder_id: str, mime_type: str) -> list[ImageResource]: ...


@runtime_checkable
class FileSource(Protocol):
    def get_file_text(self, file_id: str) -> str: ...


class PlacedImage(Protocol):
    """An image already on a slide. Sizes and positions are in the deck's units."""

    @property
    def width(self) -> float: ...

    @property
    def height(self) -> float: ...

    def set_position(self, left: float, top: float) -> None: ...


class Slide(Protocol):
    def insert_image(self, content: bytes) -> PlacedImage: ...


class Deck(Protocol):
    @property
    def page_width(self) -> float: ...

    @property
    def page_height(self) -> float: ...

    def append_blank_slide(self) -> Slide: ...

    def commit(self) -> None:
        """Persist every change made through this deck."""
        ...


@runtime_checkable
class DeckOpener(Protocol):
    def open_deck(self, presentation_id: str) -> Deck: ...


@runtime_checkable
class Notifier(Protocol):
    """Where user-facing success and failure messages go."""

    def alert(self, message: str) -> None: ...


# endregion


# region LogNotifier
class LogNotifier:
    """Notifier for the CLI: the message goes to the drivekit logger (and so to the console)."""

    def __init__(self, level: int = logging.INFO) -> None:
        self.level = level

    def alert(self, message: str) -> None:
        log.log(self.level, message)


# endregion


# region A1 notation
_A1_REF = re.compile(r"^\s*([A-Za-z]+)\s*([1-9][0-9]*)\s*$")


def parse_a1(ref: str) -> tuple[int, int]:
    """
    Convert an A1-style cell reference to 1-based (row, col).

    >>> parse_a1("B3")
    (3, 2)

    Raises:
        ValueError: If ref is not a single-cell reference like "A1" or "AA12".
    """
    match = _A1_REF.match(ref or "")
    if not match:
        raise ValueError(f"Not a cell reference: '{ref}'. Expected something like 'A1'.")

    letters, digits = match.groups()
    col = 0
    for ch in letters.upper():
        col = col * 26 + (ord(ch) - ord("A") + 1)
    return int(digits), col


def column_letter(col: int) -> str:
    """1 -> "A", 27 -> "AA"."""
    if col < 1:
        raise ValueError(f"Column numbers start at 1, got {col}")
    letters = ""
    while col:
        col, remainder = divmod(col - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def a1_ref(row: int, col: int) -> str:
    """(3, 2) -> "B3"."""
    return f"{column_letter(col)}{row}"


# endregion
