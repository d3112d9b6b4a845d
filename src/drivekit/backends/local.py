# local.py
"""Offline backend: a drive mirror folder, a CSV workbook, and pptx decks edited with python-pptx.

The drive mirror stores every resource under its ID, the same ID the
extractors pull out of a share link:

    <drive_root>/
      <folder_id>/            a folder; its files are listed by extension
      <file_id>.ini           a file (any extension, or none)
      <presentation_id>.pptx  a deck

The workbook is a folder with one CSV file per sheet.
"""
# mypy: disable-error-code="import-untyped"

from __future__ import annotations

import csv
import io
import logging
import mimetypes
from pathlib import Path
from typing import Callable, Sequence

import pptx
from pptx import presentation
from pptx.shapes.picture import Picture
from pptx.slide import Slide as PptxSlideObj
from pptx.slide import SlideLayout
from pptx.util import Emu

from drivekit.errors import CollaboratorError, ResourceNotFoundError
from drivekit.internals import constants
from drivekit.internals.run_context import get_pipeline_run_id
from drivekit.models import ImageResource

log = logging.getLogger("drivekit")

FIRST_SHEET_NAME = "Sheet1"
MAX_SANE_SLIDE_COUNT = 1000


# region mime helpers
def guess_mime_type(path: Path) -> str | None:
    """MIME type for a mirrored file, from its extension."""
    known = constants.EXTENSION_MIME_TYPES.get(path.suffix.lower())
    if known:
        return known
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed


# endregion


# region LocalDriveMirror
class LocalDriveMirror:
    """FolderSource and FileSource over a folder of ID-named resources."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def list_files_by_type(self, folder_id: str, mime_type: str) -> list[ImageResource]:
        """Read every file in the ID-named folder whose extension maps to mime_type. Unsorted."""
        pipeline_id = get_pipeline_run_id()
        folder = self.root / folder_id
        if not folder.is_dir():
            log.error(f"Folder {folder_id} not found under {self.root} [pipeline:{pipeline_id}]")
            raise ResourceNotFoundError("Folder", folder_id)

        images: list[ImageResource] = []
        try:
            for path in folder.iterdir():
                if path.is_file() and guess_mime_type(path) == mime_type:
                    images.append(ImageResource(name=path.name, content=path.read_bytes()))
        except OSError as e:
            log.error(f"Could not read folder {folder} [pipeline:{pipeline_id}]: {e}")
            raise CollaboratorError(f"Could not read folder {folder_id}: {e}") from e

        log.info(
            f"Found {len(images)} file(s) of type {mime_type} in folder {folder_id}. [pipeline:{pipeline_id}]"
        )
        return images

    def _find_file(self, file_id: str) -> Path:
        exact = self.root / file_id
        if exact.is_file():
            return exact
        for candidate in sorted(self.root.glob(f"{file_id}.*")):
            if candidate.is_file():
                return candidate
        raise ResourceNotFoundError("File", file_id)

    def get_file_text(self, file_id: str) -> str:
        """Contents of the ID-named file decoded as UTF-8 (a leading BOM is dropped)."""
        path = self._find_file(file_id)
        try:
            text = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            log.error(f"Could not read {path} [pipeline:{get_pipeline_run_id()}]: {e}")
            raise CollaboratorError(f"Could not read file {file_id}: {e}") from e

        log.debug(f"Read {len(text)} characters from {path}")
        return text


# endregion


# region pptx deck
class PptxImage:
    """A picture on a python-pptx slide. Units are EMU."""

    def __init__(self, picture: Picture) -> None:
        self._picture = picture

    @property
    def width(self) -> int:
        return int(self._picture.width)

    @property
    def height(self) -> int:
        return int(self._picture.height)

    def set_position(self, left: float, top: float) -> None:
        self._picture.left = Emu(int(round(left)))
        self._picture.top = Emu(int(round(top)))


class PptxSlide:
    def __init__(self, slide: PptxSlideObj) -> None:
        self._slide = slide

    def insert_image(self, content: bytes) -> PptxImage:
        """Add the image at (0, 0) and at its native size (pixels at the image's DPI)."""
        try:
            picture = self._slide.shapes.add_picture(io.BytesIO(content), 0, 0)
        except Exception as e:
            log.error(f"python-pptx could not read image data [pipeline:{get_pipeline_run_id()}]: {e}")
            raise CollaboratorError(f"Unsupported or corrupted image: {e}") from e
        return PptxImage(picture)


class PptxDeck:
    """
    Deck over an in-memory python-pptx Presentation.

    `save` is called by commit() with the presentation; the opener decides
    where it goes (a file on disk, an upload).
    """

    def __init__(
        self,
        prs: presentation.Presentation,
        save: Callable[[presentation.Presentation], None],
        name: str = "presentation",
    ) -> None:
        self.prs = prs
        self._save = save
        self.name = name
        self._blank_layout: SlideLayout | None = None

    @property
    def page_width(self) -> int:
        return int(self.prs.slide_width)

    @property
    def page_height(self) -> int:
        return int(self.prs.slide_height)

    def append_blank_slide(self) -> PptxSlide:
        if self._blank_layout is None:
            self._blank_layout = find_blank_layout(self.prs)
        slide = self.prs.slides.add_slide(self._blank_layout)  # pyright: ignore[reportAttributeAccessIssue]

        # A fallback layout may still carry placeholders; an image slide wants none.
        for placeholder in list(slide.placeholders):
            sp = placeholder._element
            sp.getparent().remove(sp)

        return PptxSlide(slide)

    def commit(self) -> None:
        slide_count = len(self.prs.slides)
        if slide_count > MAX_SANE_SLIDE_COUNT:
            log.warning(
                f"This is about to save a deck with over {MAX_SANE_SLIDE_COUNT} slides ... that seems a bit long!"
            )
        self._save(self.prs)
        log.info(f"Saved {self.name} ({slide_count} slides). [pipeline:{get_pipeline_run_id()}]")


def find_blank_layout(prs: presentation.Presentation) -> SlideLayout:
    """The layout named "Blank", else the layout with the fewest placeholders."""
    layout = prs.slide_layouts.get_by_name(constants.BLANK_LAYOUT_NAME)
    if layout is not None:
        return layout

    layouts = list(prs.slide_layouts)
    if not layouts:
        raise CollaboratorError("Presentation has no slide layouts to create slides from.")

    fallback = min(layouts, key=lambda candidate: len(candidate.placeholders))
    log.debug(
        f"No '{constants.BLANK_LAYOUT_NAME}' layout; using '{fallback.name}' ({len(fallback.placeholders)} placeholders)."
    )
    return fallback


def load_presentation(source: Path | io.BytesIO, label: str) -> presentation.Presentation:
    """Open a pptx from a path or a byte stream, turning python-pptx errors into CollaboratorError."""
    try:
        return pptx.Presentation(source if isinstance(source, io.BytesIO) else str(source))
    except Exception as e:
        log.error(f"Could not load PowerPoint file {label} [pipeline:{get_pipeline_run_id()}]. Error: {e}")
        raise CollaboratorError(f"Presentation appears to be corrupted: {e}") from e


class PptxDeckOpener:
    """DeckOpener over `<root>/<presentation_id>.pptx` files."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def deck_path(self, presentation_id: str) -> Path:
        return self.root / f"{presentation_id}.pptx"

    def open_deck(self, presentation_id: str) -> PptxDeck:
        path = self.deck_path(presentation_id)
        if not path.is_file():
            log.error(f"Presentation not found: {path} [pipeline:{get_pipeline_run_id()}]")
            raise ResourceNotFoundError("Presentation", presentation_id)

        prs = load_presentation(path, str(path))
        log.info(f"Opened {path} ({len(prs.slides)} existing slides).")

        def save(prs: presentation.Presentation) -> None:
            save_presentation(prs, path)

        return PptxDeck(prs, save, name=path.name)


def save_presentation(prs: presentation.Presentation, path: Path) -> None:
    """Save a presentation to disk with readable errors."""
    pipeline_id = get_pipeline_run_id()
    try:
        prs.save(str(path))
    except PermissionError as e:
        log.error(f"Save failed due to permission error [pipeline:{pipeline_id}]: {e}")
        raise CollaboratorError("Save failed: File may be open in another program") from e
    except OSError as e:
        log.error(f"Save failed in [pipeline:{pipeline_id}]: {e}")
        raise CollaboratorError(f"Save failed (disk space or IO issue): {e}") from e


# endregion


# region CsvWorkbook
_UNSAFE_FILENAME_CHARS = '<>:"/\\|?*'


def sheet_filename(sheet_name: str) -> str:
    """CSV file name for a sheet; characters no OS allows in file names become "_"."""
    safe = "".join("_" if ch in _UNSAFE_FILENAME_CHARS else ch for ch in sheet_name)
    return f"{safe.strip() or 'Sheet'}.csv"


class CsvWorkbook:
    """
    Workbook over a folder of CSV files, one per sheet.

    The "first sheet" is Sheet1.csv if present, otherwise the alphabetically
    first CSV file.
    """

    def __init__(self, folder: Path | str) -> None:
        self.folder = Path(folder)

    def sheet_path(self, sheet_name: str) -> Path:
        return self.folder / sheet_filename(sheet_name)

    def sheet_names(self) -> list[str]:
        if not self.folder.is_dir():
            return []
        return sorted(p.stem for p in self.folder.glob("*.csv"))

    def _first_sheet_path(self) -> Path:
        preferred = self.sheet_path(FIRST_SHEET_NAME)
        if preferred.is_file():
            return preferred
        names = self.sheet_names()
        if not names:
            raise ResourceNotFoundError("Sheet", f"{self.folder}/*.csv")
        return self.folder / f"{names[0]}.csv"

    def read_rows(self, sheet: str | None = None) -> list[list[str]]:
        path = self._first_sheet_path() if sheet is None else self.sheet_path(sheet)
        if not path.is_file():
            raise ResourceNotFoundError("Sheet", sheet or path.stem)
        try:
            with open(path, newline="", encoding="utf-8-sig") as f:
                return [row for row in csv.reader(f)]
        except OSError as e:
            raise CollaboratorError(f"Could not read sheet {path}: {e}") from e

    def read_cell(self, row: int, col: int, sheet: str | None = None) -> str:
        rows = self.read_rows(sheet)
        if row < 1 or col < 1 or row > len(rows) or col > len(rows[row - 1]):
            return ""
        return rows[row - 1][col - 1]

    def write_table(self, sheet_name: str, rows: Sequence[Sequence[str]]) -> None:
        """Replace the sheet's contents with rows (the file is rewritten from scratch)."""
        path = self.sheet_path(sheet_name)
        try:
            self.folder.mkdir(parents=True, exist_ok=True)
            with open(path, "w", newline="", encoding="utf-8") as f:
                csv.writer(f).writerows(rows)
        except OSError as e:
            log.error(f"Could not write sheet {path} [pipeline:{get_pipeline_run_id()}]: {e}")
            raise CollaboratorError(f"Could not write sheet '{sheet_name}': {e}") from e

        log.info(f"Wrote {len(rows)} rows to {path}. [pipeline:{get_pipeline_run_id()}]")


# endregion
