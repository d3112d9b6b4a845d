"""Shared test helper functions and recording fakes for the collaborator Protocols."""

import struct
import zlib
from pathlib import Path
from typing import Optional, Sequence

from drivekit.models import ImageResource

# Realistic-looking IDs (Drive IDs are 25+ characters of [A-Za-z0-9_-])
FOLDER_ID = "1FoLdErIdAbCdEfGhIjKlMnOpQrStU"
PRESENTATION_ID = "1PrEsEnTaTiOnIdAbCdEfGhIjKlMnO"
INI_FILE_ID = "1IniFiLeIdAbCdEfGhIjKlMnOpQrSt"

FOLDER_URL = f"https://drive.google.com/drive/folders/{FOLDER_ID}?usp=sharing"
PRESENTATION_URL = f"https://docs.google.com/presentation/d/{PRESENTATION_ID}/edit#slide=id.p"
INI_URL = f"https://drive.google.com/file/d/{INI_FILE_ID}/view?usp=sharing"

# python-pptx sizes a picture with no DPI info at 72 dpi: 914400 EMU per inch / 72
EMU_PER_PIXEL_AT_72_DPI = 12700


# region make_png
def make_png(width: int, height: int) -> bytes:
    """Smallest valid PNG of the given size: 8-bit grayscale, all black, no DPI chunk."""

    def chunk(kind: bytes, data: bytes) -> bytes:
        body = kind + data
        return struct.pack(">I", len(data)) + body + struct.pack(">I", zlib.crc32(body) & 0xFFFFFFFF)

    ihdr = struct.pack(">IIBBBBB", width, height, 8, 0, 0, 0, 0)
    raw = b"".join(b"\x00" + b"\x00" * width for _ in range(height))
    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", ihdr)
        + chunk(b"IDAT", zlib.compress(raw))
        + chunk(b"IEND", b"")
    )


def write_png(folder: Path, name: str, width: int = 100, height: int = 50) -> Path:
    path = folder / name
    path.write_bytes(make_png(width, height))
    return path


# endregion


# region fakes
class FakeWorkbook:
    """Workbook with fixed cells; records every table written."""

    def __init__(self, cells: Optional[dict[tuple[int, int], str]] = None) -> None:
        self.cells = cells or {}
        self.reads: list[tuple[int, int, Optional[str]]] = []
        self.written: dict[str, list[list[str]]] = {}

    def read_cell(self, row: int, col: int, sheet: Optional[str] = None) -> str:
        self.reads.append((row, col, sheet))
        return self.cells.get((row, col), "")

    def write_table(self, sheet_name: str, rows: Sequence[Sequence[str]]) -> None:
        self.written[sheet_name] = [list(row) for row in rows]


class FakeFolderSource:
    def __init__(self, images: Optional[list[ImageResource]] = None, error: Optional[Exception] = None) -> None:
        self.images = images or []
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def list_files_by_type(self, folder_id: str, mime_type: str) -> list[ImageResource]:
        self.calls.append((folder_id, mime_type))
        if self.error is not None:
            raise self.error
        return list(self.images)


class FakeFileSource:
    def __init__(self, texts: Optional[dict[str, str]] = None) -> None:
        self.texts = texts or {}
        self.calls: list[str] = []

    def get_file_text(self, file_id: str) -> str:
        self.calls.append(file_id)
        return self.texts[file_id]


class FakePlacedImage:
    def __init__(self, content: bytes, width: float, height: float) -> None:
        self.content = content
        self.width = width
        self.height = height
        self.position: Optional[tuple[float, float]] = None

    def set_position(self, left: float, top: float) -> None:
        self.position = (left, top)


class FakeSlide:
    def __init__(self, image_size: tuple[float, float]) -> None:
        self.image_size = image_size
        self.images: list[FakePlacedImage] = []

    def insert_image(self, content: bytes) -> FakePlacedImage:
        placed = FakePlacedImage(content, *self.image_size)
        self.images.append(placed)
        return placed


class FakeDeck:
    """A 960x540 deck whose every inserted image is 200x100."""

    def __init__(self, page_width: float = 960, page_height: float = 540, image_size: tuple[float, float] = (200, 100)) -> None:
        self.page_width = page_width
        self.page_height = page_height
        self.image_size = image_size
        self.slides: list[FakeSlide] = []
        self.commits = 0

    def append_blank_slide(self) -> FakeSlide:
        slide = FakeSlide(self.image_size)
        self.slides.append(slide)
        return slide

    def commit(self) -> None:
        self.commits += 1


class FakeDeckOpener:
    def __init__(self, deck: Optional[FakeDeck] = None) -> None:
        self.deck = deck or FakeDeck()
        self.opened: list[str] = []

    def open_deck(self, presentation_id: str) -> FakeDeck:
        self.opened.append(presentation_id)
        return self.deck


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def alert(self, message: str) -> None:
        self.messages.append(message)


# endregion
