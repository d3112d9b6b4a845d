"""Shared fixtures"""

# tests/conftest.py
import logging
from pathlib import Path
from typing import Callable

import pptx
import pytest

from drivekit.internals.config.define_config import Backend, PipelineKind, UserConfig
from tests.helpers import FOLDER_ID, PRESENTATION_ID


@pytest.fixture(autouse=True)
def isolated_user_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point DRIVEKIT_HOME at a temp folder so no test touches ~/Documents."""
    home = tmp_path / "drivekit_home"
    monkeypatch.setenv("DRIVEKIT_HOME", str(home))
    return home


@pytest.fixture(autouse=True)
def restore_drivekit_logger():
    """Undo any handlers/propagate changes a test makes via setup_logger(), so caplog keeps working."""
    logger = logging.getLogger("drivekit")
    saved_handlers = list(logger.handlers)
    saved_propagate = logger.propagate
    saved_level = logger.level
    yield logger
    for handler in list(logger.handlers):
        if handler not in saved_handlers:
            handler.close()
            logger.removeHandler(handler)
    logger.propagate = saved_propagate
    logger.setLevel(saved_level)


@pytest.fixture
def clean_debug_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Ensure debug env var is not set before test."""
    monkeypatch.delenv("DRIVEKIT_DEBUG", raising=False)
    return monkeypatch


@pytest.fixture
def drive_root(tmp_path: Path) -> Path:
    """Empty local drive mirror."""
    root = tmp_path / "drive"
    root.mkdir()
    return root


@pytest.fixture
def workbook_dir(tmp_path: Path) -> Path:
    """Empty local CSV workbook."""
    folder = tmp_path / "workbook"
    folder.mkdir()
    return folder


@pytest.fixture
def make_blank_deck(drive_root: Path) -> Callable[[str], Path]:
    """Save python-pptx's default (empty, 4:3) presentation into the drive mirror under an ID."""

    def _make(presentation_id: str = PRESENTATION_ID) -> Path:
        path = drive_root / f"{presentation_id}.pptx"
        pptx.Presentation().save(str(path))
        return path

    return _make


@pytest.fixture
def image_folder(drive_root: Path) -> Path:
    """The drive mirror folder the deck tests read images from."""
    folder = drive_root / FOLDER_ID
    folder.mkdir()
    return folder


@pytest.fixture
def local_deck_cfg(drive_root: Path, workbook_dir: Path) -> UserConfig:
    """images-to-deck against the local backend; links are read from the workbook."""
    return UserConfig(
        pipeline=PipelineKind.IMAGES_TO_DECK,
        backend=Backend.LOCAL,
        drive_root=str(drive_root),
        spreadsheet=str(workbook_dir),
    )


@pytest.fixture
def local_report_cfg(drive_root: Path, workbook_dir: Path) -> UserConfig:
    """config-report against the local backend, with two short report keys."""
    return UserConfig(
        pipeline=PipelineKind.CONFIG_REPORT,
        backend=Backend.LOCAL,
        drive_root=str(drive_root),
        spreadsheet=str(workbook_dir),
        report_keys=["gain", "level"],
        report_header=["Band", "Key", "Value"],
    )
