"""Build the collaborator set for the configured backend."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from drivekit.collaborators import DeckOpener, FileSource, FolderSource, Workbook
from drivekit.errors import IdentifierNotFoundError
from drivekit.identifiers import extract_id
from drivekit.internals.config.define_config import Backend, UserConfig

log = logging.getLogger("drivekit")

_BARE_ID = re.compile(r"^[A-Za-z0-9_-]+$")


# region Collaborators
@dataclass
class Collaborators:
    """Everything a pipeline needs from the outside world. workbook is None when no spreadsheet is configured."""

    workbook: Optional[Workbook]
    folders: FolderSource
    files: FileSource
    decks: DeckOpener


# endregion


# region build_collaborators
def build_collaborators(cfg: UserConfig) -> Collaborators:
    """Create the local or Google collaborators described by cfg."""
    if cfg.backend == Backend.LOCAL:
        from drivekit.backends.local import CsvWorkbook, LocalDriveMirror, PptxDeckOpener

        drive_root = cfg.get_drive_root()
        mirror = LocalDriveMirror(drive_root)
        log.info(f"Using local drive mirror at {drive_root}")
        return Collaborators(
            workbook=CsvWorkbook(cfg.get_workbook_dir()),
            folders=mirror,
            files=mirror,
            decks=PptxDeckOpener(drive_root),
        )

    # Only import the Google client stack when it's actually used.
    from drivekit.backends.google import (
        DrivePptxDeckOpener,
        DriveService,
        GoogleAuth,
        SheetsWorkbook,
        build_service,
    )

    creds = GoogleAuth(
        credentials_path=cfg.get_credentials_path(),
        token_path=cfg.get_token_path(),
        service_account_path=cfg.get_service_account_path(),
    ).authenticate()

    drive = DriveService(build_service("drive", "v3", creds))
    workbook = None
    if cfg.spreadsheet:
        workbook = SheetsWorkbook(
            build_service("sheets", "v4", creds), resolve_spreadsheet_id(cfg.spreadsheet)
        )

    return Collaborators(
        workbook=workbook,
        folders=drive,
        files=drive,
        decks=DrivePptxDeckOpener(drive),
    )


# endregion


# region resolve_spreadsheet_id
def resolve_spreadsheet_id(spreadsheet: str) -> str:
    """Accept either a Sheets URL or a bare spreadsheet ID."""
    candidate = spreadsheet.strip()
    if _BARE_ID.match(candidate):
        return candidate

    spreadsheet_id = extract_id(candidate)
    if spreadsheet_id is None:
        raise IdentifierNotFoundError(
            f"Invalid Google Sheets URL: {spreadsheet}", slot="spreadsheet", url=spreadsheet
        )
    return spreadsheet_id


# endregion
