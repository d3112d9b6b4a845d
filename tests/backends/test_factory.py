"""Tests for building the collaborator set from a config."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from drivekit.backends.factory import build_collaborators, resolve_spreadsheet_id
from drivekit.backends.local import CsvWorkbook, LocalDriveMirror, PptxDeckOpener
from drivekit.errors import IdentifierNotFoundError
from drivekit.internals.config.define_config import Backend, UserConfig


def test_local_backend_collaborators(drive_root: Path, workbook_dir: Path) -> None:
    cfg = UserConfig(drive_root=str(drive_root), spreadsheet=str(workbook_dir))

    collaborators = build_collaborators(cfg)

    assert isinstance(collaborators.workbook, CsvWorkbook)
    assert collaborators.workbook.folder == workbook_dir
    assert isinstance(collaborators.folders, LocalDriveMirror)
    assert collaborators.files is collaborators.folders
    assert isinstance(collaborators.decks, PptxDeckOpener)


@pytest.mark.parametrize(
    "spreadsheet,expected",
    [
        ("1AbC_dEf-123", "1AbC_dEf-123"),
        ("  1AbC_dEf-123 ", "1AbC_dEf-123"),
        ("https://docs.google.com/spreadsheets/d/1AbC_dEf-123/edit#gid=0", "1AbC_dEf-123"),
    ],
)
def test_resolve_spreadsheet_id(spreadsheet: str, expected: str) -> None:
    assert resolve_spreadsheet_id(spreadsheet) == expected


def test_resolve_spreadsheet_id_rejects_unrecognized_url() -> None:
    with pytest.raises(IdentifierNotFoundError) as exc_info:
        resolve_spreadsheet_id("https://example.com/sheet")

    assert exc_info.value.slot == "spreadsheet"


def test_google_backend_builds_drive_and_sheets_services() -> None:
    cfg = UserConfig(backend=Backend.GOOGLE, spreadsheet="SHEETID", service_account_path="sa.json")

    with (
        patch("drivekit.backends.google.GoogleAuth") as mock_auth,
        patch("drivekit.backends.google.build_service") as mock_build,
    ):
        mock_build.side_effect = lambda api, version, creds: MagicMock(name=f"{api}-{version}")
        collaborators = build_collaborators(cfg)

    mock_auth.return_value.authenticate.assert_called_once()
    built = [call.args[:2] for call in mock_build.call_args_list]
    assert built == [("drive", "v3"), ("sheets", "v4")]
    assert collaborators.workbook is not None
    assert collaborators.workbook.spreadsheet_id == "SHEETID"
    assert collaborators.files is collaborators.folders


def test_google_backend_without_spreadsheet_has_no_workbook() -> None:
    cfg = UserConfig(backend=Backend.GOOGLE, service_account_path="sa.json")

    with (
        patch("drivekit.backends.google.GoogleAuth"),
        patch("drivekit.backends.google.build_service"),
    ):
        collaborators = build_collaborators(cfg)

    assert collaborators.workbook is None
