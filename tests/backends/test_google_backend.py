"""Tests for the Google backend. Every googleapiclient service is a MagicMock; nothing touches the network."""

import io
from pathlib import Path
from unittest.mock import MagicMock, patch

import pptx
import pytest
from googleapiclient.errors import HttpError

from drivekit.backends.google import (
    DrivePptxDeckOpener,
    DriveService,
    GoogleAuth,
    SheetsWorkbook,
    google_call,
    quote_sheet_name,
)
from drivekit.errors import AuthenticationError, CollaboratorError, ResourceNotFoundError
from drivekit.internals import constants


def _http_error(status: int) -> HttpError:
    resp = MagicMock(status=status, reason="Error")
    return HttpError(resp, b'{"error": {"message": "nope"}}')


def _pptx_bytes(slide_count: int = 0) -> bytes:
    prs = pptx.Presentation()
    for _ in range(slide_count):
        prs.slides.add_slide(prs.slide_layouts[6])
    buffer = io.BytesIO()
    prs.save(buffer)
    return buffer.getvalue()


# region google_call
def test_google_call_maps_404_to_not_found() -> None:
    with pytest.raises(ResourceNotFoundError) as exc_info:
        with google_call("Folder", "abc"):
            raise _http_error(404)

    assert exc_info.value.message == "Folder not found: abc"


def test_google_call_maps_other_statuses_to_collaborator_error() -> None:
    with pytest.raises(CollaboratorError) as exc_info:
        with google_call("Spreadsheet", "abc"):
            raise _http_error(403)

    assert not isinstance(exc_info.value, ResourceNotFoundError)
    assert exc_info.value.details["status"] == 403


def test_google_call_lets_other_exceptions_through() -> None:
    with pytest.raises(KeyError):
        with google_call("File", "abc"):
            raise KeyError("x")


# endregion


# region DriveService
class TestDriveService:
    def test_list_files_by_type_follows_pages_and_downloads_each(self) -> None:
        service = MagicMock()
        service.files.return_value.list.return_value.execute.side_effect = [
            {"files": [{"id": "id1", "name": "b.png"}], "nextPageToken": "page2"},
            {"files": [{"id": "id2", "name": "a.png"}]},
        ]
        drive = DriveService(service)

        with patch.object(DriveService, "download_bytes", side_effect=lambda file_id: file_id.encode()):
            images = drive.list_files_by_type("FOLDER", "image/png")

        assert [(image.name, image.content) for image in images] == [("b.png", b"id1"), ("a.png", b"id2")]

        list_calls = service.files.return_value.list.call_args_list
        assert len(list_calls) == 2
        assert list_calls[0].kwargs["q"] == (
            "'FOLDER' in parents and mimeType = 'image/png' and trashed = false"
        )
        assert list_calls[0].kwargs["pageToken"] is None
        assert list_calls[1].kwargs["pageToken"] == "page2"

    def test_missing_folder_raises_not_found(self) -> None:
        service = MagicMock()
        service.files.return_value.list.return_value.execute.side_effect = _http_error(404)

        with pytest.raises(ResourceNotFoundError):
            DriveService(service).list_files_by_type("FOLDER", "image/png")

    def test_get_file_text_decodes_utf8_and_drops_bom(self) -> None:
        drive = DriveService(MagicMock())

        with patch.object(DriveService, "download_bytes", return_value="\ufeff[A]\nk = \u00e9\n".encode("utf-8")):
            assert drive.get_file_text("file") == "[A]\nk = é\n"

    def test_download_bytes_reads_every_chunk(self) -> None:
        service = MagicMock()
        drive = DriveService(service)

        def fake_downloader(buffer: io.BytesIO, request: object) -> MagicMock:
            downloader = MagicMock()
            chunks = iter([b"hello ", b"world"])

            def next_chunk() -> tuple[None, bool]:
                data = next(chunks)
                buffer.write(data)
                return None, data == b"world"

            downloader.next_chunk.side_effect = next_chunk
            return downloader

        with patch("drivekit.backends.google.MediaIoBaseDownload", side_effect=fake_downloader):
            assert drive.download_bytes("file") == b"hello world"

        service.files.return_value.get_media.assert_called_once_with(fileId="file", supportsAllDrives=True)

    def test_update_content_uploads_to_the_same_file(self) -> None:
        service = MagicMock()

        with patch("drivekit.backends.google.MediaIoBaseUpload") as mock_upload:
            DriveService(service).update_content("deck", b"data", constants.PPTX_MIME_TYPE)

        assert mock_upload.call_args.kwargs["mimetype"] == constants.PPTX_MIME_TYPE
        update_kwargs = service.files.return_value.update.call_args.kwargs
        assert update_kwargs["fileId"] == "deck"
        assert update_kwargs["media_body"] is mock_upload.return_value


# endregion


# region SheetsWorkbook
def test_quote_sheet_name() -> None:
    assert quote_sheet_name("DC2DC Level") == "'DC2DC Level'"
    assert quote_sheet_name("It's") == "'It''s'"


class TestSheetsWorkbook:
    def _service(self, titles: list[str]) -> MagicMock:
        service = MagicMock()
        service.spreadsheets.return_value.get.return_value.execute.return_value = {
            "sheets": [{"properties": {"title": title}} for title in titles]
        }
        return service

    def test_read_cell_defaults_to_first_sheet(self) -> None:
        service = self._service(["Inputs", "Other"])
        values = service.spreadsheets.return_value.values.return_value
        values.get.return_value.execute.return_value = {"values": [["https://link"]]}

        value = SheetsWorkbook(service, "SHEET").read_cell(2, 1)

        assert value == "https://link"
        values.get.assert_called_once_with(spreadsheetId="SHEET", range="'Inputs'!A2")

    def test_read_cell_named_sheet_skips_metadata_lookup(self) -> None:
        service = MagicMock()
        values = service.spreadsheets.return_value.values.return_value
        values.get.return_value.execute.return_value = {"values": [["x"]]}

        SheetsWorkbook(service, "SHEET").read_cell(1, 28, "Data")

        values.get.assert_called_once_with(spreadsheetId="SHEET", range="'Data'!AB1")
        service.spreadsheets.return_value.get.assert_not_called()

    def test_read_cell_empty_is_empty_string(self) -> None:
        service = self._service(["Sheet1"])
        service.spreadsheets.return_value.values.return_value.get.return_value.execute.return_value = {}

        assert SheetsWorkbook(service, "SHEET").read_cell(1, 1) == ""

    def test_write_table_adds_missing_sheet_then_clears_and_writes(self) -> None:
        service = self._service(["Sheet1"])
        sheets = service.spreadsheets.return_value
        rows = [("Band", "Key", "Value"), ("B1", "k", "v")]

        SheetsWorkbook(service, "SHEET").write_table("DC2DC Level", rows)

        add_body = sheets.batchUpdate.call_args.kwargs["body"]
        assert add_body == {"requests": [{"addSheet": {"properties": {"title": "DC2DC Level"}}}]}
        sheets.values.return_value.clear.assert_called_once_with(
            spreadsheetId="SHEET", range="'DC2DC Level'", body={}
        )
        sheets.values.return_value.update.assert_called_once_with(
            spreadsheetId="SHEET",
            range="'DC2DC Level'!A1",
            valueInputOption="RAW",
            body={"values": [["Band", "Key", "Value"], ["B1", "k", "v"]]},
        )

    def test_write_table_reuses_existing_sheet(self) -> None:
        service = self._service(["Sheet1", "DC2DC Level"])

        SheetsWorkbook(service, "SHEET").write_table("DC2DC Level", [("a", "b", "c")])

        service.spreadsheets.return_value.batchUpdate.assert_not_called()


# endregion


# region DrivePptxDeckOpener
def test_deck_round_trip_exports_edits_and_uploads() -> None:
    drive = MagicMock()
    drive.export_bytes.return_value = _pptx_bytes(slide_count=1)

    deck = DrivePptxDeckOpener(drive).open_deck("DECK")
    deck.append_blank_slide()
    deck.commit()

    drive.export_bytes.assert_called_once_with("DECK", constants.PPTX_MIME_TYPE)
    file_id, data, mime_type = drive.update_content.call_args.args
    assert file_id == "DECK"
    assert mime_type == constants.PPTX_MIME_TYPE
    assert len(pptx.Presentation(io.BytesIO(data)).slides) == 2


def test_deck_without_commit_uploads_nothing() -> None:
    drive = MagicMock()
    drive.export_bytes.return_value = _pptx_bytes()

    DrivePptxDeckOpener(drive).open_deck("DECK").append_blank_slide()

    drive.update_content.assert_not_called()


# endregion


# region GoogleAuth
class TestGoogleAuth:
    def test_service_account_wins(self, tmp_path: Path) -> None:
        key = tmp_path / "sa.json"
        key.write_text("{}", encoding="utf-8")

        with patch(
            "drivekit.backends.google.service_account.Credentials.from_service_account_file"
        ) as mock_from_file:
            creds = GoogleAuth(service_account_path=key).authenticate()

        assert creds is mock_from_file.return_value
        assert mock_from_file.call_args.args[0] == str(key)

    def test_valid_cached_token_skips_browser_flow(self, tmp_path: Path) -> None:
        token = tmp_path / "token.json"
        token.write_text("{}", encoding="utf-8")
        cached = MagicMock(valid=True, expired=False)

        with (
            patch(
                "drivekit.backends.google.Credentials.from_authorized_user_file",
                return_value=cached,
            ),
            patch("drivekit.backends.google.InstalledAppFlow") as mock_flow,
        ):
            creds = GoogleAuth(token_path=token).authenticate()

        assert creds is cached
        mock_flow.from_client_secrets_file.assert_not_called()

    def test_expired_token_is_refreshed_and_saved(self, tmp_path: Path) -> None:
        token = tmp_path / "token.json"
        token.write_text("{}", encoding="utf-8")
        cached = MagicMock(valid=True, expired=True, refresh_token="r")
        cached.to_json.return_value = '{"refreshed": true}'

        with patch(
            "drivekit.backends.google.Credentials.from_authorized_user_file",
            return_value=cached,
        ):
            GoogleAuth(token_path=token).authenticate()

        cached.refresh.assert_called_once()
        assert token.read_text(encoding="utf-8") == '{"refreshed": true}'

    def test_no_token_runs_oauth_flow_and_caches_token(self, tmp_path: Path) -> None:
        secrets = tmp_path / "client_secret.json"
        secrets.write_text("{}", encoding="utf-8")
        token = tmp_path / "cache" / "token.json"

        with patch("drivekit.backends.google.InstalledAppFlow") as mock_flow:
            new_creds = mock_flow.from_client_secrets_file.return_value.run_local_server.return_value
            new_creds.to_json.return_value = '{"token": "t"}'

            creds = GoogleAuth(credentials_path=secrets, token_path=token).authenticate()

        assert creds is new_creds
        assert token.read_text(encoding="utf-8") == '{"token": "t"}'

    def test_nothing_configured_raises_authentication_error(self, tmp_path: Path) -> None:
        with pytest.raises(AuthenticationError, match="OAuth client secrets not found"):
            GoogleAuth(token_path=tmp_path / "token.json").authenticate()

    def test_bad_service_account_file_raises_authentication_error(self, tmp_path: Path) -> None:
        key = tmp_path / "sa.json"
        key.write_text("not json", encoding="utf-8")

        with patch(
            "drivekit.backends.google.service_account.Credentials.from_service_account_file",
            side_effect=ValueError("bad key"),
        ):
            with pytest.raises(AuthenticationError, match="bad key"):
                GoogleAuth(service_account_path=key).authenticate()


# endregion
