# google.py
"""
Google backend: Drive v3 for folders and files, Sheets v4 for the workbook,
and Slides decks edited as pptx (export from Drive, edit with python-pptx,
upload the new content back to the same file).

Every googleapiclient HttpError is turned into a CollaboratorError (or
ResourceNotFoundError for 404s) so the orchestrator reports it once.
"""
# mypy: disable-error-code="import-untyped"

from __future__ import annotations

import io
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional, Sequence

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseDownload, MediaIoBaseUpload
from pptx import presentation

from drivekit.backends.local import PptxDeck, load_presentation
from drivekit.collaborators import a1_ref
from drivekit.errors import (
    AuthenticationError,
    CollaboratorError,
    ResourceNotFoundError,
)
from drivekit.internals import constants
from drivekit.internals.run_context import get_pipeline_run_id
from drivekit.models import ImageResource

log = logging.getLogger("drivekit")

SCOPES = [
    "https://www.googleapis.com/auth/drive",  # list, download, export, and update files
    "https://www.googleapis.com/auth/spreadsheets",
]


# region GoogleAuth
class GoogleAuth:
    """
    Obtain credentials for the Drive and Sheets APIs.

    A service account key wins if one is given. Otherwise a cached user token
    is loaded (and refreshed when expired), and the installed-app OAuth flow
    runs in the browser only when there is no usable token.
    """

    def __init__(
        self,
        credentials_path: Optional[Path] = None,
        token_path: Optional[Path] = None,
        service_account_path: Optional[Path] = None,
        scopes: Optional[list[str]] = None,
    ) -> None:
        self.credentials_path = credentials_path
        self.token_path = token_path or Path("token.json")
        self.service_account_path = service_account_path
        self.scopes = scopes or SCOPES

    def authenticate(self) -> Any:
        """
        Return valid credentials.

        Raises:
            AuthenticationError: If no credentials can be obtained.
        """
        try:
            if self.service_account_path is not None:
                creds = service_account.Credentials.from_service_account_file(
                    str(self.service_account_path), scopes=self.scopes
                )
                log.info("Authenticated with service account")
                return creds

            creds = self._load_token()
            if creds and creds.expired and creds.refresh_token:
                log.info("Refreshing expired token")
                creds.refresh(Request())
                self._save_token(creds)

            if not creds or not creds.valid:
                creds = self._run_oauth_flow()
                self._save_token(creds)

            log.info("Authenticated with Google")
            return creds
        except AuthenticationError:
            raise
        except (GoogleAuthError, OSError, ValueError) as e:
            log.error(f"Authentication failed: {e}")
            raise AuthenticationError(f"Failed to authenticate: {e}") from e

    def _load_token(self) -> Optional[Credentials]:
        if not self.token_path.exists():
            return None
        try:
            log.debug(f"Loading token from {self.token_path}")
            return Credentials.from_authorized_user_file(str(self.token_path), self.scopes)
        except ValueError as e:
            log.warning(f"Ignoring unreadable token file {self.token_path}: {e}")
            return None

    def _run_oauth_flow(self) -> Credentials:
        if self.credentials_path is None or not self.credentials_path.exists():
            raise AuthenticationError(
                f"OAuth client secrets not found: {self.credentials_path}. "
                "Download OAuth credentials from the Google Cloud Console and set credentials_path."
            )
        log.info("Running OAuth2 flow in the browser")
        flow = InstalledAppFlow.from_client_secrets_file(str(self.credentials_path), self.scopes)
        return flow.run_local_server(
            port=0,
            authorization_prompt_message="Opening browser for Google authentication...",
            success_message="Authentication successful! You can close this window.",
            open_browser=True,
        )

    def _save_token(self, creds: Credentials) -> None:
        log.debug(f"Saving token to {self.token_path}")
        self.token_path.parent.mkdir(parents=True, exist_ok=True)
        self.token_path.write_text(creds.to_json(), encoding="utf-8")


def build_service(api: str, version: str, credentials: Any) -> Any:
    """Build a googleapiclient service without the on-disk discovery cache."""
    try:
        return build(api, version, credentials=credentials, cache_discovery=False)
    except HttpError as e:
        raise CollaboratorError(f"Failed to connect to the {api} API: {e}") from e


# endregion


# region error translation
@contextmanager
def google_call(kind: str, resource_id: str) -> Iterator[None]:
    """Translate HttpError raised inside the block into drivekit errors."""
    try:
        yield
    except HttpError as e:
        status = getattr(e.resp, "status", None)
        log.error(
            f"{kind} request for {resource_id} failed with HTTP {status} [pipeline:{get_pipeline_run_id()}]: {e}"
        )
        if status == 404:
            raise ResourceNotFoundError(kind, resource_id) from e
        raise CollaboratorError(
            f"{kind} request failed (HTTP {status}): {e}",
            {"resource_id": resource_id, "status": status},
        ) from e


# endregion


# region DriveService
class DriveService:
    """FolderSource and FileSource over the Drive v3 API."""

    def __init__(self, service: Any, page_size: int = 100) -> None:
        self.service = service
        self.page_size = page_size

    def _list(self, query: str, folder_id: str) -> list[dict[str, Any]]:
        files: list[dict[str, Any]] = []
        page_token = None
        with google_call("Folder", folder_id):
            while True:
                response = (
                    self.service.files()
                    .list(
                        q=query,
                        pageSize=self.page_size,
                        pageToken=page_token,
                        fields="nextPageToken, files(id, name, mimeType)",
                        supportsAllDrives=True,
                        includeItemsFromAllDrives=True,
                    )
                    .execute()
                )
                files.extend(response.get("files", []))
                page_token = response.get("nextPageToken")
                if not page_token:
                    break
        return files

    def _download(self, request: Any) -> bytes:
        buffer = io.BytesIO()
        downloader = MediaIoBaseDownload(buffer, request)
        done = False
        while not done:
            _, done = downloader.next_chunk()
        return buffer.getvalue()

    def download_bytes(self, file_id: str) -> bytes:
        with google_call("File", file_id):
            return self._download(
                self.service.files().get_media(fileId=file_id, supportsAllDrives=True)
            )

    def export_bytes(self, file_id: str, mime_type: str) -> bytes:
        """Export a Google Workspace file (e.g. Slides) in another format."""
        with google_call("File", file_id):
            return self._download(
                self.service.files().export_media(fileId=file_id, mimeType=mime_type)
            )

    def update_content(self, file_id: str, data: bytes, mime_type: str) -> None:
        """Replace a file's content with data."""
        media = MediaIoBaseUpload(io.BytesIO(data), mimetype=mime_type, resumable=True)
        with google_call("File", file_id):
            self.service.files().update(
                fileId=file_id, media_body=media, supportsAllDrives=True
            ).execute()

    def list_files_by_type(self, folder_id: str, mime_type: str) -> list[ImageResource]:
        """Download every non-trashed file of mime_type directly inside the folder. Unsorted."""
        query = (
            f"'{folder_id}' in parents and mimeType = '{mime_type}' and trashed = false"
        )
        listed = self._list(query, folder_id)
        log.info(
            f"Found {len(listed)} file(s) of type {mime_type} in folder {folder_id}. [pipeline:{get_pipeline_run_id()}]"
        )
        return [
            ImageResource(name=item["name"], content=self.download_bytes(item["id"]))
            for item in listed
        ]

    def get_file_text(self, file_id: str) -> str:
        data = self.download_bytes(file_id)
        return data.decode("utf-8-sig", errors="replace")


# endregion


# region SheetsWorkbook
def quote_sheet_name(name: str) -> str:
    """Quote a sheet title for A1 ranges: 'It''s here'."""
    return "'" + name.replace("'", "''") + "'"


class SheetsWorkbook:
    """Workbook over a Google Sheets spreadsheet (Sheets v4)."""

    def __init__(self, service: Any, spreadsheet_id: str) -> None:
        self.service = service
        self.spreadsheet_id = spreadsheet_id

    def sheet_titles(self) -> list[str]:
        with google_call("Spreadsheet", self.spreadsheet_id):
            meta = (
                self.service.spreadsheets()
                .get(spreadsheetId=self.spreadsheet_id, fields="sheets.properties.title")
                .execute()
            )
        return [sheet["properties"]["title"] for sheet in meta.get("sheets", [])]

    def read_cell(self, row: int, col: int, sheet: str | None = None) -> str:
        if sheet is None:
            titles = self.sheet_titles()
            if not titles:
                raise ResourceNotFoundError("Sheet", self.spreadsheet_id)
            sheet = titles[0]

        cell_range = f"{quote_sheet_name(sheet)}!{a1_ref(row, col)}"
        with google_call("Spreadsheet", self.spreadsheet_id):
            result = (
                self.service.spreadsheets()
                .values()
                .get(spreadsheetId=self.spreadsheet_id, range=cell_range)
                .execute()
            )
        values = result.get("values", [])
        if not values or not values[0]:
            return ""
        return str(values[0][0])

    def write_table(self, sheet_name: str, rows: Sequence[Sequence[str]]) -> None:
        """Add the sheet if missing, clear it, then write rows from A1 as raw values."""
        sheets = self.service.spreadsheets()
        if sheet_name not in self.sheet_titles():
            log.info(f"Adding sheet '{sheet_name}' to spreadsheet {self.spreadsheet_id}")
            with google_call("Spreadsheet", self.spreadsheet_id):
                sheets.batchUpdate(
                    spreadsheetId=self.spreadsheet_id,
                    body={"requests": [{"addSheet": {"properties": {"title": sheet_name}}}]},
                ).execute()

        quoted = quote_sheet_name(sheet_name)
        with google_call("Spreadsheet", self.spreadsheet_id):
            sheets.values().clear(
                spreadsheetId=self.spreadsheet_id, range=quoted, body={}
            ).execute()
            if rows:
                sheets.values().update(
                    spreadsheetId=self.spreadsheet_id,
                    range=f"{quoted}!A1",
                    valueInputOption="RAW",
                    body={"values": [list(row) for row in rows]},
                ).execute()

        log.info(
            f"Wrote {len(rows)} rows to sheet '{sheet_name}'. [pipeline:{get_pipeline_run_id()}]"
        )


# endregion


# region DrivePptxDeckOpener
class DrivePptxDeckOpener:
    """
    DeckOpener for Google Slides files.

    The presentation is exported as pptx, edited in memory with python-pptx,
    and on commit uploaded back as the file's new content.
    """

    def __init__(self, drive: DriveService) -> None:
        self.drive = drive

    def open_deck(self, presentation_id: str) -> PptxDeck:
        data = self.drive.export_bytes(presentation_id, constants.PPTX_MIME_TYPE)
        prs = load_presentation(io.BytesIO(data), presentation_id)
        log.info(f"Exported presentation {presentation_id} ({len(prs.slides)} existing slides).")

        def save(prs: presentation.Presentation) -> None:
            buffer = io.BytesIO()
            prs.save(buffer)
            self.drive.update_content(presentation_id, buffer.getvalue(), constants.PPTX_MIME_TYPE)

        return PptxDeck(prs, save, name=f"presentation {presentation_id}")


# endregion
