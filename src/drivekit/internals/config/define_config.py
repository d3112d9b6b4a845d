# internals/config/define_config.py
"""User configuration dataclass and validation."""

# region imports
from __future__ import annotations

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # Python 3.10

import tomli_w  # For writing (no stdlib equivalent yet)

import logging
import os
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from drivekit.collaborators import parse_a1
from drivekit.internals import constants
from drivekit.internals.paths import (
    normalize_path,
    user_base_dir,
    user_drive_dir,
    user_workbook_dir,
)

log = logging.getLogger("drivekit")
# endregion


# region Enums
class PipelineKind(Enum):
    """Which pipeline to run."""

    IMAGES_TO_DECK = "images-to-deck"
    CONFIG_REPORT = "config-report"


class Backend(Enum):
    """Where folders, files, workbooks and decks live."""

    LOCAL = "local"  # a drive mirror folder + CSV workbook + pptx files
    GOOGLE = "google"  # Drive, Sheets, and Slides via the Google APIs


# endregion

_PATH_FIELDS = (
    "drive_root",
    "credentials_path",
    "token_path",
    "service_account_path",
)
_CELL_FIELDS = ("folder_cell", "presentation_cell", "ini_cell")
_OPTIONAL_STR_FIELDS = (
    "spreadsheet",
    "input_sheet",
    "folder_url",
    "presentation_url",
    "ini_url",
) + _PATH_FIELDS


# region class UserConfig
@dataclass
class UserConfig:
    """All user-configurable settings for drivekit."""

    # region define fields
    pipeline: PipelineKind = PipelineKind.IMAGES_TO_DECK
    backend: Backend = Backend.LOCAL

    # Local backend: folder whose entries are named by resource ID. None -> ~/Documents/drivekit/drive
    drive_root: Optional[str] = None

    # The spreadsheet holding the input links (and receiving the report).
    # Local backend: a folder of CSV sheets. Google backend: a Sheets URL or ID.
    spreadsheet: Optional[str] = None
    input_sheet: Optional[str] = None  # None means the first sheet

    # Direct inputs. When unset, the URL is read from the matching cell of the input sheet.
    folder_url: Optional[str] = None
    presentation_url: Optional[str] = None
    ini_url: Optional[str] = None

    folder_cell: str = "A1"
    presentation_cell: str = "A2"
    ini_cell: str = "A1"

    image_mime_type: str = constants.PNG_MIME_TYPE

    # config-report output
    report_sheet: str = constants.DEFAULT_REPORT_SHEET
    report_keys: list[str] = field(
        default_factory=lambda: list(constants.DEFAULT_REPORT_KEYS)
    )
    report_header: list[str] = field(
        default_factory=lambda: list(constants.DEFAULT_REPORT_HEADER)
    )

    # Google backend credentials
    credentials_path: Optional[str] = None  # OAuth client secrets JSON
    token_path: Optional[str] = None  # cached user token; None -> ~/Documents/drivekit/token.json
    service_account_path: Optional[str] = None  # if set, used instead of OAuth

    # endregion

    # region path getters
    def _resolve_path(self, raw: str) -> Path:
        """Expand ~ and ${VARS}; relative paths resolve against the user base dir."""
        p = Path(os.path.expandvars(raw)).expanduser()

        if p.is_absolute():
            return p.resolve()

        return (user_base_dir() / p).resolve()

    def _make_path_relative(self, path_str: str | None) -> str | None:
        """Paths under the user base dir are saved relative to it; others stay absolute. Forward slashes either way."""
        if path_str is None:
            return None

        abs_path = self._resolve_path(path_str)
        base = user_base_dir()

        try:
            return normalize_path(str(abs_path.relative_to(base)))
        except ValueError:
            return normalize_path(str(abs_path))

    def get_drive_root(self) -> Path:
        """Local drive mirror root, with fallback to the default user folder."""
        if self.drive_root:
            return self._resolve_path(self.drive_root)
        return user_drive_dir()

    def get_workbook_dir(self) -> Path:
        """Local CSV workbook folder, with fallback to the default user folder."""
        if self.spreadsheet:
            return self._resolve_path(self.spreadsheet)
        return user_workbook_dir()

    def get_credentials_path(self) -> Path | None:
        return self._resolve_path(self.credentials_path) if self.credentials_path else None

    def get_token_path(self) -> Path:
        if self.token_path:
            return self._resolve_path(self.token_path)
        return user_base_dir() / "token.json"

    def get_service_account_path(self) -> Path | None:
        if self.service_account_path:
            return self._resolve_path(self.service_account_path)
        return None

    # endregion

    # region from_toml
    @classmethod
    def from_toml(cls, path: Path) -> UserConfig:
        """
        Load configuration from a TOML file.

        The TOML file should have flat key-value pairs matching the UserConfig field names.

        Example TOML:
            pipeline = "config-report"
            backend = "google"
            spreadsheet = "https://docs.google.com/spreadsheets/d/1AbC.../edit"
            report_sheet = "DC2DC Level"

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If TOML is invalid, has unknown keys, or contains invalid enum values
        """
        if not path.exists():
            log.error(f"Config file not found: {path}")
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            error_msg = f"Invalid TOML syntax in {path}"
            log.error(error_msg)
            raise ValueError(error_msg) from e

        if not data:
            log.warning(f"Config toml file is empty: {path}. Using all defaults.")

        known = {f for f in cls.__dataclass_fields__}
        unknown = set(data) - known
        if unknown:
            error_msg = f"Unknown setting(s) in {path}: {sorted(unknown)}"
            log.error(error_msg)
            raise ValueError(error_msg)

        if "pipeline" in data:
            data["pipeline"] = _enum_from_value(PipelineKind, "pipeline", data["pipeline"])
        if "backend" in data:
            data["backend"] = _enum_from_value(Backend, "backend", data["backend"])

        return cls(**data)

    # endregion

    # region save_toml
    def save_toml(self, path: Path) -> None:
        """Save configuration to a TOML file. None values are left out (TOML has no null)."""
        path = Path(path)

        if path.exists() and path.is_dir():
            error_msg = f"Cannot save config: path is a directory, not a file: {path}."
            log.error(error_msg)
            raise ValueError(error_msg)

        path.parent.mkdir(parents=True, exist_ok=True)

        data = {k: v for k, v in self.config_to_dict().items() if v is not None}
        for name in _PATH_FIELDS:
            if name in data:
                data[name] = self._make_path_relative(data[name])

        try:
            with open(path, "wb") as f:
                tomli_w.dump(data, f)
        except PermissionError as e:
            error_msg = f"Permission denied writing to: {path}"
            log.error(error_msg)
            raise PermissionError(error_msg) from e
        except OSError as e:
            error_msg = f"Failed to write config file to {path}"
            log.error(error_msg)
            raise OSError(error_msg) from e

    # endregion

    # region config_to_dict
    def config_to_dict(self) -> dict[str, Any]:
        """Plain dict of all fields with enums as their string values (for TOML and manifests)."""
        data = asdict(self)
        data["pipeline"] = self.pipeline.value
        data["backend"] = self.backend.value
        return data

    # endregion

    # region validate
    def validate(self) -> None:
        """
        Validate intrinsic config values (no filesystem or network access).

        Raises:
            ValueError: On a wrong type, an empty string where None is expected,
                a malformed cell reference, or an empty report key list.
        """
        if not isinstance(self.pipeline, PipelineKind):
            raise ValueError(
                f"pipeline must be a PipelineKind enum, got {type(self.pipeline).__name__}. "
                f"Valid values: {[e.value for e in PipelineKind]}"
            )
        if not isinstance(self.backend, Backend):
            raise ValueError(
                f"backend must be a Backend enum, got {type(self.backend).__name__}. "
                f"Valid values: {[e.value for e in Backend]}"
            )

        for field_name in _OPTIONAL_STR_FIELDS:
            val = getattr(self, field_name)
            if val is None:
                continue
            if not isinstance(val, str):
                raise ValueError(
                    f"{field_name} must be a string, got {type(val).__name__}"
                )
            if field_name in _PATH_FIELDS and val == "":
                raise ValueError(
                    f"{field_name} cannot be empty string; use None for default"
                )

        for field_name in _CELL_FIELDS:
            parse_a1(getattr(self, field_name))  # raises ValueError with a helpful message

        if not self.image_mime_type or not isinstance(self.image_mime_type, str):
            raise ValueError("image_mime_type must be a non-empty string")

        if not isinstance(self.report_sheet, str) or not self.report_sheet.strip():
            raise ValueError("report_sheet must be a non-empty string")

        for list_name in ("report_keys", "report_header"):
            values = getattr(self, list_name)
            if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
                raise ValueError(f"{list_name} must be a list of strings")

        if not self.report_keys:
            raise ValueError("report_keys cannot be empty; there would be nothing to report")

    # endregion

    # region validate_pipeline_requirements
    def validate_pipeline_requirements(self) -> None:
        """
        Validate external state needed by the selected backend, right before a run.

        Local: the drive root must be an existing folder; the workbook path, if it
        exists, must be a folder. Google: some credential file must be present.
        """
        if self.backend == Backend.LOCAL:
            drive_root = self.get_drive_root()
            if not drive_root.exists():
                raise FileNotFoundError(f"Drive folder not found: {drive_root}")
            if not drive_root.is_dir():
                raise ValueError(f"Drive path is not a folder: {drive_root}")

            workbook = self.get_workbook_dir()
            if workbook.exists() and not workbook.is_dir():
                raise ValueError(f"Workbook path exists but is not a folder: {workbook}")
            return

        # The report always writes to a spreadsheet; the deck pipeline only reads
        # cells from one when its URLs weren't given directly.
        needs_spreadsheet = self.pipeline == PipelineKind.CONFIG_REPORT or not (
            self.folder_url and self.presentation_url
        )
        if needs_spreadsheet and not self.spreadsheet:
            raise ValueError(
                "No spreadsheet specified. Set spreadsheet to a Google Sheets URL or ID."
            )

        service_account = self.get_service_account_path()
        if service_account is not None:
            if not service_account.is_file():
                raise FileNotFoundError(f"Service account file not found: {service_account}")
            return

        credentials = self.get_credentials_path()
        if credentials is None and not self.get_token_path().is_file():
            raise ValueError(
                "No Google credentials configured. Set credentials_path (OAuth client secrets) "
                "or service_account_path."
            )
        if credentials is not None and not credentials.is_file():
            raise FileNotFoundError(f"OAuth client secrets file not found: {credentials}")

    # endregion


# endregion


# region _enum_from_value
def _enum_from_value(enum_cls: type[Enum], field_name: str, raw: Any) -> Any:
    """Convert a TOML/CLI string into an enum member with a readable error."""
    try:
        return enum_cls(str(raw).strip().lower())
    except ValueError as e:
        error_msg = (
            f"Invalid {field_name}: '{raw}'. "
            f"Valid options: {[member.value for member in enum_cls]}"
        )
        log.error(error_msg)
        raise ValueError(error_msg) from e


# endregion
