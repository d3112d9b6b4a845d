"""Cross-platform path resolution for user directories.

Uses platformdirs to find OS-appropriate locations for:
- Logs (where drivekit.log lives)
- Configs (saved TOML settings, including the sample config)
- Manifests (one JSON record per pipeline run)
- Drive (the default root of the local drive mirror backend)
- Workbook (the default folder of CSV sheets for the local backend)
"""

import os
from pathlib import Path

from platformdirs import (
    user_documents_dir,
)  # Gives us the "right" place for files on each OS

from drivekit.internals.constants import APP_NAME, HOME_ENV_VAR


# region user_base_dir
def user_base_dir() -> Path:
    """
    Base directory for all drivekit user files.

    DRIVEKIT_HOME overrides the location (handy for tests and CI).

    Returns:
        Path to ~/Documents/drivekit/ (or OS equivalent)

    Examples:
        Windows: C:/Users/YourName/Documents/drivekit/
        macOS: /Users/YourName/Documents/drivekit/
        Linux: /home/yourname/Documents/drivekit/
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        base = resolve_path(override)
    else:
        base = Path(user_documents_dir()) / APP_NAME
    base.mkdir(parents=True, exist_ok=True)
    return base


# endregion


# region user_log_dir_path
def user_log_dir_path() -> Path:
    """
    Directory for log files.

    Returns:
        Path to ~/Documents/drivekit/logs/
    """
    log_dir = user_base_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


# endregion


# region user_configs_dir
def user_configs_dir() -> Path:
    """
    Directory for saved configuration files.

    Returns:
        Path to ~/Documents/drivekit/configs/
    """
    configs_dir = user_base_dir() / "configs"
    configs_dir.mkdir(parents=True, exist_ok=True)
    return configs_dir


# endregion


# region user_manifests_dir
def user_manifests_dir() -> Path:
    """
    Directory for saved manifest files.

    Returns:
        Path to ~/Documents/drivekit/manifests/
    """
    manifests_dir = user_base_dir() / "manifests"
    manifests_dir.mkdir(parents=True, exist_ok=True)
    return manifests_dir


# endregion


# region user_drive_dir
def user_drive_dir() -> Path:
    """
    Default root of the local drive mirror (resources stored under their IDs).

    Returns:
        Path to ~/Documents/drivekit/drive/
    """
    drive_dir = user_base_dir() / "drive"
    drive_dir.mkdir(parents=True, exist_ok=True)
    return drive_dir


# endregion


# region user_workbook_dir
def user_workbook_dir() -> Path:
    """
    Default local workbook: a folder holding one CSV file per sheet.

    Returns:
        Path to ~/Documents/drivekit/workbook/
    """
    workbook_dir = user_base_dir() / "workbook"
    workbook_dir.mkdir(parents=True, exist_ok=True)
    return workbook_dir


# endregion


# region resolve_path
def resolve_path(raw: str) -> Path:
    """
    Expand ~ and ${VARS}; resolve to absolute path.

    Relative paths resolve relative to current working directory.
    """
    expanded = os.path.expandvars(raw)
    return Path(expanded).expanduser().resolve()


# endregion


# region normalize_path
def normalize_path(path_str: str | None) -> str | None:
    """
    Normalize path separators to forward slashes for cross-platform compatibility.

    Forward slashes work on all platforms (Windows, Mac, Linux) and avoid
    TOML escape sequence issues with backslashes.
    """
    return path_str.replace("\\", "/") if path_str else None


# endregion
