"""User directory structure creation and initialization.
Auto-creates ~/Documents/drivekit/ structure with a README and sample config.

On first run, this creates:
- ~/Documents/drivekit/
  ├── README.md           (explains what each folder is for)
  ├── configs/            (sample_config.toml, plus any saved settings)
  ├── drive/              (local drive mirror: folders and files named by ID)
  ├── workbook/           (local spreadsheet: one CSV file per sheet)
  ├── logs/               (drivekit.log lives here)
  └── manifests/          (one JSON record per pipeline run)

Safe to call repeatedly - won't overwrite existing user files.
"""

import logging
from pathlib import Path

from drivekit.internals.config.define_config import UserConfig
from drivekit.internals.paths import (
    user_base_dir,
    user_configs_dir,
    user_drive_dir,
    user_log_dir_path,
    user_manifests_dir,
    user_workbook_dir,
)

log = logging.getLogger("drivekit")

SAMPLE_CONFIG_NAME = "sample_config.toml"

README_TEXT = """# drivekit

This folder was created automatically the first time drivekit ran.

- `configs/` holds TOML settings files. `sample_config.toml` lists every setting
  with its default; copy it and pass the copy with `drivekit --config <file>`.
- `drive/` is the default local drive mirror. A folder named by a folder ID holds
  that folder's files; a file named by a file ID (any extension) is that file;
  `<id>.pptx` is the presentation with that ID.
- `workbook/` is the default local spreadsheet: one CSV file per sheet, named
  after the sheet. Input links are read from `Sheet1.csv` unless you pick
  another sheet.
- `logs/` holds `drivekit.log`.
- `manifests/` holds one JSON record per pipeline run.

Set DRIVEKIT_HOME to use a different folder.
"""


def ensure_user_scaffold() -> None:
    """
    Create the folder structure, README and sample config on first run.

    Safe to call every time - won't overwrite existing user files.
    """
    base = user_base_dir()

    # paths.py functions do the mkdir
    configs = user_configs_dir()
    user_drive_dir()
    user_workbook_dir()
    user_log_dir_path()
    user_manifests_dir()

    readme_path = base / "README.md"
    if not readme_path.exists():
        _create_readme(readme_path)
        log.info(f"Created new README at {readme_path}")

    _write_sample_config_if_missing(configs / SAMPLE_CONFIG_NAME)

    log.debug(f"User scaffold ready at {base}")


def _create_readme(path: Path) -> None:
    """Write a friendly README explaining the folder structure."""
    path.write_text(README_TEXT, encoding="utf-8")


def _write_sample_config_if_missing(path: Path) -> None:
    """Save a config holding every default value, for users to copy and edit."""
    if path.exists():
        log.debug(f"Sample config already exists (not overwriting): {path}")
        return

    UserConfig().save_toml(path)
    log.info(f"Wrote sample config: {path}")
