"""Pull Drive/Slides/Sheets resource IDs out of shareable URLs.

Two extractors with deliberately different rules:

- extract_id(): ordered URL-shape patterns, then a low-confidence fallback on
  the last path segment. Used for folder and presentation links.
- extract_drive_file_id(): the first long run of ID characters anywhere in the
  string. Used for plain file links.

Both return None instead of raising; callers decide what a miss means.
"""

from __future__ import annotations

import logging
import re

from drivekit.internals.constants import FILE_ID_MIN_LENGTH, ID_FALLBACK_MIN_LENGTH

log = logging.getLogger("drivekit")

ID_CHARS = r"[A-Za-z0-9_-]"

# Order matters: the first pattern that matches wins.
ID_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("edit_link", re.compile(rf"/d/({ID_CHARS}+)/")),  # /d/ID/edit
    ("file_link", re.compile(rf"/file/d/({ID_CHARS}+)/")),  # /file/d/ID/view
    ("id_param", re.compile(rf"[?&]id=({ID_CHARS}+)")),  # open?id=ID
    ("folder_link", re.compile(rf"/folders/({ID_CHARS}+)")),  # /drive/folders/ID
    ("presentation_link", re.compile(rf"/presentation/d/({ID_CHARS}+)/")),
)

_FULL_ID = re.compile(rf"{ID_CHARS}+")
_FILE_ID_RUN = re.compile(rf"{ID_CHARS}{{{FILE_ID_MIN_LENGTH},}}")


# region extract_id
def extract_id(url: str | None) -> str | None:
    """
    Return the resource ID embedded in a Drive, Slides, or Sheets URL, or None.

    Tries the patterns in ID_PATTERNS in order. If none match and the input has
    at least one "/", falls back to the final path segment (query string
    removed), accepted only when it is made of ID characters and is longer than
    20 characters. The fallback can be fooled by a long slug and will miss a
    short real ID; Drive IDs are long enough in practice.
    """
    if not isinstance(url, str) or not url:
        return None

    for rule_name, pattern in ID_PATTERNS:
        match = pattern.search(url)
        if match and match.group(1):
            log.debug(f"Matched {rule_name} rule for {url}")
            return match.group(1)

    if "/" in url:
        candidate = url.split("/")[-1].split("?")[0]
        if _FULL_ID.fullmatch(candidate) and len(candidate) >= ID_FALLBACK_MIN_LENGTH:
            log.debug(f"Using last path segment of {url} as its ID")
            return candidate

    return None


# endregion


# region extract_drive_file_id
def extract_drive_file_id(url: str | None) -> str | None:
    """Return the first run of 25+ ID characters in the URL, or None."""
    if not isinstance(url, str):
        return None
    match = _FILE_ID_RUN.search(url)
    return match.group(0) if match else None


# endregion
