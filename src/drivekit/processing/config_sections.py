# config_sections.py
"""Parse INI-style text into {section: {key: value}}.

The format is the loose, hand-edited kind:
- `;` starts a comment line
- `[name]` starts (or resumes) a section
- `key = value` lines belong to the current section; the value may contain `=`

Nothing in here raises on bad input. A line we can't use is dropped, so a
broken file just yields fewer keys.
"""

from __future__ import annotations

import logging
import re
from enum import Enum

log = logging.getLogger("drivekit")

ConfigSections = dict[str, dict[str, str]]

COMMENT_PREFIX = ";"
_SECTION_HEADER = re.compile(r"^\[(.+)\]$")
_LINE_BREAK = re.compile(r"\r?\n")


# region Enums
class LineKind(Enum):
    """What a single stripped line is."""

    BLANK = "blank"
    COMMENT = "comment"
    SECTION = "section"
    ASSIGNMENT = "assignment"
    JUNK = "junk"  # no "=" and not a header


class ParserState(Enum):
    """Where the parser is in the document. There is no end state; input just runs out."""

    BEFORE_FIRST_SECTION = "before_first_section"
    IN_SECTION = "in_section"


# endregion


# region classify_line
def classify_line(line: str) -> LineKind:
    """Classify one line of the document (whitespace is stripped first)."""
    stripped = line.strip()
    if not stripped:
        return LineKind.BLANK
    if stripped.startswith(COMMENT_PREFIX):
        return LineKind.COMMENT
    if _SECTION_HEADER.match(stripped):
        return LineKind.SECTION
    if "=" in stripped:
        return LineKind.ASSIGNMENT
    return LineKind.JUNK


# endregion


# region parse_ini_sections
def parse_ini_sections(document: str) -> ConfigSections:
    """
    Parse the document into an insertion-ordered mapping of sections.

    A section header seen a second time resumes the first section's mapping;
    keys collected earlier stay. A repeated key inside a section keeps the
    last value. Lines before the first header are discarded.

    Example:
        >>> parse_ini_sections("[A]\\nk = v=w\\n")
        {'A': {'k': 'v=w'}}
    """
    sections: ConfigSections = {}
    if not document:
        return sections

    state = ParserState.BEFORE_FIRST_SECTION
    current: dict[str, str] | None = None
    skipped = 0

    for line in _LINE_BREAK.split(document):
        kind = classify_line(line)
        stripped = line.strip()

        if kind in (LineKind.BLANK, LineKind.COMMENT):
            continue

        if kind is LineKind.SECTION:
            header = _SECTION_HEADER.match(stripped)
            assert header is not None  # classify_line already matched it
            name = header.group(1)
            current = sections.setdefault(name, {})
            state = ParserState.IN_SECTION
            continue

        if state is ParserState.BEFORE_FIRST_SECTION or current is None:
            skipped += 1
            continue

        if kind is LineKind.JUNK:
            skipped += 1
            continue

        key, _, value = stripped.partition("=")
        current[key.strip()] = value.strip()

    if skipped:
        log.debug(f"Skipped {skipped} line(s) outside a section or without '='.")

    return sections


# endregion
