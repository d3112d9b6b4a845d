# config_table.py
"""Flatten parsed config sections into report rows."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from drivekit.models import ConfigTableRow


# region project_sections
def project_sections(
    sections: Mapping[str, Mapping[str, str]], keys: Sequence[str]
) -> list[ConfigTableRow]:
    """
    One row per (section, key), sections in insertion order, keys in the given order.

    A key the section doesn't have gets an empty value, so every section
    contributes exactly len(keys) rows.
    """
    return [
        ConfigTableRow(section_name, key, section.get(key, ""))
        for section_name, section in sections.items()
        for key in keys
    ]


# endregion


# region build_config_table
def build_config_table(
    sections: Mapping[str, Mapping[str, str]],
    keys: Sequence[str],
    header: Iterable[str] | None = None,
) -> list[tuple[str, ...]]:
    """Rows ready for a spreadsheet write: the optional header row, then the projected rows."""
    table: list[tuple[str, ...]] = []
    if header is not None:
        table.append(tuple(header))
    table.extend(tuple(row) for row in project_sections(sections, keys))
    return table


# endregion
