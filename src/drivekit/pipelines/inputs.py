"""Resolve a pipeline's input link from the config or from a spreadsheet cell."""

import logging
from typing import Optional

from drivekit.collaborators import Workbook, parse_a1

log = logging.getLogger("drivekit")


def read_input(
    explicit: Optional[str],
    workbook: Optional[Workbook],
    cell: str,
    sheet: Optional[str] = None,
) -> str:
    """
    Return the explicit value if set, else the stripped contents of `cell`.

    Returns "" when neither source has a value; the caller decides whether
    that is an error.
    """
    if explicit and explicit.strip():
        return explicit.strip()

    if workbook is None:
        log.debug(f"No value given and no workbook to read cell {cell} from.")
        return ""

    row, col = parse_a1(cell)
    value = workbook.read_cell(row, col, sheet)
    log.debug(f"Read cell {cell} of sheet {sheet or '<first>'}: {value!r}")
    return (value or "").strip()
