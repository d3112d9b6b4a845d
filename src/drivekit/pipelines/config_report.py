# config_report.py
"""INI file to spreadsheet report pipeline."""

import logging
from typing import Optional

from drivekit.collaborators import FileSource, Workbook
from drivekit.errors import IdentifierNotFoundError, InputMissingError
from drivekit.identifiers import extract_drive_file_id
from drivekit.internals import constants
from drivekit.internals.config.define_config import PipelineKind, UserConfig
from drivekit.internals.run_context import get_pipeline_run_id
from drivekit.models import OutcomeStatus, PipelineOutcome
from drivekit.pipelines.inputs import read_input
from drivekit.processing.config_sections import parse_ini_sections
from drivekit.processing.config_table import build_config_table
from drivekit.utils import preview

log = logging.getLogger("drivekit")


def run_config_report(
    cfg: UserConfig,
    workbook: Optional[Workbook],
    files: FileSource,
) -> PipelineOutcome:
    """
    Download the ini file, pick cfg.report_keys out of every section, and write the table.

    The report sheet is always rewritten, even when the file has no sections
    (it then holds only the header row).

    Raises:
        InputMissingError: The ini link is empty, or there is no workbook to write to.
        IdentifierNotFoundError: The link has no recognizable file ID.
    """
    pipeline_id = get_pipeline_run_id()
    log.info(f"Starting config-report pipeline. [pipeline:{pipeline_id}]")

    ini_url = read_input(cfg.ini_url, workbook, cfg.ini_cell, cfg.input_sheet)
    if not ini_url:
        raise InputMissingError(constants.MSG_INI_INPUT_MISSING.format(cell=cfg.ini_cell))

    file_id = extract_drive_file_id(ini_url)
    if not file_id:
        raise IdentifierNotFoundError(
            constants.MSG_INVALID_INI_URL.format(cell=cfg.ini_cell), slot="ini", url=ini_url
        )

    if workbook is None:
        raise InputMissingError("No spreadsheet configured to write the report to.")

    text = file_source_text(files, file_id)
    sections = parse_ini_sections(text)
    log.info(f"Parsed {len(sections)} section(s) from file {file_id}. [pipeline:{pipeline_id}]")

    rows = build_config_table(sections, cfg.report_keys, header=cfg.report_header)
    workbook.write_table(cfg.report_sheet, rows)

    data_rows = len(rows) - 1
    if not sections:
        return PipelineOutcome(
            pipeline=PipelineKind.CONFIG_REPORT.value,
            status=OutcomeStatus.NO_ITEMS,
            message=constants.MSG_NO_SECTIONS.format(sheet=cfg.report_sheet),
            count=0,
            target=cfg.report_sheet,
        )

    log.info(f"config-report pipeline complete [pipeline:{pipeline_id}]")
    return PipelineOutcome(
        pipeline=PipelineKind.CONFIG_REPORT.value,
        status=OutcomeStatus.SUCCESS,
        message=constants.MSG_REPORT_WRITTEN.format(
            count=data_rows, sections=len(sections), sheet=cfg.report_sheet
        ),
        count=data_rows,
        target=cfg.report_sheet,
    )


def file_source_text(files: FileSource, file_id: str) -> str:
    """Fetch the file and log a short preview of it."""
    text = files.get_file_text(file_id)
    first_line = next((line for line in text.splitlines() if line.strip()), "")
    log.debug(f"File {file_id}: {len(text)} characters, begins with: {preview(first_line)}")
    return text
