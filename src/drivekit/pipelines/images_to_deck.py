# images_to_deck.py
"""Drive folder images to slides pipeline."""

import logging
from typing import Optional

from drivekit.collaborators import DeckOpener, FolderSource, Workbook
from drivekit.errors import IdentifierNotFoundError, InputMissingError
from drivekit.identifiers import extract_id
from drivekit.internals import constants
from drivekit.internals.config.define_config import PipelineKind, UserConfig
from drivekit.internals.run_context import get_pipeline_run_id
from drivekit.models import OutcomeStatus, PipelineOutcome
from drivekit.pipelines.inputs import read_input
from drivekit.processing.image_layout import centered_position, sort_images

log = logging.getLogger("drivekit")


def run_images_to_deck(
    cfg: UserConfig,
    workbook: Optional[Workbook],
    folders: FolderSource,
    decks: DeckOpener,
) -> PipelineOutcome:
    """
    Append one blank slide per image in the folder, each image centered at native size.

    Images go in file-name collation order. The deck is only committed when at
    least one image was placed.

    Raises:
        InputMissingError: Folder or presentation link is empty.
        IdentifierNotFoundError: A link has no recognizable ID.
    """
    pipeline_id = get_pipeline_run_id()
    log.info(f"Starting images-to-deck pipeline. [pipeline:{pipeline_id}]")

    folder_url = read_input(cfg.folder_url, workbook, cfg.folder_cell, cfg.input_sheet)
    presentation_url = read_input(
        cfg.presentation_url, workbook, cfg.presentation_cell, cfg.input_sheet
    )

    if not folder_url or not presentation_url:
        raise InputMissingError(
            constants.MSG_DECK_INPUTS_MISSING.format(
                folder_cell=cfg.folder_cell, presentation_cell=cfg.presentation_cell
            )
        )

    folder_id = extract_id(folder_url)
    if not folder_id:
        raise IdentifierNotFoundError(
            constants.MSG_INVALID_FOLDER_URL.format(cell=cfg.folder_cell),
            slot="folder",
            url=folder_url,
        )

    presentation_id = extract_id(presentation_url)
    if not presentation_id:
        raise IdentifierNotFoundError(
            constants.MSG_INVALID_PRESENTATION_URL.format(cell=cfg.presentation_cell),
            slot="presentation",
            url=presentation_url,
        )

    log.info(f"Folder: {folder_id}  Presentation: {presentation_id} [pipeline:{pipeline_id}]")

    images = sort_images(folders.list_files_by_type(folder_id, cfg.image_mime_type))
    deck = decks.open_deck(presentation_id)

    image_count = 0
    for image in images:
        slide = deck.append_blank_slide()
        placed = slide.insert_image(image.content)

        left, top = centered_position(
            deck.page_width, deck.page_height, placed.width, placed.height
        )
        placed.set_position(left, top)

        image_count += 1
        log.info(f"Inserted image: {image.name}")

    if image_count == 0:
        log.info(f"{constants.MSG_NO_IMAGES} [pipeline:{pipeline_id}]")
        return PipelineOutcome(
            pipeline=PipelineKind.IMAGES_TO_DECK.value,
            status=OutcomeStatus.NO_ITEMS,
            message=constants.MSG_NO_IMAGES,
            count=0,
            target=presentation_id,
        )

    deck.commit()

    message = constants.MSG_IMAGES_INSERTED.format(count=image_count)
    log.info(f"images-to-deck pipeline complete [pipeline:{pipeline_id}]")
    return PipelineOutcome(
        pipeline=PipelineKind.IMAGES_TO_DECK.value,
        status=OutcomeStatus.SUCCESS,
        message=message,
        count=image_count,
        target=presentation_id,
    )
