"""Route program flow to the selected pipeline, and own the one error boundary around it."""

import logging
from typing import Optional

from drivekit.backends.factory import Collaborators, build_collaborators
from drivekit.collaborators import LogNotifier, Notifier
from drivekit.errors import DrivekitError, PipelineInputError
from drivekit.internals import constants
from drivekit.internals.config.define_config import PipelineKind, UserConfig
from drivekit.internals.manifest import RunManifest
from drivekit.internals.run_context import (
    get_pipeline_run_id,
    get_session_id,
    start_pipeline_run,
)
from drivekit.models import OutcomeStatus, PipelineOutcome
from drivekit.pipelines.config_report import run_config_report
from drivekit.pipelines.images_to_deck import run_images_to_deck

log = logging.getLogger("drivekit")


# region run_pipeline
def run_pipeline(
    cfg: UserConfig,
    collaborators: Optional[Collaborators] = None,
    notifier: Optional[Notifier] = None,
) -> PipelineOutcome:
    """
    Run the pipeline named by cfg.pipeline and report the result to the user.

    Input problems (empty cell, unusable link) end the run with INVALID_INPUT.
    Any other exception raised inside the run is logged with its traceback
    and ends it with FAILED; nothing is retried. Either way the user gets
    exactly one notifier message, and the outcome is returned, not raised.

    Config errors are not caught here: cfg is validated before the run starts.
    """
    notifier = notifier or LogNotifier()

    cfg.validate()
    if collaborators is None:
        cfg.validate_pipeline_requirements()

    pipeline_id = start_pipeline_run()
    log.info(f"Initializing pipeline run. [pipeline:{pipeline_id}]")

    run_manifest = RunManifest(cfg, run_id=pipeline_id)
    run_manifest.start()

    log_pipeline_info(cfg)

    try:
        if collaborators is None:
            collaborators = build_collaborators(cfg)
        outcome = _dispatch(cfg, collaborators)
    except PipelineInputError as e:
        log.warning(f"{e.message} [pipeline:{pipeline_id}]")
        outcome = PipelineOutcome(
            pipeline=cfg.pipeline.value,
            status=OutcomeStatus.INVALID_INPUT,
            message=e.message,
        )
    except Exception as e:
        log.exception(f"Pipeline failed. [pipeline:{pipeline_id}]")  # full traceback
        run_manifest.fail(e)
        detail = e.message if isinstance(e, DrivekitError) else str(e)
        outcome = PipelineOutcome(
            pipeline=cfg.pipeline.value,
            status=OutcomeStatus.FAILED,
            message=constants.MSG_UNEXPECTED_ERROR.format(error=detail),
        )
        notifier.alert(outcome.message)
        return outcome

    run_manifest.complete(outcome)
    notifier.alert(outcome.message)
    return outcome


# endregion


# region _dispatch
def _dispatch(cfg: UserConfig, collaborators: Collaborators) -> PipelineOutcome:
    if cfg.pipeline == PipelineKind.IMAGES_TO_DECK:
        return run_images_to_deck(
            cfg, collaborators.workbook, collaborators.folders, collaborators.decks
        )
    elif cfg.pipeline == PipelineKind.CONFIG_REPORT:
        return run_config_report(cfg, collaborators.workbook, collaborators.files)
    else:
        raise ValueError(f"Unknown pipeline: {cfg.pipeline}")


# endregion


# region log_pipeline_info
def log_pipeline_info(cfg: UserConfig) -> None:
    """Print this pipeline run's run ID, session ID, and general config info to the log."""
    log.info("=== Pipeline Run Started ===")
    log.info(f"Run ID: {get_pipeline_run_id()}")
    log.info(f"Session ID: {get_session_id()}")
    log.info(f"Pipeline: {cfg.pipeline.value}")
    log.info(f"Backend: {cfg.backend.value}")
    log.debug(f"Configuration: {cfg}")


# endregion
