"""Process-global execution context.

Two tracking IDs tag every log line and manifest:
- session_id: one per CLI invocation
- pipeline_run_id: fresh for each pipeline execution
"""

from __future__ import annotations

import logging
import os
import threading
import uuid

from drivekit.internals.constants import APP_NAME, SESSION_ENV_VAR

_session_id: str | None = None
_pipeline_run_id: str | None = None

_session_lock = threading.Lock()
_pipeline_lock = threading.Lock()


def _new_id() -> str:
    return uuid.uuid4().hex[:8]


# region session id
def get_session_id() -> str:
    """
    Return the session ID, generating it on first use.

    Resolution order: the DRIVEKIT_SESSION_ID environment
    variable (lets CI or a wrapper script correlate logs), then a random
    8-character hex string.
    """
    global _session_id

    if _session_id is None:
        with _session_lock:
            # Re-check inside the lock; another thread may have won the race.
            if _session_id is None:
                _session_id = os.environ.get(SESSION_ENV_VAR) or _new_id()
    return _session_id


# endregion


# region pipeline run id
def start_pipeline_run() -> str:
    """Generate, store, and return a fresh pipeline run ID. Always overwrites."""
    global _pipeline_run_id

    with _pipeline_lock:
        _pipeline_run_id = _new_id()

    return _pipeline_run_id


def get_pipeline_run_id() -> str:
    """Return the current pipeline run ID, or "Unknown" outside of a run."""
    if _pipeline_run_id is None:
        logging.getLogger(APP_NAME).debug(
            "No pipeline run ID set yet; call start_pipeline_run() at the start of a pipeline."
        )
        return "Unknown"
    return _pipeline_run_id


def seed_pipeline_run_id(value: str) -> None:
    """Force the pipeline run ID (tests)."""
    global _pipeline_run_id
    with _pipeline_lock:
        _pipeline_run_id = value


# endregion
