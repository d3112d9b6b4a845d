"""Track and record metadata for pipeline runs."""

from __future__ import annotations

import json
import logging
import platform
import sys
from datetime import datetime
from importlib.metadata import PackageNotFoundError, version
from typing import Any

from drivekit.internals.config.define_config import UserConfig
from drivekit.internals.constants import APP_NAME
from drivekit.internals.paths import user_log_dir_path, user_manifests_dir
from drivekit.internals.run_context import get_session_id
from drivekit.models import PipelineOutcome

log = logging.getLogger("drivekit")

MANIFEST_VERSION = "1.0"


# region RunManifest
class RunManifest:
    """
    JSON record of one pipeline run: what ran, with which settings, and how it ended.

    A manifest must never break a run, so write failures are only logged.
    """

    def __init__(self, cfg: UserConfig, run_id: str) -> None:
        """Build the manifest in memory. Call .start() to write it."""
        self.cfg = cfg
        self.run_id = run_id
        self.start_time: datetime = datetime.now()
        self.manifest_path = user_manifests_dir() / f"run_{self.run_id}_manifest.json"
        self.manifest: dict[str, Any] = self._build_manifest()
        self.end_time: datetime | None = None
        self.duration: float | None = None

    # region lifecycle
    def start(self) -> None:
        """Write the initial manifest with status "running"."""
        self.manifest["status"] = "running"
        log.debug(f"Writing initial manifest to {self.manifest_path}")
        self._write_manifest()

    def complete(self, outcome: PipelineOutcome) -> None:
        """Record the pipeline's outcome (success, no items, or invalid input)."""
        self._stop_clock()
        self.manifest["status"] = outcome.status.value
        self.manifest["message"] = outcome.message
        self.manifest["count"] = outcome.count
        self.manifest["target"] = outcome.target
        self._write_manifest()
        log.debug(f"Updated manifest: {outcome.status.value}, at {self.manifest_path}")

    def fail(self, error: BaseException) -> None:
        """Record an unexpected error."""
        self._stop_clock()
        self.manifest["status"] = "failed"
        self.manifest["error"] = str(error)
        self.manifest["error_type"] = type(error).__name__
        self._write_manifest()
        log.error(f"Updated manifest ({self.manifest_path}): failed - {error}")

    # endregion

    def _build_manifest(self) -> dict[str, Any]:
        return {
            "manifest_version": MANIFEST_VERSION,
            "run_id": self.run_id,
            "session_id": get_session_id(),
            "environment": self._get_environment_info(),
            "start_time": self.start_time.isoformat(),
            "end_time": None,
            "duration_seconds": None,
            "pipeline": self.cfg.pipeline.value,
            "backend": self.cfg.backend.value,
            "log_path": str(user_log_dir_path()),
            "config": self.cfg.config_to_dict(),
            "message": None,
            "count": None,
            "target": None,
            "error": None,
            "error_type": None,
        }

    def _write_manifest(self) -> None:
        try:
            with open(self.manifest_path, "w", encoding="utf-8", newline="\n") as f:
                json.dump(self.manifest, f, indent=2)
        except OSError as e:
            log.error(f"Failed to write manifest to {self.manifest_path}: {e}")

    def _stop_clock(self) -> None:
        self.end_time = datetime.now()
        self.duration = (self.end_time - self.start_time).total_seconds()
        self.manifest["end_time"] = self.end_time.isoformat()
        self.manifest["duration_seconds"] = self.duration

    def _get_environment_info(self) -> dict[str, Any]:
        return {
            "python_version": sys.version.split()[0],
            "platform": platform.system(),
            "platform_release": platform.release(),
            "app_version": _get_app_version(),
        }


# endregion


def _get_app_version() -> str:
    try:
        return version(APP_NAME)
    except PackageNotFoundError:
        return "unknown"
