"""Startup logic needed before anything else happens.

- Console encoding setup
- Logging configuration
- User directory scaffolding (logs, configs, drive mirror, workbook)
"""

import logging
import sys

from drivekit.internals.logger import setup_logger
from drivekit.internals.scaffold import ensure_user_scaffold
from drivekit.utils import get_debug_mode, setup_console_encoding


# region initialize_application
def initialize_application() -> logging.Logger:
    """Common startup tasks for every entry point.

    Exits with code 1 (after printing to stderr) when the log files can't be
    created, since there is nowhere to log the failure to.
    """

    # Windows console encoding must be set before any console output,
    # so this comes before the logger.
    setup_console_encoding()

    try:
        log = setup_logger(enable_trace=_should_enable_trace_on_startup())
    except PermissionError as e:
        print(
            f"Cannot create log files: {e}\nCheck permissions on your Documents folder, "
            "or set DRIVEKIT_HOME to a writable folder.",
            file=sys.stderr,
        )
        sys.exit(1)
    except OSError as e:
        print(
            f"Cannot create log files (disk full or I/O error): {e}",
            file=sys.stderr,
        )
        sys.exit(1)

    log.info("Starting drivekit Log.")

    log.debug("Checking for existing drivekit user folders and scaffolding if needed.")
    ensure_user_scaffold()

    return log


# endregion


# region _should_enable_trace_on_startup
def _should_enable_trace_on_startup() -> bool:
    """
    Determine if trace logging should start immediately based on Debug Mode switch.

    Checks:
    - Environment variable (DRIVEKIT_DEBUG)
    - System default (DEBUG_MODE_DEFAULT in constants.py)
    """
    return get_debug_mode()


# endregion
