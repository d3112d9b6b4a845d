"""Entry point for the drivekit command line tool."""

from __future__ import annotations

import logging

from drivekit import startup
from drivekit.cli import run as run_cli


def main() -> None:
    """Application entry point - handles initialization, then hands off to the CLI.

    Call like:
    ```
    drivekit --config my_settings.toml
    python -m drivekit --pipeline config-report
    ```

    The process exits with the pipeline outcome's exit code.
    """

    # Set up logging and user folder scaffold.
    log: logging.Logger = startup.initialize_application()

    try:
        exit_code = run_cli()
    except Exception:
        log.exception("Unhandled exception - program crashed.")  # Logs full traceback
        raise

    raise SystemExit(exit_code)


if __name__ == "__main__":

    main()
