"""
Basic logging setup; creates console and file handlers with the session id in every log line.
"""

import logging

from drivekit.internals.constants import APP_NAME
from drivekit.internals.paths import user_log_dir_path
from drivekit.internals.run_context import get_session_id


def setup_logger(
    name: str = APP_NAME,
    level: int = logging.DEBUG,
    enable_trace: bool = False,
) -> logging.Logger:
    """
    Setup logging with console and file output.

    Safe to call multiple times (won't create duplicate handlers).

    Args:
        name: Logger name (default: "drivekit")
        level: Minimum log level (default: DEBUG)
        enable_trace: Also write a trace log with file/function/line for every record

    Returns:
        Configured logger instance

    Example:
        >>> log = setup_logger()
        >>> log.info("Listing folder")
        2025-01-09 14:23:45 [INFO] Listing folder [run:a1b2c3d4]
    """

    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    logger.setLevel(level)

    # Keep drivekit records out of the root logger; googleapiclient logs there.
    logger.propagate = False

    session_id = get_session_id()

    log_format = f"%(asctime)s [%(levelname)s] %(message)s [run:{session_id}]"
    formatter = logging.Formatter(log_format, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.INFO)
    logger.addHandler(console_handler)

    log_file = user_log_dir_path() / f"{APP_NAME}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(formatter)
    file_handler.setLevel(logging.DEBUG)
    logger.addHandler(file_handler)

    if enable_trace:
        trace_log_format = f"%(filename)s: %(funcName)s(), Line: %(lineno)d: - [%(levelname)s] %(asctime)s - %(message)s -- [run_id={session_id}]"
        trace_formatter = logging.Formatter(trace_log_format, datefmt="%Y-%m-%d %H:%M:%S")
        trace_log_file = user_log_dir_path() / f"trace_{APP_NAME}.log"
        trace_handler = logging.FileHandler(trace_log_file, encoding="utf-8")
        trace_handler.setFormatter(trace_formatter)
        trace_handler.setLevel(logging.DEBUG)
        logger.addHandler(trace_handler)

    logger.info(f"Logger initialized. Writing to {log_file}")

    return logger
