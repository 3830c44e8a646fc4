"""
Centralized logging configuration for the license harness.

Every module logs through a ``license_harness.*`` logger obtained with
``logging.getLogger``. Entry points (the CLI, a scenario suite's setup hook)
call ``setup_logging()`` once to persist those records to a file:

    from license_harness.log_config import setup_logging
    setup_logging()
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

LOGGER_NAME = "license_harness"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_initialized = False


def default_log_dir() -> Path:
    return Path(
        os.environ.get(
            "LICENSE_HARNESS_LOG_DIR",
            str(Path(tempfile.gettempdir()) / "license-harness-logs"),
        )
    )


def setup_logging(
    *,
    log_dir: Optional[str | Path] = None,
    level: str = "DEBUG",
    console: bool = False,
) -> Path:
    """
    Attach a file handler (and optionally a console handler) to the
    ``license_harness`` logger.

    Args:
        log_dir: Directory for ``harness.log``. Defaults to
            LICENSE_HARNESS_LOG_DIR or ``<tmp>/license-harness-logs``.
        level: Minimum log level.
        console: Also echo records to stderr.

    Returns:
        Path to the log file.
    """
    global _initialized

    log_path = Path(log_dir) if log_dir else default_log_dir()
    log_file = log_path / "harness.log"

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, str(level).upper(), logging.DEBUG))

    if _initialized:
        return log_file

    log_path.mkdir(parents=True, exist_ok=True)
    if not any(
        isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", None) == str(log_file)
        for h in logger.handlers
    ):
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    if console:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(stream_handler)

    _initialized = True
    return log_file
