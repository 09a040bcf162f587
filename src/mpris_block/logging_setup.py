"""Logging setup for mpris-block."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path

LOG_LEVEL_ENV = "MPRIS_BLOCK_LOG_LEVEL"


def _default_log_dir() -> Path:
    state_home = os.getenv("XDG_STATE_HOME")
    if state_home:
        return Path(state_home) / "mpris-block" / "logs"
    return Path.home() / ".mpris_block" / "logs"


def init_logging(app_name: str = "mpris_block") -> Path:
    """Initialize logging and return the log file path.

    Handlers only ever write to the log file and stderr; stdout belongs to
    the status bar.

    Every block on the bar runs its own short-lived process, and they all
    append to the same file. Rollover is not coordinated between processes,
    so lines written while two of them rotate at once can be lost. The
    default level is WARNING to keep the file quiet; set
    MPRIS_BLOCK_LOG_LEVEL=DEBUG to trace one problem.
    """
    log_dir = _default_log_dir()
    log_path = log_dir / "app.log"
    level_name = os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING

    logger = logging.getLogger()
    logger.setLevel(level)
    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s [pid %(process)d] %(name)s: %(message)s"
    )

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=2_000_000,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)

        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(level)
        stream_handler.setFormatter(formatter)

        if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
            logger.addHandler(file_handler)
        if not any(
            isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
            for h in logger.handlers
        ):
            logger.addHandler(stream_handler)
    except OSError:
        logging.basicConfig(level=level, format=str(formatter._fmt))

    logging.getLogger(app_name).debug("Logging initialized at %s", log_path)
    return log_path


def set_console_level(level: int) -> None:
    """Adjust console (stderr) handler level."""
    root = logging.getLogger()
    for handler in root.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(
            handler, logging.FileHandler
        ):
            handler.setLevel(level)
