"""File logging setup.

The TUI owns the terminal, so log records go to a file in the temp directory
instead of stderr.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from .constants import LOG_FILE

_LOGGER_NAME = "kube_wizard"
_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"

_handler: logging.Handler | None = None


def default_log_path() -> Path:
    return Path(tempfile.gettempdir()) / LOG_FILE


def setup_logging(path: Path | None = None, level: int | str = logging.INFO) -> Path:
    """Attach a file handler to the package logger and return the log path.

    Raises OSError when the file cannot be opened; callers decide whether that
    is fatal.
    """
    global _handler

    log_path = Path(path) if path is not None else default_log_path()
    logger = logging.getLogger(_LOGGER_NAME)
    if _handler is not None:
        logger.removeHandler(_handler)
        _handler.close()
        _handler = None

    handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    _handler = handler

    logger.info("--- Logger initialized ---")
    return log_path


def shutdown_logging() -> None:
    global _handler

    if _handler is None:
        return
    logger = logging.getLogger(_LOGGER_NAME)
    logger.info("--- Logger closing ---")
    logger.removeHandler(_handler)
    _handler.close()
    _handler = None
