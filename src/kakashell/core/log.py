"""Logging setup: module loggers write to a file under the config dir."""

from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"


def setup_logging(debug: bool = False, log_path: Path | None = None) -> logging.Logger:
    """Configure the ``kakashell`` logger.

    The console belongs to rich output, so records only go to the log file.
    Calling this twice replaces the previous handler.
    """
    if log_path is None:
        from kakashell.core.config import get_log_path
        log_path = get_log_path()

    logger = logging.getLogger("kakashell")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.propagate = False
    return logger
