"""
Logging setup for the protoplan service.

Module code logs through ``logging.getLogger(__name__)``; this module only
wires handlers onto the ``protoplan`` package logger at startup.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_MAX_BYTES = 5 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 5


def setup_rotating_logger(
    log_file: Union[str, Path],
    logger_name: str,
    level: Union[int, str] = logging.INFO,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
) -> logging.Logger:
    """
    Set up a rotating file logger.

    Args:
        log_file: Path to the log file. Parent directories are created.
        logger_name: Name of the logger.
        level: Logging level (int or name such as "info").
        max_bytes: Maximum size of a log file before rotation.
        backup_count: Number of backup log files to keep.

    Returns:
        Configured logger instance.
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(logger_name)
    logger.setLevel(_coerce_level(level))

    # Avoid stacking handlers when called twice for the same file
    for existing in logger.handlers:
        if isinstance(existing, RotatingFileHandler) and existing.baseFilename == os.path.abspath(log_path):
            return logger

    handler = RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backup_count)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger


def configure_logging(level: Union[int, str] = "info", log_dir: Optional[Path] = None) -> logging.Logger:
    """Attach console (and optionally rotating file) handlers to the package logger."""
    logger = logging.getLogger("protoplan")
    logger.setLevel(_coerce_level(level))

    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(console)

    if log_dir is not None:
        setup_rotating_logger(Path(log_dir) / "protoplan.log", "protoplan", level=level)

    return logger


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO
