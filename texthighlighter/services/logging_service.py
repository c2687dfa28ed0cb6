"""
Logging service for TextHighlighter.

The highlighter is a library that lives inside someone else's Qt
application, so this module only ever configures the ``texthighlighter``
logger tree and leaves the root logger to the host. File output goes to
~/.local/share/texthighlighter/logs/ when requested.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional


DEFAULT_LOG_DIR = Path.home() / ".local" / "share" / "texthighlighter" / "logs"

# Name of the package logger every module logger hangs off
PACKAGE_LOGGER = "texthighlighter"

# Overrides the level passed to setup_logging(), e.g. TEXTHIGHLIGHTER_LOG_LEVEL=DEBUG
LOG_LEVEL_ENV = "TEXTHIGHLIGHTER_LOG_LEVEL"

_logging_initialized = False


def _level_from_env(default: int) -> int:
    name = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    if not name:
        return default
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


def setup_logging(
    log_level: int = logging.INFO,
    log_to_file: bool = False,
    log_dir: Optional[Path] = None,
) -> None:
    """
    Attach console (and optionally file) handlers to the package logger.

    Args:
        log_level: The logging level (e.g., logging.DEBUG, logging.INFO).
        log_to_file: Whether to also log to a dated file.
        log_dir: Directory for log files. Defaults to DEFAULT_LOG_DIR.

    Calling it more than once is a no-op.
    """
    global _logging_initialized

    if _logging_initialized:
        return

    log_level = _level_from_env(log_level)
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(log_level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(log_format, date_format))
    package_logger.addHandler(console_handler)

    if log_to_file:
        log_dir = log_dir or DEFAULT_LOG_DIR
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            log_path = log_dir / f"texthighlighter_{datetime.now().strftime('%Y%m%d')}.log"

            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setLevel(log_level)
            file_handler.setFormatter(logging.Formatter(log_format, date_format))
            package_logger.addHandler(file_handler)

        except (OSError, PermissionError) as e:
            package_logger.warning(f"Could not create log file: {e}. Logging to console only.")

    _logging_initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module of this package.

    Names outside the package tree are nested under it so that the
    handlers installed by setup_logging() still apply.

    Usage:
        from texthighlighter.services.logging_service import get_logger
        logger = get_logger(__name__)
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
