"""Logging setup for studentdir processes.

Everything logs under the "studentdir" logger hierarchy via
``logging.getLogger(__name__)``; ``setup_logging`` attaches the handlers once
per process from the loaded Settings.
"""

from __future__ import annotations

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from studentdir.config import Settings

ROOT_LOGGER = "studentdir"
LOG_FILE = "studentdir.log"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# (pattern, replacement) applied in order by sanitize_for_log
_REDACTIONS = [
    (re.compile(r"\$2[abxy]?\$\d{2}\$[./A-Za-z0-9]{53}"), "[PASSWORD_HASH]"),
    (re.compile(r"(?i)(password['\"]?\s*[=:]\s*)['\"]?[^\s,'\")]+"), r"\1[REDACTED]"),
    (re.compile(r"://([^:/@\s]+):[^@\s]+@"), r"://\1:***@"),
]


def setup_logging(
    settings: Settings,
    *,
    console: bool = True,
    max_bytes: int = MAX_LOG_BYTES,
    backup_count: int = LOG_BACKUPS,
) -> logging.Logger:
    """Route the studentdir logger to a rotating file (and stderr).

    The directory and level come from ``settings.log_dir`` and
    ``settings.log_level``; Settings has already applied the YAML file and
    STUDENTDIR_LOG_* environment overrides. Calling this again replaces the
    handlers from the previous call.

    Args:
        settings: Loaded, validated settings.
        console: Also write to stderr.
        max_bytes: Size at which the log file is rotated.
        backup_count: Rotated files to keep.

    Returns:
        The "studentdir" logger.
    """
    log_path = Path(settings.log_dir) / LOG_FILE
    log_path.parent.mkdir(parents=True, exist_ok=True)
    level = logging.getLevelName(settings.log_level.upper())

    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    logger = logging.getLogger(ROOT_LOGGER)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(level)

    logger.info("Logging to %s at %s", log_path, settings.log_level.upper())
    return logger


def sanitize_for_log(text: str) -> str:
    """Strip password digests, password values and URL credentials from text."""
    for pattern, replacement in _REDACTIONS:
        text = pattern.sub(replacement, text)
    return text
