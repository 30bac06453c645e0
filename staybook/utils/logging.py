# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Logging configuration for StayBook.

Service modules log through ``logging.getLogger(__name__)`` under the
``staybook`` namespace; ``setup_logging`` installs a single stderr handler on
the root logger and pins the levels of the libraries the service runs on.
"""

import logging
import sys
from typing import TextIO

from staybook.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

APP_LOGGER = "staybook"

# Least severe level each library may emit, whatever the app level
LIBRARY_LEVEL_FLOORS: dict[str, int] = {
    "aiosqlite": logging.WARNING,
    "apscheduler": logging.WARNING,
    "alembic": logging.INFO,
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.INFO,
    "uvicorn.error": logging.INFO,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
}


def get_log_level() -> int:
    """Resolve the LOG_LEVEL setting to a logging level.

    Unknown names fall back to INFO.
    """
    name = get_settings().log_level.strip().upper()
    level = logging.getLevelNamesMapping().get(name)
    if level is None or level == logging.NOTSET:
        return logging.INFO
    return level


def setup_logging(
    level: int | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure application logging.

    Args:
        level: Logging level. Defaults to settings value.
        stream: Output stream. Defaults to stderr.
    """
    if level is None:
        level = get_log_level()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    root_logger.addHandler(handler)

    logging.getLogger(APP_LOGGER).setLevel(level)
    _configure_library_loggers(level)


def _configure_library_loggers(app_level: int) -> None:
    """Pin third-party logger levels relative to the app level.

    Args:
        app_level: Application log level.
    """
    for name, floor in LIBRARY_LEVEL_FLOORS.items():
        logging.getLogger(name).setLevel(max(app_level, floor))

    # SQLAlchemy logs statements at INFO; show them only when debugging
    sql_level = logging.INFO if app_level <= logging.DEBUG else logging.WARNING
    logging.getLogger("sqlalchemy.engine").setLevel(sql_level)
