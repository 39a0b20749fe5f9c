"""Logging setup for the ``wp2md`` logger hierarchy.

Modules log through ``logging.getLogger(__name__)``; nothing is emitted
until an application calls one of these helpers.
"""

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from .models.config import Wp2mdConfig

LOGGER_NAME = "wp2md"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    force: bool = False,
) -> logging.Logger:
    """
    Send wp2md log records to stderr and, optionally, a file.

    Converted Markdown often goes to stdout, so log lines stay on stderr.
    An already configured logger only has its level changed unless force
    is set.

    Args:
        level: Level name; unknown names fall back to INFO
        log_file: Also append records to this file
        force: Replace existing handlers

    Returns:
        The ``wp2md`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False

    if logger.handlers and not force:
        return logger

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def setup_logging_from_config(config: "Wp2mdConfig") -> logging.Logger:
    """Apply the ``log_level`` and ``log_file`` settings of a loaded config."""
    return setup_logging(config.log_level, config.log_file, force=True)
