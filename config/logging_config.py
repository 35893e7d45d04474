#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Logging configuration - one place to set format, level and handlers.

Modules keep using ``logging.getLogger(__name__)`` (or ``get_logger``);
entry points call ``setup_logging`` once.
"""

import logging
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def setup_logging(
    level: Union[str, int] = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    force: bool = False
) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        level: Level name or number
        log_file: Optional file to mirror console output into
        force: Reconfigure even if already set up

    Returns:
        The root logger
    """
    global _configured

    root = logging.getLogger()
    if _configured and not force:
        return root

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handlers = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )
    # ReportLab and PIL are chatty at DEBUG
    logging.getLogger("PIL").setLevel(max(level, logging.INFO))
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

    _configured = True
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-level logger with default configuration applied."""
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers:
        setup_logging()
    return logger
