"""Logging setup for the command-line interface."""

from __future__ import annotations

import logging
import sys
from typing import Union

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Union[int, str] = logging.WARNING) -> logging.Logger:
    """Attach a single stderr handler to the ``debt_plan`` logger.

    Calling this again updates the level and re-targets the handler at the
    current ``sys.stderr``.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logger = logging.getLogger("debt_plan")
    logger.setLevel(level)
    for handler in logger.handlers:
        if getattr(handler, "_debt_plan_handler", False):
            handler.setStream(sys.stderr)
            break
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._debt_plan_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
