"""myipmon — live terminal dashboard for host network interfaces.

Samples interface addresses and byte counters, tracks a rolling rate
window per interface, resolves the public IP once, and renders the lot
as a grid of rich panels with plotext charts.
"""

from __future__ import annotations

__version__ = "0.1.0"

import os
import sys
from typing import Any, TextIO

from loguru import logger

logger.disable(__name__)

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{module}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def configure_logging(sink: str | TextIO | None = None) -> int:
    """Enable package logging on a single sink and return its handler id.

    ``sink`` defaults to stderr. A string is treated as a file path.
    The level comes from ``LOGURU_LEVEL`` (default INFO).
    """
    level = os.getenv("LOGURU_LEVEL", "INFO")
    logger.remove()
    kwargs: dict[str, Any] = {"level": level, "format": LOG_FORMAT}
    if isinstance(sink, str):
        kwargs["encoding"] = "utf-8"
    handler_id = logger.add(sink if sink is not None else sys.stderr, **kwargs)
    logger.enable(__name__)
    return handler_id


__all__ = ["__version__", "configure_logging", "logger"]
