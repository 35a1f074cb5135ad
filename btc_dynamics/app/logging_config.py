"""Logging configuration for the dynamics backend."""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, TextIO


def configure_logging(level: Optional[str] = None, stream: TextIO | None = None) -> None:
    """Configure standard logging with a consistent format.

    Logs go to stdout unless ``stream`` is given. ``BTC_DYNAMICS_LOG_LEVEL``
    overrides the requested level.
    """

    env_level = os.getenv("BTC_DYNAMICS_LOG_LEVEL")
    resolved_level = (env_level or level or "INFO").upper()

    logging.basicConfig(
        level=getattr(logging, resolved_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s %(message)s",
        handlers=[logging.StreamHandler(stream or sys.stdout)],
    )


__all__ = ["configure_logging"]
