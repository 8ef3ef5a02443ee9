"""Logging initialization."""

from __future__ import annotations

import os
import logging

from trackbridge.config.logging import LOG_LEVEL, LOG_FORMAT
from trackbridge.config.dispatch import DISPATCH_LOGGER_NAME, ENV_SHOW_DISPATCH_LOGS


def configure_logging() -> None:
    # Dispatch logs one line per delivered frame. Keep it tame unless explicitly enabled.
    if (os.getenv(ENV_SHOW_DISPATCH_LOGS) or "").strip().lower() not in {"1", "true", "yes"}:
        logging.getLogger(DISPATCH_LOGGER_NAME).setLevel(logging.INFO)
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


__all__ = ["configure_logging"]
