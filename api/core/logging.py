"""
Logging configuration for the API.

Called once from `main.py` before the app is built. Never log request bodies
or email addresses; usernames are the natural key and are fine to log.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    # One line per request is too noisy at INFO.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
