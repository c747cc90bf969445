"""Logging setup for the scene server and the headless demo."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

# Wide enough for the longest module logger (``deeptime.api.routes.transition``)
LOG_FORMAT = "%(asctime)s.%(msecs)03d [%(levelname)-7s] %(name)-32s | %(message)s"
LOG_DATEFMT = "%H:%M:%S"

# Per-request access lines drown out transition logs at the default level
_NOISY_LOGGERS = ("uvicorn.access",)


def setup_logging(level: str = "INFO", stream: TextIO | None = None) -> logging.Handler:
    """Route every logger to a single handler on *stream* (stdout by default).

    Millisecond timestamps are kept because transition phases are only a
    few hundred milliseconds long.  Returns the installed handler.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()
    root.addHandler(handler)

    quiet_level = numeric_level if numeric_level <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)
    return handler
