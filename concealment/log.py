"""Logging setup for the command-line scripts."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def parse_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name}")
    return level


def configure_logging(
    level: int | str = logging.INFO, stream: TextIO | None = None
) -> logging.Logger:
    """Route ``concealment.*`` records to ``stream`` (stdout by default).

    Safe to call more than once; the handler is replaced, not stacked.
    """
    if isinstance(level, str):
        level = parse_level(level)
    root = logging.getLogger("concealment")
    for handler in list(root.handlers):
        if getattr(handler, "_concealment", False):
            root.removeHandler(handler)
    handler = logging.StreamHandler(
        stream if stream is not None else sys.stdout
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._concealment = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level)
    return root
