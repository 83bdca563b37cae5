# path: src/runtime/logging_config.py
"""
Central logging configuration for recipe-diff.

Call configure_logging() once from the entrypoint:

    from runtime.logging_config import configure_logging
    configure_logging()

After that, loader / analysis progress logs are visible on stdout next to
the summary table.
"""

from __future__ import annotations

import logging
import sys
from typing import Union


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def resolve_level(level: Union[int, str]) -> int:
    """
    Turn "info" / "DEBUG" / 20 into a logging level number.

    Unknown names raise ValueError.
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Configure root logging if no handlers are attached yet.

    Args:
        level: default logging level (e.g., logging.INFO, "debug")
    """
    root = logging.getLogger()

    # Don't duplicate handlers if someone already configured logging.
    if root.handlers:
        root.setLevel(resolve_level(level))
        return

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(resolve_level(level))
