"""Logging setup for the metadata service and CLI."""

from __future__ import annotations

import logging
import sys
from typing import Optional, Union

_HANDLER_NAME = "_metadir_stream_handler"


def configure_logging(level: Union[int, str] = logging.INFO, formatter: Optional[logging.Formatter] = None) -> None:
    """Send logs to stdout with a consistent format.

    Safe to call repeatedly: the metadir handler is installed once and
    updated in place on later calls.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    if formatter is None:
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%H:%M:%S")

    existing = None
    for handler in root_logger.handlers:
        if getattr(handler, _HANDLER_NAME, False):
            existing = handler
            break

    if existing is None:
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setLevel(level)
        stream_handler.setFormatter(formatter)
        setattr(stream_handler, _HANDLER_NAME, True)
        root_logger.addHandler(stream_handler)
    else:
        existing.setFormatter(formatter)
        existing.setLevel(level)

    root_logger.setLevel(level)
