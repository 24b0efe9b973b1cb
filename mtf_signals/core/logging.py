"""Logging configuration for applications embedding the engine."""

import logging
import sys
from typing import Optional, Union

from mtf_signals.core.config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-40s | %(message)s"


def setup_logging(level: Optional[Union[int, str]] = None) -> None:
    """
    Configure the root logger once at startup.

    Without an explicit level, ``log_level`` from settings (``MTF_LOG_LEVEL``)
    is used.
    """
    if level is None:
        level = get_settings().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    # Avoid duplicate handlers when called more than once
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)
    root.setLevel(level)
