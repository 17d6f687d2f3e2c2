"""Logging helpers shared by all airwatch modules."""

from __future__ import annotations

import logging
import sys

ROOT_LOGGER_NAME = 'airwatch'
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the airwatch namespace."""
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + '.'):
        name = f'{ROOT_LOGGER_NAME}.{name}'
    return logging.getLogger(name)


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Install a single stream handler on the airwatch root logger."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)

    if not any(getattr(h, '_airwatch_handler', False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._airwatch_handler = True
        root.addHandler(handler)

    return root
