"""
Package-wide logging helpers.

Usage:
    from earth_rasters.utils.logging import get_logger
    logger = get_logger(__name__)

Environment variables:
    EARTH_RASTERS_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
"""

from __future__ import annotations

import logging
from typing import Optional

from ..config import LOG_LEVEL

_ROOT = "earth_rasters"


def _resolve_level(value: Optional[str]) -> int:
    if not value:
        return logging.INFO
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _configure_root_once() -> None:
    root = logging.getLogger(_ROOT)
    if root.handlers:
        return
    level = _resolve_level(LOG_LEVEL)
    root.setLevel(level)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt="%(levelname)s | %(name)s | %(message)s"))
    root.addHandler(handler)
    root.propagate = False


def set_level(level: str) -> None:
    """Change the level of the package root logger (used by the CLI ``--verbose`` flag)."""
    _configure_root_once()
    logging.getLogger(_ROOT).setLevel(_resolve_level(level))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a child logger under the ``earth_rasters`` root logger."""
    _configure_root_once()
    root = logging.getLogger(_ROOT)
    if not name:
        return root
    if name.startswith(_ROOT + "."):
        name = name[len(_ROOT) + 1:]
    return root.getChild(name)
