# src/utils/log.py
"""
Logging setup shared by the API, the Lambda handler and scripts.

configure_logging() is idempotent; modules grab a logger with get_logger(__name__).
The level defaults to LOG_LEVEL from settings.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from src.utils.config import get_settings

_DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_is_configured = False


def configure_logging(level: Optional[Union[int, str]] = None, fmt: str = _DEFAULT_LOG_FORMAT) -> None:
    """Configure the root logger exactly once."""
    global _is_configured
    if _is_configured:
        return

    if level is None:
        level = get_settings().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(level=level, format=fmt)
    _is_configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
