from __future__ import annotations

import logging
import os
from typing import Optional, Union

from pythonjsonlogger import jsonlogger

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# chatty third-party loggers kept at WARNING
NOISY_LOGGERS = ("werkzeug", "urllib3")


def _resolve_level(level: Optional[Union[int, str]]) -> int:
    if level is None:
        level = os.getenv("WINE_BROWSER_LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
        level: Optional[Union[int, str]] = None,
        force_format: Optional[str] = None,
) -> None:
    """
    Configure root logger for the wine browser

    Modes:
    - JSON (default), structured `extra` fields end up as JSON keys
    - plain text (dev mode)

    Selection Order:
        1) force_format argument ("json" or "plain") if provided
        2) env var WINE_BROWSER_LOG_FORMAT
        3) default = "json"

    Level: `level` argument, else env var WINE_BROWSER_LOG_LEVEL, else INFO.
    """
    if force_format is not None:
        format_mode = force_format.lower()
    else:
        format_mode = os.getenv("WINE_BROWSER_LOG_FORMAT", "json").lower()

    logger = logging.getLogger()
    logger.setLevel(_resolve_level(level))

    handler = logging.StreamHandler()
    if format_mode == "plain":
        formatter = logging.Formatter(LOG_FORMAT)
    else:
        formatter = jsonlogger.JsonFormatter(LOG_FORMAT)
    handler.setFormatter(formatter)

    # Replace any existing handlers to avoid duplicate logs
    logger.handlers.clear()
    logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
