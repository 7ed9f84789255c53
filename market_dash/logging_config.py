from __future__ import annotations

import logging
import os
from typing import Optional

from pythonjsonlogger import jsonlogger

SERVICE_NAME = "market_dash"

# Context fields the table layer attaches via extra={...}; every record gets them
CONTEXT_DEFAULTS = {"view_id": "-"}

# Werkzeug logs one line per Dash callback request
_NOISY_LOGGERS = ("werkzeug",)


class ContextDefaultsFilter(logging.Filter):
    """Fill in table context fields a log call didn't pass, so formatters can rely on them."""

    def filter(self, record: logging.LogRecord) -> bool:
        for name, default in CONTEXT_DEFAULTS.items():
            if not hasattr(record, name):
                setattr(record, name, default)
        return True


def _resolve_level(level: Optional[int]) -> int:
    if level is not None:
        return level
    name = os.getenv("MARKET_DASH_LOG_LEVEL", "INFO").upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
        level: Optional[int] = None,
        force_format: Optional[str] = None,
) -> None:
    """
    Configure the root logger for the dashboard

    Format, first match wins:
        1) force_format argument ("json" or "plain")
        2) env var MARKET_DASH_LOG_FORMAT
        3) "json"

    Level: the 'level' argument, else MARKET_DASH_LOG_LEVEL, else INFO.

    JSON lines carry 'time', 'level', 'logger', 'service' and 'view_id' plus
    whatever extra={...} the call passed. Plain lines show the view id in brackets.
    """
    if force_format is not None:
        format_mode = force_format.lower()
    else:
        format_mode = os.getenv("MARKET_DASH_LOG_FORMAT", "json").lower()

    root = logging.getLogger()
    root.setLevel(_resolve_level(level))

    handler = logging.StreamHandler()
    handler.addFilter(ContextDefaultsFilter())

    if format_mode == "plain":
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-7s %(name)s [%(view_id)s] %(message)s"
        )
    else:
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"asctime": "time", "levelname": "level", "name": "logger"},
            static_fields={"service": SERVICE_NAME},
        )
    handler.setFormatter(formatter)

    # A single handler, so re-configuring (tests, reloader) never duplicates lines
    root.handlers.clear()
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))
