"""Structured logging setup using structlog.

The terminal belongs to the TUI, so log records go to a rotating file (or
nowhere) instead of stdout. Output format is chosen by the
``TUI_HRDASH_LOG_FORMAT`` environment variable: ``json`` or ``console``
(the default).
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

import structlog
from structlog.contextvars import merge_contextvars
from structlog.typing import Processor

LOG_FORMAT_ENV = "TUI_HRDASH_LOG_FORMAT"
LOG_MAX_BYTES = 1_048_576
LOG_BACKUP_COUNT = 3


def _processors(use_json: bool) -> list[Processor]:
    processors: list[Processor] = [
        merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
    ]
    if use_json:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors += [
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ]
    return processors


def configure_logging(log_file: Path | str | None = None, level: str = "INFO") -> None:
    """Configure stdlib logging and structlog for the application.

    Args:
        log_file: Path of the rotating log file. ``None`` discards records.
        level: Logging level name, e.g. ``"DEBUG"``.
    """
    use_json = os.getenv(LOG_FORMAT_ENV, "").lower() == "json"

    handler: logging.Handler
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            filename=str(path),
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
    else:
        handler = logging.NullHandler()

    logging.basicConfig(
        format="%(message)s",
        handlers=[handler],
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )

    structlog.configure(
        processors=_processors(use_json),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
