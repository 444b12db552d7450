"""
Logging setup for the AI readiness engine.

Call ``configure_logging(config)`` once at CLI entry.  Library modules only
ever use ``logging.getLogger(__name__)``; scoring results never depend on
whether or how logging is configured.

Console output goes to stderr so that ``--json`` command output on stdout
stays machine-readable.

JSON format (``json_format = true`` under ``[logging]``) emits one object
per line, with any ``extra=`` fields merged in::

    {"ts": "2026-03-02T09:15:00Z", "level": "WARNING",
     "logger": "ai_readiness.scoring.calculator", "msg": "..."}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ai_readiness.config import LoggingConfig

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s | %(message)s"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Attributes every LogRecord has; anything else came in through ``extra=``.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}


class _JsonLineFormatter(logging.Formatter):
    """Serialise a record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict = {
            "ts": created.strftime(TIMESTAMP_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(
            (key, val)
            for key, val in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _formatter(config: "LoggingConfig") -> logging.Formatter:
    if config.json_format:
        return _JsonLineFormatter()
    formatter = logging.Formatter(TEXT_FORMAT, datefmt=TIMESTAMP_FORMAT)
    # Timestamps carry a literal "Z", so render them in UTC.
    formatter.converter = lambda secs: datetime.fromtimestamp(secs, tz=timezone.utc).timetuple()
    return formatter


def _file_handler(log_file: str) -> logging.Handler:
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, encoding="utf-8")


def configure_logging(config: "LoggingConfig", debug: bool = False) -> None:
    """Install stderr (and optional file) handlers on the root logger.

    Args:
        config: ``[logging]`` section of ``AppConfig``.
        debug:  Force DEBUG level regardless of ``config.level``.
    """
    level = logging.DEBUG if debug else logging.getLevelName(config.level)
    if not isinstance(level, int):
        level = logging.INFO

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        handlers.append(_file_handler(config.log_file))

    formatter = _formatter(config)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
