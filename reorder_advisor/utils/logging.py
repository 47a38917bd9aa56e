"""
Root logger setup for the reorder advisor CLI.

The ``report`` command calls ``configure_logging(config.logging)`` right after
loading its config, so the first lines a run logs are the catalog fetch and
the one-time classifier training. What ends up in the log:

  reorder_advisor.ingestion.*   records fetched / loaded, catalog padding
  reorder_advisor.ml.trainer    training start, final loss, failures
  reorder_advisor.engine.*      one WARNING per rejected item, batch counts

Package modules only ever call ``logging.getLogger(__name__)``.

With ``[logging] json_format = true`` each record is a single JSON line.
Keys passed through ``extra=`` are copied onto the object::

    {"ts": "2026-10-19T15:00:00Z", "level": "WARNING",
     "logger": "reorder_advisor.engine.evaluator", "msg": "Rejected ...",
     "item_id": "17"}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reorder_advisor.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Request lines from the catalog client are noise at INFO.
_QUIET_LOGGERS = ("httpx", "httpcore")

_STANDARD_RECORD_KEYS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class _JsonLineFormatter(logging.Formatter):
    """One JSON object per record: ``ts``, ``level``, ``logger``, ``msg``."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                LOG_DATE_FORMAT
            ),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        entry.update(
            (key, val)
            for key, val in record.__dict__.items()
            if key not in _STANDARD_RECORD_KEYS and not key.startswith("_")
        )
        return json.dumps(entry, default=str)


def _build_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return _JsonLineFormatter()
    return logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def configure_logging(config: "LoggingConfig") -> None:
    """Install stdout (and, if ``config.log_file`` is set, file) handlers.

    Replaces whatever handlers the root logger had, so calling it twice does
    not duplicate output.
    """
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    formatter = _build_formatter(config.json_format)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    logging.basicConfig(level=level, handlers=handlers, force=True)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
