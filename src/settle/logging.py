"""JSON log output for applications using settle.

Library modules only create loggers and attach combinator fields
(``combinator``, ``task_index``, ``status``, ``tasks``) through ``extra``.
configure_logging() is for applications and examples.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

_RESERVED_LOG_RECORD_ATTRS: set[str] = set(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}

# Promoted to top-level keys instead of being nested under "extra".
_COMBINATOR_FIELDS: tuple[str, ...] = ("combinator", "task_index", "status")


class JsonFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra: dict[str, Any] = {}
        for key, value in record.__dict__.items():
            if key in _RESERVED_LOG_RECORD_ATTRS or key.startswith("_"):
                continue
            if key in _COMBINATOR_FIELDS:
                payload[key] = value
            else:
                extra[key] = value
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=repr)


def configure_logging(level: str = "INFO", settle_level: str | None = None) -> None:
    """Send all logging to stdout as JSON.

    Args:
        level: Root logger level.
        settle_level: Level for the "settle" logger. Per-task DEBUG lines are
            noisy, so by default it never goes below INFO.
    """
    root = logging.getLogger()

    # Drop existing handlers so re-configuring does not duplicate output.
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonFormatter())

    root.addHandler(handler)
    root.setLevel(level.upper())

    library = logging.getLogger("settle")
    if settle_level is not None:
        library.setLevel(settle_level.upper())
    else:
        library.setLevel(max(root.level, logging.INFO))
