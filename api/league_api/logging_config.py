"""Structured JSON logs for the league API.

Log calls in this service pass an event name as the message
(``draft_pick_committed``) and their context through ``extra=``. The
formatter writes one JSON object per line: the event, the service
identity and the extra fields flattened next to them.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any

from .utils.datetime_utils import now_utc

# Attributes every LogRecord carries; anything else came in through extra=.
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "taskName",
}

# AccessLogMiddleware already writes one line per request.
_QUIET_LOGGERS = ("uvicorn.access",)


class JSONFormatter(logging.Formatter):
    def __init__(self, service: str, environment: str) -> None:
        super().__init__()
        self._service = service
        self._environment = environment

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": now_utc().isoformat(),
            "level": record.levelname.lower(),
            "event": record.getMessage(),
            "logger": record.name,
            "service": self._service,
            "environment": self._environment,
        }
        if record.levelno >= logging.WARNING:
            payload["source"] = f"{record.module}:{record.lineno}"
        payload.update(
            (key, value) for key, value in vars(record).items() if key not in _STANDARD_ATTRS
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def resolve_log_level(level: str | None, environment: str) -> int:
    """Explicit level wins; otherwise INFO in production and DEBUG elsewhere."""
    name = (level or ("INFO" if environment.lower() == "production" else "DEBUG")).strip().upper()
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def configure_logging(service: str, environment: str, log_level: str | None = None) -> None:
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JSONFormatter(service=service, environment=environment))
    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(resolve_log_level(log_level or os.getenv("LOG_LEVEL"), environment))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
