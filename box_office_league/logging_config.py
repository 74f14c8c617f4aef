"""JSON logging for the scoring service.

One JSON object per line on stdout. Fields passed through ``extra=`` (season
ids, week indices, studio ids) are merged into the top-level object.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

from .config import Settings, settings as default_settings
from .utils.datetime_utils import now_utc

# Attributes every LogRecord carries; anything else on a record came from ``extra=``.
_STANDARD_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}

# Uvicorn's own access line duplicates StructuredLoggingMiddleware.
_QUIETED_LOGGERS = ("uvicorn.access",)


class JSONFormatter(logging.Formatter):
    def __init__(self, service: str, environment: str) -> None:
        super().__init__()
        self._service = service
        self._environment = environment

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": now_utc().isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "service": self._service,
            "environment": self._environment,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_ATTRS and key not in payload:
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def resolve_log_level(level: str | None, environment: str) -> int:
    """Explicit LOG_LEVEL wins; otherwise DEBUG outside production."""
    if level:
        name = level.strip().upper()
    else:
        name = "INFO" if environment.lower() == "production" else "DEBUG"
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def configure_logging(service: str, config: Settings | None = None) -> None:
    config = config or default_settings
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JSONFormatter(service=service, environment=config.environment))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(resolve_log_level(config.log_level, config.environment))

    for name in _QUIETED_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if config.sql_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
