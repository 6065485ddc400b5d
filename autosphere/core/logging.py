"""Logging setup for the API process.

Everything goes to stdout. Request middleware and domain code attach
structured extras: request fields (``request_id``, ``path``, ...) and
lifecycle fields (``event``, ``collection``, ``record_id``, ``actor_id``,
``reason``). The JSON formatter emits them as top-level keys; the text
formatter appends the lifecycle ones as ``key=value`` pairs.

Read straight from the environment so it can run before Settings load.
"""

from __future__ import annotations

import json
import logging
import logging.config
import os
import sys
from datetime import UTC, datetime
from typing import Any

REQUEST_FIELDS = (
    "request_id",
    "method",
    "path",
    "query",
    "status_code",
    "duration_ms",
    "client_ip",
    "user_agent",
    "error_type",
)
LIFECYCLE_FIELDS = ("event", "collection", "record_id", "actor_id", "reason")

TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _env_bool(name: str, *, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _extras(record: logging.LogRecord, fields: tuple[str, ...]) -> dict[str, Any]:
    return {key: record.__dict__[key] for key in fields if key in record.__dict__}


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        payload.update(_extras(record, REQUEST_FIELDS + LIFECYCLE_FIELDS))
        # UUIDs and enums from domain extras
        return json.dumps(payload, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines with lifecycle extras appended."""

    def __init__(self) -> None:
        super().__init__(TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _extras(record, LIFECYCLE_FIELDS)
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        head, sep, tail = line.partition("\n")
        return f"{head} [{pairs}]{sep}{tail}"


def _library_loggers(level: str, *, uvicorn_access: bool) -> dict[str, Any]:
    """Route uvicorn into the root handler and keep client libraries quiet."""
    return {
        "uvicorn": {"level": level, "propagate": True},
        "uvicorn.error": {"level": level, "propagate": True},
        "uvicorn.access": {
            "level": "INFO" if uvicorn_access else "WARNING",
            "propagate": True,
        },
        "httpx": {"level": os.getenv("HTTPX_LOG_LEVEL", "WARNING"), "propagate": True},
        "sqlalchemy.engine": {
            "level": os.getenv("SQL_LOG_LEVEL", "WARNING"),
            "propagate": True,
        },
        # Firebase Admin's HTTP transport
        "google.auth": {"level": "WARNING", "propagate": True},
    }


def configure_logging() -> None:
    """Apply logging config from the environment.

    Env vars:
    - LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: INFO)
    - LOG_JSON: true/false (default: false)
    - LOG_REQUESTS: true/false (default: true)
    - LOG_UVICORN_ACCESS: true/false (defaults to the opposite of LOG_REQUESTS)
    - HTTPX_LOG_LEVEL, SQL_LOG_LEVEL: library levels (default: WARNING)
    """
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    log_requests = _env_bool("LOG_REQUESTS", default=True)
    uvicorn_access = _env_bool("LOG_UVICORN_ACCESS", default=not log_requests)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "text": {"()": "autosphere.core.logging.TextFormatter"},
                "json": {"()": "autosphere.core.logging.JsonFormatter"},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": "json"
                    if _env_bool("LOG_JSON", default=False)
                    else "text",
                    "stream": sys.stdout,
                }
            },
            "root": {"handlers": ["console"], "level": level},
            "loggers": _library_loggers(level, uvicorn_access=uvicorn_access),
        }
    )
