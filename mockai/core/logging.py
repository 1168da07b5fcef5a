"""Logging setup for the mock server.

Log calls are event names with structured fields passed through ``extra=``
(``request.completed`` with method/path/status/duration_ms,
``rate_limit.exceeded`` with model/limit, ...). Two renderings exist:

- ``json``: one object per record, fields as top-level keys
- ``plain``: access records as ``<id> [<date>] "<method> <path>" <status> <ms> ms``,
  every other record as ``<time> <level> <logger> <event> key=value ...``

The current request id lives in a context variable set by the pipeline and
is stamped on every record emitted while the request is in flight.
"""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from email.utils import formatdate
from logging import LogRecord
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from mockai.core.config import LogSettings

ACCESS_LOGGER_NAME = "mockai.access"

_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)

# Attributes every LogRecord has; anything else arrived through ``extra=``
_RECORD_ATTRS = frozenset(vars(LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "taskName",
}


def set_request_id(request_id: str | None) -> None:
    """Bind ``request_id`` to the current context."""

    _request_id_var.set(request_id)


def get_request_id() -> str | None:
    return _request_id_var.get()


def clear_request_id() -> None:
    _request_id_var.set(None)


def record_fields(record: LogRecord) -> dict[str, Any]:
    """Return the structured fields attached to ``record`` via ``extra=``."""

    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


class RequestIdFilter(logging.Filter):
    """Attach request_id from context when absent on the record."""

    def filter(self, record: LogRecord) -> bool:  # noqa: D401
        if getattr(record, "request_id", None) is None:
            request_id = get_request_id()
            if request_id:
                record.request_id = request_id
        return True


class JsonFormatter(logging.Formatter):
    """Render a record and its fields as a single JSON object."""

    def __init__(self, *, ensure_ascii: bool = True) -> None:
        super().__init__()
        self.ensure_ascii = ensure_ascii

    def format(self, record: LogRecord) -> str:  # noqa: D401
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record_fields(record).items():
            if value is not None:
                data[key] = value
        if "request_id" not in data and get_request_id():
            data["request_id"] = get_request_id()

        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(data, default=str, ensure_ascii=self.ensure_ascii)


class PlainFormatter(logging.Formatter):
    """Single-line text output; access records use the access-log layout."""

    access_format = '{request_id} [{date}] "{method} {path}" {status} {duration_ms} ms'

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)s %(name)s %(message)s")

    def format(self, record: LogRecord) -> str:  # noqa: D401
        fields = record_fields(record)
        if record.name == ACCESS_LOGGER_NAME and "status" in fields:
            return self.access_format.format(
                request_id=fields.get("request_id") or "-",
                date=formatdate(record.created, usegmt=True),
                method=fields.get("method", "-"),
                path=fields.get("path", "-"),
                status=fields["status"],
                duration_ms=fields.get("duration_ms", "-"),
            )

        record.message = record.getMessage()
        record.asctime = self.formatTime(record)
        line = self.formatMessage(record)

        pairs = " ".join(f"{key}={value}" for key, value in fields.items() if value is not None)
        if pairs:
            line = f"{line} {pairs}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _build_handler(log_settings: LogSettings) -> logging.Handler:
    output = log_settings.output.lower()
    if output == "file":
        file_path = Path(log_settings.file_path or "logs/mockai.log")
        file_path.parent.mkdir(parents=True, exist_ok=True)
        if log_settings.max_bytes:
            return RotatingFileHandler(
                file_path,
                maxBytes=log_settings.max_bytes,
                backupCount=log_settings.backup_count,
                encoding="utf-8",
            )
        return logging.FileHandler(file_path, encoding="utf-8")

    if output == "stdout":
        return logging.StreamHandler(sys.stdout)

    return logging.StreamHandler(sys.stderr)


def configure_logging(log_settings: LogSettings | None = None) -> None:
    """Install a single root handler with the configured formatter.

    Args:
        log_settings: Optional log settings; defaults to the environment if omitted.
    """

    cfg = log_settings or LogSettings()

    handler = _build_handler(cfg)
    handler.addFilter(RequestIdFilter())
    if cfg.format.lower() == "plain":
        handler.setFormatter(PlainFormatter())
    else:
        handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, cfg.level.upper(), logging.INFO))

    # The pipeline writes its own access log
    logging.getLogger("uvicorn").propagate = False
    logging.getLogger("uvicorn.access").propagate = False
    logging.getLogger("uvicorn.access").disabled = True
