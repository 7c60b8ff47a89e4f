"""Structured logging for registry requests.

Records are stamped at emit time with the correlation id of the current API
request and, during a building resolution, the verblijfsobject being resolved.
Every BAG request made for one chase therefore carries the same ``object_id``,
even though only the resolver knows it. Request fields passed through
``extra=`` (``registry``, ``url``, ``status_code``, ``duration_ms``) are
rendered next to them, as JSON keys or as ``key=value`` pairs.
"""

import json
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone

# Set per API request by the correlation-id middleware
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

# Set for the duration of one building resolution
resolving_object_id: ContextVar[str] = ContextVar("resolving_object_id", default="")

CONTEXT_FIELDS = ("correlation_id", "object_id")
REQUEST_FIELDS = ("registry", "url", "status_code", "duration_ms")


def get_correlation_id() -> str:
    """Return the current correlation ID, or empty string if not set."""
    return correlation_id.get()


@contextmanager
def bind_object_id(object_id: str):
    """Attribute every record logged inside the block to *object_id*."""
    token = resolving_object_id.set(object_id)
    try:
        yield
    finally:
        resolving_object_id.reset(token)


class RequestContextFilter(logging.Filter):
    """Copy the correlation id and resolving object id onto each record.

    An explicit ``extra={"object_id": ...}`` wins over the bound one.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = correlation_id.get()
        if not getattr(record, "object_id", None):
            record.object_id = resolving_object_id.get()
        return True


def record_fields(record: logging.LogRecord) -> dict:
    """Context and registry request fields set on *record*, in a stable order."""
    fields = {}
    for key in CONTEXT_FIELDS + REQUEST_FIELDS:
        value = getattr(record, key, None)
        if value not in (None, ""):
            fields[key] = value
    return fields


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_fields(record),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class RegistryTextFormatter(logging.Formatter):
    """Plain text with the registry fields appended, e.g. ``[registry=bag status_code=200]``."""

    def __init__(self):
        super().__init__("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        fields = record_fields(record)
        if fields:
            line += " [" + " ".join(f"{k}={v}" for k, v in fields.items()) + "]"
        return line


def setup_logging(json_format: bool = True, level: str = "INFO") -> None:
    """Route all records through one stderr handler.

    Args:
        json_format: JSON lines for the API service; text for the CLI.
        level: Log level string (DEBUG, INFO, WARNING, ERROR).
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    handler = logging.StreamHandler()
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(JSONFormatter() if json_format else RegistryTextFormatter())
    root.addHandler(handler)

    # RegistryClient logs every request itself, with the fields above
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
