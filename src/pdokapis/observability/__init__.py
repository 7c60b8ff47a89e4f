"""Observability: structured logging and MLflow tracing helpers."""

from pdokapis.observability.logging import bind_object_id, get_correlation_id, setup_logging
from pdokapis.observability.tracing import init_tracing, start_span, trace

__all__ = ["bind_object_id", "get_correlation_id", "init_tracing", "setup_logging", "start_span", "trace"]
