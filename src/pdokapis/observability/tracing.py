"""MLflow tracing helpers for registry calls.

Usage:

    from pdokapis.observability.tracing import trace, start_span

    @trace(name="bag.get_building", span_type="RETRIEVER")
    async def get_building(...): ...

    with start_span("resolve_buildings") as span:
        span.set_inputs({...})
"""

import logging
from contextlib import contextmanager

import mlflow

logger = logging.getLogger(__name__)


def trace(name: str | None = None, **kwargs):
    """Decorator: wraps a sync or async function in an MLflow trace."""
    return mlflow.trace(name=name, **kwargs) if name else mlflow.trace(**kwargs)


@contextmanager
def start_span(name: str = "span", **kwargs):
    """Context manager: MLflow span around a block of work."""
    with mlflow.start_span(name=name, **kwargs) as span:
        yield span


def init_tracing(tracking_uri: str, experiment_name: str) -> None:
    """Point MLflow at the configured tracking store for this process."""
    mlflow.set_tracking_uri(tracking_uri)
    mlflow.set_experiment(experiment_name)
    mlflow.config.enable_async_logging()
    logger.info("MLflow tracing enabled: %s", tracking_uri)
