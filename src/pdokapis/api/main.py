"""pdok-apis API: FastAPI application over the Locatieserver, BRK and BAG clients.

Run:
    uvicorn pdokapis.api.main:app --reload
    # or
    pdok-api
"""

import logging
import uuid
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from pdokapis import __version__
from pdokapis.api.routes import router
from pdokapis.api.schemas import HealthResponse
from pdokapis.config import settings
from pdokapis.observability.logging import correlation_id, setup_logging
from pdokapis.observability.tracing import init_tracing
from pdokapis.pipeline.status import check_registries
from pdokapis.retrieval.bag import BagClientBuilder
from pdokapis.retrieval.brk import BrkClientBuilder
from pdokapis.retrieval.locatieserver import LookupClientBuilder

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the registry clients on startup, close them on shutdown."""
    setup_logging(json_format=settings.log_json, level=settings.log_level)
    init_tracing(settings.mlflow_tracking_uri, settings.mlflow_experiment_name)

    app.state.lookup = LookupClientBuilder(settings.user_agent).build()
    app.state.brk = BrkClientBuilder(settings.user_agent).build()
    app.state.bag = BagClientBuilder(settings.user_agent).build()
    if not settings.bag_api_key:
        logger.warning("BAG_API_KEY not set: building lookups will be rejected by BAG")

    logger.info("pdok-apis API ready")
    yield
    logger.info("Shutting down")
    for client in (app.state.lookup, app.state.brk, app.state.bag):
        await client.aclose()


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """Set correlation ID from X-Request-ID header or generate a new one."""

    async def dispatch(self, request: Request, call_next):
        cid = request.headers.get("x-request-id", str(uuid.uuid4()))
        token = correlation_id.set(cid)
        try:
            response = await call_next(request)
            response.headers["x-request-id"] = cid
            return response
        finally:
            correlation_id.reset(token)


app = FastAPI(
    title="pdok-apis",
    description="Resolve Dutch addresses, cadastral lots and BAG buildings "
    "across the Locatieserver, BRK and BAG registries.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(CorrelationIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/health", response_model=HealthResponse)
async def health(request: Request):
    """Health check: one known-good query against every registry."""
    checks = await check_registries(request.app.state.lookup, request.app.state.brk, request.app.state.bag)
    status = "healthy" if all(v == "ok" for v in checks.values()) else "degraded"
    return {"status": status, "checks": checks}


def run() -> None:
    """Console entry point: pdok-api"""
    uvicorn.run("pdokapis.api.main:app", host="0.0.0.0", port=8000)
