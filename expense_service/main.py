"""
Expense Tracker API

A FastAPI service backing a personal expense tracker: account signup and
login, recording and deleting income/expense transactions, listing the most
recent ones, searching a single day and summarising a calendar month.

Every route performs a single storage round trip. The database connection
is verified once at startup and released at shutdown; a failed connection is
logged and the service keeps serving, answering each request with a 500.
"""
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from expense_service import database, metrics
from expense_service.api import router
from expense_service.config import settings
from expense_service.logging import (
    configure_logging,
    get_logger,
    set_request_context,
    clear_request_context,
    generate_request_id,
)

# Configure structured logging
configure_logging(settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("service_starting", service_name=settings.service_name)

    database.connect()

    logger.info("service_started", service_name=settings.service_name, port=settings.port)

    yield

    logger.info("service_stopping", service_name=settings.service_name)
    database.disconnect()


app = FastAPI(
    title="Expense Tracker API",
    description="Signup, login and income/expense tracking for a personal budget",
    version="0.1.0",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _endpoint_label(request: Request) -> str:
    """Route template for metrics labels, so ids in paths don't explode cardinality."""
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    """
    Middleware for request tracing, logging, and metrics.

    Sets up request context with:
    - request_id: Unique identifier for tracing
    - Timing for duration_ms calculation
    - Prometheus metrics collection
    """
    method = request.method
    path = request.url.path

    # Skip logging/metrics for health and metrics endpoints
    if path in ("/health", "/metrics"):
        return await call_next(request)

    request_id = request.headers.get("X-Request-ID") or generate_request_id()
    set_request_context(request_id)
    request.state.request_id = request_id

    start_time = time.perf_counter()

    logger.info("request_received", method=method, path=path)

    try:
        response = await call_next(request)

        duration_seconds = time.perf_counter() - start_time

        logger.info(
            "request_completed",
            method=method,
            path=path,
            status_code=response.status_code,
            duration_ms=round(duration_seconds * 1000, 2),
        )

        metrics.record_request(method, _endpoint_label(request), response.status_code, duration_seconds)

        response.headers["X-Request-ID"] = request_id
        return response

    except Exception as e:
        duration_seconds = time.perf_counter() - start_time

        logger.error(
            "request_failed",
            method=method,
            path=path,
            duration_ms=round(duration_seconds * 1000, 2),
            error=str(e),
        )
        metrics.record_request(method, _endpoint_label(request), 500, duration_seconds)
        raise

    finally:
        clear_request_context()


app.include_router(router)


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "ok", "service": settings.service_name}


@app.get("/metrics")
async def prometheus_metrics():
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
