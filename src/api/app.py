# This file builds the FastAPI application and registers all API routers.
# It exists so startup behavior, middleware, and error handling are configured in one place.
# The app adds request IDs, timing headers, request logging, metrics, and a request-size guard.
# The pooled database client is created at startup (unless one is injected) and disposed at shutdown.

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest
from starlette.middleware.base import RequestResponseEndpoint

from src.api.api_config import ApiConfig, get_api_config
from src.api.db_access import DatabaseClient
from src.api.error_handlers import PAYLOAD_TOO_LARGE, register_error_handlers
from src.api.request_limits import RequestBodyLimitMiddleware
from src.api.response_envelope import build_error_envelope
from src.api.routers.auth import router as auth_router
from src.api.routers.fuel_records import router as fuel_records_router
from src.api.routers.health import router as health_router
from src.api.routers.oil_changes import router as oil_changes_router
from src.api.routers.vehicles import router as vehicles_router
from src.common.logging import configure_logging

logger = logging.getLogger(__name__)

API_HTTP_REQUESTS_TOTAL = Counter(
    "api_http_requests_total",
    "Total number of HTTP requests processed by the API.",
    ["method", "path", "status_code"],
)
API_HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "api_http_request_duration_seconds",
    "API request duration in seconds.",
    ["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10),
)
API_HTTP_INFLIGHT_REQUESTS = Gauge(
    "api_http_inflight_requests",
    "Number of API requests currently being processed.",
    ["method"],
)


def _route_label(request: Request) -> str:
    route = request.scope.get("route")
    return str(getattr(route, "path", "unmatched"))


def _declared_length_too_large(request: Request, max_body_bytes: int) -> bool | None:
    """True/False for a readable Content-Length, None when the header is malformed."""

    raw = request.headers.get("content-length")
    if raw is None:
        return False
    try:
        return int(raw) > max_body_bytes
    except ValueError:
        return None


def create_app(
    config: ApiConfig | None = None,
    db_client: DatabaseClient | None = None,
) -> FastAPI:
    """Create configured FastAPI application instance."""

    config = config or get_api_config()
    configure_logging(config.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if app.state.db is None:
            app.state.db = DatabaseClient.from_config(config)
            logger.info("Database pool ready (size=%s)", config.db_pool_size)
        try:
            yield
        finally:
            if app.state.owns_db and app.state.db is not None:
                app.state.db.close()
                app.state.db = None
                logger.info("Database pool closed")

    app = FastAPI(
        title=config.api_name,
        lifespan=lifespan,
        description=(
            "Multi-tenant API for tracking vehicles, oil changes, and fuel records. "
            "Use the `Authorization: Bearer <token>` header for protected routes."
        ),
        version=config.app_version,
        openapi_tags=[
            {"name": "health", "description": "Service index, liveness, and version metadata."},
            {"name": "auth", "description": "Registration, login, and current principal."},
            {"name": "vehicles", "description": "Vehicles owned by the authenticated user."},
            {"name": "oil-changes", "description": "Oil change history per vehicle."},
            {"name": "fuel-records", "description": "Fuel fill-ups per vehicle."},
        ],
    )
    app.state.config = config
    app.state.db = db_client
    app.state.owns_db = db_client is None

    if config.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Streamed bodies are capped on received bytes; Content-Length is checked up front below.
    app.add_middleware(RequestBodyLimitMiddleware, max_body_bytes=config.max_body_bytes)

    @app.middleware("http")
    async def request_context_middleware(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        method_label = request.method
        started = time.perf_counter()
        status_code = 500
        API_HTTP_INFLIGHT_REQUESTS.labels(method=method_label).inc()
        try:
            too_large = _declared_length_too_large(request, config.max_body_bytes)
            if too_large is None:
                response: Response = JSONResponse(
                    status_code=400,
                    content=build_error_envelope(message="Invalid Content-Length header"),
                )
            elif too_large:
                response = JSONResponse(
                    status_code=413,
                    content=build_error_envelope(message=PAYLOAD_TOO_LARGE),
                )
            else:
                response = await call_next(request)
            status_code = response.status_code
            duration_ms = (time.perf_counter() - started) * 1000.0

            response.headers["x-request-id"] = request_id
            response.headers["x-response-time-ms"] = f"{duration_ms:.2f}"
            logger.info(
                "%s %s -> %s (%.2f ms)",
                request.method,
                request.url.path,
                status_code,
                duration_ms,
            )
            return response
        finally:
            duration_s = time.perf_counter() - started
            path_label = _route_label(request)
            API_HTTP_REQUESTS_TOTAL.labels(
                method=method_label,
                path=path_label,
                status_code=str(status_code),
            ).inc()
            API_HTTP_REQUEST_DURATION_SECONDS.labels(
                method=method_label,
                path=path_label,
            ).observe(duration_s)
            API_HTTP_INFLIGHT_REQUESTS.labels(method=method_label).dec()

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(auth_router, prefix=config.api_prefix)
    app.include_router(vehicles_router, prefix=config.api_prefix)
    app.include_router(oil_changes_router, prefix=config.api_prefix)
    app.include_router(fuel_records_router, prefix=config.api_prefix)

    return app


app = create_app()
