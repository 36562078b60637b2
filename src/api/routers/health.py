# This file defines the service index, health, and version endpoints.
# It exists so orchestration and monitoring systems can verify service health quickly.
# The health check runs a trivial query through the pool and reports 503 when it fails.

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from src.api.dependencies import ConfigDep, DBDep
from src.api.schemas.health_schemas import HealthResponse, ServiceIndexResponse, VersionResponse

router = APIRouter(tags=["health"])


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@router.get("/", response_model=ServiceIndexResponse)
def service_index(config: ConfigDep) -> dict[str, Any]:
    prefix = config.api_prefix
    return {
        "status": "success",
        "message": config.api_name,
        "version": config.app_version,
        "documentation": {
            "auth": f"{prefix}/auth (POST /register, POST /login, GET /me)",
            "vehicles": f"{prefix}/vehicles (GET, POST, GET /:id, PATCH /:id, DELETE /:id)",
            "oilChanges": (
                f"{prefix}/vehicles/:vehicleId/oil-changes (GET, POST), "
                f"{prefix}/oil-changes/:id (GET, PATCH, DELETE)"
            ),
            "fuelRecords": (
                f"{prefix}/vehicles/:vehicleId/fuel-records (GET, POST), "
                f"{prefix}/fuel-records/:id (GET, PATCH, DELETE)"
            ),
        },
    }


@router.get("/health", response_model=HealthResponse, responses={503: {"model": HealthResponse}})
def health(config: ConfigDep, db: DBDep) -> Any:
    connected = db.can_connect()
    payload = HealthResponse(
        status="success" if connected else "error",
        message="Server is healthy" if connected else "Server health check failed",
        environment=config.environment,
        database="connected" if connected else "disconnected",
        timestamp=_utc_now(),
    )
    if connected:
        return payload
    return JSONResponse(status_code=503, content=payload.model_dump(mode="json"))


@router.get("/version", response_model=VersionResponse)
def version(config: ConfigDep) -> dict[str, Any]:
    return {
        "status": "success",
        "data": {
            "project": config.api_name,
            "version": config.app_version,
            "api_prefix": config.api_prefix,
            "environment": config.environment,
        },
    }
