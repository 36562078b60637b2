# This file defines consistent API error payloads and exception handlers.
# It exists so every endpoint returns the same error envelope regardless of where a failure starts.
# The handlers translate validation, auth, ownership, and store failures into safe client messages.
# Driver errors are classified into a closed set of kinds; raw details only reach the logs.

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import (
    DataError,
    DBAPIError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.response_envelope import build_error_envelope

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Internal server error"
VALIDATION_FAILED = "Validation failed"
INVALID_JSON = "Invalid JSON in request body"
PAYLOAD_TOO_LARGE = "Request entity too large"


class APIError(Exception):
    """Domain error type with structured API details."""

    def __init__(
        self,
        *,
        status_code: int,
        error_code: str,
        message: str,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.errors = errors
        super().__init__(message)


def not_found_or_forbidden(resource: str) -> APIError:
    """Missing rows and rows owned by someone else are reported identically."""

    return APIError(
        status_code=404,
        error_code="NOT_FOUND_OR_FORBIDDEN",
        message=f"{resource} not found or you do not have permission to access it",
    )


def invalid_query_param(field: str, message: str) -> APIError:
    return APIError(
        status_code=400,
        error_code="INVALID_QUERY_PARAM",
        message=VALIDATION_FAILED,
        errors=[{"field": field, "message": message, "location": "query"}],
    )


class StoreErrorKind(str, Enum):
    UNIQUE_VIOLATION = "unique_violation"
    FOREIGN_KEY_VIOLATION = "foreign_key_violation"
    CHECK_VIOLATION = "check_violation"
    INVALID_DATA = "invalid_data"
    POOL_TIMEOUT = "pool_timeout"
    CONNECTION = "connection"
    UNKNOWN = "unknown"


_PG_CODES = {
    "23505": StoreErrorKind.UNIQUE_VIOLATION,
    "23503": StoreErrorKind.FOREIGN_KEY_VIOLATION,
    "23514": StoreErrorKind.CHECK_VIOLATION,
}

_STORE_ERROR_RESPONSES: dict[StoreErrorKind, tuple[int, str]] = {
    StoreErrorKind.UNIQUE_VIOLATION: (409, "Resource already exists"),
    StoreErrorKind.FOREIGN_KEY_VIOLATION: (404, "Related resource not found"),
    StoreErrorKind.CHECK_VIOLATION: (400, VALIDATION_FAILED),
    StoreErrorKind.INVALID_DATA: (400, VALIDATION_FAILED),
}


def classify_store_error(exc: SQLAlchemyError) -> StoreErrorKind:
    """Map a SQLAlchemy/driver failure onto the closed set of store error kinds."""

    if isinstance(exc, PoolTimeoutError):
        return StoreErrorKind.POOL_TIMEOUT
    if isinstance(exc, IntegrityError):
        original = exc.orig
        pg_code = getattr(original, "pgcode", None)
        if pg_code in _PG_CODES:
            return _PG_CODES[pg_code]
        detail = str(original).lower()
        if "unique" in detail:
            return StoreErrorKind.UNIQUE_VIOLATION
        if "foreign key" in detail:
            return StoreErrorKind.FOREIGN_KEY_VIOLATION
        if "check" in detail:
            return StoreErrorKind.CHECK_VIOLATION
        return StoreErrorKind.UNKNOWN
    if isinstance(exc, DataError):
        return StoreErrorKind.INVALID_DATA
    if isinstance(exc, (OperationalError, InterfaceError)):
        return StoreErrorKind.CONNECTION
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return StoreErrorKind.CONNECTION
    return StoreErrorKind.UNKNOWN


def _is_development(request: Request) -> bool:
    config = getattr(request.app.state, "config", None)
    return bool(config is not None and config.is_development)


def _field_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    errors: list[dict[str, Any]] = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ())]
        field = ".".join(location[1:]) if len(location) > 1 else (location[0] if location else "")
        message = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
        errors.append(
            {
                "field": field,
                "message": message,
                "location": location[0] if location else "unknown",
            }
        )
    return errors


def _error_response(
    status_code: int, message: str, errors: list[dict[str, Any]] | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=build_error_envelope(message=message, errors=errors),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.error_code)
        return _error_response(exc.status_code, exc.message, exc.errors)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        if any(error.get("type") == "json_invalid" for error in exc.errors()):
            return _error_response(400, INVALID_JSON)
        return _error_response(400, VALIDATION_FAILED, _field_errors(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            message = f"Route {request.method} {request.url.path} not found"
        else:
            message = str(exc.detail)
        return _error_response(exc.status_code, message)

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        kind = classify_store_error(exc)
        logger.error(
            "Store failure on %s %s kind=%s detail=%s",
            request.method,
            request.url.path,
            kind.value,
            exc,
        )
        if kind in _STORE_ERROR_RESPONSES:
            status_code, message = _STORE_ERROR_RESPONSES[kind]
            return _error_response(status_code, message)
        message = str(exc) if _is_development(request) else GENERIC_SERVER_ERROR
        return _error_response(500, message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        message = str(exc) if _is_development(request) else GENERIC_SERVER_ERROR
        return _error_response(500, message)
