# This file defines shared schema pieces reused by multiple API endpoints.
# It exists so envelope status, pagination, and error payloads stay consistent.
# Shared models reduce duplication and keep contract changes easier to review.
# These classes are also used by tests to validate response shape stability.

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


# Largest value a PostgreSQL INTEGER / SERIAL column holds.
MAX_INTEGER = 2_147_483_647


class PaginationMetadata(BaseModel):
    currentPage: int = Field(ge=1)
    totalPages: int = Field(ge=0)
    totalItems: int = Field(ge=0)
    limit: int = Field(ge=1)


class SuccessEnvelope(BaseModel):
    status: Literal["success"] = "success"


class FieldError(BaseModel):
    field: str
    message: str
    location: str


class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    message: str
    errors: list[FieldError] | None = None


class MessageData(BaseModel):
    message: str


class MessageResponse(SuccessEnvelope):
    data: MessageData


def trim_optional(value: str | None) -> str | None:
    """Trim a free-text value; blank strings are stored as NULL."""

    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    status_code: {"model": ErrorResponse} for status_code in (400, 401, 404, 413, 500)
}
