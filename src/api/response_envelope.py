# This file builds response envelopes for API endpoints in a consistent format.
# It exists so clients can branch on `status` alone for every success and failure response.
# The helpers return plain dictionaries that Pydantic response models validate at runtime.
# This keeps endpoint functions focused on data access instead of repetitive envelope assembly.

from __future__ import annotations

from typing import Any

SUCCESS_STATUS = "success"
ERROR_STATUS = "error"


def build_object_envelope(*, data: Any) -> dict[str, Any]:
    """Build standard single-entity (or message) response envelope."""

    return {"status": SUCCESS_STATUS, "data": data}


def build_list_envelope(*, data: list[dict[str, Any]], pagination: dict[str, Any]) -> dict[str, Any]:
    """Build standard paginated list response envelope."""

    return {"status": SUCCESS_STATUS, "pagination": pagination, "data": data}


def build_message_envelope(*, message: str) -> dict[str, Any]:
    return build_object_envelope(data={"message": message})


def build_error_envelope(
    *, message: str, errors: list[dict[str, Any]] | None = None
) -> dict[str, Any]:
    """Build standard error envelope; `errors` is omitted when there is nothing to list."""

    payload: dict[str, Any] = {"status": ERROR_STATUS, "message": message}
    if errors:
        payload["errors"] = errors
    return payload
