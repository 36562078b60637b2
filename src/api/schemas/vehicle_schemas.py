# This file defines vehicle request bodies, rows, and list envelopes.
# It exists so vehicle payload rules and response shapes are strongly typed in one place.
# Names are trimmed and required; license plates are optional and blank plates become null.

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator

from src.api.schemas.common import PaginationMetadata, SuccessEnvelope, trim_optional

MAX_NAME_LENGTH = 100
MAX_LICENSE_PLATE_LENGTH = 20


class VehicleWrite(BaseModel):
    name: str
    license_plate: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not 1 <= len(cleaned) <= MAX_NAME_LENGTH:
            raise ValueError(
                f"Vehicle name is required and must be between 1 and {MAX_NAME_LENGTH} characters"
            )
        return cleaned

    @field_validator("license_plate")
    @classmethod
    def validate_license_plate(cls, value: str | None) -> str | None:
        cleaned = trim_optional(value)
        if cleaned is not None and len(cleaned) > MAX_LICENSE_PLATE_LENGTH:
            raise ValueError(f"License plate must not exceed {MAX_LICENSE_PLATE_LENGTH} characters")
        return cleaned


class VehicleOut(BaseModel):
    id: int
    user_id: int
    name: str
    license_plate: str | None = None
    created_at: datetime


class VehicleResponse(SuccessEnvelope):
    data: VehicleOut


class VehicleListResponse(SuccessEnvelope):
    pagination: PaginationMetadata
    data: list[VehicleOut]
