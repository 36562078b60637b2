# This file defines oil change and fuel record request bodies, rows, and list envelopes.
# It exists so maintenance record rules are declared once and shared by create and update routes.
# Monetary and volume fields use Decimal and are rounded half-up to the NUMERIC(10, 2) storage scale.

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, Field, field_validator

from src.api.schemas.common import MAX_INTEGER, PaginationMetadata, SuccessEnvelope, trim_optional

MAX_NOTES_LENGTH = 1000
MAX_MILEAGE = MAX_INTEGER
MONEY_STEP = Decimal("0.01")
MAX_NUMERIC_10_2 = Decimal("99999999.99")


class OilChangeWrite(BaseModel):
    change_date: date
    mileage: int = Field(ge=0, le=MAX_MILEAGE)
    notes: str | None = None

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, value: str | None) -> str | None:
        cleaned = trim_optional(value)
        if cleaned is not None and len(cleaned) > MAX_NOTES_LENGTH:
            raise ValueError(f"Notes must not exceed {MAX_NOTES_LENGTH} characters")
        return cleaned


class OilChangeOut(BaseModel):
    id: int
    vehicle_id: int
    change_date: date
    mileage: int
    notes: str | None = None
    created_at: datetime


class OilChangeResponse(SuccessEnvelope):
    data: OilChangeOut


class OilChangeListResponse(SuccessEnvelope):
    pagination: PaginationMetadata
    data: list[OilChangeOut]


class FuelRecordWrite(BaseModel):
    fill_date: date
    price_per_liter: Decimal = Field(gt=0)
    liters_filled: Decimal = Field(gt=0)

    @field_validator("price_per_liter", "liters_filled")
    @classmethod
    def round_to_cents(cls, value: Decimal) -> Decimal:
        """Store values the way NUMERIC(10, 2) does: half-up to two places."""

        if value > MAX_NUMERIC_10_2:
            raise ValueError(f"Value must not exceed {MAX_NUMERIC_10_2}")
        rounded = value.quantize(MONEY_STEP, rounding=ROUND_HALF_UP)
        if rounded <= 0:
            raise ValueError("Value must be at least 0.01 after rounding to 2 decimal places")
        return rounded


class FuelRecordOut(BaseModel):
    id: int
    vehicle_id: int
    fill_date: date
    price_per_liter: Decimal
    liters_filled: Decimal
    created_at: datetime


class FuelRecordResponse(SuccessEnvelope):
    data: FuelRecordOut


class FuelRecordListResponse(SuccessEnvelope):
    pagination: PaginationMetadata
    data: list[FuelRecordOut]
