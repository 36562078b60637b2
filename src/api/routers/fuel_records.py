# This file defines fuel record endpoints nested under vehicles and addressed by record id.
# It exists so clients can log fill-ups, page through them, correct them, and remove them.
# Ownership is checked through the parent vehicle before any read or write of a record.
# Prices and volumes travel as decimals so totals are never rounded by float conversion.

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Path, status

from src.api.dependencies import (
    OwnershipDep,
    PaginationDep,
    PrincipalDep,
    get_fuel_record_repository,
)
from src.api.error_handlers import not_found_or_forbidden
from src.api.repositories.child_records import FuelRecordRepository
from src.api.response_envelope import (
    build_list_envelope,
    build_message_envelope,
    build_object_envelope,
)
from src.api.schemas.common import ERROR_RESPONSES, MAX_INTEGER, MessageResponse
from src.api.schemas.record_schemas import (
    FuelRecordListResponse,
    FuelRecordResponse,
    FuelRecordWrite,
)

router = APIRouter(tags=["fuel-records"], responses=ERROR_RESPONSES)
FuelRecordRepositoryDep = Annotated[FuelRecordRepository, Depends(get_fuel_record_repository)]
VehicleIdPath = Annotated[int, Path(gt=0, le=MAX_INTEGER, description="Vehicle id")]
RecordIdPath = Annotated[int, Path(gt=0, le=MAX_INTEGER, description="Fuel record id")]

RESOURCE_NAME = "Fuel record"
TABLE_NAME = "fuel_records"


@router.post(
    "/vehicles/{vehicle_id}/fuel-records",
    response_model=FuelRecordResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_fuel_record(
    vehicle_id: VehicleIdPath,
    payload: FuelRecordWrite,
    principal: PrincipalDep,
    ownership: OwnershipDep,
    records: FuelRecordRepositoryDep,
) -> dict[str, Any]:
    if not ownership.owns_vehicle(vehicle_id, principal.user_id):
        raise not_found_or_forbidden("Vehicle")
    row = records.create(vehicle_id=vehicle_id, values=payload.model_dump())
    return build_object_envelope(data=row)


@router.get("/vehicles/{vehicle_id}/fuel-records", response_model=FuelRecordListResponse)
def list_fuel_records(
    vehicle_id: VehicleIdPath,
    principal: PrincipalDep,
    pagination: PaginationDep,
    ownership: OwnershipDep,
    records: FuelRecordRepositoryDep,
) -> dict[str, Any]:
    if not ownership.owns_vehicle(vehicle_id, principal.user_id):
        raise not_found_or_forbidden("Vehicle")
    result = records.list_page(
        vehicle_id=vehicle_id,
        user_id=principal.user_id,
        pagination=pagination,
    )
    return build_list_envelope(data=result.items, pagination=result.metadata())


@router.get("/fuel-records/{record_id}", response_model=FuelRecordResponse)
def get_fuel_record(
    record_id: RecordIdPath,
    principal: PrincipalDep,
    records: FuelRecordRepositoryDep,
) -> dict[str, Any]:
    # The read joins vehicles on user_id, so a foreign record comes back as None.
    row = records.get_by_id(record_id, user_id=principal.user_id)
    if row is None:
        raise not_found_or_forbidden(RESOURCE_NAME)
    return build_object_envelope(data=row)


@router.patch("/fuel-records/{record_id}", response_model=FuelRecordResponse)
def update_fuel_record(
    record_id: RecordIdPath,
    payload: FuelRecordWrite,
    principal: PrincipalDep,
    ownership: OwnershipDep,
    records: FuelRecordRepositoryDep,
) -> dict[str, Any]:
    if not ownership.owns_child_resource(record_id, principal.user_id, TABLE_NAME):
        raise not_found_or_forbidden(RESOURCE_NAME)
    row = records.update(record_id, user_id=principal.user_id, values=payload.model_dump())
    if row is None:
        raise not_found_or_forbidden(RESOURCE_NAME)
    return build_object_envelope(data=row)


@router.delete("/fuel-records/{record_id}", response_model=MessageResponse)
def delete_fuel_record(
    record_id: RecordIdPath,
    principal: PrincipalDep,
    ownership: OwnershipDep,
    records: FuelRecordRepositoryDep,
) -> dict[str, Any]:
    if not ownership.owns_child_resource(record_id, principal.user_id, TABLE_NAME):
        raise not_found_or_forbidden(RESOURCE_NAME)
    if not records.delete(record_id, user_id=principal.user_id):
        raise not_found_or_forbidden(RESOURCE_NAME)
    return build_message_envelope(message="Fuel record deleted successfully")
