# This file defines oil change endpoints nested under vehicles and addressed by record id.
# It exists so clients can log, page through, correct, and remove oil changes for their own vehicles.
# Ownership is checked through the parent vehicle before any read or write of a record.
# A record owned by someone else answers exactly like a record that does not exist.

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Path, status

from src.api.dependencies import OwnershipDep, PaginationDep, PrincipalDep, get_oil_change_repository
from src.api.error_handlers import not_found_or_forbidden
from src.api.repositories.child_records import OilChangeRepository
from src.api.response_envelope import (
    build_list_envelope,
    build_message_envelope,
    build_object_envelope,
)
from src.api.schemas.common import ERROR_RESPONSES, MAX_INTEGER, MessageResponse
from src.api.schemas.record_schemas import OilChangeListResponse, OilChangeResponse, OilChangeWrite

router = APIRouter(tags=["oil-changes"], responses=ERROR_RESPONSES)
OilChangeRepositoryDep = Annotated[OilChangeRepository, Depends(get_oil_change_repository)]
VehicleIdPath = Annotated[int, Path(gt=0, le=MAX_INTEGER, description="Vehicle id")]
RecordIdPath = Annotated[int, Path(gt=0, le=MAX_INTEGER, description="Oil change id")]

RESOURCE_NAME = "Oil change record"
TABLE_NAME = "oil_changes"


@router.post(
    "/vehicles/{vehicle_id}/oil-changes",
    response_model=OilChangeResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_oil_change(
    vehicle_id: VehicleIdPath,
    payload: OilChangeWrite,
    principal: PrincipalDep,
    ownership: OwnershipDep,
    records: OilChangeRepositoryDep,
) -> dict[str, Any]:
    if not ownership.owns_vehicle(vehicle_id, principal.user_id):
        raise not_found_or_forbidden("Vehicle")
    row = records.create(vehicle_id=vehicle_id, values=payload.model_dump())
    return build_object_envelope(data=row)


@router.get("/vehicles/{vehicle_id}/oil-changes", response_model=OilChangeListResponse)
def list_oil_changes(
    vehicle_id: VehicleIdPath,
    principal: PrincipalDep,
    pagination: PaginationDep,
    ownership: OwnershipDep,
    records: OilChangeRepositoryDep,
) -> dict[str, Any]:
    if not ownership.owns_vehicle(vehicle_id, principal.user_id):
        raise not_found_or_forbidden("Vehicle")
    result = records.list_page(
        vehicle_id=vehicle_id,
        user_id=principal.user_id,
        pagination=pagination,
    )
    return build_list_envelope(data=result.items, pagination=result.metadata())


@router.get("/oil-changes/{record_id}", response_model=OilChangeResponse)
def get_oil_change(
    record_id: RecordIdPath,
    principal: PrincipalDep,
    records: OilChangeRepositoryDep,
) -> dict[str, Any]:
    # The read joins vehicles on user_id, so a foreign record comes back as None.
    row = records.get_by_id(record_id, user_id=principal.user_id)
    if row is None:
        raise not_found_or_forbidden(RESOURCE_NAME)
    return build_object_envelope(data=row)


@router.patch("/oil-changes/{record_id}", response_model=OilChangeResponse)
def update_oil_change(
    record_id: RecordIdPath,
    payload: OilChangeWrite,
    principal: PrincipalDep,
    ownership: OwnershipDep,
    records: OilChangeRepositoryDep,
) -> dict[str, Any]:
    if not ownership.owns_child_resource(record_id, principal.user_id, TABLE_NAME):
        raise not_found_or_forbidden(RESOURCE_NAME)
    row = records.update(record_id, user_id=principal.user_id, values=payload.model_dump())
    if row is None:
        raise not_found_or_forbidden(RESOURCE_NAME)
    return build_object_envelope(data=row)


@router.delete("/oil-changes/{record_id}", response_model=MessageResponse)
def delete_oil_change(
    record_id: RecordIdPath,
    principal: PrincipalDep,
    ownership: OwnershipDep,
    records: OilChangeRepositoryDep,
) -> dict[str, Any]:
    if not ownership.owns_child_resource(record_id, principal.user_id, TABLE_NAME):
        raise not_found_or_forbidden(RESOURCE_NAME)
    if not records.delete(record_id, user_id=principal.user_id):
        raise not_found_or_forbidden(RESOURCE_NAME)
    return build_message_envelope(message="Oil change record deleted successfully")
