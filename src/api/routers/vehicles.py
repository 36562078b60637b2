# This file defines vehicle endpoints under the API prefix.
# It exists so clients can create, search, page through, update, and delete their own vehicles.
# Every query is scoped to the authenticated user; foreign ids answer 404 like missing ones.
# Deleting a vehicle also removes its oil changes and fuel records through the store's cascade.

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Path, Query, status

from src.api.dependencies import ConfigDep, PaginationDep, PrincipalDep, get_vehicle_repository
from src.api.error_handlers import invalid_query_param, not_found_or_forbidden
from src.api.pagination import PaginationParamError, normalize_search
from src.api.repositories.vehicle_repository import VehicleRepository
from src.api.response_envelope import (
    build_list_envelope,
    build_message_envelope,
    build_object_envelope,
)
from src.api.schemas.common import ERROR_RESPONSES, MAX_INTEGER, MessageResponse
from src.api.schemas.vehicle_schemas import VehicleListResponse, VehicleResponse, VehicleWrite

router = APIRouter(prefix="/vehicles", tags=["vehicles"], responses=ERROR_RESPONSES)
VehicleRepositoryDep = Annotated[VehicleRepository, Depends(get_vehicle_repository)]
VehicleIdPath = Annotated[int, Path(gt=0, le=MAX_INTEGER, description="Vehicle id")]

RESOURCE_NAME = "Vehicle"


@router.post("", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
def create_vehicle(
    payload: VehicleWrite,
    principal: PrincipalDep,
    vehicles: VehicleRepositoryDep,
) -> dict[str, Any]:
    row = vehicles.create(
        user_id=principal.user_id,
        name=payload.name,
        license_plate=payload.license_plate,
    )
    return build_object_envelope(data=row)


@router.get("", response_model=VehicleListResponse)
def list_vehicles(
    principal: PrincipalDep,
    vehicles: VehicleRepositoryDep,
    config: ConfigDep,
    pagination: PaginationDep,
    search: str | None = Query(default=None),
) -> dict[str, Any]:
    try:
        search_term = normalize_search(search, max_length=config.max_search_length)
    except PaginationParamError as exc:
        raise invalid_query_param(exc.field, str(exc)) from exc

    result = vehicles.list_page(
        user_id=principal.user_id,
        search=search_term,
        pagination=pagination,
    )
    return build_list_envelope(data=result.items, pagination=result.metadata())


@router.get("/{vehicle_id}", response_model=VehicleResponse)
def get_vehicle(
    vehicle_id: VehicleIdPath,
    principal: PrincipalDep,
    vehicles: VehicleRepositoryDep,
) -> dict[str, Any]:
    row = vehicles.get_by_id(vehicle_id, user_id=principal.user_id)
    if row is None:
        raise not_found_or_forbidden(RESOURCE_NAME)
    return build_object_envelope(data=row)


@router.patch("/{vehicle_id}", response_model=VehicleResponse)
def update_vehicle(
    vehicle_id: VehicleIdPath,
    payload: VehicleWrite,
    principal: PrincipalDep,
    vehicles: VehicleRepositoryDep,
) -> dict[str, Any]:
    row = vehicles.update(
        vehicle_id,
        user_id=principal.user_id,
        name=payload.name,
        license_plate=payload.license_plate,
    )
    if row is None:
        raise not_found_or_forbidden(RESOURCE_NAME)
    return build_object_envelope(data=row)


@router.delete("/{vehicle_id}", response_model=MessageResponse)
def delete_vehicle(
    vehicle_id: VehicleIdPath,
    principal: PrincipalDep,
    vehicles: VehicleRepositoryDep,
) -> dict[str, Any]:
    if not vehicles.delete(vehicle_id, user_id=principal.user_id):
        raise not_found_or_forbidden(RESOURCE_NAME)
    return build_message_envelope(message="Vehicle deleted successfully")
