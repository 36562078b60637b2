# This file provides dependency factories for FastAPI routes.
# It exists so the config, the pooled database client, and repositories come from one place.
# The database client is owned by the application instance, not by a module global.
# The setup keeps routers thin and makes endpoint tests easy to wire with a different store.

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Header, Query, Request

from src.api.api_config import ApiConfig
from src.api.db_access import DatabaseClient
from src.api.error_handlers import invalid_query_param
from src.api.ownership import OwnershipResolver
from src.api.pagination import PaginationParamError, PaginationSpec, normalize_pagination
from src.api.repositories.child_records import FuelRecordRepository, OilChangeRepository
from src.api.repositories.user_repository import UserRepository
from src.api.repositories.vehicle_repository import VehicleRepository
from src.api.security import AuthError, Principal, verify_bearer_header

logger = logging.getLogger(__name__)


def get_config(request: Request) -> ApiConfig:
    return request.app.state.config


def get_database_client(request: Request) -> DatabaseClient:
    return request.app.state.db


ConfigDep = Annotated[ApiConfig, Depends(get_config)]
DBDep = Annotated[DatabaseClient, Depends(get_database_client)]


def get_ownership_resolver(db: DBDep) -> OwnershipResolver:
    return OwnershipResolver(db=db)


def get_user_repository(db: DBDep) -> UserRepository:
    return UserRepository(db=db)


def get_vehicle_repository(db: DBDep) -> VehicleRepository:
    return VehicleRepository(db=db)


def get_oil_change_repository(db: DBDep) -> OilChangeRepository:
    return OilChangeRepository(db=db)


def get_fuel_record_repository(db: DBDep) -> FuelRecordRepository:
    return FuelRecordRepository(db=db)


def get_current_principal(
    config: ConfigDep,
    authorization: Annotated[str | None, Header()] = None,
) -> Principal:
    """Resolve the bearer token on the request into a principal or fail with 401."""

    try:
        return verify_bearer_header(
            authorization,
            secret=config.jwt_secret,
            algorithm=config.jwt_algorithm,
        )
    except AuthError as exc:
        logger.info("Rejected credentials: %s", exc.kind.value)
        raise


def get_pagination(
    config: ConfigDep,
    page: Annotated[int | None, Query()] = None,
    limit: Annotated[int | None, Query()] = None,
) -> PaginationSpec:
    try:
        return normalize_pagination(
            page=page,
            limit=limit,
            default_page_size=config.default_page_size,
            max_page_size=config.max_page_size,
        )
    except PaginationParamError as exc:
        raise invalid_query_param(exc.field, str(exc)) from exc


OwnershipDep = Annotated[OwnershipResolver, Depends(get_ownership_resolver)]
PrincipalDep = Annotated[Principal, Depends(get_current_principal)]
PaginationDep = Annotated[PaginationSpec, Depends(get_pagination)]
