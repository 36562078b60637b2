# This file implements owner-scoped data access for vehicles.
# It exists so routers can stay transport-focused while SQL and scoping rules live in one layer.
# Every statement filters on user_id, so another tenant's vehicle simply matches zero rows.
# Deleting a vehicle relies on ON DELETE CASCADE to remove its oil changes and fuel records.

from __future__ import annotations

from typing import Any

from src.api.db_access import DatabaseClient
from src.api.pagination import PageResult, PaginationSpec, ScopedQuery, contains_pattern, paginate

VEHICLE_COLUMNS = "v.id, v.user_id, v.name, v.license_plate, v.created_at"
_RETURNING_COLUMNS = "id, user_id, name, license_plate, created_at"


class VehicleRepository:
    """Data retrieval and mutation for vehicles owned by one user."""

    def __init__(self, *, db: DatabaseClient) -> None:
        self.db = db

    def create(self, *, user_id: int, name: str, license_plate: str | None) -> dict[str, Any]:
        row = self.db.execute_returning_one(
            f"""
            INSERT INTO vehicles (user_id, name, license_plate)
            VALUES (:user_id, :name, :license_plate)
            RETURNING {_RETURNING_COLUMNS}
            """,
            {"user_id": user_id, "name": name, "license_plate": license_plate},
        )
        if row is None:
            raise RuntimeError("Vehicle insert returned no row.")
        return row

    def get_by_id(self, vehicle_id: int, *, user_id: int) -> dict[str, Any] | None:
        return self.db.fetch_one(
            f"SELECT {VEHICLE_COLUMNS} FROM vehicles v WHERE v.id = :vehicle_id AND v.user_id = :user_id",
            {"vehicle_id": vehicle_id, "user_id": user_id},
        )

    def list_page(
        self,
        *,
        user_id: int,
        search: str | None,
        pagination: PaginationSpec,
    ) -> PageResult:
        where_clauses = ["v.user_id = :user_id"]
        params: dict[str, Any] = {"user_id": user_id}
        if search is not None:
            where_clauses.append(
                "(LOWER(v.name) LIKE :search ESCAPE '\\' "
                "OR LOWER(v.license_plate) LIKE :search ESCAPE '\\')"
            )
            params["search"] = contains_pattern(search)

        query = ScopedQuery(
            from_sql="vehicles v",
            where_sql=" AND ".join(where_clauses),
            order_by="v.created_at DESC, v.id DESC",
            columns=VEHICLE_COLUMNS,
            params=params,
        )
        return paginate(self.db, query, pagination)

    def update(
        self,
        vehicle_id: int,
        *,
        user_id: int,
        name: str,
        license_plate: str | None,
    ) -> dict[str, Any] | None:
        return self.db.execute_returning_one(
            f"""
            UPDATE vehicles
            SET name = :name, license_plate = :license_plate
            WHERE id = :vehicle_id AND user_id = :user_id
            RETURNING {_RETURNING_COLUMNS}
            """,
            {
                "vehicle_id": vehicle_id,
                "user_id": user_id,
                "name": name,
                "license_plate": license_plate,
            },
        )

    def delete(self, vehicle_id: int, *, user_id: int) -> bool:
        affected = self.db.execute(
            "DELETE FROM vehicles WHERE id = :vehicle_id AND user_id = :user_id",
            {"vehicle_id": vehicle_id, "user_id": user_id},
        )
        return affected > 0
