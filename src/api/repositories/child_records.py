# This file implements owner-scoped data access for records that belong to a vehicle.
# It exists because oil changes and fuel records share one ownership rule and one listing shape.
# Ownership is transitive: a record is visible only through a vehicle whose user_id matches.
# Updates and deletes are single statements whose WHERE clause carries that ownership check.

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from src.api.db_access import DatabaseClient
from src.api.pagination import PageResult, PaginationSpec, ScopedQuery, paginate

_OWNED_VEHICLES_SQL = "SELECT id FROM vehicles WHERE user_id = :user_id"


class ChildRecordRepository:
    """Shared CRUD for tables keyed by vehicle_id."""

    table: str = ""
    fields: tuple[str, ...] = ()
    date_column: str = ""

    def __init__(self, *, db: DatabaseClient) -> None:
        self.db = db
        self.table = db.validate_identifier(self.table)

    @property
    def all_columns(self) -> tuple[str, ...]:
        return ("id", "vehicle_id", *self.fields, "created_at")

    def _select_columns(self, alias: str) -> str:
        return ", ".join(f"{alias}.{column}" for column in self.all_columns)

    def _field_values(self, values: Mapping[str, Any]) -> dict[str, Any]:
        missing = [name for name in self.fields if name not in values]
        if missing:
            raise ValueError(f"Missing fields for {self.table}: {', '.join(missing)}")
        return {name: values[name] for name in self.fields}

    def create(self, *, vehicle_id: int, values: Mapping[str, Any]) -> dict[str, Any]:
        """Insert a record; the caller has already confirmed the vehicle is owned."""

        params = {"vehicle_id": vehicle_id, **self._field_values(values)}
        column_sql = ", ".join(("vehicle_id", *self.fields))
        value_sql = ", ".join(f":{name}" for name in ("vehicle_id", *self.fields))
        row = self.db.execute_returning_one(
            f"""
            INSERT INTO {self.table} ({column_sql})
            VALUES ({value_sql})
            RETURNING {", ".join(self.all_columns)}
            """,
            params,
        )
        if row is None:
            raise RuntimeError(f"Insert into {self.table} returned no row.")
        return row

    def get_by_id(self, record_id: int, *, user_id: int) -> dict[str, Any] | None:
        return self.db.fetch_one(
            f"""
            SELECT {self._select_columns("c")}
            FROM {self.table} c
            JOIN vehicles v ON v.id = c.vehicle_id
            WHERE c.id = :record_id AND v.user_id = :user_id
            """,
            {"record_id": record_id, "user_id": user_id},
        )

    def list_page(
        self,
        *,
        vehicle_id: int,
        user_id: int,
        pagination: PaginationSpec,
    ) -> PageResult:
        query = ScopedQuery(
            from_sql=f"{self.table} c JOIN vehicles v ON v.id = c.vehicle_id",
            where_sql="c.vehicle_id = :vehicle_id AND v.user_id = :user_id",
            order_by=f"c.{self.date_column} DESC, c.created_at DESC, c.id DESC",
            columns=self._select_columns("c"),
            params={"vehicle_id": vehicle_id, "user_id": user_id},
        )
        return paginate(self.db, query, pagination)

    def update(
        self,
        record_id: int,
        *,
        user_id: int,
        values: Mapping[str, Any],
    ) -> dict[str, Any] | None:
        params = {"record_id": record_id, "user_id": user_id, **self._field_values(values)}
        set_sql = ", ".join(f"{name} = :{name}" for name in self.fields)
        return self.db.execute_returning_one(
            f"""
            UPDATE {self.table}
            SET {set_sql}
            WHERE id = :record_id AND vehicle_id IN ({_OWNED_VEHICLES_SQL})
            RETURNING {", ".join(self.all_columns)}
            """,
            params,
        )

    def delete(self, record_id: int, *, user_id: int) -> bool:
        affected = self.db.execute(
            f"DELETE FROM {self.table} WHERE id = :record_id AND vehicle_id IN ({_OWNED_VEHICLES_SQL})",
            {"record_id": record_id, "user_id": user_id},
        )
        return affected > 0


class OilChangeRepository(ChildRecordRepository):
    table = "oil_changes"
    fields = ("change_date", "mileage", "notes")
    date_column = "change_date"


class FuelRecordRepository(ChildRecordRepository):
    table = "fuel_records"
    fields = ("fill_date", "price_per_liter", "liters_filled")
    date_column = "fill_date"
