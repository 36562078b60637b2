# This file decides whether a principal may act on a vehicle or on a record hanging off a vehicle.
# It exists so every router asks the same question the same way before reading or mutating child rows.
# Ownership of oil changes and fuel records is transitive through the parent vehicle.
# A missing row and a row owned by another user both answer False; callers never learn which.

from __future__ import annotations

from src.api.db_access import DatabaseClient

CHILD_TABLES: frozenset[str] = frozenset({"oil_changes", "fuel_records"})


class OwnershipResolver:
    """Row-level ownership checks run as owner-scoped queries."""

    def __init__(self, *, db: DatabaseClient) -> None:
        self.db = db

    def owns_vehicle(self, vehicle_id: int, user_id: int) -> bool:
        row = self.db.fetch_one(
            "SELECT id FROM vehicles WHERE id = :vehicle_id AND user_id = :user_id",
            {"vehicle_id": vehicle_id, "user_id": user_id},
        )
        return row is not None

    def owns_child_resource(self, child_id: int, user_id: int, child_table: str) -> bool:
        table = self._child_table(child_table)
        row = self.db.fetch_one(
            f"""
            SELECT c.id
            FROM {table} c
            JOIN vehicles v ON v.id = c.vehicle_id
            WHERE c.id = :child_id AND v.user_id = :user_id
            """,
            {"child_id": child_id, "user_id": user_id},
        )
        return row is not None

    def _child_table(self, child_table: str) -> str:
        if child_table not in CHILD_TABLES:
            raise ValueError(f"Unsupported child table: {child_table!r}")
        return self.db.validate_identifier(child_table)
