# This file implements data access for user accounts used by registration and login.
# It exists so auth routes never build SQL themselves.
# Users are only ever created and looked up here; nothing in the API updates or deletes them.

from __future__ import annotations

from typing import Any

from src.api.db_access import DatabaseClient

USER_COLUMNS = "id, email, password_hash, created_at"


class UserRepository:
    def __init__(self, *, db: DatabaseClient) -> None:
        self.db = db

    def get_by_email(self, email: str) -> dict[str, Any] | None:
        return self.db.fetch_one(
            f"SELECT {USER_COLUMNS} FROM users WHERE email = :email",
            {"email": email},
        )

    def create(self, *, email: str, password_hash: str) -> dict[str, Any]:
        row = self.db.execute_returning_one(
            f"""
            INSERT INTO users (email, password_hash)
            VALUES (:email, :password_hash)
            RETURNING {USER_COLUMNS}
            """,
            {"email": email, "password_hash": password_hash},
        )
        if row is None:
            raise RuntimeError("User insert returned no row.")
        return row
