# This file provides shared helpers for API endpoint tests.
# It exists so tests can run the real routers and repositories against an in-memory SQLite store.
# The helpers build consistent config objects, a seeded schema, and scoped TestClient contexts.
# Centralized test wiring keeps API tests small and focused on behavior.

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from src.api.api_config import ApiConfig
from src.api.app import create_app
from src.api.db_access import DatabaseClient

DEFAULT_PASSWORD = "Passw0rd"

SQLITE_SCHEMA = [
    """
    CREATE TABLE users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        email TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE vehicles (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL REFERENCES users (id) ON DELETE CASCADE,
        name TEXT NOT NULL,
        license_plate TEXT,
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE oil_changes (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        vehicle_id INTEGER NOT NULL REFERENCES vehicles (id) ON DELETE CASCADE,
        change_date TEXT NOT NULL,
        mileage INTEGER NOT NULL CHECK (mileage >= 0),
        notes TEXT,
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE fuel_records (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        vehicle_id INTEGER NOT NULL REFERENCES vehicles (id) ON DELETE CASCADE,
        fill_date TEXT NOT NULL,
        price_per_liter TEXT NOT NULL,
        liters_filled TEXT NOT NULL,
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
]


def build_test_config(**overrides: Any) -> ApiConfig:
    """Create deterministic API config for tests."""

    values: dict[str, Any] = {
        "api_name": "Test Vehicle API",
        "api_prefix": "/api",
        "app_version": "0.1.0",
        "environment": "test",
        "database_url": "sqlite://",
        "jwt_secret": "test-secret",
        "jwt_expires_minutes": 60,
        "default_page_size": 10,
        "max_page_size": 100,
        "allowed_origins": [],
    }
    values.update(overrides)
    return ApiConfig(**values)


def _enable_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_sqlite_engine() -> Engine:
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _enable_foreign_keys)
    with engine.begin() as connection:
        for statement in SQLITE_SCHEMA:
            connection.exec_driver_sql(statement)
    return engine


def build_test_db_client() -> DatabaseClient:
    """Fresh in-memory store with the API tables created."""

    return DatabaseClient(engine=build_sqlite_engine())


class FakeDBClient:
    """Store double for health checks and failure injection."""

    def __init__(self, *, connected: bool = True, error: Exception | None = None) -> None:
        self._connected = connected
        self._error = error

    def can_connect(self) -> bool:
        return self._connected

    def _fail(self, *_: Any, **__: Any) -> Any:
        if self._error is not None:
            raise self._error
        return None

    fetch_all = _fail
    fetch_one = _fail
    fetch_scalar = _fail
    execute = _fail
    execute_returning_one = _fail

    def close(self) -> None:
        return None


@contextmanager
def api_test_client(
    *,
    config: ApiConfig | None = None,
    db_client: Any | None = None,
    raise_server_exceptions: bool = True,
) -> Iterator[TestClient]:
    """Yield a TestClient for an app wired to the given config and store."""

    resolved_config = config or build_test_config()
    resolved_db = db_client if db_client is not None else build_test_db_client()
    app = create_app(resolved_config, resolved_db)

    try:
        with TestClient(app, raise_server_exceptions=raise_server_exceptions) as client:
            yield client
    finally:
        if isinstance(resolved_db, DatabaseClient):
            resolved_db.close()


def register_user(client: TestClient, email: str, password: str = DEFAULT_PASSWORD) -> dict[str, Any]:
    response = client.post("/api/auth/register", json={"email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()["data"]


def auth_headers(client: TestClient, email: str, password: str = DEFAULT_PASSWORD) -> dict[str, str]:
    """Register a user and return the bearer header for its token."""

    token = register_user(client, email, password)["token"]
    return {"Authorization": f"Bearer {token}"}


def create_vehicle(
    client: TestClient,
    headers: dict[str, str],
    *,
    name: str = "Civic",
    license_plate: str | None = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {"name": name}
    if license_plate is not None:
        body["license_plate"] = license_plate
    response = client.post("/api/vehicles", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]
