"""DDL helpers for the vehicle maintenance tables."""

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from src.api.api_config import load_api_config
from src.common.logging import configure_logging

logger = logging.getLogger(__name__)

DDL_ORDER = [
    "users.sql",
    "vehicles.sql",
    "oil_changes.sql",
    "fuel_records.sql",
]


def apply_schema(engine: Engine, ddl_dir: Path | None = None) -> None:
    """Apply table DDL files in foreign-key order inside one transaction."""

    ddl_path = ddl_dir or Path("sql/ddl")
    with engine.begin() as connection:
        for ddl_file in DDL_ORDER:
            sql_text = (ddl_path / ddl_file).read_text(encoding="utf-8")
            connection.exec_driver_sql(sql_text)
            logger.info("Applied %s", ddl_file)


def main() -> None:
    config = load_api_config()
    configure_logging(config.log_level)
    engine = create_engine(config.database_url)
    try:
        apply_schema(engine)
    finally:
        engine.dispose()


if __name__ == "__main__":
    main()
