from __future__ import annotations

import importlib

from dotenv import load_dotenv

from crewsite.database.bootstrap import apply_schema, list_tables
from crewsite.database.connection import DatabaseConnection, DBConfig
from crewsite.settings import get_settings_module


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    conn_factory = DatabaseConnection(DBConfig.from_dict(settings.DB_CONFIG))

    apply_schema(conn_factory)
    tables = list_tables(conn_factory)
    print(f"OK: Applied schema -> {conn_factory.config.describe()} (tables={len(tables)})")


if __name__ == "__main__":
    main()
