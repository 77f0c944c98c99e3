from __future__ import annotations

import logging

from .connection import DatabaseConnection
from .session import transaction

logger = logging.getLogger(__name__)

SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS documents (
        path VARCHAR(512) NOT NULL PRIMARY KEY,
        collection VARCHAR(512) NOT NULL,
        body JSON NOT NULL,
        updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
        INDEX idx_documents_collection (collection)
    )
    """,
)


def apply_schema(conn_factory: DatabaseConnection) -> None:
    """Create the document table (idempotent: CREATE IF NOT EXISTS)."""
    with transaction(conn_factory, dictionary=False) as cur:
        for stmt in SCHEMA_STATEMENTS:
            cur.execute(stmt)
    logger.info("schema ready on %s", conn_factory.config.describe())


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    with transaction(conn_factory, dictionary=False) as cur:
        cur.execute("SHOW TABLES")
        return [str(row[0]) for row in cur.fetchall()]
