"""Short-lived MySQL sessions for the document table."""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def transaction(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator:
    """One connection per unit of work: commit on success, roll back on error."""
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield cur
            conn.commit()
        finally:
            cur.close()
    except Exception as exc:
        logger.debug("rolling back: %s: %s", type(exc).__name__, exc)
        conn.rollback()
        raise
    finally:
        conn.close()


def decode_body(body) -> dict:
    # mysql-connector returns JSON columns as str or bytes depending on the driver build.
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8")
    return json.loads(body) if isinstance(body, str) else dict(body)


def fetch_body(cur) -> Optional[dict]:
    row = cur.fetchone()
    return decode_body(row["body"]) if row else None


def fetch_bodies(cur) -> list[dict]:
    return [decode_body(row["body"]) for row in cur.fetchall() or []]
