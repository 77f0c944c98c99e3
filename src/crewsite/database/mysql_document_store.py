from __future__ import annotations

import json
from typing import Iterable, Optional, Sequence

import mysql.connector.errors

from ..core.exceptions import DocumentConflict, DocumentExists
from ..store.document_store import Filter, OrderBy, apply_ordering, expectation_holds, matches, split_path
from .connection import DatabaseConnection
from .session import fetch_bodies, fetch_body, transaction


def _key(path: str) -> tuple[str, str]:
    key = path.strip("/")
    collection, _ = split_path(key)
    return key, collection


class MySQLDocumentStore:
    """DocumentStore backed by a single ``documents`` table with a JSON body.

    Filtering and ordering run in Python over one collection; the primary key
    on ``path`` provides the conditional create.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, path: str) -> Optional[dict]:
        key, _ = _key(path)
        with transaction(self._conn_factory) as cur:
            cur.execute("SELECT body FROM documents WHERE path=%s", (key,))
            return fetch_body(cur)

    def put(self, path: str, document: dict) -> None:
        key, collection = _key(path)
        with transaction(self._conn_factory) as cur:
            cur.execute(
                """
                INSERT INTO documents(path, collection, body)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE body=VALUES(body)
                """,
                (key, collection, json.dumps(document)),
            )

    def create(self, path: str, document: dict) -> None:
        key, collection = _key(path)
        try:
            with transaction(self._conn_factory) as cur:
                cur.execute(
                    "INSERT INTO documents(path, collection, body) VALUES(%s,%s,%s)",
                    (key, collection, json.dumps(document)),
                )
        except mysql.connector.errors.IntegrityError:
            raise DocumentExists(key) from None

    def update(self, path: str, partial: dict, *, expect: Optional[dict] = None) -> None:
        key, _ = _key(path)
        with transaction(self._conn_factory) as cur:
            cur.execute("SELECT body FROM documents WHERE path=%s FOR UPDATE", (key,))
            body = fetch_body(cur)
            if body is None:
                raise KeyError(key)
            if expect is not None and not expectation_holds(body, expect):
                raise DocumentConflict(key)
            body.update(partial)
            cur.execute("UPDATE documents SET body=%s WHERE path=%s", (json.dumps(body), key))

    def delete(self, path: str, *, expect: Optional[dict] = None) -> None:
        key, _ = _key(path)
        with transaction(self._conn_factory) as cur:
            if expect is not None:
                cur.execute("SELECT body FROM documents WHERE path=%s FOR UPDATE", (key,))
                if not expectation_holds(fetch_body(cur), expect):
                    raise DocumentConflict(key)
            cur.execute("DELETE FROM documents WHERE path=%s", (key,))

    def query(
        self,
        collection_path: str,
        filters: Iterable[Filter] = (),
        ordering: Iterable[OrderBy] = (),
    ) -> Sequence[dict]:
        filters = list(filters)
        with transaction(self._conn_factory) as cur:
            cur.execute("SELECT body FROM documents WHERE collection=%s", (collection_path.strip("/"),))
            docs = fetch_bodies(cur)
        return apply_ordering([d for d in docs if matches(d, filters)], ordering)
