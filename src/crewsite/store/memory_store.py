from __future__ import annotations

import copy
import threading
from typing import Iterable, Optional, Sequence

from ..core.exceptions import DocumentConflict, DocumentExists
from .document_store import Filter, OrderBy, apply_ordering, expectation_holds, matches, split_path


class InMemoryDocumentStore:
    """Dict-backed DocumentStore for development and tests.

    Documents are deep-copied in and out so callers never share state with the store.
    """

    def __init__(self):
        self._docs: dict[str, dict] = {}
        self._lock = threading.Lock()

    def get(self, path: str) -> Optional[dict]:
        split_path(path)
        with self._lock:
            doc = self._docs.get(path.strip("/"))
            return copy.deepcopy(doc) if doc is not None else None

    def put(self, path: str, document: dict) -> None:
        split_path(path)
        with self._lock:
            self._docs[path.strip("/")] = copy.deepcopy(document)

    def create(self, path: str, document: dict) -> None:
        split_path(path)
        key = path.strip("/")
        with self._lock:
            if key in self._docs:
                raise DocumentExists(key)
            self._docs[key] = copy.deepcopy(document)

    def update(self, path: str, partial: dict, *, expect: Optional[dict] = None) -> None:
        split_path(path)
        key = path.strip("/")
        with self._lock:
            if key not in self._docs:
                raise KeyError(key)
            if expect is not None and not expectation_holds(self._docs[key], expect):
                raise DocumentConflict(key)
            self._docs[key].update(copy.deepcopy(partial))

    def delete(self, path: str, *, expect: Optional[dict] = None) -> None:
        split_path(path)
        key = path.strip("/")
        with self._lock:
            if expect is not None and not expectation_holds(self._docs.get(key), expect):
                raise DocumentConflict(key)
            self._docs.pop(key, None)

    def query(
        self,
        collection_path: str,
        filters: Iterable[Filter] = (),
        ordering: Iterable[OrderBy] = (),
    ) -> Sequence[dict]:
        collection = collection_path.strip("/")
        filters = list(filters)
        with self._lock:
            found = [
                copy.deepcopy(doc)
                for key, doc in self._docs.items()
                if split_path(key)[0] == collection and matches(doc, filters)
            ]
        return apply_ordering(found, ordering)
