from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Protocol, Sequence


@dataclass(frozen=True)
class Filter:
    field: str
    op: str
    value: Any


@dataclass(frozen=True)
class OrderBy:
    field: str
    descending: bool = False


_OPS: dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "in": lambda left, right: left in right,
}


class DocumentStore(Protocol):
    """Generic document store contract the repositories are written against.

    Paths are slash separated; a document's collection is its path minus the
    last segment.
    """

    def get(self, path: str) -> Optional[dict]:
        raise NotImplementedError

    def put(self, path: str, document: dict) -> None:
        raise NotImplementedError

    def create(self, path: str, document: dict) -> None:
        """Conditional write: raise DocumentExists when ``path`` is taken."""

        raise NotImplementedError

    def update(self, path: str, partial: dict, *, expect: Optional[dict] = None) -> None:
        """Merge ``partial`` into an existing document (KeyError if missing).

        With ``expect``, raise DocumentConflict unless every listed field
        currently holds the given value; check and write are atomic.
        """

        raise NotImplementedError

    def delete(self, path: str, *, expect: Optional[dict] = None) -> None:
        """Remove ``path``; with ``expect`` the document must exist and match."""

        raise NotImplementedError

    def query(
        self,
        collection_path: str,
        filters: Iterable[Filter] = (),
        ordering: Iterable[OrderBy] = (),
    ) -> Sequence[dict]:
        raise NotImplementedError


def split_path(path: str) -> tuple[str, str]:
    collection, _, doc_id = path.strip("/").rpartition("/")
    if not collection or not doc_id:
        raise ValueError(f"Invalid document path: {path!r}")
    return collection, doc_id


def matches(document: dict, filters: Iterable[Filter]) -> bool:
    for f in filters:
        try:
            op = _OPS[f.op]
        except KeyError:
            raise ValueError(f"Unsupported filter operator: {f.op!r}") from None
        if f.field not in document:
            return False
        left = document[f.field]
        if left is None and f.op not in {"==", "!="}:
            return False
        if not op(left, f.value):
            return False
    return True


def expectation_holds(document: Optional[dict], expect: dict) -> bool:
    if document is None:
        return False
    return all(field in document and document[field] == value for field, value in expect.items())


def apply_ordering(documents: list[dict], ordering: Iterable[OrderBy]) -> list[dict]:
    # Stable sorts applied last-key-first give multi-key ordering.
    for order in reversed(list(ordering)):
        documents.sort(key=lambda d: (d.get(order.field) is None, d.get(order.field)), reverse=order.descending)
    return documents
