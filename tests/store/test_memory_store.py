import pytest

from crewsite.core.exceptions import DocumentConflict, DocumentExists
from crewsite.store.document_store import Filter, OrderBy
from crewsite.store.memory_store import InMemoryDocumentStore


def test_get_put_update_delete():
    store = InMemoryDocumentStore()
    store.put("c/1", {"a": 1})
    store.update("c/1", {"b": 2})

    assert store.get("c/1") == {"a": 1, "b": 2}

    store.delete("c/1")
    assert store.get("c/1") is None


def test_documents_are_copied():
    store = InMemoryDocumentStore()
    doc = {"nested": {"x": 1}}
    store.put("c/1", doc)
    doc["nested"]["x"] = 99

    fetched = store.get("c/1")
    fetched["nested"]["x"] = 42

    assert store.get("c/1") == {"nested": {"x": 1}}


def test_create_is_conditional():
    store = InMemoryDocumentStore()
    store.create("locks/a", {"owner": 1})

    with pytest.raises(DocumentExists):
        store.create("locks/a", {"owner": 2})
    assert store.get("locks/a") == {"owner": 1}


def test_update_missing_raises():
    with pytest.raises(KeyError):
        InMemoryDocumentStore().update("c/none", {"a": 1})


def test_conditional_update_checks_expected_fields():
    store = InMemoryDocumentStore()
    store.put("c/1", {"closed_at": None, "n": 1})

    store.update("c/1", {"closed_at": "t1"}, expect={"closed_at": None})
    with pytest.raises(DocumentConflict):
        store.update("c/1", {"closed_at": "t2"}, expect={"closed_at": None})

    assert store.get("c/1") == {"closed_at": "t1", "n": 1}


def test_conditional_delete_requires_matching_document():
    store = InMemoryDocumentStore()
    store.put("locks/a", {"owner": "r2"})

    with pytest.raises(DocumentConflict):
        store.delete("locks/a", expect={"owner": "r1"})
    with pytest.raises(DocumentConflict):
        store.delete("locks/missing", expect={"owner": "r1"})
    assert store.get("locks/a") == {"owner": "r2"}

    store.delete("locks/a", expect={"owner": "r2"})
    assert store.get("locks/a") is None


def test_query_filters_ordering_and_collection_scope():
    store = InMemoryDocumentStore()
    store.put("c/1", {"k": "x", "n": 3})
    store.put("c/2", {"k": "y", "n": 1})
    store.put("c/3", {"k": "x", "n": 2})
    store.put("c/sub/4", {"k": "x", "n": 0})
    store.put("other/5", {"k": "x", "n": 5})

    docs = store.query("c", [Filter("k", "==", "x")], [OrderBy("n")])
    assert [d["n"] for d in docs] == [2, 3]

    docs = store.query("c", [Filter("n", "in", [1, 3])], [OrderBy("n", descending=True)])
    assert [d["n"] for d in docs] == [3, 1]


def test_query_none_values_only_match_equality_ops():
    store = InMemoryDocumentStore()
    store.put("c/1", {"t": None})
    store.put("c/2", {"t": "2026-03-02"})

    assert len(store.query("c", [Filter("t", "!=", None)])) == 1
    assert len(store.query("c", [Filter("t", ">=", "2026-01-01")])) == 1


def test_invalid_path_and_operator():
    store = InMemoryDocumentStore()
    with pytest.raises(ValueError):
        store.put("no-collection", {})
    store.put("c/1", {"a": 1})
    with pytest.raises(ValueError):
        store.query("c", [Filter("a", "~", 1)])
