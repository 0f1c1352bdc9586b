"""Tests for the in-memory DocumentStore."""

import pytest

from qrlogin.core.errors import DocumentExistsError, DocumentNotFoundError, PreconditionFailedError
from qrlogin.db import DocumentStore, PARTNERS, seed_partners


@pytest.fixture
def docs():
    return DocumentStore().collection("things")


def test_collection_handle_is_shared():
    store = DocumentStore()
    assert store.collection("login") is store.collection("login")


def test_create_refuses_to_overwrite(docs):
    docs.create("k", {"v": 1})
    with pytest.raises(DocumentExistsError):
        docs.create("k", {"v": 2})
    assert docs.get("k") == {"v": 1}


def test_get_returns_copies(docs):
    docs.create("k", {"v": [1]})
    docs.get("k")["v"].append(2)
    assert docs.get("k") == {"v": [1]}


def test_find_one_exact_match_first_in_order(docs):
    docs.create("a", {"apiKey": "key-1", "n": 1})
    docs.create("b", {"apiKey": "key-1", "n": 2})

    assert docs.find_one("apiKey", "key-1") == ("a", {"apiKey": "key-1", "n": 1})
    assert docs.find_one("apiKey", "KEY-1") is None
    assert docs.find_one("missing", "key-1") is None


def test_update_merges_and_notifies_listeners(docs):
    seen = []
    docs.on_update(lambda key, snap: seen.append((key, snap)))
    docs.create("k", {"a": 1})

    result = docs.update("k", {"b": 2})

    assert result == {"a": 1, "b": 2}
    assert seen == [("k", {"a": 1, "b": 2})]


def test_create_and_delete_do_not_notify(docs):
    seen = []
    docs.on_update(lambda key, snap: seen.append(key))
    docs.create("k", {"a": 1})
    docs.delete("k")
    assert seen == []


def test_update_missing_document(docs):
    with pytest.raises(DocumentNotFoundError):
        docs.update("nope", {"a": 1})


def test_update_precondition(docs):
    docs.create("k", {"locked": True})
    with pytest.raises(PreconditionFailedError):
        docs.update("k", {"a": 1}, only_if=lambda d: not d["locked"])
    assert docs.get("k") == {"locked": True}


def test_listener_failure_does_not_fail_write(docs, caplog):
    def broken(key, snap):
        raise RuntimeError("boom")

    docs.on_update(broken)
    docs.create("k", {"a": 1})

    assert docs.update("k", {"a": 2}) == {"a": 2}
    assert "Update listener failed" in caplog.text


def test_conditional_delete(docs):
    docs.create("k", {"keep": True})
    assert docs.delete("k", only_if=lambda d: not d["keep"]) is False
    assert "k" in docs
    assert docs.delete("k") is True
    assert docs.delete("k") is False


def test_seed_partners_skips_existing():
    store = DocumentStore()
    assert seed_partners(store, ["a", "b"]) == 2
    assert seed_partners(store, ["b", "c"]) == 1
    assert len(store.collection(PARTNERS)) == 3
