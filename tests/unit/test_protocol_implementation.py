"""Test that store implementations conform to the PersistenceStore protocol."""

import pytest

from readrmood.domain.entities import Book
from readrmood.domain.interfaces.persistence_store import PersistenceStore
from readrmood.infrastructure.json_persistence_store import JsonFilePersistenceStore
from readrmood.infrastructure.memory_persistence_store import InMemoryPersistenceStore

METHODS = [
    "load_books",
    "save_books",
    "load_sessions",
    "save_sessions",
    "load_moods",
    "save_moods",
    "load_achievements",
    "save_achievements",
    "load_settings",
    "save_settings",
]


@pytest.fixture(params=["memory", "json"])
def any_store(request, tmp_path):
    """Yield each store implementation in turn."""
    if request.param == "memory":
        yield InMemoryPersistenceStore()
    else:
        store = JsonFilePersistenceStore(tmp_path)
        yield store
        store.close()


def test_store_implements_protocol(any_store):
    """Test that the store is an instance of the protocol."""
    assert isinstance(any_store, PersistenceStore)
    for name in METHODS:
        assert callable(getattr(any_store, name))
    assert any_store.last_error is None


def test_stores_are_interchangeable(any_store):
    """Test that both stores round-trip through the protocol."""
    books = [Book(title="Dune", total_pages=412)]
    any_store.save_books(books)
    assert any_store.load_books() == books


def test_memory_store_counts_saves():
    store = InMemoryPersistenceStore()
    store.save_books([])
    store.save_books([])
    assert store.save_counts["books"] == 2

    store.clear()
    assert store.save_counts == {}
