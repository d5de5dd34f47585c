"""
Tests for the key-value stores and the SQLite-backed factory wiring.
"""
import pytest

from conftest import make_crisis
from domain.exceptions import RepositoryError
from factory import ServiceFactory
from infrastructure.persistence.kv_store import InMemoryKeyValueStore


class TestSQLiteKeyValueStore:
    def test_set_get_overwrite(self, sqlite_factory):
        store = sqlite_factory._store
        assert store.get("k") is None
        store.set("k", "one")
        store.set("k", "two")
        assert store.get("k") == "two"

    def test_remove_and_clear(self, sqlite_factory):
        store = sqlite_factory._store
        store.set("a", "1")
        store.set("b", "2")
        store.remove("a")
        assert store.get("a") is None
        store.clear()
        assert store.get("b") is None

    def test_data_survives_a_new_factory(self, settings, sqlite_factory):
        saved = sqlite_factory.crisis_repository.save(make_crisis("2024-05-01"))
        reopened = ServiceFactory(settings)
        reopened.initialize()
        assert reopened.crisis_repository.get_by_id(saved.id) == saved

    def test_factory_requires_initialize(self, settings):
        factory = ServiceFactory(settings)
        with pytest.raises(RuntimeError):
            factory.crisis_repository


class TestInMemoryKeyValueStore:
    def test_quota_exceeded_raises_and_keeps_old_value(self):
        store = InMemoryKeyValueStore(quota_bytes=10)
        store.set("k", "12345")
        with pytest.raises(RepositoryError):
            store.set("k", "x" * 11)
        assert store.get("k") == "12345"

    def test_overwrite_counts_only_new_value(self):
        store = InMemoryKeyValueStore(quota_bytes=10)
        store.set("k", "x" * 10)
        store.set("k", "y" * 10)
        assert store.get("k") == "y" * 10
