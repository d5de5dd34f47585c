"""
Shared pytest fixtures for the Alivio migraine tracker tests.
"""
import os
import sys
from datetime import date
from pathlib import Path

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from domain.entities import Crisis, MedicationEntry
from domain.models import EntryType, Relief
from factory import ServiceFactory
from infrastructure.config import Settings
from infrastructure.persistence.crisis_repo import KeyValueCrisisRepository
from infrastructure.persistence.kv_store import InMemoryKeyValueStore
from infrastructure.persistence.profile_repo import KeyValueProfileRepository

TODAY = date(2024, 5, 20)


@pytest.fixture
def store():
    """Empty in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def crisis_repo(store):
    return KeyValueCrisisRepository(store, key="alivio_crises_v1")


@pytest.fixture
def profile_repo(store):
    return KeyValueProfileRepository(store, key="alivio_profile_v1")


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway SQLite file."""
    return Settings(project_root=tmp_path, db_path=str(tmp_path / "alivio-test.db"))


@pytest.fixture
def sqlite_factory(settings):
    """ServiceFactory backed by a real SQLite file."""
    factory = ServiceFactory(settings)
    factory.initialize()
    return factory


@pytest.fixture
def memory_factory(settings, store):
    """ServiceFactory backed by the in-memory store."""
    factory = ServiceFactory(settings, store=store)
    factory.initialize()
    return factory


@pytest.fixture
def client(memory_factory):
    """FastAPI TestClient wired to the in-memory factory (no lifespan)."""
    from fastapi.testclient import TestClient

    from adapters.rest.app import app
    from adapters.rest.dependencies import set_factory

    set_factory(memory_factory)
    return TestClient(app)


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Point the CLI at a throwaway database."""
    db_path = tmp_path / "cli.db"
    monkeypatch.setenv("DB_PATH", str(db_path))
    monkeypatch.chdir(tmp_path)
    return db_path


def make_crisis(day, intensity=5, **kwargs) -> Crisis:
    """Crisis with sensible defaults for tests."""
    kwargs.setdefault("type", EntryType.PAIN if intensity else EntryType.MEDICATION)
    return Crisis(date=day, intensity=intensity, **kwargs)


def make_med(name, relief=Relief.MODERATE, dose="1 tab") -> MedicationEntry:
    return MedicationEntry(name=name, dose=dose, time="10:00", relief=relief)
