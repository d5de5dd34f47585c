"""
Tests for backup export, import and wipe.
"""
import json
from datetime import datetime, timezone

import pytest

from application.services.backup import BACKUP_VERSION, BackupService
from conftest import make_crisis, make_med
from domain.entities import UserProfile
from domain.exceptions import BackupFormatError, RepositoryError
from domain.models import Relief
from infrastructure.persistence.crisis_repo import KeyValueCrisisRepository
from infrastructure.persistence.kv_store import InMemoryKeyValueStore
from infrastructure.persistence.profile_repo import KeyValueProfileRepository


@pytest.fixture
def backup(crisis_repo, profile_repo):
    return BackupService(crisis_repo, profile_repo)


@pytest.fixture
def populated(crisis_repo, profile_repo):
    profile_repo.save_profile(UserProfile(name="Ana", age=30, joined_date="2024-01-01T10:00:00"))
    crisis_repo.save(make_crisis("2024-05-01", symptoms=["Nausea"], medications=[make_med("Ibuprofen", Relief.TOTAL)]))
    crisis_repo.save(make_crisis("2024-05-03", intensity=0, is_period=True))
    return crisis_repo.get_all(), profile_repo.get_profile()


class TestExport:
    def test_envelope_shape(self, backup, populated):
        data = json.loads(backup.export_all(now=datetime(2024, 5, 20, tzinfo=timezone.utc)))
        assert data["version"] == BACKUP_VERSION
        assert data["timestamp"].startswith("2024-05-20T00:00:00")
        assert data["profile"]["name"] == "Ana"
        assert [c["date"] for c in data["crises"]] == ["2024-05-03", "2024-05-01"]

    def test_export_without_profile(self, backup, crisis_repo):
        crisis_repo.save(make_crisis("2024-05-01"))
        assert json.loads(backup.export_all())["profile"] is None


class TestImport:
    def test_round_trip_into_fresh_store(self, backup, populated):
        crises, profile = populated
        text = backup.export_all()

        store = InMemoryKeyValueStore()
        target = BackupService(KeyValueCrisisRepository(store), KeyValueProfileRepository(store))
        summary = target.import_all(text)

        assert summary.crises_imported == 2
        assert summary.profile_imported is True
        assert KeyValueCrisisRepository(store).get_all() == crises
        assert KeyValueProfileRepository(store).get_profile() == profile

    def test_import_replaces_not_merges(self, backup, crisis_repo):
        crisis_repo.save(make_crisis("2024-01-01", notes="old"))
        backup.import_all(json.dumps({
            "version": 1,
            "crises": [{"id": "x", "date": "2023-06-01", "intensity": 3}],
        }))
        assert [c.id for c in crisis_repo.get_all()] == ["x"]

    def test_import_sorts_and_normalizes(self, backup, crisis_repo):
        backup.import_all(json.dumps({
            "version": 1,
            "crises": [
                {"id": "a", "date": "2024-01-01"},
                {"id": "b", "date": "2024-03-01T18:30:00.000Z"},
            ],
        }))
        assert [(c.id, c.date) for c in crisis_repo.get_all()] == [("b", "2024-03-01"), ("a", "2024-01-01")]

    def test_records_without_id_get_one(self, backup, crisis_repo):
        backup.import_all(json.dumps({"version": 1, "crises": [{"date": "2024-01-01"}]}))
        assert crisis_repo.get_all()[0].id

    def test_duplicate_ids_are_made_unique(self, backup, crisis_repo):
        backup.import_all(json.dumps({
            "version": 1,
            "crises": [
                {"id": "x", "date": "2024-01-02", "notes": "first"},
                {"id": "x", "date": "2024-01-01", "notes": "second"},
            ],
        }))
        crises = crisis_repo.get_all()
        assert len({c.id for c in crises}) == 2
        assert crisis_repo.get_by_id("x").notes == "first"
        assert crisis_repo.delete("x") is True
        assert [c.notes for c in crisis_repo.get_all()] == ["second"]

    def test_profile_absent_keeps_current_profile(self, backup, profile_repo, populated):
        backup.import_all(json.dumps({"version": 1, "profile": None, "crises": []}))
        assert profile_repo.get_profile().name == "Ana"

    @pytest.mark.parametrize("payload", [
        "not json",
        json.dumps({"version": 1}),
        json.dumps({"crises": []}),
        json.dumps({"version": 0, "crises": []}),
        json.dumps({"version": 1, "crises": "nope"}),
        json.dumps({"version": 1, "crises": [{"intensity": 2}]}),
        json.dumps({"version": 1, "crises": [{"date": "2024-01-01", "intensity": 42}]}),
        json.dumps([1, 2, 3]),
        json.dumps({"version": 1, "crises": [{"id": "a", "date": "2024-01-01", "medications": ["Ibuprofen"]}]}),
        json.dumps({"version": 1, "crises": [{"id": "a", "date": "2024-01-01", "symptoms": "Nausea"}]}),
    ])
    def test_invalid_backup_changes_nothing(self, backup, store, populated, payload):
        before = dict(store._data)
        crises, profile = populated
        with pytest.raises(BackupFormatError):
            backup.import_all(payload)
        assert store._data == before
        assert backup._crisis_repo.get_all() == crises
        assert backup._profile_repo.get_profile() == profile

    def test_store_failure_propagates(self, populated):
        store = InMemoryKeyValueStore(quota_bytes=50)
        target = BackupService(KeyValueCrisisRepository(store), KeyValueProfileRepository(store))
        text = json.dumps({"version": 1, "crises": [c.to_dict() for c in populated[0]]})
        with pytest.raises(RepositoryError):
            target.import_all(text)


class TestClearAll:
    def test_wipes_everything(self, backup, store, crisis_repo, profile_repo, populated):
        backup.clear_all()
        assert crisis_repo.get_all() == []
        assert profile_repo.get_profile() is None
        assert store.get("alivio_crises_v1") is None
