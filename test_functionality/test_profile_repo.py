"""
Tests for the profile repository and ProfileService (onboarding, avatar).
"""
import json
from datetime import datetime

from application.services.profile import ProfileService
from domain.entities import UserProfile
from infrastructure.persistence.profile_repo import KeyValueProfileRepository


class TestProfileRepository:
    def test_absent_profile_is_none(self, profile_repo):
        assert profile_repo.get_profile() is None

    def test_save_and_reload(self, store, profile_repo):
        profile = UserProfile(name="Ana", age=31, migraine_type="With aura", joined_date="2024-01-01T09:00:00")
        profile_repo.save_profile(profile)
        assert KeyValueProfileRepository(store).get_profile() == profile
        stored = json.loads(store.get("alivio_profile_v1"))
        assert stored["migraineType"] == "With aura"
        assert stored["joinedDate"] == "2024-01-01T09:00:00"

    def test_corrupt_profile_reads_as_none(self, store):
        store.set("alivio_profile_v1", "{broken")
        assert KeyValueProfileRepository(store).get_profile() is None

    def test_clear(self, store, profile_repo):
        profile_repo.save_profile(UserProfile(name="Ana"))
        profile_repo.clear()
        assert profile_repo.get_profile() is None
        assert store.get("alivio_profile_v1") is None


class TestProfileService:
    def test_onboarding_flow(self, profile_repo):
        service = ProfileService(profile_repo)
        assert service.onboarding_required() is True
        created = service.complete_onboarding(
            "  Ana ", migraine_type="Chronic", age=30, now=datetime(2024, 5, 1, 8, 30),
        )
        assert created.name == "Ana"
        assert created.joined_date == "2024-05-01T08:30:00"
        assert service.onboarding_required() is False

    def test_update_avatar(self, profile_repo):
        service = ProfileService(profile_repo)
        assert service.update_avatar("data:image/png;base64,AAA") is None
        service.complete_onboarding("Ana")
        updated = service.update_avatar("data:image/png;base64,AAA")
        assert updated.avatar == "data:image/png;base64,AAA"
        assert service.update_avatar("").avatar is None
        assert service.get_profile().name == "Ana"
