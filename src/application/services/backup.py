"""
application.services.backup - Full-state export, import and wipe.

The backup file is UTF-8 JSON:

    {"version": 1, "timestamp": "<ISO-8601>", "profile": {...} | null,
     "crises": [{...}, ...]}

Import is all-or-nothing: the envelope is validated and every record is
converted before any repository is touched, so a rejected file leaves the
current state exactly as it was. A valid import replaces the collection
and profile wholesale; it never merges.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ValidationError, field_validator

from application.dto import ImportSummary
from domain.entities import Crisis, UserProfile, new_id
from domain.exceptions import BackupFormatError
from domain.ports import CrisisRepository, ProfileRepository

logger = logging.getLogger(__name__)

BACKUP_VERSION = 1


class BackupEnvelope(BaseModel):
    """Minimal schema check for an incoming backup."""
    version: int
    timestamp: Optional[str] = None
    profile: Optional[dict[str, Any]] = None
    crises: list[dict[str, Any]]

    @field_validator("version")
    @classmethod
    def _version_present(cls, v: int) -> int:
        if not v:
            raise ValueError("version must be set")
        return v


class BackupService:
    """Snapshots and restores both repositories."""

    def __init__(
        self,
        crisis_repo: CrisisRepository,
        profile_repo: ProfileRepository,
    ):
        self._crisis_repo = crisis_repo
        self._profile_repo = profile_repo

    def export_all(self, now: Optional[datetime] = None) -> str:
        """Serialize the profile and every crisis to the backup format."""
        profile = self._profile_repo.get_profile()
        crises = self._crisis_repo.get_all()
        snapshot = {
            "version": BACKUP_VERSION,
            "timestamp": (now or datetime.now(timezone.utc)).isoformat(),
            "profile": profile.to_dict() if profile else None,
            "crises": [c.to_dict() for c in crises],
        }
        logger.info("Exported %d crises", len(crises))
        return json.dumps(snapshot, indent=2)

    def import_all(self, text: str) -> ImportSummary:
        """Replace all state with the backup in *text*.

        Raises:
            BackupFormatError: If the text is not a valid backup. Nothing
                has been changed in that case.
            RepositoryError: If the store rejects the write.
        """
        envelope, crises, profile = self._parse(text)

        self._crisis_repo.replace_all(crises)
        if profile is not None:
            self._profile_repo.save_profile(profile)

        logger.info(
            "Imported backup v%d: %d crises, profile=%s",
            envelope.version, len(crises), profile is not None,
        )
        return ImportSummary(
            crises_imported=len(crises),
            profile_imported=profile is not None,
            version=envelope.version,
            exported_at=envelope.timestamp,
        )

    def clear_all(self) -> None:
        """Wipe every crisis and the profile."""
        self._crisis_repo.clear()
        self._profile_repo.clear()
        logger.info("All data cleared")

    @staticmethod
    def _parse(text: str) -> tuple[BackupEnvelope, list[Crisis], Optional[UserProfile]]:
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as e:
            logger.error("Import failed: not valid JSON: %s", e)
            raise BackupFormatError(f"Backup is not valid JSON: {e}") from e

        try:
            envelope = BackupEnvelope.model_validate(data)
        except ValidationError as e:
            logger.error("Import failed: invalid backup format: %s", e)
            raise BackupFormatError(f"Invalid backup format: {e}") from e

        try:
            crises = [Crisis.from_dict(item) for item in envelope.crises]
            seen: set[str] = set()
            for crisis in crises:
                if crisis.id in seen:
                    logger.warning("Duplicate crisis id %s in backup, assigning a new one", crisis.id)
                    crisis.id = new_id()
                elif not crisis.id:
                    crisis.id = new_id()
                seen.add(crisis.id)
            profile = UserProfile.from_dict(envelope.profile) if envelope.profile else None
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.error("Import failed: invalid record: %s", e)
            raise BackupFormatError(f"Invalid record in backup: {e}") from e

        return envelope, crises, profile
