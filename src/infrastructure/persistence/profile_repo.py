"""
infrastructure.persistence.profile_repo - Cached user profile repository.

Implements the ProfileRepository port. The profile is a single JSON object
under its own key; saves replace it wholesale.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from domain.entities import UserProfile
from domain.exceptions import RepositoryError, StorageReadError
from domain.ports import KeyValueStore

logger = logging.getLogger(__name__)


class KeyValueProfileRepository:
    """Single-profile store cached in memory."""

    def __init__(self, store: KeyValueStore, key: str = "alivio_profile_v1"):
        self._store = store
        self._key = key
        self._cache: Optional[UserProfile] = None

    def get_profile(self) -> Optional[UserProfile]:
        if self._cache is not None:
            return self._cache
        try:
            raw = self._store.get(self._key)
        except StorageReadError as e:
            logger.error("Could not read the stored profile under '%s': %s", self._key, e)
            return None
        if not raw:
            return None
        try:
            self._cache = UserProfile.from_dict(json.loads(raw))
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            logger.error("Stored profile under '%s' is corrupt: %s", self._key, e)
            return None
        return self._cache

    def save_profile(self, profile: UserProfile) -> None:
        try:
            payload = json.dumps(profile.to_dict())
        except (TypeError, ValueError) as e:
            raise RepositoryError(f"Could not serialize profile: {e}") from e
        self._store.set(self._key, payload)
        self._cache = profile
        logger.debug("Saved profile for %s", profile.name)

    def clear(self) -> None:
        self._store.remove(self._key)
        self._cache = None
