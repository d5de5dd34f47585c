"""
infrastructure.persistence.crisis_repo - Cached crisis repository.

Implements the CrisisRepository port on top of any KeyValueStore. The whole
collection lives under one key as a JSON array and is mirrored in memory:
reads are served from the cache after the first load, writes persist the
full list and then install it as the new cache.

The cached list is always sorted by date descending (ties keep insertion
order), which lets analytics stop scanning at a date cutoff.
"""

from __future__ import annotations

import json
import logging
from copy import deepcopy
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from domain.entities import Crisis, new_id
from domain.exceptions import RepositoryError, StorageReadError
from domain.ports import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadResult:
    """Outcome of reading the persisted collection.

    ok=False means the stored payload was corrupt; crises is then empty and
    error holds the reason.
    """
    crises: list[Crisis] = field(default_factory=list)
    ok: bool = True
    error: str = ""


def sort_by_date_desc(crises: list[Crisis]) -> list[Crisis]:
    """Return a new list ordered most recent first (stable for equal dates)."""
    return sorted(crises, key=lambda c: c.date, reverse=True)


class KeyValueCrisisRepository:
    """Crisis collection cached in memory and persisted under a single key."""

    def __init__(self, store: KeyValueStore, key: str = "alivio_crises_v1"):
        self._store = store
        self._key = key
        self._cache: Optional[list[Crisis]] = None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_all(self) -> list[Crisis]:
        """Return every crisis, most recent first.

        Never raises on unreadable data: a corrupt payload or a store that
        cannot be read is logged and treated as an empty collection.

        The list is a fresh copy but the records in it are the cached
        instances; treat them as read-only and change them through update().
        """
        if self._cache is None:
            result = self._load()
            if not result.ok:
                logger.error(
                    "Stored crises under '%s' are corrupt or unreadable, starting empty: %s",
                    self._key, result.error,
                )
            self._cache = result.crises
        return list(self._cache)

    def get_by_id(self, crisis_id: str) -> Optional[Crisis]:
        """Return a detached copy of the crisis with *crisis_id*, if any."""
        for crisis in self.get_all():
            if crisis.id == crisis_id:
                return deepcopy(crisis)
        return None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save(self, crisis: Crisis) -> Crisis:
        """Assign a fresh id, add the crisis and persist the collection."""
        created = replace(crisis, id=new_id())
        self._commit(self.get_all() + [created])
        logger.debug("Saved crisis %s dated %s", created.id, created.date)
        return created

    def update(self, crisis_id: str, changes: dict[str, Any]) -> Optional[Crisis]:
        """Merge *changes* into the crisis with *crisis_id*.

        Unspecified fields are left unchanged. An unknown id is a no-op and
        returns None without touching storage.

        Raises:
            ValueError: If changes name an unknown field, try to change the
                id, or hold an invalid value.
        """
        allowed_fields = Crisis.field_names() - {"id"}
        invalid = set(changes) - allowed_fields
        if invalid:
            raise ValueError(
                f"Invalid field(s) {sorted(invalid)}. Allowed: {sorted(allowed_fields)}"
            )

        crises = self.get_all()
        for idx, crisis in enumerate(crises):
            if crisis.id == crisis_id:
                updated = replace(crisis, **changes)
                crises[idx] = updated
                self._commit(crises)
                logger.debug("Updated crisis %s: %s", crisis_id, sorted(changes))
                return updated

        logger.debug("Update skipped, crisis %s not found", crisis_id)
        return None

    def delete(self, crisis_id: str) -> bool:
        """Remove the crisis with *crisis_id*. Returns False if it was absent."""
        crises = self.get_all()
        remaining = [c for c in crises if c.id != crisis_id]
        if len(remaining) == len(crises):
            logger.debug("Delete skipped, crisis %s not found", crisis_id)
            return False
        self._commit(remaining)
        logger.debug("Deleted crisis %s", crisis_id)
        return True

    def replace_all(self, crises: list[Crisis]) -> None:
        """Discard the current collection and install *crises* instead."""
        self._commit(list(crises))
        logger.info("Replaced crisis collection (%d records)", len(crises))

    def clear(self) -> None:
        """Remove the persisted collection and forget the cache."""
        self._store.remove(self._key)
        self._cache = None

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _load(self) -> LoadResult:
        try:
            raw = self._store.get(self._key)
        except StorageReadError as e:
            return LoadResult(ok=False, error=str(e))
        if not raw:
            return LoadResult()
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise TypeError(f"expected a JSON array, got {type(data).__name__}")
            crises = [Crisis.from_dict(item) for item in data]
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            return LoadResult(ok=False, error=str(e))
        logger.debug("Loaded %d crises from '%s'", len(crises), self._key)
        return LoadResult(crises=sort_by_date_desc(crises))

    def _commit(self, crises: list[Crisis]) -> None:
        """Sort, persist, then install as cache.

        The cache only changes after the store accepted the write, so a
        failed write leaves both untouched.
        """
        ordered = sort_by_date_desc(crises)
        try:
            payload = json.dumps([c.to_dict() for c in ordered])
        except (TypeError, ValueError) as e:
            raise RepositoryError(f"Could not serialize crises: {e}") from e
        self._store.set(self._key, payload)
        self._cache = ordered
