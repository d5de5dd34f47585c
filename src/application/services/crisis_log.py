"""
application.services.crisis_log - Turning form input into stored crises.

Every path that creates or edits a crisis goes through here: the full and
quick log forms (CrisisDraft), the one-tap rest entry, and the structured
prefill produced by the AI assistant. Dates are normalized to YYYY-MM-DD at
this boundary; the entry type and duration are derived, not trusted.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from application.dto import CrisisDraft
from domain.entities import Crisis, MedicationEntry
from domain.models import EntryType, FunctionalImpact, Relief, normalize_date
from domain.ports import CrisisRepository

logger = logging.getLogger(__name__)

REST_NOTE = "Automatic entry: rest mode was activated."
UNKNOWN_DOSE = "??"


def compute_duration(start_time: str, end_time: str) -> str:
    """Return the span between two ``HH:MM`` times as ``"{h}h {m}m"``.

    An end time earlier than the start wraps past midnight. Returns an
    empty string when either time is missing.
    """
    if not start_time or not end_time:
        return ""
    h1, m1 = (int(part) for part in start_time.split(":")[:2])
    h2, m2 = (int(part) for part in end_time.split(":")[:2])
    diff = (h2 * 60 + m2) - (h1 * 60 + m1)
    if diff < 0:
        diff += 24 * 60
    return f"{diff // 60}h {diff % 60}m"


def derive_entry_type(draft: CrisisDraft) -> EntryType:
    """Pain wins over medication, medication over period, else the chosen type."""
    if draft.intensity > 0:
        return EntryType.PAIN
    if draft.medications:
        return EntryType.MEDICATION
    if draft.is_period:
        return EntryType.PERIOD
    return EntryType(draft.type)


def _clock_time(now: datetime) -> str:
    return now.strftime("%H:%M")


def new_medication(name: str, dose: str = "", now: Optional[datetime] = None) -> MedicationEntry:
    """A medication intake taken now, with the default Moderate relief."""
    return MedicationEntry(
        name=name,
        dose=dose,
        time=_clock_time(now or datetime.now()),
        relief=Relief.MODERATE,
    )


def build_crisis(draft: CrisisDraft) -> Crisis:
    """Build an unsaved Crisis from *draft* (no id yet)."""
    return Crisis(
        date=normalize_date(draft.date),
        type=derive_entry_type(draft),
        start_time=draft.start_time,
        end_time=draft.end_time or None,
        duration=compute_duration(draft.start_time, draft.end_time) or None,
        intensity=draft.intensity,
        localization=[] if draft.light else list(draft.localization),
        pain_quality=[] if draft.light else list(draft.pain_quality),
        symptoms=[] if draft.light else list(draft.symptoms),
        medications=list(draft.medications),
        functional_impact=draft.functional_impact,
        notes=draft.notes,
        is_period=draft.is_period,
    )


class CrisisLogService:
    """Creates and edits crises on behalf of the logging forms."""

    def __init__(self, crisis_repo: CrisisRepository):
        self._crisis_repo = crisis_repo

    def log(self, draft: CrisisDraft) -> Crisis:
        """Derive and save a new crisis from *draft*."""
        created = self._crisis_repo.save(build_crisis(draft))
        logger.info("Logged %s on %s (intensity %d)", created.type.value, created.date, created.intensity)
        return created

    def edit(self, crisis_id: str, draft: CrisisDraft) -> Optional[Crisis]:
        """Replace the editable fields of *crisis_id* with *draft*.

        Returns None if the crisis no longer exists.
        """
        rebuilt = build_crisis(draft)
        changes = {
            name: getattr(rebuilt, name)
            for name in Crisis.field_names() - {"id"}
        }
        return self._crisis_repo.update(crisis_id, changes)

    def log_rest(self, day: Optional[str] = None, now: Optional[datetime] = None) -> Crisis:
        """One-tap rest entry for *day* (today by default)."""
        now = now or datetime.now()
        rest = Crisis(
            date=normalize_date(day or now),
            type=EntryType.REST,
            start_time=_clock_time(now),
            intensity=2,
            symptoms=["Fatigue"],
            functional_impact=FunctionalImpact.LIMITED,
            notes=REST_NOTE,
            is_period=False,
        )
        created = self._crisis_repo.save(rest)
        logger.info("Logged rest entry on %s", created.date)
        return created

    @staticmethod
    def draft_from_prefill(prefill: dict[str, Any], now: Optional[datetime] = None) -> CrisisDraft:
        """Convert the AI assistant's structured prefill into a draft.

        The prefill may carry ``date`` (date or timestamp), ``startTime``,
        ``endTime``, ``intensity``, ``notes`` and ``medications`` as a list of
        names. Medication doses are unknown at this point and marked ``??``.

        Raises:
            ValueError: If the date or intensity cannot be parsed.
        """
        now = now or datetime.now()
        start_time = prefill.get("startTime") or _clock_time(now)
        medications = [
            MedicationEntry(name=str(name), dose=UNKNOWN_DOSE, time=start_time, relief=Relief.MODERATE)
            for name in prefill.get("medications") or []
            if name
        ]
        return CrisisDraft(
            date=normalize_date(prefill.get("date") or now),
            start_time=start_time,
            end_time=prefill.get("endTime") or "",
            intensity=int(prefill.get("intensity") or 0),
            medications=medications,
            notes=prefill.get("notes") or "",
        )
