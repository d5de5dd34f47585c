"""
domain.models - Value objects and enumerations for the migraine tracker.

These are immutable data containers with no business logic beyond
formatting, and no dependencies on infrastructure (no SQLite, no FastAPI).

    - EntryType, FunctionalImpact, Relief  → closed vocabularies of a Crisis
    - CrisisStats                          → rolling-window statistics
    - ClinicalInsights                     → frequency-ranked summary tags
    - normalize_date()                     → the single date representation
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Union


# ---------------------------------------------------------------------------
# Vocabularies
# ---------------------------------------------------------------------------

class EntryType(str, Enum):
    """Denormalized classification of a logged event."""
    MIGRAINE = "Migraine"
    PAIN = "Pain"
    MEDICATION = "Medication"
    PERIOD = "Period"
    REST = "Rest"


class FunctionalImpact(str, Enum):
    """How much the episode limited daily activity."""
    NONE = "None"
    LIMITED = "Limited"
    PROSTRATION = "Prostration"


class Relief(str, Enum):
    """Relief rating reported for a medication intake."""
    NONE = "None"
    MODERATE = "Moderate"
    TOTAL = "Total"

    @property
    def is_effective(self) -> bool:
        return self in (Relief.MODERATE, Relief.TOTAL)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

DateLike = Union[str, date, datetime]


def normalize_date(value: DateLike) -> str:
    """Return the calendar day of *value* as ``YYYY-MM-DD``.

    Accepts a ``date``, a ``datetime``, a ``YYYY-MM-DD`` string or a full
    ISO-8601 timestamp (a trailing ``Z`` is accepted). Timestamps keep the
    day they were written in; no timezone conversion is applied.

    Raises:
        ValueError: If the value cannot be parsed.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid date: {value!r}")

    text = value.strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text).isoformat()
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date().isoformat()
    except ValueError as e:
        raise ValueError(f"Invalid date {value!r}: {e}")


# ---------------------------------------------------------------------------
# Analytics results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CrisisStats:
    """Rolling-window statistics over the crisis history."""
    total_recent: int = 0
    avg_intensity: str = "0"
    total_history: int = 0
    days_free: int = 0

    def to_dict(self) -> dict:
        return {
            "totalRecent": self.total_recent,
            "avgIntensity": self.avg_intensity,
            "totalHistory": self.total_history,
            "daysFree": self.days_free,
        }


NO_SYMPTOM_LABEL = "None"
NO_MEDICATION_LABEL = "Not registered"
NO_LOCALIZATION_LABEL = "Diffuse"


@dataclass(frozen=True)
class ClinicalInsights:
    """Most frequent tag per category across the whole history.

    Every field always holds a label; categories without qualifying data
    carry their fallback label instead of None.
    """
    top_symptom: str = NO_SYMPTOM_LABEL
    top_medication: str = NO_MEDICATION_LABEL
    top_localization: str = NO_LOCALIZATION_LABEL

    def to_dict(self) -> dict:
        return {
            "topSymptom": self.top_symptom,
            "topMedication": self.top_medication,
            "topLocalization": self.top_localization,
        }
