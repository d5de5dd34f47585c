"""
application.services.analytics - Read-only aggregations over the crisis history.

Two pure queries, compute_stats() and compute_clinical_insights(), take the
crisis list explicitly so they can be tested without storage. AnalyticsService
binds them to the repository and the clock for adapters.

compute_stats() relies on the list being sorted by date descending (the
repository's invariant): it stops scanning at the first record older than
the window, so its cost grows with the number of recent records rather
than with the whole history.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date, timedelta
from typing import Callable, Optional

from domain.entities import Crisis
from domain.models import (
    NO_LOCALIZATION_LABEL,
    NO_MEDICATION_LABEL,
    NO_SYMPTOM_LABEL,
    ClinicalInsights,
    CrisisStats,
)
from domain.ports import CrisisRepository

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 30


def compute_stats(
    crises: list[Crisis],
    today: date,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> CrisisStats:
    """Rolling-window statistics for a date-descending crisis list.

    A crisis is recent when its date is on or after ``today - window_days``.
    """
    if not crises:
        return CrisisStats()

    cutoff = (today - timedelta(days=window_days)).isoformat()
    total_recent = 0
    intensity_sum = 0
    for crisis in crises:
        if crisis.date < cutoff:
            break
        total_recent += 1
        intensity_sum += crisis.intensity

    avg_intensity = f"{intensity_sum / total_recent:.1f}" if total_recent else "0"

    last_day = date.fromisoformat(crises[0].date)
    days_free = max(0, (today - last_day).days)

    return CrisisStats(
        total_recent=total_recent,
        avg_intensity=avg_intensity,
        total_history=len(crises),
        days_free=days_free,
    )


def _top(counter: Counter, fallback: str) -> str:
    ranked = counter.most_common(1)
    return ranked[0][0] if ranked else fallback


def compute_clinical_insights(crises: list[Crisis]) -> Optional[ClinicalInsights]:
    """Most frequent symptom, effective medication and pain location.

    Returns None for an empty history. Medications only count when their
    relief was Moderate or Total. Ties go to the tag seen first.
    """
    if not crises:
        return None

    symptoms: Counter = Counter()
    medications: Counter = Counter()
    localizations: Counter = Counter()

    for crisis in crises:
        symptoms.update(crisis.symptoms)
        localizations.update(crisis.localization)
        medications.update(m.name for m in crisis.medications if m.relief.is_effective)

    return ClinicalInsights(
        top_symptom=_top(symptoms, NO_SYMPTOM_LABEL),
        top_medication=_top(medications, NO_MEDICATION_LABEL),
        top_localization=_top(localizations, NO_LOCALIZATION_LABEL),
    )


class AnalyticsService:
    """Statistics and insights over the repository's current collection."""

    def __init__(
        self,
        crisis_repo: CrisisRepository,
        window_days: int = DEFAULT_WINDOW_DAYS,
        clock: Callable[[], date] = date.today,
    ):
        self._crisis_repo = crisis_repo
        self._window_days = window_days
        self._clock = clock

    def get_stats(self) -> CrisisStats:
        stats = compute_stats(self._crisis_repo.get_all(), self._clock(), self._window_days)
        logger.debug(
            "Stats: %d recent, avg %s, %d total, %d days free",
            stats.total_recent, stats.avg_intensity, stats.total_history, stats.days_free,
        )
        return stats

    def get_clinical_insights(self) -> Optional[ClinicalInsights]:
        return compute_clinical_insights(self._crisis_repo.get_all())
