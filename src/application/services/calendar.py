"""
application.services.calendar - Month calendar queries.

The calendar renders up to 42 cells and asks, per cell, which kinds of
entries happened that day. index_by_day() groups the history once so each
cell is a dict lookup instead of a scan over every crisis.
"""

from __future__ import annotations

import calendar as _calendar
import logging
from collections import defaultdict
from enum import Enum

from application.dto import MonthGrid
from domain.entities import Crisis
from domain.models import EntryType, normalize_date
from domain.ports import CrisisRepository

logger = logging.getLogger(__name__)


class CalendarFilter(str, Enum):
    """Entry filter offered above the day list."""
    ALL = "All"
    PAIN = "Pain"
    MEDICATION = "Medication"
    PERIOD = "Period"
    REST = "Rest"


class DayMarker(str, Enum):
    """Icon shown in a calendar cell."""
    PAIN = "pain"
    MEDICATION = "medication"
    PERIOD = "period"
    REST = "rest"


_PAIN_TYPES = (EntryType.MIGRAINE, EntryType.PAIN)


def matches_filter(crisis: Crisis, flt: CalendarFilter) -> bool:
    flt = CalendarFilter(flt)
    if flt is CalendarFilter.ALL:
        return True
    if flt is CalendarFilter.PAIN:
        return crisis.type in _PAIN_TYPES
    if flt is CalendarFilter.PERIOD:
        return crisis.is_period
    return crisis.type.value == flt.value


def day_markers(entries: list[Crisis]) -> list[DayMarker]:
    """Markers for one day's entries, in display order."""
    markers = []
    if any(e.type in _PAIN_TYPES for e in entries):
        markers.append(DayMarker.PAIN)
    if any(e.medications or e.type is EntryType.MEDICATION for e in entries):
        markers.append(DayMarker.MEDICATION)
    if any(e.is_period for e in entries):
        markers.append(DayMarker.PERIOD)
    if any(e.type is EntryType.REST for e in entries):
        markers.append(DayMarker.REST)
    return markers


def index_by_day(crises: list[Crisis]) -> dict[str, list[Crisis]]:
    """Group crises by date, preserving their order within each day."""
    by_day: dict[str, list[Crisis]] = defaultdict(list)
    for crisis in crises:
        by_day[crisis.date].append(crisis)
    return dict(by_day)


def month_grid(year: int, month: int) -> MonthGrid:
    """Monday-first layout for *month* of *year*."""
    start_offset, days = _calendar.monthrange(year, month)
    prev_year, prev_month = (year - 1, 12) if month == 1 else (year, month - 1)
    return MonthGrid(
        year=year,
        month=month,
        start_offset=start_offset,
        days_in_month=days,
        prev_month_days=_calendar.monthrange(prev_year, prev_month)[1],
    )


class CalendarService:
    """Calendar views over the repository's current collection."""

    def __init__(self, crisis_repo: CrisisRepository):
        self._crisis_repo = crisis_repo

    def month_view(self, year: int, month: int) -> dict[str, list[DayMarker]]:
        """Markers for every day of the month that has entries."""
        grid = month_grid(year, month)
        by_day = index_by_day(self._crisis_repo.get_all())
        view = {}
        for day in range(1, grid.days_in_month + 1):
            key = f"{year:04d}-{month:02d}-{day:02d}"
            entries = by_day.get(key)
            if entries:
                view[key] = day_markers(entries)
        return view

    def entries_for_day(self, day: str, flt: CalendarFilter = CalendarFilter.ALL) -> list[Crisis]:
        key = normalize_date(day)
        return [
            c for c in self._crisis_repo.get_all()
            if c.date == key and matches_filter(c, flt)
        ]

    def recent(self, limit: int = 3) -> list[Crisis]:
        """The latest *limit* entries (the list is already most recent first)."""
        return self._crisis_repo.get_all()[:limit]
