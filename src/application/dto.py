"""
application.dto - Data Transfer Objects for service input/output.

These are the structured inputs and results that services exchange with
callers (CLI and REST adapters).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from domain.entities import MedicationEntry
from domain.models import EntryType, FunctionalImpact


@dataclass(frozen=True)
class CrisisDraft:
    """Form input for a new or edited crisis, before derivation.

    light: quick-log mode; localization, pain quality and symptoms are
    dropped when the record is built.
    """
    date: str
    type: EntryType = EntryType.PAIN
    start_time: str = ""
    end_time: str = ""
    intensity: int = 0
    localization: list[str] = field(default_factory=list)
    pain_quality: list[str] = field(default_factory=list)
    symptoms: list[str] = field(default_factory=list)
    medications: list[MedicationEntry] = field(default_factory=list)
    functional_impact: FunctionalImpact = FunctionalImpact.NONE
    notes: str = ""
    is_period: bool = False
    light: bool = False


@dataclass(frozen=True)
class ImportSummary:
    """Result of a successful backup import."""
    crises_imported: int
    profile_imported: bool
    version: int
    exported_at: Optional[str] = None


@dataclass(frozen=True)
class MonthGrid:
    """Layout of a Monday-first month calendar."""
    year: int
    month: int
    start_offset: int
    days_in_month: int
    prev_month_days: int

    @property
    def cell_count(self) -> int:
        return self.start_offset + self.days_in_month
