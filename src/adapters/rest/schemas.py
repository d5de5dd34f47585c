"""Pydantic models for REST API request validation.

Bodies use the same camelCase keys as the stored JSON (snake_case is
accepted too).
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from application.dto import CrisisDraft
from domain.entities import MedicationEntry, UserProfile
from domain.models import EntryType, FunctionalImpact, Relief


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Crises ---

class MedicationBody(_CamelModel):
    name: str = Field(..., min_length=1)
    dose: str = ""
    time: str = ""
    relief: Relief = Relief.MODERATE

    def to_entry(self) -> MedicationEntry:
        return MedicationEntry(name=self.name, dose=self.dose, time=self.time, relief=self.relief)


class CrisisBody(_CamelModel):
    """A crisis as entered in the log form."""
    date: str
    type: EntryType = EntryType.PAIN
    start_time: str = ""
    end_time: str = ""
    intensity: int = Field(0, ge=0, le=10)
    localization: list[str] = []
    pain_quality: list[str] = []
    symptoms: list[str] = []
    medications: list[MedicationBody] = []
    functional_impact: FunctionalImpact = FunctionalImpact.NONE
    notes: str = ""
    is_period: bool = False
    light: bool = False

    def to_draft(self) -> CrisisDraft:
        return CrisisDraft(
            date=self.date,
            type=self.type,
            start_time=self.start_time,
            end_time=self.end_time,
            intensity=self.intensity,
            localization=self.localization,
            pain_quality=self.pain_quality,
            symptoms=self.symptoms,
            medications=[m.to_entry() for m in self.medications],
            functional_impact=self.functional_impact,
            notes=self.notes,
            is_period=self.is_period,
            light=self.light,
        )


# null on these resets them (no end time, no tags)
_CLEARABLE_FIELDS = {"end_time", "duration", "localization", "pain_quality", "symptoms", "medications"}


class CrisisPatchBody(_CamelModel):
    """Partial update; only the fields sent are changed."""
    date: Optional[str] = None
    type: Optional[EntryType] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    duration: Optional[str] = None
    intensity: Optional[int] = Field(None, ge=0, le=10)
    localization: Optional[list[str]] = None
    pain_quality: Optional[list[str]] = None
    symptoms: Optional[list[str]] = None
    medications: Optional[list[MedicationBody]] = None
    functional_impact: Optional[FunctionalImpact] = None
    notes: Optional[str] = None
    is_period: Optional[bool] = None

    def to_changes(self) -> dict[str, Any]:
        """Fields that were sent. null clears a nullable field and is ignored otherwise."""
        changes = {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None or name in _CLEARABLE_FIELDS
        }
        if "medications" in changes:
            changes["medications"] = [m.to_entry() for m in changes["medications"] or []]
        return changes


class RestBody(_CamelModel):
    date: Optional[str] = None


# --- Profile ---

class ProfileBody(_CamelModel):
    name: str = Field(..., min_length=1)
    age: Optional[int] = Field(None, ge=0, le=130)
    migraine_type: str = ""
    joined_date: Optional[str] = None
    avatar: Optional[str] = None

    def to_profile(self, joined_date: str) -> UserProfile:
        return UserProfile(
            name=self.name,
            age=self.age,
            migraine_type=self.migraine_type,
            joined_date=self.joined_date or joined_date,
            avatar=self.avatar,
        )


class AvatarBody(BaseModel):
    avatar: Optional[str] = None
