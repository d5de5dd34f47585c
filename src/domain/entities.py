"""
domain.entities - Persisted types (have IDs) for the migraine tracker.

These dataclasses are decoupled from any persistence strategy: repositories
decide where they live, the entities only know how to turn themselves into
the JSON shape used by storage and backup files (camelCase keys) and back.

IDs are assigned by the repository implementations, not by the entities.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Optional
from uuid import uuid4

from domain.models import EntryType, FunctionalImpact, Relief, normalize_date


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return uuid4().hex


@dataclass
class MedicationEntry:
    """One medication intake recorded inside a crisis."""
    name: str
    dose: str = ""
    time: str = ""
    relief: Relief = Relief.NONE
    id: str = field(default_factory=new_id)

    def __post_init__(self):
        self.relief = Relief(self.relief)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "dose": self.dose,
            "time": self.time,
            "relief": self.relief.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> MedicationEntry:
        return cls(
            id=str(data.get("id") or new_id()),
            name=str(data["name"]),
            dose=str(data.get("dose") or ""),
            time=str(data.get("time") or ""),
            relief=Relief(data.get("relief") or Relief.NONE),
        )


# JSON key -> attribute name for the fields that differ
_CRISIS_JSON_KEYS = {
    "startTime": "start_time",
    "endTime": "end_time",
    "painQuality": "pain_quality",
    "functionalImpact": "functional_impact",
    "isPeriod": "is_period",
}


@dataclass
class Crisis:
    """A single logged health event (pain, medication, period or rest).

    ``date`` is always stored as ``YYYY-MM-DD`` so that plain string
    comparison orders records chronologically.
    """
    date: str
    type: EntryType = EntryType.PAIN
    start_time: str = ""
    end_time: Optional[str] = None
    duration: Optional[str] = None
    intensity: int = 0
    localization: list[str] = field(default_factory=list)
    pain_quality: list[str] = field(default_factory=list)
    symptoms: list[str] = field(default_factory=list)
    medications: list[MedicationEntry] = field(default_factory=list)
    functional_impact: FunctionalImpact = FunctionalImpact.NONE
    notes: str = ""
    is_period: bool = False
    id: str = ""

    def __post_init__(self):
        self.date = normalize_date(self.date)
        self.type = EntryType(self.type)
        self.functional_impact = FunctionalImpact(self.functional_impact)
        self.intensity = int(self.intensity)
        if not 0 <= self.intensity <= 10:
            raise ValueError(f"Intensity must be between 0 and 10, got {self.intensity}")
        for name in ("localization", "pain_quality", "symptoms"):
            tags = getattr(self, name)
            if tags is None:
                tags = []
            elif not isinstance(tags, (list, tuple)):
                raise TypeError(f"{name} must be a list, got {type(tags).__name__}")
            setattr(self, name, [str(t) for t in tags])
        self.medications = [
            m if isinstance(m, MedicationEntry) else MedicationEntry.from_dict(m)
            for m in self.medications or []
        ]

    @classmethod
    def field_names(cls) -> set[str]:
        return {f.name for f in fields(cls)}

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date,
            "type": self.type.value,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "duration": self.duration,
            "intensity": self.intensity,
            "localization": list(self.localization),
            "painQuality": list(self.pain_quality),
            "symptoms": list(self.symptoms),
            "medications": [m.to_dict() for m in self.medications],
            "functionalImpact": self.functional_impact.value,
            "notes": self.notes,
            "isPeriod": self.is_period,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Crisis:
        """Build a Crisis from its JSON shape.

        Missing optional fields fall back to their defaults; unknown keys
        (e.g. legacy ``medicationName``) are ignored.

        Raises:
            KeyError: If ``date`` is missing.
            ValueError: If a field holds an invalid value.
        """
        known = cls.field_names()
        kwargs = {}
        for key, value in data.items():
            name = _CRISIS_JSON_KEYS.get(key, key)
            if name in known and value is not None:
                kwargs[name] = value
        if "date" not in kwargs:
            raise KeyError("Crisis record is missing 'date'")
        kwargs["id"] = str(kwargs.get("id", ""))
        return cls(**kwargs)


@dataclass
class UserProfile:
    """The single user profile stored on this device."""
    name: str
    migraine_type: str = ""
    joined_date: str = ""
    age: Optional[int] = None
    avatar: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "age": self.age,
            "migraineType": self.migraine_type,
            "joinedDate": self.joined_date,
            "avatar": self.avatar,
        }

    @classmethod
    def from_dict(cls, data: dict) -> UserProfile:
        age = data.get("age")
        return cls(
            name=str(data["name"]),
            age=int(age) if age not in (None, "") else None,
            migraine_type=str(data.get("migraineType") or ""),
            joined_date=str(data.get("joinedDate") or ""),
            avatar=data.get("avatar") or None,
        )
