"""
domain.ports - Abstract interfaces (Protocols) for all system boundaries.

These define WHAT the system needs without specifying HOW. Infrastructure
modules provide concrete implementations. Application services depend only
on these protocols, never on concrete classes.

Using typing.Protocol (structural typing) instead of ABC: any class that
implements the methods satisfies the port without explicit inheritance.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from domain.entities import Crisis, UserProfile


# ---------------------------------------------------------------------------
# Storage Port
# ---------------------------------------------------------------------------

@runtime_checkable
class KeyValueStore(Protocol):
    """Durable, synchronous, string-keyed text storage for one device."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...
    def clear(self) -> None: ...


# ---------------------------------------------------------------------------
# Repository Ports
# ---------------------------------------------------------------------------

@runtime_checkable
class CrisisRepository(Protocol):
    """Cached, persisted collection of crises kept sorted by date descending."""

    def get_all(self) -> list[Crisis]: ...
    def get_by_id(self, crisis_id: str) -> Crisis | None: ...
    def save(self, crisis: Crisis) -> Crisis: ...
    def update(self, crisis_id: str, changes: dict[str, Any]) -> Crisis | None: ...
    def delete(self, crisis_id: str) -> bool: ...
    def replace_all(self, crises: list[Crisis]) -> None: ...
    def clear(self) -> None: ...


@runtime_checkable
class ProfileRepository(Protocol):
    """Single user profile per device."""

    def get_profile(self) -> UserProfile | None: ...
    def save_profile(self, profile: UserProfile) -> None: ...
    def clear(self) -> None: ...
