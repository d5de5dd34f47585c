"""
domain.exceptions - Custom exception hierarchy for the migraine tracker.

All domain-level errors inherit from DomainError so callers can catch
broad or specific exceptions as needed.
"""


class DomainError(Exception):
    """Base exception for all domain-level errors."""


class RepositoryError(DomainError):
    """Raised when the persistent store fails to write (quota, serialization)."""


class BackupFormatError(DomainError):
    """Raised when a backup payload is malformed; nothing has been changed."""


class StorageReadError(DomainError):
    """Raised when the persistent store cannot be read (unreadable or tampered file)."""
