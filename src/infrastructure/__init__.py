"""
infrastructure - Concrete implementations of domain ports.

Contains all storage-specific code: SQLite, the key-value stores and the
JSON-backed repositories. Depends on domain/ only (implements ports).
Never imported by application/.
"""
