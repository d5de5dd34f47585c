"""
infrastructure.config - Typed, injectable configuration.

A frozen dataclass that can be constructed from the environment (and an
optional .env file) or passed explicitly in tests.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class Settings:
    """Centralized configuration for the migraine tracker.

    No module-level globals: construct via from_env() or pass explicitly
    in tests.
    """
    project_root: Path

    # Database backing the key-value store
    db_path: str = "alivio.db"

    # Storage keys (one JSON document per key)
    crises_key: str = "alivio_crises_v1"
    profile_key: str = "alivio_profile_v1"

    # Analytics
    recent_window_days: int = 30

    # Logging
    log_level: str = "INFO"

    # REST adapter
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    @classmethod
    def from_env(cls, project_root: Optional[Path] = None) -> Settings:
        """Build Settings from environment variables and .env."""
        from dotenv import load_dotenv
        load_dotenv()

        root = project_root or Path(__file__).resolve().parent.parent.parent

        return cls(
            project_root=root,
            db_path=os.getenv("DB_PATH", str(root / "alivio.db")),
            crises_key=os.getenv("CRISES_KEY", "alivio_crises_v1"),
            profile_key=os.getenv("PROFILE_KEY", "alivio_profile_v1"),
            recent_window_days=int(os.getenv("RECENT_WINDOW_DAYS", "30")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            api_host=os.getenv("API_HOST", "0.0.0.0"),
            api_port=int(os.getenv("API_PORT", "8000")),
        )
