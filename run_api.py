"""
Run the Alivio migraine tracker REST API.

Usage:
    python run_api.py

Environment variables (all optional, also read from .env):
    DB_PATH             SQLite database file path (default: alivio.db)
    CRISES_KEY          Storage key of the crisis collection (default: alivio_crises_v1)
    PROFILE_KEY         Storage key of the profile (default: alivio_profile_v1)
    RECENT_WINDOW_DAYS  Window of the rolling statistics (default: 30)
    LOG_LEVEL           Root log level (default: INFO)
    API_HOST            Bind address (default: 0.0.0.0)
    API_PORT            Bind port (default: 8000)
"""

import logging
import sys
from pathlib import Path

# Ensure src/ is importable
sys.path.insert(0, str(Path(__file__).parent / "src"))

import uvicorn

from infrastructure.config import Settings

if __name__ == "__main__":
    settings = Settings.from_env(project_root=Path(__file__).parent)
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "adapters.rest.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
