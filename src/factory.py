"""
factory - Composition root for the migraine tracker.

ALL dependency wiring happens here. No other module constructs its own
dependencies. Adapters (CLI, REST) call this factory to get fully
configured services.

The repositories own the in-memory cache, so the factory builds exactly
one of each and hands the same instance to every service it creates.

Usage:
    from factory import ServiceFactory
    from infrastructure.config import Settings

    config = Settings.from_env()
    factory = ServiceFactory(config)
    factory.initialize()  # one-time startup

    stats = factory.create_analytics_service().get_stats()
"""

from __future__ import annotations

import logging
from typing import Optional

from domain.ports import KeyValueStore
from infrastructure.config import Settings
from infrastructure.persistence.connection import SQLiteConnection
from infrastructure.persistence.crisis_repo import KeyValueCrisisRepository
from infrastructure.persistence.kv_store import SQLiteKeyValueStore
from infrastructure.persistence.migrations import run_migrations
from infrastructure.persistence.profile_repo import KeyValueProfileRepository
from application.services.analytics import AnalyticsService
from application.services.backup import BackupService
from application.services.calendar import CalendarService
from application.services.crisis_log import CrisisLogService
from application.services.profile import ProfileService

logger = logging.getLogger(__name__)


class ServiceFactory:
    """Composition root, wires all dependencies together.

    Call initialize() once at startup, then create services as needed.

    store: optional KeyValueStore to use instead of the SQLite one
    (e.g. InMemoryKeyValueStore in tests).
    """

    def __init__(self, config: Settings, store: Optional[KeyValueStore] = None):
        self._config = config
        self._connection = SQLiteConnection(config.db_path)
        self._store = store or SQLiteKeyValueStore(self._connection)
        self._uses_sqlite = store is None

        self._crisis_repo = KeyValueCrisisRepository(self._store, key=config.crises_key)
        self._profile_repo = KeyValueProfileRepository(self._store, key=config.profile_key)
        self._initialized = False

    @property
    def config(self) -> Settings:
        return self._config

    def initialize(self) -> None:
        """One-time startup: create the key-value table if needed."""
        if self._uses_sqlite:
            run_migrations(self._connection)
        self._initialized = True
        logger.info("ServiceFactory ready")

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    @property
    def crisis_repository(self) -> KeyValueCrisisRepository:
        self._ensure_initialized()
        return self._crisis_repo

    @property
    def profile_repository(self) -> KeyValueProfileRepository:
        self._ensure_initialized()
        return self._profile_repo

    # ------------------------------------------------------------------
    # Service creation
    # ------------------------------------------------------------------

    def create_crisis_log_service(self) -> CrisisLogService:
        return CrisisLogService(self.crisis_repository)

    def create_analytics_service(self) -> AnalyticsService:
        return AnalyticsService(
            self.crisis_repository,
            window_days=self._config.recent_window_days,
        )

    def create_calendar_service(self) -> CalendarService:
        return CalendarService(self.crisis_repository)

    def create_profile_service(self) -> ProfileService:
        return ProfileService(self.profile_repository)

    def create_backup_service(self) -> BackupService:
        return BackupService(self.crisis_repository, self.profile_repository)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError(
                "ServiceFactory not initialized. Call factory.initialize() first."
            )
