"""
Application wiring for the Steadfast store.

Builds the storage gateway, every repository and every service around one
shared database connection, and runs the startup sequence.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from steadfast.config import (
    LOG_DIR,
    LOG_FILE,
    LOG_FORMAT,
    ensure_directories,
    get_log_level,
    load_environment,
)
from steadfast.db import (
    Database,
    GratitudeRepository,
    HabitLogRepository,
    HabitRepository,
    LegacyKeyValueStore,
    PrayerRepository,
)
from steadfast.migrate_legacy_store import (
    MigrationReport,
    is_migration_needed,
    migrate_from_legacy_store,
)
from steadfast.services import (
    AnalyticsService,
    GratitudeService,
    HabitLogService,
    HabitService,
    PrayerService,
)

logger = logging.getLogger(__name__)


def setup_logging():
    """Configure root logging to the log file and stdout."""
    ensure_directories()
    logging.basicConfig(
        level=get_log_level(),
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(LOG_DIR / LOG_FILE),
            logging.StreamHandler(sys.stdout),
        ],
    )


class SteadfastApp:
    """Holds the database, repositories and services of one store."""

    def __init__(
        self,
        db_path: Optional[Path] = None,
        legacy_store_path: Optional[Path] = None,
    ):
        """
        Build the object graph without touching the database.

        Args:
            db_path: SQLite file (defaults to the configured path)
            legacy_store_path: Legacy key-value file read by the import
        """
        self.db = Database(db_path)
        self.legacy_store = LegacyKeyValueStore(legacy_store_path)

        # Repositories
        self.habit_repo = HabitRepository(self.db)
        self.log_repo = HabitLogRepository(self.db)
        self.gratitude_repo = GratitudeRepository(self.db)
        self.prayer_repo = PrayerRepository(self.db)

        # Services
        self.habits = HabitService(self.habit_repo)
        self.habit_logs = HabitLogService(self.habit_repo, self.log_repo)
        self.analytics = AnalyticsService(self.habit_repo, self.log_repo)
        self.gratitude = GratitudeService(self.gratitude_repo)
        self.prayers = PrayerService(self.prayer_repo)

        self.migration_report: Optional[MigrationReport] = None

    def start(self) -> "SteadfastApp":
        """
        Open the store, import legacy data once, and seed default habits.

        Returns:
            The started application
        """
        try:
            self.db.open()
            logger.info(f"Database opened: {self.db.db_path}")

            if is_migration_needed(self.legacy_store):
                self.migration_report = migrate_from_legacy_store(
                    self.legacy_store,
                    self.habit_repo,
                    self.log_repo,
                    self.gratitude_repo,
                    self.prayer_repo,
                )

            self.habits.seed_default_habits()
        except Exception as e:
            logger.error(f"Failed to start application: {e}", exc_info=True)
            raise
        return self

    def stop(self):
        """Close the database connection."""
        self.db.close()
        logger.info("Database closed")


_default_app: Optional[SteadfastApp] = None


def get_app() -> SteadfastApp:
    """Get or create the default started application."""
    global _default_app
    if _default_app is None:
        load_environment()
        _default_app = SteadfastApp().start()
    return _default_app
