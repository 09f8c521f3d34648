"""
Steadfast - Spiritual Habit Tracker Store

Local persistence and analytics for habits, daily completion logs,
gratitude entries and prayer requests, backed by SQLite.
"""

from .app import SteadfastApp, get_app, setup_logging
from .config import VERSION
from .db import Database, NotFoundError, NotOpenError, SqlExecutionError
from .migrate_legacy_store import MigrationReport, migrate_from_legacy_store
from .models import HabitFrequency, PrayerCategory, PrayerPriority, PrayerStatus
from .services import (
    AnalyticsService,
    GratitudeService,
    HabitLogService,
    HabitService,
    PrayerService,
)

__version__ = VERSION

__all__ = [
    "AnalyticsService",
    "Database",
    "GratitudeService",
    "HabitFrequency",
    "HabitLogService",
    "HabitService",
    "MigrationReport",
    "NotFoundError",
    "NotOpenError",
    "PrayerCategory",
    "PrayerPriority",
    "PrayerService",
    "PrayerStatus",
    "SqlExecutionError",
    "SteadfastApp",
    "get_app",
    "migrate_from_legacy_store",
    "setup_logging",
]
