"""
Database module for the Steadfast store.

This module provides the persistence layer for habits, completion logs,
gratitude entries and prayer requests.

Structure:
- schema.py: Table definitions, indexes and versioned migrations
- base.py: Storage gateway owning the single SQLite connection
- errors.py: Storage and lookup exceptions
- models.py: Entities and their row mappings
- habits.py / habit_logs.py / gratitude.py / prayers.py: Repositories
- legacy_store.py: Flat key-value store read by the one-shot migration
"""

from .base import Database, ExecuteResult
from .errors import (
    NotFoundError,
    NotOpenError,
    RowDecodeError,
    SqlExecutionError,
    SteadfastError,
    StorageError,
)
from .gratitude import GratitudeRepository
from .habit_logs import HabitLogRepository, completion_percentage
from .habits import HabitRepository
from .legacy_store import LegacyKeyValueStore
from .models import (
    CompletionRate,
    DailyCount,
    DailyHabitLog,
    GratitudeEntry,
    Habit,
    PrayerRequest,
    PrayerUpdate,
)
from .prayers import PrayerRepository
from .schema import SCHEMA_VERSION, ensure_schema

__all__ = [
    # Gateway
    "Database",
    "ExecuteResult",
    "SCHEMA_VERSION",
    "ensure_schema",
    # Errors
    "NotFoundError",
    "NotOpenError",
    "RowDecodeError",
    "SqlExecutionError",
    "SteadfastError",
    "StorageError",
    # Models
    "CompletionRate",
    "DailyCount",
    "DailyHabitLog",
    "GratitudeEntry",
    "Habit",
    "PrayerRequest",
    "PrayerUpdate",
    # Repositories
    "GratitudeRepository",
    "HabitLogRepository",
    "HabitRepository",
    "LegacyKeyValueStore",
    "PrayerRepository",
    # Utilities
    "completion_percentage",
]
