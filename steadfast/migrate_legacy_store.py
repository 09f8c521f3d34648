"""
One-shot import from the legacy key-value store into SQLite.

Before the relational schema existed, every collection was kept as a JSON
blob under a single key. This module reads those blobs and replays each
element through the matching repository's ``save``, which keeps the source
ids so a forced rerun updates rows instead of duplicating them.

Each blob is imported independently: a failure part-way through one stream
is recorded in the report and the remaining streams still run. Whatever was
imported before the failure stays in place. The completion flag is written
at the end in every case, so the import never runs twice on its own.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from steadfast.db.gratitude import GratitudeRepository
from steadfast.db.habit_logs import HabitLogRepository
from steadfast.db.habits import HabitRepository
from steadfast.db.legacy_store import (
    GRATITUDE_KEY,
    HABIT_LOGS_KEY,
    HABITS_KEY,
    MIGRATION_COMPLETE_KEY,
    PRAYERS_KEY,
    LegacyKeyValueStore,
)
from steadfast.db.models import DailyHabitLog, GratitudeEntry, Habit, PrayerRequest
from steadfast.db.prayers import PrayerRepository

logger = logging.getLogger(__name__)


@dataclass
class MigrationReport:
    """Outcome of a legacy import."""

    success: bool = True
    habits_imported: int = 0
    logs_imported: int = 0
    gratitude_imported: int = 0
    prayers_imported: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "habits_imported": self.habits_imported,
            "logs_imported": self.logs_imported,
            "gratitude_imported": self.gratitude_imported,
            "prayers_imported": self.prayers_imported,
            "errors": list(self.errors),
        }


def is_migration_needed(store: LegacyKeyValueStore) -> bool:
    """Check whether the legacy import has not yet completed."""
    return store.get_item(MIGRATION_COMPLETE_KEY) != "true"


def _load_list(store: LegacyKeyValueStore, key: str) -> list[Any]:
    raw = store.get_item(key)
    if not raw:
        return []
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError(f"{key} does not hold a JSON list")
    return data


def _import_stream(
    store: LegacyKeyValueStore,
    key: str,
    decode: Callable[[dict], Any],
    save: Callable[[Any], Any],
    report: MigrationReport,
    label: str,
) -> int:
    """
    Import every element of one legacy blob.

    Args:
        store: Legacy store to read from
        key: Key of the JSON list blob
        decode: Turns one JSON object into an entity
        save: Repository write path for the entity
        report: Collects the error if the stream fails
        label: Name used in log lines and error messages

    Returns:
        Number of elements saved before the stream finished or failed
    """
    imported = 0
    try:
        for item in _load_list(store, key):
            save(decode(item))
            imported += 1
        logger.info(f"Imported {imported} {label} from {key}")
    except Exception as e:
        message = f"Failed to import {label}: {e}"
        logger.error(message, exc_info=True)
        report.errors.append(message)
        report.success = False
    return imported


def migrate_from_legacy_store(
    store: LegacyKeyValueStore,
    habits: HabitRepository,
    logs: HabitLogRepository,
    gratitude: GratitudeRepository,
    prayers: Optional[PrayerRepository] = None,
) -> MigrationReport:
    """
    Import habits, habit logs, gratitude entries and prayers.

    Habits are imported before logs so that log rows find their habit.
    Prayers are only imported when a prayer repository is given.

    Returns:
        A MigrationReport with per-stream counts and any errors
    """
    logger.info("Starting legacy store migration")
    report = MigrationReport()

    report.habits_imported = _import_stream(
        store, HABITS_KEY, Habit.from_dict, habits.save, report, "habits"
    )
    report.logs_imported = _import_stream(
        store, HABIT_LOGS_KEY, DailyHabitLog.from_dict, logs.save, report, "habit logs"
    )
    report.gratitude_imported = _import_stream(
        store,
        GRATITUDE_KEY,
        GratitudeEntry.from_dict,
        gratitude.save,
        report,
        "gratitude entries",
    )
    if prayers is not None:
        report.prayers_imported = _import_stream(
            store, PRAYERS_KEY, PrayerRequest.from_dict, prayers.save, report, "prayers"
        )

    store.set_item(MIGRATION_COMPLETE_KEY, "true")

    if report.success:
        logger.info(f"Legacy store migration completed: {report.to_dict()}")
    else:
        logger.warning(f"Legacy store migration finished with errors: {report.errors}")
    return report
