"""
Shared fixtures: a fresh SQLite store per test plus its repositories and services.
"""

from datetime import datetime, timezone

import pytest

from steadfast.db import (
    Database,
    GratitudeRepository,
    HabitLogRepository,
    HabitRepository,
    LegacyKeyValueStore,
    PrayerRepository,
)
from steadfast.services import (
    AnalyticsService,
    GratitudeService,
    HabitLogService,
    HabitService,
    PrayerService,
)


@pytest.fixture
def db(tmp_path):
    database = Database(tmp_path / "test.db")
    database.open()
    yield database
    database.close()


@pytest.fixture
def habit_repo(db):
    return HabitRepository(db)


@pytest.fixture
def log_repo(db):
    return HabitLogRepository(db)


@pytest.fixture
def gratitude_repo(db):
    return GratitudeRepository(db)


@pytest.fixture
def prayer_repo(db):
    return PrayerRepository(db)


@pytest.fixture
def legacy_store(tmp_path):
    return LegacyKeyValueStore(tmp_path / "legacy.json")


@pytest.fixture
def habit_service(habit_repo):
    return HabitService(habit_repo)


@pytest.fixture
def log_service(habit_repo, log_repo):
    return HabitLogService(habit_repo, log_repo)


@pytest.fixture
def analytics(habit_repo, log_repo):
    return AnalyticsService(habit_repo, log_repo)


@pytest.fixture
def gratitude_service(gratitude_repo):
    return GratitudeService(gratitude_repo)


@pytest.fixture
def prayer_service(prayer_repo):
    return PrayerService(prayer_repo)


def utc(*args) -> datetime:
    """Build an aware UTC timestamp."""
    return datetime(*args, tzinfo=timezone.utc)
