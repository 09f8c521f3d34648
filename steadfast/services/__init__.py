from .analytics import (
    AnalyticsService,
    DailyStats,
    MonthlyStats,
    WeeklyStats,
    compute_streak,
)
from .gratitude import GratitudeService
from .habit_logs import HabitLogService
from .habits import HabitService
from .locks import KeyedLock
from .prayers import PrayerService, PrayerStats

__all__ = [
    "AnalyticsService",
    "DailyStats",
    "GratitudeService",
    "HabitLogService",
    "HabitService",
    "KeyedLock",
    "MonthlyStats",
    "PrayerService",
    "PrayerStats",
    "WeeklyStats",
    "compute_streak",
]
