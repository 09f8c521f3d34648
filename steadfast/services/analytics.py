"""
Analytics service for habit completion statistics.

Provides functionality for:
- Daily, weekly and monthly completion stats over trailing windows
- Current streaks walked backwards from the latest completion
- Per-habit completion rates

Nothing here is persisted; every figure is recomputed from the raw logs.
"""

import calendar
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from steadfast.config import (
    DEFAULT_DAILY_WINDOW,
    DEFAULT_MONTHLY_WINDOW,
    DEFAULT_WEEKLY_WINDOW,
)
from steadfast.db.habit_logs import HabitLogRepository, completion_percentage
from steadfast.db.habits import HabitRepository
from steadfast.db.models import CompletionRate
from steadfast.models import HabitFrequency, month_bounds, shift_months, week_start

logger = logging.getLogger(__name__)


@dataclass
class DailyStats:
    """Completion of daily habits on one calendar day."""

    date: date
    completed: int
    total: int
    percentage: int


@dataclass
class WeeklyStats:
    """Completion of weekly habits over one Sunday-aligned week."""

    week_start: date
    week_end: date
    completed: int
    total: int
    percentage: int


@dataclass
class MonthlyStats:
    """Completion of monthly habits over one calendar month."""

    date: date  # First day of the month
    month: str
    year: int
    completed: int
    total: int
    percentage: int


def compute_streak(completed_dates: Iterable[date], frequency: HabitFrequency) -> int:
    """
    Count consecutive cadence periods ending at the most recent completion.

    Args:
        completed_dates: Completed log dates, newest first
        frequency: Cadence used to step back between periods

    Returns:
        Number of consecutive matches before the first gap (0 if none)
    """
    streak = 0
    expected: Optional[date] = None
    for day in completed_dates:
        if expected is None:
            expected = day
        if day != expected:
            break
        streak += 1
        expected = frequency.previous_period(expected)
    return streak


class AnalyticsService:
    """Service for time-windowed completion statistics."""

    def __init__(self, habit_repo: HabitRepository, log_repo: HabitLogRepository):
        """
        Initialize the analytics service.

        Args:
            habit_repo: Repository for habits
            log_repo: Repository for habit logs
        """
        self.habit_repo = habit_repo
        self.log_repo = log_repo

    def get_daily_stats(
        self, days: int = DEFAULT_DAILY_WINDOW, today: Optional[date] = None
    ) -> list[DailyStats]:
        """
        Get daily-habit completion for each of the last ``days`` days.

        Args:
            days: Number of days in the window, ending today
            today: Last day of the window (defaults to today)

        Returns:
            One DailyStats per day, oldest first
        """
        if today is None:
            today = date.today()
        if days <= 0:
            return []

        total = len(self.habit_repo.get_by_frequency(HabitFrequency.DAILY))
        start = today - timedelta(days=days - 1)
        completed_by_date = {
            row.date: row.completed
            for row in self.log_repo.get_daily_stats_for_range(
                start, today, HabitFrequency.DAILY
            )
        }

        stats = []
        for offset in range(days):
            day = start + timedelta(days=offset)
            completed = completed_by_date.get(day, 0)
            stats.append(
                DailyStats(
                    date=day,
                    completed=completed,
                    total=total,
                    percentage=completion_percentage(completed, total),
                )
            )
        return stats

    def get_weekly_stats(
        self, weeks: int = DEFAULT_WEEKLY_WINDOW, today: Optional[date] = None
    ) -> list[WeeklyStats]:
        """
        Get weekly-habit completion for each of the last ``weeks`` weeks.

        Weeks start on Sunday. The possible total is seven times the number
        of weekly habits; every completed log of a weekly habit within the
        week counts, whichever day it fell on.

        Returns:
            One WeeklyStats per week, oldest first
        """
        if today is None:
            today = date.today()

        habit_ids = {h.id for h in self.habit_repo.get_by_frequency(HabitFrequency.WEEKLY)}
        total = 7 * len(habit_ids)
        current_week = week_start(today)

        stats = []
        for i in range(weeks - 1, -1, -1):
            start = current_week - timedelta(days=7 * i)
            end = start + timedelta(days=6)
            logs = self.log_repo.get_for_date_range(start, end)
            completed = sum(1 for log in logs if log.completed and log.habit_id in habit_ids)
            stats.append(
                WeeklyStats(
                    week_start=start,
                    week_end=end,
                    completed=completed,
                    total=total,
                    percentage=completion_percentage(completed, total),
                )
            )
        return stats

    def get_monthly_stats(
        self, months: int = DEFAULT_MONTHLY_WINDOW, today: Optional[date] = None
    ) -> list[MonthlyStats]:
        """
        Get monthly-habit completion for each of the last ``months`` months.

        A monthly habit is satisfied once per month, so ``completed`` counts
        distinct habits with at least one completed log in the month.

        Returns:
            One MonthlyStats per calendar month, oldest first
        """
        if today is None:
            today = date.today()

        habit_ids = {h.id for h in self.habit_repo.get_by_frequency(HabitFrequency.MONTHLY)}
        total = len(habit_ids)
        first_of_current = today.replace(day=1)

        stats = []
        for i in range(months - 1, -1, -1):
            first = shift_months(first_of_current, -i)
            start, end = month_bounds(first.year, first.month)
            logs = self.log_repo.get_for_date_range(start, end)
            completed_ids = {
                log.habit_id for log in logs if log.completed and log.habit_id in habit_ids
            }
            completed = len(completed_ids)
            stats.append(
                MonthlyStats(
                    date=start,
                    month=calendar.month_name[start.month],
                    year=start.year,
                    completed=completed,
                    total=total,
                    percentage=completion_percentage(completed, total),
                )
            )
        return stats

    def get_current_streak(self, habit_id: str, today: Optional[date] = None) -> int:
        """
        Get the current streak for a habit as of ``today``.

        Completed logs up to today are walked newest first, stepping back one
        day, week or calendar month depending on the habit's frequency; the
        streak ends at the first gap. Unknown habits have a streak of 0.
        """
        habit = self.habit_repo.get_by_id(habit_id)
        if habit is None:
            return 0
        if today is None:
            today = date.today()

        completed_dates = self.log_repo.get_completed_dates(habit_id, today)
        streak = compute_streak(completed_dates, habit.frequency)
        logger.debug(f"Streak for habit {habit_id} as of {today}: {streak}")
        return streak

    def get_completion_rate(
        self, habit_id: str, start_date: date, end_date: date
    ) -> CompletionRate:
        """Completed vs. logged days for one habit within a range."""
        return self.log_repo.get_completion_rate(habit_id, start_date, end_date)
