"""
Habit log service for completion tracking.

Provides functionality for:
- Toggling and logging habit completions per calendar day
- Looking up logs by day, habit and range
- Keeping each habit's cached streak in step with its logs
"""

import logging
import uuid
from dataclasses import replace
from datetime import date
from typing import Optional

from steadfast.config import LEGACY_EPOCH
from steadfast.db.habit_logs import HabitLogRepository
from steadfast.db.habits import HabitRepository
from steadfast.db.models import DailyHabitLog, utcnow

from .analytics import compute_streak
from .locks import KeyedLock

logger = logging.getLogger(__name__)


class HabitLogService:
    """Service for recording and reading habit completions."""

    def __init__(
        self,
        habit_repo: HabitRepository,
        log_repo: HabitLogRepository,
    ):
        """
        Initialize the habit log service.

        Args:
            habit_repo: Repository for habits
            log_repo: Repository for habit logs
        """
        self.habit_repo = habit_repo
        self.log_repo = log_repo
        self._locks = KeyedLock()

    def toggle_completion(self, habit_id: str, day: date) -> DailyHabitLog:
        """
        Flip the completion of a habit on a day.

        The first toggle for a day creates a completed log; later toggles
        flip it. Concurrent toggles of the same (habit, day) run one after
        the other, and the read-modify-write happens in one transaction.

        Returns:
            The stored log after the toggle
        """
        with self._locks.hold((habit_id, day)):
            now = utcnow()
            with self.log_repo.db.transaction():
                existing = self.log_repo.get_by_habit_and_date(habit_id, day)
                if existing:
                    completed = not existing.completed
                    log = replace(
                        existing,
                        completed=completed,
                        completed_at=now if completed else None,
                        updated_at=now,
                    )
                else:
                    log = self._new_log(habit_id, day, completed=True, now=now)
                stored = self.log_repo.save(log)

            logger.info(
                f"Toggled habit {habit_id} on {day}: completed={stored.completed}"
            )
            self.refresh_cached_streak(habit_id)
            return stored

    def log_completion(self, habit_id: str, day: date) -> DailyHabitLog:
        """Mark a habit completed on a day (idempotent)."""
        with self._locks.hold((habit_id, day)):
            now = utcnow()
            stored = self.log_repo.save(self._new_log(habit_id, day, completed=True, now=now))
            self.refresh_cached_streak(habit_id)
            return stored

    def delete_log(self, habit_id: str, day: date) -> bool:
        """Remove a habit's log for a day."""
        with self._locks.hold((habit_id, day)):
            deleted = self.log_repo.delete(habit_id, day)
            if deleted:
                self.refresh_cached_streak(habit_id)
            return deleted

    def get_logs_for_date(self, day: date) -> list[DailyHabitLog]:
        return self.log_repo.get_for_date(day)

    def get_logs_for_habit(self, habit_id: str) -> list[DailyHabitLog]:
        return self.log_repo.get_for_habit(habit_id)

    def get_logs_for_date_range(self, start_date: date, end_date: date) -> list[DailyHabitLog]:
        return self.log_repo.get_for_date_range(start_date, end_date)

    def get_all_logs(self, today: Optional[date] = None) -> list[DailyHabitLog]:
        """Get every log from the legacy epoch through today."""
        if today is None:
            today = date.today()
        return self.log_repo.get_for_date_range(date.fromisoformat(LEGACY_EPOCH), today)

    def refresh_cached_streak(self, habit_id: str, today: Optional[date] = None):
        """
        Recompute a habit's display streak and last completed date.

        The cached values are a convenience for display; analytics always
        recompute from the logs.
        """
        habit = self.habit_repo.get_by_id(habit_id)
        if habit is None:
            return

        if today is None:
            today = date.today()
        completed_dates = self.log_repo.get_completed_dates(habit_id, today)
        streak = compute_streak(completed_dates, habit.frequency)
        last_completed = completed_dates[0] if completed_dates else None

        if habit.streak == streak and habit.last_completed_date == last_completed:
            return

        self.habit_repo.save(
            replace(
                habit,
                streak=streak,
                last_completed_date=last_completed,
                updated_at=utcnow(),
            )
        )
        logger.debug(f"Cached streak for habit {habit_id} is now {streak}")

    @staticmethod
    def _new_log(habit_id: str, day: date, completed: bool, now) -> DailyHabitLog:
        return DailyHabitLog(
            id=uuid.uuid4().hex,
            habit_id=habit_id,
            date=day,
            completed=completed,
            completed_at=now if completed else None,
            created_at=now,
            updated_at=now,
        )
