"""
Habit log repository module for daily completion records.

Handles all log-related database operations including:
- Date, habit and date-range lookups
- Upserting logs keyed by (habit, date)
- Per-date and per-habit completion aggregates
"""

import logging
from datetime import date
from typing import Optional

from steadfast.models import HabitFrequency

from .base import Database
from .models import CompletionRate, DailyCount, DailyHabitLog, format_timestamp

logger = logging.getLogger(__name__)


def completion_percentage(completed: int, total: int) -> int:
    """Whole-number percentage rounded half up; 0 when there is nothing to complete."""
    if total <= 0:
        return 0
    return int(completed * 100 / total + 0.5)


class HabitLogRepository:
    """
    Repository for daily habit completion logs.

    A habit has at most one log per calendar day. ``save`` always upserts on
    the (habit, date) pair, so a caller-supplied id only matters when a new
    row is created.
    """

    def __init__(self, db: Database):
        self.db = db

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_for_date(self, day: date) -> list[DailyHabitLog]:
        """Get every habit's log for one calendar day."""
        rows = self.db.query_all(
            "SELECT * FROM habit_logs WHERE date = ? ORDER BY createdAt ASC",
            (day.isoformat(),),
        )
        return [DailyHabitLog.from_row(row) for row in rows]

    def get_for_habit(self, habit_id: str) -> list[DailyHabitLog]:
        """Get all logs for one habit, newest date first."""
        rows = self.db.query_all(
            "SELECT * FROM habit_logs WHERE habitId = ? ORDER BY date DESC",
            (habit_id,),
        )
        return [DailyHabitLog.from_row(row) for row in rows]

    def get_for_date_range(self, start_date: date, end_date: date) -> list[DailyHabitLog]:
        """
        Get logs within a date range.

        Args:
            start_date: Start date (inclusive)
            end_date: End date (inclusive)

        Returns:
            Logs ordered by date ascending
        """
        rows = self.db.query_all(
            """
            SELECT * FROM habit_logs
            WHERE date >= ? AND date <= ?
            ORDER BY date ASC, createdAt ASC
            """,
            (start_date.isoformat(), end_date.isoformat()),
        )
        return [DailyHabitLog.from_row(row) for row in rows]

    def get_by_habit_and_date(self, habit_id: str, day: date) -> Optional[DailyHabitLog]:
        """Get the single log for a habit on a day, if any."""
        row = self.db.query_first(
            "SELECT * FROM habit_logs WHERE habitId = ? AND date = ?",
            (habit_id, day.isoformat()),
        )
        return DailyHabitLog.from_row(row) if row else None

    def get_completed_dates(self, habit_id: str, up_to: date) -> list[date]:
        """Get the dates a habit was completed on or before ``up_to``, newest first."""
        rows = self.db.query_all(
            """
            SELECT * FROM habit_logs
            WHERE habitId = ? AND completed = 1 AND date <= ?
            ORDER BY date DESC
            """,
            (habit_id, up_to.isoformat()),
        )
        return [DailyHabitLog.from_row(row).date for row in rows]

    # =========================================================================
    # Write Operations
    # =========================================================================

    def save(self, log: DailyHabitLog) -> DailyHabitLog:
        """
        Insert or update the log for ``(log.habit_id, log.date)``.

        When a row already exists for that pair it keeps its id and
        ``createdAt``; only the completion fields and ``updatedAt`` change.

        Returns:
            The log as stored
        """
        with self.db.transaction():
            self.db.execute(
                """
                INSERT INTO habit_logs (
                    id, habitId, date, completed, completedAt, createdAt, updatedAt
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(habitId, date) DO UPDATE SET
                    completed = excluded.completed,
                    completedAt = excluded.completedAt,
                    updatedAt = excluded.updatedAt
                """,
                (
                    log.id,
                    log.habit_id,
                    log.date.isoformat(),
                    1 if log.completed else 0,
                    format_timestamp(log.completed_at),
                    log.created_at.isoformat(),
                    log.updated_at.isoformat(),
                ),
            )
            stored = self.get_by_habit_and_date(log.habit_id, log.date)

        logger.debug(
            f"Saved log for habit {log.habit_id} on {log.date}: "
            f"completed={log.completed}"
        )
        return stored if stored else log

    def delete(self, habit_id: str, day: date) -> bool:
        """
        Delete the log for a habit on a day.

        Returns:
            True if a log was deleted, False if none existed
        """
        result = self.db.execute(
            "DELETE FROM habit_logs WHERE habitId = ? AND date = ?",
            (habit_id, day.isoformat()),
        )
        return result.rowcount > 0

    # =========================================================================
    # Aggregates
    # =========================================================================

    def get_daily_stats_for_range(
        self,
        start_date: date,
        end_date: date,
        frequency: HabitFrequency,
    ) -> list[DailyCount]:
        """
        Per-date completed and logged counts for habits of one frequency.

        Only dates that have at least one log appear in the result.

        Args:
            start_date: Start date (inclusive)
            end_date: End date (inclusive)
            frequency: Only count logs of habits with this frequency

        Returns:
            DailyCount rows ordered by date ascending
        """
        rows = self.db.query_all(
            """
            SELECT
                hl.date AS date,
                COUNT(CASE WHEN hl.completed = 1 THEN 1 END) AS completed,
                COUNT(h.id) AS total
            FROM habit_logs hl
            INNER JOIN habits h ON hl.habitId = h.id
            WHERE hl.date >= ? AND hl.date <= ? AND h.frequency = ?
            GROUP BY hl.date
            ORDER BY hl.date ASC
            """,
            (start_date.isoformat(), end_date.isoformat(), HabitFrequency(frequency).value),
        )
        return [
            DailyCount(
                date=date.fromisoformat(row["date"]),
                completed=row["completed"] or 0,
                total=row["total"] or 0,
            )
            for row in rows
        ]

    def get_completion_rate(
        self, habit_id: str, start_date: date, end_date: date
    ) -> CompletionRate:
        """Completed vs. logged days for one habit within a range."""
        row = self.db.query_first(
            """
            SELECT
                COUNT(*) AS total,
                COUNT(CASE WHEN completed = 1 THEN 1 END) AS completed
            FROM habit_logs
            WHERE habitId = ? AND date >= ? AND date <= ?
            """,
            (habit_id, start_date.isoformat(), end_date.isoformat()),
        )
        completed = row["completed"] if row else 0
        total = row["total"] if row else 0
        return CompletionRate(
            completed=completed,
            total=total,
            percentage=completion_percentage(completed, total),
        )
