"""
Habits repository module for habit CRUD operations.

Handles all habit-related database operations including:
- Listing habits (all, active, by frequency)
- Upserting habits (the single write path)
- Deleting habits (logs cascade)
"""

import logging
from typing import Optional

from steadfast.models import HabitFrequency

from .base import Database
from .models import Habit, format_day

logger = logging.getLogger(__name__)


class HabitRepository:
    """Repository for managing habits in SQLite."""

    def __init__(self, db: Database):
        """
        Initialize the habit repository.

        Args:
            db: Open storage gateway shared by all repositories
        """
        self.db = db

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_all(self) -> list[Habit]:
        """Get all habits in creation order."""
        rows = self.db.query_all("SELECT * FROM habits ORDER BY createdAt ASC, rowid ASC")
        return [Habit.from_row(row) for row in rows]

    def get_by_id(self, habit_id: str) -> Optional[Habit]:
        """Get a habit by its ID."""
        row = self.db.query_first("SELECT * FROM habits WHERE id = ?", (habit_id,))
        return Habit.from_row(row) if row else None

    def get_by_frequency(self, frequency: HabitFrequency) -> list[Habit]:
        """Get habits of one frequency in creation order."""
        rows = self.db.query_all(
            """
            SELECT * FROM habits
            WHERE frequency = ?
            ORDER BY createdAt ASC, rowid ASC
            """,
            (HabitFrequency(frequency).value,),
        )
        return [Habit.from_row(row) for row in rows]

    def get_active(self) -> list[Habit]:
        """Get habits that have not been switched off."""
        rows = self.db.query_all(
            "SELECT * FROM habits WHERE isActive = 1 ORDER BY createdAt ASC, rowid ASC"
        )
        return [Habit.from_row(row) for row in rows]

    def count(self) -> int:
        """Count all habits."""
        row = self.db.query_first("SELECT COUNT(*) AS count FROM habits")
        return row["count"] if row else 0

    # =========================================================================
    # Write Operations
    # =========================================================================

    def save(self, habit: Habit) -> Habit:
        """
        Insert or update a habit keyed by its ID.

        An existing row gets every mutable field plus ``updatedAt`` rewritten
        and keeps its original ``createdAt``; a new row is inserted whole.

        Args:
            habit: The habit to persist

        Returns:
            The habit as passed in
        """
        params = (
            habit.name,
            habit.icon,
            HabitFrequency(habit.frequency).value,
            habit.reminder_time,
            habit.streak or 0,
            format_day(habit.last_completed_date),
            1 if habit.is_active else 0,
            1 if habit.is_default else 0,
            habit.updated_at.isoformat(),
        )

        with self.db.transaction():
            exists = self.db.query_first("SELECT 1 FROM habits WHERE id = ?", (habit.id,))
            if exists:
                self.db.execute(
                    """
                    UPDATE habits
                    SET name = ?, icon = ?, frequency = ?, reminderTime = ?,
                        streak = ?, lastCompletedDate = ?, isActive = ?,
                        isDefault = ?, updatedAt = ?
                    WHERE id = ?
                    """,
                    params + (habit.id,),
                )
                logger.debug(f"Updated habit {habit.id}")
            else:
                self.db.execute(
                    """
                    INSERT INTO habits (
                        name, icon, frequency, reminderTime, streak,
                        lastCompletedDate, isActive, isDefault, updatedAt,
                        id, createdAt
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    params + (habit.id, habit.created_at.isoformat()),
                )
                logger.debug(f"Inserted habit {habit.id}")

        return habit

    def delete(self, habit_id: str) -> bool:
        """
        Delete a habit; its logs are removed by the foreign-key cascade.

        Returns:
            True if a habit was deleted, False if not found
        """
        result = self.db.execute("DELETE FROM habits WHERE id = ?", (habit_id,))
        deleted = result.rowcount > 0
        if deleted:
            logger.info(f"Deleted habit {habit_id}")
        else:
            logger.debug(f"No habit to delete for id {habit_id}")
        return deleted
