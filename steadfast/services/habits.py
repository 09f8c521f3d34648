"""
Habit service for managing the practices a user tracks.

Provides functionality for:
- Creating, editing and deleting habits
- Switching habits on and off
- Seeding the default habits into an empty store
"""

import logging
import uuid
from dataclasses import replace
from typing import Any, Optional

from steadfast.db.errors import NotFoundError
from steadfast.db.habits import HabitRepository
from steadfast.db.models import Habit, utcnow
from steadfast.models import DEFAULT_HABITS, HabitFrequency

logger = logging.getLogger(__name__)

# Fields a caller may change through update_habit
EDITABLE_FIELDS = {"name", "icon", "frequency", "reminder_time", "is_active"}


class HabitService:
    """Service for habit lifecycle operations."""

    def __init__(self, habit_repo: HabitRepository):
        self.habit_repo = habit_repo

    def create_habit(
        self,
        name: str,
        icon: Optional[str] = None,
        frequency: HabitFrequency = HabitFrequency.DAILY,
        reminder_time: Optional[str] = None,
        is_default: bool = False,
    ) -> Habit:
        """
        Create and store a new active habit.

        Args:
            name: Display name (must not be blank)
            icon: Optional emoji or icon name
            frequency: How often the habit is expected
            reminder_time: Optional "HH:MM" reminder
            is_default: Whether the habit came from the default set

        Returns:
            The stored habit
        """
        if not name or not name.strip():
            raise ValueError("Habit name must not be empty")

        now = utcnow()
        habit = Habit(
            id=uuid.uuid4().hex,
            name=name.strip(),
            icon=icon,
            frequency=HabitFrequency(frequency),
            reminder_time=reminder_time,
            is_default=is_default,
            created_at=now,
            updated_at=now,
        )
        self.habit_repo.save(habit)
        logger.info(f"Created habit '{habit.name}' ({habit.id}, {habit.frequency.value})")
        return habit

    def get_habit(self, habit_id: str) -> Habit:
        habit = self.habit_repo.get_by_id(habit_id)
        if habit is None:
            raise NotFoundError("Habit", habit_id)
        return habit

    def update_habit(self, habit_id: str, **changes: Any) -> Habit:
        """
        Apply a partial update to a habit.

        Raises:
            NotFoundError: If the habit does not exist
            ValueError: If a field is not editable
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update habit fields: {sorted(unknown)}")
        if "frequency" in changes:
            changes["frequency"] = HabitFrequency(changes["frequency"])

        habit = replace(self.get_habit(habit_id), updated_at=utcnow(), **changes)
        self.habit_repo.save(habit)
        logger.debug(f"Updated habit {habit_id}: {sorted(changes)}")
        return habit

    def toggle_active(self, habit_id: str) -> Habit:
        """Switch a habit on or off."""
        habit = self.get_habit(habit_id)
        return self.update_habit(habit_id, is_active=not habit.is_active)

    def delete_habit(self, habit_id: str) -> bool:
        """Delete a habit together with all of its logs."""
        return self.habit_repo.delete(habit_id)

    def list_habits(
        self, frequency: Optional[HabitFrequency] = None, active_only: bool = False
    ) -> list[Habit]:
        """List habits in creation order, optionally filtered."""
        if frequency is None:
            return self.habit_repo.get_active() if active_only else self.habit_repo.get_all()

        habits = self.habit_repo.get_by_frequency(frequency)
        if active_only:
            habits = [h for h in habits if h.is_active]
        return habits

    def seed_default_habits(self) -> list[Habit]:
        """
        Create the default habits if the store has none.

        Returns:
            The habits created (empty if the store already had habits)
        """
        if self.habit_repo.count() > 0:
            return []

        created = [
            self.create_habit(
                template.name,
                icon=template.icon,
                frequency=template.frequency,
                is_default=template.is_default,
            )
            for template in DEFAULT_HABITS
        ]
        logger.info(f"Seeded {len(created)} default habits")
        return created
