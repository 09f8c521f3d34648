"""
Habit models for spiritual practice tracking.

Defines habit frequencies, their cadence step used for streaks, and the
default habits seeded on first launch.
"""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Optional


class HabitFrequency(str, Enum):
    """
    How often a habit is expected to be completed.

    - DAILY: once per calendar day
    - WEEKLY: once per week (weeks start on Sunday)
    - MONTHLY: once per calendar month
    """

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    def previous_period(self, day: date) -> date:
        """
        Step one cadence period back from ``day``.

        Daily steps back one day, weekly seven days, and monthly one calendar
        month. A monthly step that lands past the end of the shorter month is
        clamped to its last day (e.g. March 31 -> February 28/29).
        """
        if self == HabitFrequency.DAILY:
            return day - timedelta(days=1)
        if self == HabitFrequency.WEEKLY:
            return day - timedelta(days=7)
        return shift_months(day, -1)


def shift_months(day: date, months: int) -> date:
    """Shift a date by whole calendar months, clamping the day of month."""
    month_index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def week_start(day: date) -> date:
    """Return the Sunday that starts the week containing ``day``."""
    # date.weekday(): Monday=0 ... Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a calendar month (month is 1-12)."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


@dataclass(frozen=True)
class HabitTemplate:
    """Blueprint for a habit created by seeding rather than by the user."""

    name: str
    icon: Optional[str]
    frequency: HabitFrequency = HabitFrequency.DAILY
    is_default: bool = True


# Default habits that are created the first time the store is empty
DEFAULT_HABITS = [
    HabitTemplate("Bible Reading", "📖"),
    HabitTemplate("Prayer", "🙏"),
    HabitTemplate("Gratitude", "🌟"),
    HabitTemplate("Scripture Memorization", "💭", HabitFrequency.WEEKLY),
    HabitTemplate("Acts of Kindness", "❤️"),
]
