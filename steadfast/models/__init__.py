from .habit import (
    DEFAULT_HABITS,
    HabitFrequency,
    HabitTemplate,
    month_bounds,
    shift_months,
    week_start,
)
from .prayer import (
    PRIORITY_ORDER,
    PrayerCategory,
    PrayerFilter,
    PrayerPriority,
    PrayerStatus,
)

__all__ = [
    "DEFAULT_HABITS",
    "HabitFrequency",
    "HabitTemplate",
    "PRIORITY_ORDER",
    "PrayerCategory",
    "PrayerFilter",
    "PrayerPriority",
    "PrayerStatus",
    "month_bounds",
    "shift_months",
    "week_start",
]
