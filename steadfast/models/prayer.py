"""
Prayer request enumerations and ordering rules.
"""

from enum import Enum


class PrayerCategory(str, Enum):
    PERSONAL = "Personal"
    FAMILY = "Family"
    FRIENDS = "Friends"
    CHURCH = "Church"
    HEALTH = "Health"
    WORK = "Work"
    WORLD = "World"
    OTHER = "Other"


class PrayerPriority(str, Enum):
    URGENT = "Urgent"
    HIGH = "High"
    NORMAL = "Normal"

    @property
    def rank(self) -> int:
        """Sort rank, lower sorts first (Urgent > High > Normal)."""
        return PRIORITY_ORDER[self]


class PrayerStatus(str, Enum):
    """
    Lifecycle status of a prayer request.

    Requests start ACTIVE and move to ANSWERED or ARCHIVED.
    """

    ACTIVE = "Active"
    ANSWERED = "Answered"
    ARCHIVED = "Archived"


class PrayerFilter(str, Enum):
    """Status filter applied when listing prayers."""

    ALL = "all"
    ACTIVE = "active"
    ANSWERED = "answered"
    ARCHIVED = "archived"

    def matches(self, status: PrayerStatus) -> bool:
        if self == PrayerFilter.ALL:
            return True
        return status.value.lower() == self.value


PRIORITY_ORDER = {
    PrayerPriority.URGENT: 0,
    PrayerPriority.HIGH: 1,
    PrayerPriority.NORMAL: 2,
}
