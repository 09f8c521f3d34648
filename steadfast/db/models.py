"""
Database models for the Steadfast store.

Each entity maps a stored row onto a dataclass through ``from_row``, which
checks and coerces every column (0/1 integers to booleans, ISO text to dates
and timestamps, text to enums) and raises ``RowDecodeError`` on anything
malformed. ``from_dict`` reads the camelCase JSON written by the legacy
key-value store.
"""

import sqlite3
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional, Type, TypeVar

from steadfast.models import (
    HabitFrequency,
    PrayerCategory,
    PrayerPriority,
    PrayerStatus,
)

from .errors import RowDecodeError

E = TypeVar("E", bound=Enum)


def utcnow() -> datetime:
    """Current time as an aware UTC timestamp."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing 'Z'."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        raise ValueError(f"not a timestamp: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def parse_day(value: Any) -> date:
    """Parse an ISO calendar day (YYYY-MM-DD)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value:
        raise ValueError(f"not a date: {value!r}")
    return date.fromisoformat(value.strip()[:10])


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def format_day(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


class _RowReader:
    """Typed column accessors that raise RowDecodeError on bad data."""

    def __init__(self, entity: str, row: Mapping[str, Any]):
        self.entity = entity
        self.row = row

    def _get(self, key: str) -> Any:
        try:
            return self.row[key]
        except (KeyError, IndexError) as e:
            raise RowDecodeError(self.entity, key, None, "missing column") from e

    def text(self, key: str) -> str:
        value = self._get(key)
        if not isinstance(value, str):
            raise RowDecodeError(self.entity, key, value, "expected text")
        return value

    def optional_text(self, key: str) -> Optional[str]:
        value = self._get(key)
        if value is None or value == "":
            return None
        if not isinstance(value, str):
            raise RowDecodeError(self.entity, key, value, "expected text")
        return value

    def integer(self, key: str, default: int = 0) -> int:
        value = self._get(key)
        if value is None:
            return default
        if isinstance(value, bool) or not isinstance(value, int):
            raise RowDecodeError(self.entity, key, value, "expected integer")
        return value

    def flag(self, key: str, default: bool = False) -> bool:
        value = self._get(key)
        if value is None:
            return default
        if value in (0, 1):
            return bool(value)
        raise RowDecodeError(self.entity, key, value, "expected 0 or 1")

    def day(self, key: str) -> date:
        value = self._get(key)
        try:
            return parse_day(value)
        except ValueError as e:
            raise RowDecodeError(self.entity, key, value, str(e)) from e

    def optional_day(self, key: str) -> Optional[date]:
        if self._get(key) in (None, ""):
            return None
        return self.day(key)

    def timestamp(self, key: str) -> datetime:
        value = self._get(key)
        try:
            return parse_timestamp(value)
        except ValueError as e:
            raise RowDecodeError(self.entity, key, value, str(e)) from e

    def optional_timestamp(self, key: str) -> Optional[datetime]:
        if self._get(key) in (None, ""):
            return None
        return self.timestamp(key)

    def enum(self, key: str, enum_type: Type[E]) -> E:
        value = self._get(key)
        try:
            return enum_type(value)
        except ValueError as e:
            raise RowDecodeError(self.entity, key, value, str(e)) from e


def _as_mapping(row: Any) -> Mapping[str, Any]:
    if isinstance(row, sqlite3.Row):
        return {key: row[key] for key in row.keys()}
    return row


@dataclass
class Habit:
    """A recurring spiritual practice."""

    id: str
    name: str
    frequency: HabitFrequency
    created_at: datetime
    updated_at: datetime
    icon: Optional[str] = None
    reminder_time: Optional[str] = None
    streak: int = 0  # Cached display value; analytics recompute from logs
    last_completed_date: Optional[date] = None
    is_active: bool = True
    is_default: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "frequency": self.frequency.value,
            "reminder_time": self.reminder_time,
            "streak": self.streak,
            "last_completed_date": format_day(self.last_completed_date),
            "is_active": self.is_active,
            "is_default": self.is_default,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_row(cls, row: Any) -> "Habit":
        """Create a Habit from a database row."""
        r = _RowReader("habit", _as_mapping(row))
        return cls(
            id=r.text("id"),
            name=r.text("name"),
            icon=r.optional_text("icon"),
            frequency=r.enum("frequency", HabitFrequency),
            reminder_time=r.optional_text("reminderTime"),
            streak=r.integer("streak"),
            last_completed_date=r.optional_day("lastCompletedDate"),
            is_active=r.flag("isActive", default=True),
            is_default=r.flag("isDefault"),
            created_at=r.timestamp("createdAt"),
            updated_at=r.timestamp("updatedAt"),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Habit":
        """Create a Habit from its legacy camelCase JSON form."""
        now = utcnow()
        last_completed = data.get("lastCompletedDate")
        return cls(
            id=str(data["id"]),
            name=data["name"],
            icon=data.get("icon") or None,
            frequency=HabitFrequency(data.get("frequency") or HabitFrequency.DAILY),
            reminder_time=data.get("reminderTime") or None,
            streak=int(data.get("streak") or 0),
            last_completed_date=parse_day(last_completed) if last_completed else None,
            is_active=bool(data.get("isActive", True)),
            is_default=bool(data.get("isDefault", False)),
            created_at=parse_timestamp(data["createdAt"]) if data.get("createdAt") else now,
            updated_at=parse_timestamp(data["updatedAt"]) if data.get("updatedAt") else now,
        )


@dataclass
class DailyHabitLog:
    """One completion record for a habit on a calendar day."""

    id: str
    habit_id: str
    date: date
    completed: bool
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "habit_id": self.habit_id,
            "date": self.date.isoformat(),
            "completed": self.completed,
            "completed_at": format_timestamp(self.completed_at),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_row(cls, row: Any) -> "DailyHabitLog":
        """Create a DailyHabitLog from a database row."""
        r = _RowReader("habit_log", _as_mapping(row))
        return cls(
            id=r.text("id"),
            habit_id=r.text("habitId"),
            date=r.day("date"),
            completed=r.flag("completed"),
            completed_at=r.optional_timestamp("completedAt"),
            created_at=r.timestamp("createdAt"),
            updated_at=r.timestamp("updatedAt"),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DailyHabitLog":
        """Create a DailyHabitLog from its legacy camelCase JSON form."""
        now = utcnow()
        completed_at = data.get("completedAt")
        return cls(
            id=str(data["id"]),
            habit_id=str(data["habitId"]),
            date=parse_day(data["date"]),
            completed=bool(data.get("completed", False)),
            completed_at=parse_timestamp(completed_at) if completed_at else None,
            created_at=parse_timestamp(data["createdAt"]) if data.get("createdAt") else now,
            updated_at=parse_timestamp(data["updatedAt"]) if data.get("updatedAt") else now,
        )


@dataclass
class DailyCount:
    """Per-date completion count produced by log aggregation."""

    date: date
    completed: int
    total: int


@dataclass
class CompletionRate:
    """Completed vs. logged days for one habit over a range."""

    completed: int
    total: int
    percentage: int


@dataclass
class GratitudeEntry:
    """A day's ordered list of gratitude items."""

    id: str
    date: date
    created_at: datetime
    updated_at: datetime
    entries: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "entries": list(self.entries),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_row(cls, row: Any, items: Optional[list[str]] = None) -> "GratitudeEntry":
        """Create a GratitudeEntry from an entry row and its item texts."""
        r = _RowReader("gratitude_entry", _as_mapping(row))
        return cls(
            id=r.text("id"),
            date=r.day("date"),
            entries=list(items or []),
            created_at=r.timestamp("createdAt"),
            updated_at=r.timestamp("updatedAt"),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GratitudeEntry":
        """Create a GratitudeEntry from its legacy camelCase JSON form."""
        now = utcnow()
        entries = data.get("entries") or []
        if not isinstance(entries, list):
            raise ValueError(f"entries must be a list, got {type(entries).__name__}")
        return cls(
            id=str(data["id"]),
            date=parse_day(data["date"]),
            entries=[item for item in entries if isinstance(item, str)],
            created_at=parse_timestamp(data["createdAt"]) if data.get("createdAt") else now,
            updated_at=parse_timestamp(data["updatedAt"]) if data.get("updatedAt") else now,
        )


@dataclass
class PrayerUpdate:
    """A timestamped note appended to a prayer request."""

    id: str
    note: str
    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "note": self.note,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_row(cls, row: Any) -> "PrayerUpdate":
        r = _RowReader("prayer_update", _as_mapping(row))
        return cls(
            id=r.text("id"),
            note=r.text("note"),
            created_at=r.timestamp("createdAt"),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PrayerUpdate":
        return cls(
            id=str(data["id"]),
            note=data["note"],
            created_at=parse_timestamp(data["createdAt"]),
        )


@dataclass
class PrayerRequest:
    """A tracked prayer need with a lifecycle status."""

    id: str
    title: str
    category: PrayerCategory
    priority: PrayerPriority
    status: PrayerStatus
    created_at: datetime
    updated_at: datetime
    description: Optional[str] = None
    answered_at: Optional[datetime] = None
    answered_note: Optional[str] = None
    updates: list[PrayerUpdate] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category.value,
            "priority": self.priority.value,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "answered_at": format_timestamp(self.answered_at),
            "answered_note": self.answered_note,
            "updates": [u.to_dict() for u in self.updates],
        }

    @classmethod
    def from_row(
        cls, row: Any, updates: Optional[list[PrayerUpdate]] = None
    ) -> "PrayerRequest":
        """Create a PrayerRequest from a row and its update rows."""
        r = _RowReader("prayer_request", _as_mapping(row))
        return cls(
            id=r.text("id"),
            title=r.text("title"),
            description=r.optional_text("description"),
            category=r.enum("category", PrayerCategory),
            priority=r.enum("priority", PrayerPriority),
            status=r.enum("status", PrayerStatus),
            created_at=r.timestamp("createdAt"),
            updated_at=r.timestamp("updatedAt"),
            answered_at=r.optional_timestamp("answeredAt"),
            answered_note=r.optional_text("answeredNote"),
            updates=list(updates or []),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PrayerRequest":
        """Create a PrayerRequest from its legacy camelCase JSON form."""
        answered_at = data.get("answeredAt")
        return cls(
            id=str(data["id"]),
            title=data["title"],
            description=data.get("description") or None,
            category=PrayerCategory(data.get("category") or PrayerCategory.OTHER),
            priority=PrayerPriority(data.get("priority") or PrayerPriority.NORMAL),
            status=PrayerStatus(data.get("status") or PrayerStatus.ACTIVE),
            created_at=parse_timestamp(data["createdAt"]),
            updated_at=parse_timestamp(data.get("updatedAt") or data["createdAt"]),
            answered_at=parse_timestamp(answered_at) if answered_at else None,
            answered_note=data.get("answeredNote") or None,
            updates=[PrayerUpdate.from_dict(u) for u in data.get("updates") or []],
        )
