"""
Prayer repository module.

Prayer requests are stored relationally: one row per request in
``prayer_requests`` and an append-only list of notes in ``prayer_updates``.
"""

import logging
import uuid
from typing import Any, Optional

from steadfast.models import PrayerCategory, PrayerPriority, PrayerStatus

from .base import Database
from .errors import NotFoundError
from .models import PrayerRequest, PrayerUpdate, format_timestamp, utcnow

logger = logging.getLogger(__name__)

# Fields a partial update may change, mapped to their columns
UPDATABLE_FIELDS = {
    "title": "title",
    "description": "description",
    "category": "category",
    "priority": "priority",
    "status": "status",
    "answered_at": "answeredAt",
    "answered_note": "answeredNote",
}


def generate_id() -> str:
    return uuid.uuid4().hex


class PrayerRepository:
    """Repository for prayer requests and their updates."""

    def __init__(self, db: Database):
        self.db = db

    # =========================================================================
    # Read Operations
    # =========================================================================

    def _get_updates(self, prayer_id: str) -> list[PrayerUpdate]:
        rows = self.db.query_all(
            """
            SELECT * FROM prayer_updates
            WHERE prayerId = ?
            ORDER BY createdAt ASC, rowid ASC
            """,
            (prayer_id,),
        )
        return [PrayerUpdate.from_row(row) for row in rows]

    def get_all(self) -> list[PrayerRequest]:
        """Get every prayer request in creation order."""
        rows = self.db.query_all("SELECT * FROM prayer_requests ORDER BY createdAt ASC")
        return [PrayerRequest.from_row(row, self._get_updates(row["id"])) for row in rows]

    def get_by_status(self, status: PrayerStatus) -> list[PrayerRequest]:
        """Get prayer requests with one status."""
        rows = self.db.query_all(
            "SELECT * FROM prayer_requests WHERE status = ? ORDER BY createdAt ASC",
            (PrayerStatus(status).value,),
        )
        return [PrayerRequest.from_row(row, self._get_updates(row["id"])) for row in rows]

    def get_by_id(self, prayer_id: str) -> Optional[PrayerRequest]:
        row = self.db.query_first("SELECT * FROM prayer_requests WHERE id = ?", (prayer_id,))
        if not row:
            return None
        return PrayerRequest.from_row(row, self._get_updates(prayer_id))

    def count(self) -> int:
        row = self.db.query_first("SELECT COUNT(*) AS count FROM prayer_requests")
        return row["count"] if row else 0

    def _require(self, prayer_id: str) -> PrayerRequest:
        prayer = self.get_by_id(prayer_id)
        if prayer is None:
            raise NotFoundError("Prayer", prayer_id)
        return prayer

    # =========================================================================
    # Write Operations
    # =========================================================================

    def create(
        self,
        title: str,
        category: PrayerCategory,
        priority: PrayerPriority,
        description: Optional[str] = None,
    ) -> PrayerRequest:
        """Create a new active prayer request."""
        now = utcnow()
        prayer = PrayerRequest(
            id=generate_id(),
            title=title,
            description=description,
            category=PrayerCategory(category),
            priority=PrayerPriority(priority),
            status=PrayerStatus.ACTIVE,
            created_at=now,
            updated_at=now,
        )
        self.db.execute(
            """
            INSERT INTO prayer_requests (
                id, title, description, category, priority, status,
                createdAt, updatedAt, answeredAt, answeredNote
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, NULL, NULL)
            """,
            (
                prayer.id,
                prayer.title,
                prayer.description,
                prayer.category.value,
                prayer.priority.value,
                prayer.status.value,
                now.isoformat(),
                now.isoformat(),
            ),
        )
        logger.info(f"Created prayer request {prayer.id}")
        return prayer

    def update(self, prayer_id: str, **changes: Any) -> PrayerRequest:
        """
        Apply a partial update and bump ``updatedAt``.

        Args:
            prayer_id: The prayer to update
            **changes: Any of title, description, category, priority, status,
                answered_at, answered_note

        Raises:
            NotFoundError: If the prayer does not exist
            ValueError: If an unknown field is given
        """
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update prayer fields: {sorted(unknown)}")

        with self.db.transaction():
            self._require(prayer_id)
            assignments = []
            params: list[Any] = []
            for field_name, value in changes.items():
                assignments.append(f"{UPDATABLE_FIELDS[field_name]} = ?")
                params.append(self._to_column(field_name, value))
            assignments.append("updatedAt = ?")
            params.append(utcnow().isoformat())
            params.append(prayer_id)
            self.db.execute(
                f"UPDATE prayer_requests SET {', '.join(assignments)} WHERE id = ?",
                params,
            )
            updated = self._require(prayer_id)

        logger.debug(f"Updated prayer {prayer_id}: {sorted(changes)}")
        return updated

    @staticmethod
    def _to_column(field_name: str, value: Any) -> Any:
        if value is None:
            return None
        if field_name == "category":
            return PrayerCategory(value).value
        if field_name == "priority":
            return PrayerPriority(value).value
        if field_name == "status":
            return PrayerStatus(value).value
        if field_name == "answered_at":
            return format_timestamp(value)
        return value

    def mark_as_answered(self, prayer_id: str, note: Optional[str] = None) -> PrayerRequest:
        """Mark a prayer answered, stamping the time and optional note."""
        now = utcnow()
        return self.update(
            prayer_id,
            status=PrayerStatus.ANSWERED,
            answered_at=now,
            answered_note=note,
        )

    def archive(self, prayer_id: str) -> PrayerRequest:
        """Move a prayer to the archive."""
        return self.update(prayer_id, status=PrayerStatus.ARCHIVED)

    def add_update(self, prayer_id: str, note: str) -> PrayerRequest:
        """Append a timestamped note to a prayer and bump ``updatedAt``."""
        now = utcnow()
        with self.db.transaction():
            self._require(prayer_id)
            self.db.execute(
                "INSERT INTO prayer_updates (id, prayerId, note, createdAt) VALUES (?, ?, ?, ?)",
                (generate_id(), prayer_id, note, now.isoformat()),
            )
            self.db.execute(
                "UPDATE prayer_requests SET updatedAt = ? WHERE id = ?",
                (now.isoformat(), prayer_id),
            )
            prayer = self._require(prayer_id)

        logger.debug(f"Added update to prayer {prayer_id}")
        return prayer

    def save(self, prayer: PrayerRequest) -> PrayerRequest:
        """
        Insert or replace a whole prayer request, keeping its ids.

        Used when importing prayers that already carry identifiers; the
        stored updates are replaced by ``prayer.updates``.
        """
        with self.db.transaction():
            self.db.execute(
                """
                INSERT INTO prayer_requests (
                    id, title, description, category, priority, status,
                    createdAt, updatedAt, answeredAt, answeredNote
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    title = excluded.title,
                    description = excluded.description,
                    category = excluded.category,
                    priority = excluded.priority,
                    status = excluded.status,
                    updatedAt = excluded.updatedAt,
                    answeredAt = excluded.answeredAt,
                    answeredNote = excluded.answeredNote
                """,
                (
                    prayer.id,
                    prayer.title,
                    prayer.description,
                    PrayerCategory(prayer.category).value,
                    PrayerPriority(prayer.priority).value,
                    PrayerStatus(prayer.status).value,
                    prayer.created_at.isoformat(),
                    prayer.updated_at.isoformat(),
                    format_timestamp(prayer.answered_at),
                    prayer.answered_note,
                ),
            )
            self.db.execute("DELETE FROM prayer_updates WHERE prayerId = ?", (prayer.id,))
            for update in prayer.updates:
                self.db.execute(
                    "INSERT INTO prayer_updates (id, prayerId, note, createdAt) VALUES (?, ?, ?, ?)",
                    (update.id, prayer.id, update.note, update.created_at.isoformat()),
                )
        return prayer

    def delete(self, prayer_id: str) -> bool:
        """Delete a prayer permanently; its updates cascade."""
        result = self.db.execute("DELETE FROM prayer_requests WHERE id = ?", (prayer_id,))
        deleted = result.rowcount > 0
        if deleted:
            logger.info(f"Deleted prayer request {prayer_id}")
        return deleted
