"""
Gratitude repository module.

Entries live in ``gratitude_entries`` (one per date) with their ordered items
in ``gratitude_items``. Saving an entry replaces all of its items.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Optional

from .base import Database
from .models import GratitudeEntry

logger = logging.getLogger(__name__)


class GratitudeRepository:
    """Repository for gratitude entries and their items."""

    def __init__(self, db: Database):
        self.db = db

    def _get_items(self, entry_id: str) -> list[str]:
        rows = self.db.query_all(
            """
            SELECT itemText FROM gratitude_items
            WHERE entryId = ?
            ORDER BY itemOrder ASC, id ASC
            """,
            (entry_id,),
        )
        return [row["itemText"] for row in rows]

    def _hydrate(self, rows) -> list[GratitudeEntry]:
        return [GratitudeEntry.from_row(row, self._get_items(row["id"])) for row in rows]

    def get_all(self) -> list[GratitudeEntry]:
        """Get every entry, newest date first."""
        rows = self.db.query_all("SELECT * FROM gratitude_entries ORDER BY date DESC")
        return self._hydrate(rows)

    def get_by_id(self, entry_id: str) -> Optional[GratitudeEntry]:
        row = self.db.query_first("SELECT * FROM gratitude_entries WHERE id = ?", (entry_id,))
        return GratitudeEntry.from_row(row, self._get_items(row["id"])) if row else None

    def get_by_date(self, day: date) -> Optional[GratitudeEntry]:
        """Get the entry for a calendar day, if any."""
        row = self.db.query_first(
            "SELECT * FROM gratitude_entries WHERE date = ?", (day.isoformat(),)
        )
        return GratitudeEntry.from_row(row, self._get_items(row["id"])) if row else None

    def get_by_date_range(self, start_date: date, end_date: date) -> list[GratitudeEntry]:
        """Get entries between two dates (inclusive), newest first."""
        rows = self.db.query_all(
            """
            SELECT * FROM gratitude_entries
            WHERE date >= ? AND date <= ?
            ORDER BY date DESC
            """,
            (start_date.isoformat(), end_date.isoformat()),
        )
        return self._hydrate(rows)

    def count(self) -> int:
        row = self.db.query_first("SELECT COUNT(*) AS count FROM gratitude_entries")
        return row["count"] if row else 0

    def save(self, entry: GratitudeEntry) -> GratitudeEntry:
        """
        Upsert an entry and replace its items in one transaction.

        There is at most one entry per date: saving under a new id for a
        date that already has an entry overwrites that entry, keeping its
        id and creation time. Blank items are dropped; the remaining items
        are stored with contiguous ordinals in the order given.

        Returns:
            The entry with its stored id and item list
        """
        items = [item for item in entry.entries if item.strip()]

        with self.db.transaction():
            row = self.db.query_first(
                "SELECT * FROM gratitude_entries WHERE date = ?", (entry.date.isoformat(),)
            )
            if row is not None and row["id"] != entry.id:
                current = GratitudeEntry.from_row(row)
                logger.debug(f"Gratitude entry {entry.id} replaces {current.id} for {entry.date}")
                entry = replace(entry, id=current.id, created_at=current.created_at)

            self.db.execute(
                """
                INSERT INTO gratitude_entries (id, date, createdAt, updatedAt)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    date = excluded.date,
                    updatedAt = excluded.updatedAt
                """,
                (
                    entry.id,
                    entry.date.isoformat(),
                    entry.created_at.isoformat(),
                    entry.updated_at.isoformat(),
                ),
            )
            self.db.execute("DELETE FROM gratitude_items WHERE entryId = ?", (entry.id,))
            for order, item in enumerate(items):
                self.db.execute(
                    """
                    INSERT INTO gratitude_items (entryId, itemText, itemOrder)
                    VALUES (?, ?, ?)
                    """,
                    (entry.id, item, order),
                )

        logger.debug(f"Saved gratitude entry {entry.id} for {entry.date} ({len(items)} items)")
        return replace(entry, entries=items)

    def delete(self, entry_id: str) -> bool:
        """Delete an entry; its items cascade."""
        result = self.db.execute("DELETE FROM gratitude_entries WHERE id = ?", (entry_id,))
        return result.rowcount > 0
