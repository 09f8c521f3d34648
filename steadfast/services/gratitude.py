"""
Gratitude service for daily gratitude journaling.
"""

import logging
import uuid
from dataclasses import replace
from datetime import date
from typing import Optional

from steadfast.db.gratitude import GratitudeRepository
from steadfast.db.models import GratitudeEntry, utcnow
from steadfast.models import month_bounds

logger = logging.getLogger(__name__)


class GratitudeService:
    """Service for reading and writing gratitude entries."""

    def __init__(self, gratitude_repo: GratitudeRepository):
        self.gratitude_repo = gratitude_repo

    def get_today_entry(self, today: Optional[date] = None) -> Optional[GratitudeEntry]:
        if today is None:
            today = date.today()
        return self.gratitude_repo.get_by_date(today)

    def save_entry(self, day: date, items: list[str]) -> GratitudeEntry:
        """
        Save the gratitude items for a day, replacing any earlier list.

        An existing entry for the day keeps its id and creation time.

        Args:
            day: Calendar day of the entry
            items: Gratitude items in display order; blank items are dropped

        Returns:
            The stored entry
        """
        now = utcnow()
        existing = self.gratitude_repo.get_by_date(day)
        if existing:
            entry = replace(existing, entries=list(items), updated_at=now)
        else:
            entry = GratitudeEntry(
                id=uuid.uuid4().hex,
                date=day,
                entries=list(items),
                created_at=now,
                updated_at=now,
            )

        saved = self.gratitude_repo.save(entry)
        logger.info(f"Saved gratitude entry for {day} with {len(saved.entries)} items")
        return saved

    def get_entries_for_month(self, year: int, month: int) -> list[GratitudeEntry]:
        """Get the entries of a calendar month (month is 1-12), newest first."""
        start, end = month_bounds(year, month)
        return self.gratitude_repo.get_by_date_range(start, end)

    def get_all_entries(self) -> list[GratitudeEntry]:
        return self.gratitude_repo.get_all()

    def delete_entry(self, entry_id: str) -> bool:
        deleted = self.gratitude_repo.delete(entry_id)
        if deleted:
            logger.info(f"Deleted gratitude entry {entry_id}")
        return deleted
