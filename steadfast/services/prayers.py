"""
Prayer service for tracking prayer requests.

Provides functionality for:
- Listing prayers filtered by status and category, most pressing first
- Creating, editing, answering and archiving requests
- Summary counts per status
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from steadfast.db.models import PrayerRequest
from steadfast.db.prayers import PrayerRepository
from steadfast.models import PrayerCategory, PrayerFilter, PrayerPriority, PrayerStatus

logger = logging.getLogger(__name__)


@dataclass
class PrayerStats:
    """Prayer request counts per status."""

    active: int
    answered: int
    archived: int
    total: int

    def to_dict(self) -> dict:
        return {
            "active": self.active,
            "answered": self.answered,
            "archived": self.archived,
            "total": self.total,
        }


def sort_prayers(prayers: list[PrayerRequest]) -> list[PrayerRequest]:
    """Order prayers Urgent, High, Normal; newest first within a priority."""
    newest_first = sorted(prayers, key=lambda p: p.created_at, reverse=True)
    return sorted(newest_first, key=lambda p: p.priority.rank)


class PrayerService:
    """Service for prayer request operations."""

    def __init__(self, prayer_repo: PrayerRepository):
        """
        Initialize the prayer service.

        Args:
            prayer_repo: Repository for prayer requests
        """
        self.prayer_repo = prayer_repo

    def list_prayers(
        self,
        status_filter: PrayerFilter = PrayerFilter.ALL,
        category: Optional[PrayerCategory] = None,
    ) -> list[PrayerRequest]:
        """
        List prayers matching a status filter and optional category.

        Args:
            status_filter: Which statuses to include
            category: Only include this category when given

        Returns:
            Matching prayers sorted by priority, then newest first
        """
        status_filter = PrayerFilter(status_filter)
        prayers = [
            p
            for p in self.prayer_repo.get_all()
            if status_filter.matches(p.status)
            and (category is None or p.category == PrayerCategory(category))
        ]
        return sort_prayers(prayers)

    def get_prayer(self, prayer_id: str) -> Optional[PrayerRequest]:
        return self.prayer_repo.get_by_id(prayer_id)

    def get_stats(self) -> PrayerStats:
        """Count prayers per status."""
        prayers = self.prayer_repo.get_all()
        counts = {status: 0 for status in PrayerStatus}
        for prayer in prayers:
            counts[prayer.status] += 1
        return PrayerStats(
            active=counts[PrayerStatus.ACTIVE],
            answered=counts[PrayerStatus.ANSWERED],
            archived=counts[PrayerStatus.ARCHIVED],
            total=len(prayers),
        )

    def add_prayer(
        self,
        title: str,
        category: PrayerCategory = PrayerCategory.PERSONAL,
        priority: PrayerPriority = PrayerPriority.NORMAL,
        description: Optional[str] = None,
    ) -> PrayerRequest:
        if not title or not title.strip():
            raise ValueError("Prayer title must not be empty")
        return self.prayer_repo.create(title.strip(), category, priority, description)

    def update_prayer(self, prayer_id: str, **changes: Any) -> PrayerRequest:
        return self.prayer_repo.update(prayer_id, **changes)

    def mark_as_answered(self, prayer_id: str, note: Optional[str] = None) -> PrayerRequest:
        prayer = self.prayer_repo.mark_as_answered(prayer_id, note)
        logger.info(f"Prayer {prayer_id} marked as answered")
        return prayer

    def archive_prayer(self, prayer_id: str) -> PrayerRequest:
        return self.prayer_repo.archive(prayer_id)

    def add_update(self, prayer_id: str, note: str) -> PrayerRequest:
        if not note or not note.strip():
            raise ValueError("Prayer update note must not be empty")
        return self.prayer_repo.add_update(prayer_id, note.strip())

    def delete_prayer(self, prayer_id: str) -> bool:
        return self.prayer_repo.delete(prayer_id)
