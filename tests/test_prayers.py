"""
Tests for prayer requests.
"""

import pytest

from steadfast.db import NotFoundError, PrayerRequest, PrayerUpdate
from steadfast.models import PrayerCategory, PrayerFilter, PrayerPriority, PrayerStatus

from .conftest import utc


def make_prayer(prayer_id, priority, created_at, status=PrayerStatus.ACTIVE, category=PrayerCategory.FAMILY):
    return PrayerRequest(
        id=prayer_id,
        title=f"Prayer {prayer_id}",
        category=category,
        priority=priority,
        status=status,
        created_at=created_at,
        updated_at=created_at,
    )


class TestPrayerRepository:
    def test_create_and_get(self, prayer_repo):
        prayer = prayer_repo.create(
            "Healing for Mom", PrayerCategory.HEALTH, PrayerPriority.URGENT, "Surgery on Friday"
        )

        stored = prayer_repo.get_by_id(prayer.id)
        assert stored == prayer
        assert stored.status == PrayerStatus.ACTIVE
        assert stored.updates == []

    def test_update_fields(self, prayer_repo):
        prayer = prayer_repo.create("Job", PrayerCategory.WORK, PrayerPriority.NORMAL)
        updated = prayer_repo.update(prayer.id, title="New job", priority=PrayerPriority.HIGH)

        assert updated.title == "New job"
        assert updated.priority == PrayerPriority.HIGH
        assert updated.updated_at >= prayer.updated_at

    def test_update_unknown_field(self, prayer_repo):
        prayer = prayer_repo.create("Job", PrayerCategory.WORK, PrayerPriority.NORMAL)
        with pytest.raises(ValueError):
            prayer_repo.update(prayer.id, created_at=utc(2020, 1, 1))

    def test_update_missing_prayer(self, prayer_repo):
        with pytest.raises(NotFoundError):
            prayer_repo.update("missing", title="x")
        with pytest.raises(NotFoundError):
            prayer_repo.mark_as_answered("missing")
        with pytest.raises(NotFoundError):
            prayer_repo.add_update("missing", "note")

    def test_mark_as_answered(self, prayer_repo):
        prayer = prayer_repo.create("Job", PrayerCategory.WORK, PrayerPriority.NORMAL)
        answered = prayer_repo.mark_as_answered(prayer.id, "Got the offer")

        assert answered.status == PrayerStatus.ANSWERED
        assert answered.answered_note == "Got the offer"
        assert answered.answered_at is not None

    def test_archive(self, prayer_repo):
        prayer = prayer_repo.create("Job", PrayerCategory.WORK, PrayerPriority.NORMAL)
        assert prayer_repo.archive(prayer.id).status == PrayerStatus.ARCHIVED
        assert [p.id for p in prayer_repo.get_by_status(PrayerStatus.ARCHIVED)] == [prayer.id]

    def test_updates_are_appended_in_order(self, prayer_repo):
        prayer = prayer_repo.create("Job", PrayerCategory.WORK, PrayerPriority.NORMAL)
        prayer_repo.add_update(prayer.id, "Applied")
        latest = prayer_repo.add_update(prayer.id, "Interview scheduled")

        assert [u.note for u in latest.updates] == ["Applied", "Interview scheduled"]

    def test_delete_cascades_updates(self, prayer_repo, db):
        prayer = prayer_repo.create("Job", PrayerCategory.WORK, PrayerPriority.NORMAL)
        prayer_repo.add_update(prayer.id, "Applied")

        assert prayer_repo.delete(prayer.id) is True
        assert prayer_repo.delete(prayer.id) is False
        assert db.table_counts()["prayer_updates"] == 0

    def test_save_keeps_ids_and_replaces_updates(self, prayer_repo):
        prayer = make_prayer("p1", PrayerPriority.HIGH, utc(2024, 1, 1))
        prayer.updates = [PrayerUpdate(id="u1", note="first", created_at=utc(2024, 1, 2))]
        prayer_repo.save(prayer)
        prayer.updates = [PrayerUpdate(id="u2", note="second", created_at=utc(2024, 1, 3))]
        prayer_repo.save(prayer)

        stored = prayer_repo.get_by_id("p1")
        assert prayer_repo.count() == 1
        assert [(u.id, u.note) for u in stored.updates] == [("u2", "second")]


class TestPrayerService:
    def test_sorted_by_priority_then_newest(self, prayer_service, prayer_repo):
        prayer_repo.save(make_prayer("normal-old", PrayerPriority.NORMAL, utc(2024, 1, 1)))
        prayer_repo.save(make_prayer("urgent", PrayerPriority.URGENT, utc(2024, 1, 2)))
        prayer_repo.save(make_prayer("normal-new", PrayerPriority.NORMAL, utc(2024, 1, 5)))
        prayer_repo.save(make_prayer("high", PrayerPriority.HIGH, utc(2024, 1, 3)))

        assert [p.id for p in prayer_service.list_prayers()] == [
            "urgent",
            "high",
            "normal-new",
            "normal-old",
        ]

    def test_filters_compose(self, prayer_service, prayer_repo):
        prayer_repo.save(make_prayer("a", PrayerPriority.NORMAL, utc(2024, 1, 1)))
        prayer_repo.save(
            make_prayer("b", PrayerPriority.NORMAL, utc(2024, 1, 2), status=PrayerStatus.ANSWERED)
        )
        prayer_repo.save(
            make_prayer("c", PrayerPriority.NORMAL, utc(2024, 1, 3), category=PrayerCategory.CHURCH)
        )

        assert [p.id for p in prayer_service.list_prayers(PrayerFilter.ACTIVE)] == ["c", "a"]
        assert [p.id for p in prayer_service.list_prayers(PrayerFilter.ANSWERED)] == ["b"]
        assert [
            p.id for p in prayer_service.list_prayers("active", category=PrayerCategory.FAMILY)
        ] == ["a"]
        assert prayer_service.list_prayers(PrayerFilter.ARCHIVED) == []

    def test_stats(self, prayer_service):
        first = prayer_service.add_prayer("One")
        second = prayer_service.add_prayer("Two")
        prayer_service.add_prayer("Three")
        prayer_service.mark_as_answered(first.id)
        prayer_service.archive_prayer(second.id)

        stats = prayer_service.get_stats()
        assert stats.to_dict() == {"active": 1, "answered": 1, "archived": 1, "total": 3}

    def test_add_prayer_rejects_blank_title(self, prayer_service):
        with pytest.raises(ValueError):
            prayer_service.add_prayer("  ")

    def test_add_update_rejects_blank_note(self, prayer_service):
        prayer = prayer_service.add_prayer("One")
        with pytest.raises(ValueError):
            prayer_service.add_update(prayer.id, "")
