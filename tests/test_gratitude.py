"""
Tests for gratitude entries.
"""

from datetime import date

from steadfast.db import GratitudeEntry

from .conftest import utc


def item_rows(db, entry_id):
    return db.query_all(
        "SELECT itemText, itemOrder FROM gratitude_items WHERE entryId = ? ORDER BY itemOrder",
        (entry_id,),
    )


class TestGratitudeRepository:
    def test_save_replaces_items(self, gratitude_repo, db):
        entry = GratitudeEntry(
            id="g1",
            date=date(2024, 1, 1),
            entries=["Family", "Health"],
            created_at=utc(2024, 1, 1, 20),
            updated_at=utc(2024, 1, 1, 20),
        )
        gratitude_repo.save(entry)
        entry.entries = ["Rest"]
        gratitude_repo.save(entry)

        rows = item_rows(db, "g1")
        assert [(r["itemText"], r["itemOrder"]) for r in rows] == [("Rest", 0)]

    def test_blank_items_are_dropped_and_order_is_contiguous(self, gratitude_repo, db):
        entry = GratitudeEntry(
            id="g1",
            date=date(2024, 1, 1),
            entries=["Family", "", "   ", "Friends"],
            created_at=utc(2024, 1, 1),
            updated_at=utc(2024, 1, 1),
        )
        saved = gratitude_repo.save(entry)

        assert saved.entries == ["Family", "Friends"]
        rows = item_rows(db, "g1")
        assert [(r["itemText"], r["itemOrder"]) for r in rows] == [("Family", 0), ("Friends", 1)]

    def test_delete_cascades_items(self, gratitude_repo, db):
        gratitude_repo.save(
            GratitudeEntry(
                id="g1",
                date=date(2024, 1, 1),
                entries=["Family"],
                created_at=utc(2024, 1, 1),
                updated_at=utc(2024, 1, 1),
            )
        )
        assert gratitude_repo.delete("g1") is True
        assert gratitude_repo.delete("g1") is False
        assert item_rows(db, "g1") == []

    def test_save_new_id_for_existing_date_overwrites(self, gratitude_repo, db):
        gratitude_repo.save(
            GratitudeEntry(
                id="a",
                date=date(2024, 1, 1),
                entries=["A", "B"],
                created_at=utc(2024, 1, 1, 8),
                updated_at=utc(2024, 1, 1, 8),
            )
        )
        saved = gratitude_repo.save(
            GratitudeEntry(
                id="b",
                date=date(2024, 1, 1),
                entries=["C"],
                created_at=utc(2024, 1, 1, 20),
                updated_at=utc(2024, 1, 1, 20),
            )
        )

        assert saved.id == "a"
        assert saved.created_at == utc(2024, 1, 1, 8)
        assert db.table_counts()["gratitude_entries"] == 1
        stored = gratitude_repo.get_by_date(date(2024, 1, 1))
        assert stored.id == "a"
        assert stored.created_at == utc(2024, 1, 1, 8)
        assert stored.updated_at == utc(2024, 1, 1, 20)
        assert [(r["itemText"], r["itemOrder"]) for r in item_rows(db, "a")] == [("C", 0)]
        assert item_rows(db, "b") == []

    def test_from_dict_skips_non_text_items(self):
        entry = GratitudeEntry.from_dict(
            {"id": "g", "date": "2024-01-01", "entries": ["A", None, 3, ""]}
        )
        assert entry.entries == ["A", ""]

    def test_get_all_newest_first(self, gratitude_service, gratitude_repo):
        gratitude_service.save_entry(date(2024, 1, 1), ["a"])
        gratitude_service.save_entry(date(2024, 1, 3), ["b"])
        gratitude_service.save_entry(date(2024, 1, 2), ["c"])

        assert [e.date.day for e in gratitude_repo.get_all()] == [3, 2, 1]
        assert gratitude_repo.count() == 3


class TestGratitudeService:
    def test_resave_keeps_id_and_created_at(self, gratitude_service, db):
        day = date(2024, 1, 1)
        first = gratitude_service.save_entry(day, ["A", "B"])
        second = gratitude_service.save_entry(day, ["C"])

        assert second.id == first.id
        assert second.created_at == first.created_at
        assert second.entries == ["C"]
        rows = item_rows(db, first.id)
        assert [(r["itemText"], r["itemOrder"]) for r in rows] == [("C", 0)]
        assert db.table_counts()["gratitude_entries"] == 1

    def test_get_today_entry(self, gratitude_service):
        day = date(2024, 5, 5)
        assert gratitude_service.get_today_entry(today=day) is None

        gratitude_service.save_entry(day, ["Sunshine"])
        assert gratitude_service.get_today_entry(today=day).entries == ["Sunshine"]

    def test_items_keep_their_order(self, gratitude_service):
        day = date(2024, 5, 5)
        gratitude_service.save_entry(day, ["third", "first", "second"])
        assert gratitude_service.get_today_entry(today=day).entries == [
            "third",
            "first",
            "second",
        ]

    def test_entries_for_month(self, gratitude_service):
        for day in (date(2024, 1, 31), date(2024, 2, 1), date(2024, 2, 29), date(2024, 3, 1)):
            gratitude_service.save_entry(day, ["x"])

        entries = gratitude_service.get_entries_for_month(2024, 2)
        assert [e.date for e in entries] == [date(2024, 2, 29), date(2024, 2, 1)]

    def test_delete_entry(self, gratitude_service):
        entry = gratitude_service.save_entry(date(2024, 1, 1), ["x"])
        assert gratitude_service.delete_entry(entry.id) is True
        assert gratitude_service.get_all_entries() == []
