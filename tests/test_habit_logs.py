"""
Tests for the habit log repository and completion toggling.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest

from steadfast.db import DailyHabitLog, SqlExecutionError, completion_percentage
from steadfast.models import HabitFrequency

from .conftest import utc


def count_logs(db, habit_id, day):
    row = db.query_first(
        "SELECT COUNT(*) AS count FROM habit_logs WHERE habitId = ? AND date = ?",
        (habit_id, day.isoformat()),
    )
    return row["count"]


@pytest.fixture
def habit(habit_service):
    return habit_service.create_habit("Prayer")


class TestHabitLogRepository:
    def test_save_upserts_on_habit_and_date(self, log_repo, habit, db):
        day = date(2024, 1, 5)
        first = DailyHabitLog(
            id="log-1",
            habit_id=habit.id,
            date=day,
            completed=True,
            completed_at=utc(2024, 1, 5, 7),
            created_at=utc(2024, 1, 5, 7),
            updated_at=utc(2024, 1, 5, 7),
        )
        log_repo.save(first)
        second = DailyHabitLog(
            id="log-2",
            habit_id=habit.id,
            date=day,
            completed=False,
            created_at=utc(2024, 1, 5, 8),
            updated_at=utc(2024, 1, 5, 8),
        )
        stored = log_repo.save(second)

        assert count_logs(db, habit.id, day) == 1
        assert stored.id == "log-1"
        assert stored.completed is False
        assert stored.completed_at is None
        assert stored.created_at == first.created_at
        assert stored.updated_at == second.updated_at

    def test_log_for_unknown_habit_is_rejected(self, log_repo):
        log = DailyHabitLog(
            id="orphan",
            habit_id="missing",
            date=date(2024, 1, 1),
            completed=True,
            created_at=utc(2024, 1, 1),
            updated_at=utc(2024, 1, 1),
        )
        with pytest.raises(SqlExecutionError):
            log_repo.save(log)

    def test_queries(self, log_service, log_repo, habit, habit_service):
        other = habit_service.create_habit("Fasting")
        for day in (date(2024, 1, 3), date(2024, 1, 1), date(2024, 1, 2)):
            log_service.toggle_completion(habit.id, day)
        log_service.toggle_completion(other.id, date(2024, 1, 2))

        assert [log.date.day for log in log_repo.get_for_habit(habit.id)] == [3, 2, 1]
        assert {log.habit_id for log in log_repo.get_for_date(date(2024, 1, 2))} == {
            habit.id,
            other.id,
        }
        in_range = log_repo.get_for_date_range(date(2024, 1, 2), date(2024, 1, 3))
        assert [log.date.day for log in in_range] == [2, 2, 3]

    def test_completed_dates_exclude_uncompleted_and_future(self, log_service, log_repo, habit):
        log_service.toggle_completion(habit.id, date(2024, 1, 1))
        log_service.toggle_completion(habit.id, date(2024, 1, 2))
        log_service.toggle_completion(habit.id, date(2024, 1, 2))
        log_service.toggle_completion(habit.id, date(2024, 1, 9))

        assert log_repo.get_completed_dates(habit.id, date(2024, 1, 5)) == [date(2024, 1, 1)]

    def test_daily_stats_for_range_counts_one_frequency(self, log_service, log_repo, habit_service):
        prayer = habit_service.create_habit("Prayer")
        reading = habit_service.create_habit("Reading")
        sabbath = habit_service.create_habit("Sabbath", frequency=HabitFrequency.WEEKLY)
        day = date(2024, 1, 6)
        log_service.toggle_completion(prayer.id, day)
        log_service.toggle_completion(reading.id, day)
        log_service.toggle_completion(reading.id, day)
        log_service.toggle_completion(sabbath.id, day)

        [row] = log_repo.get_daily_stats_for_range(day, day, HabitFrequency.DAILY)
        assert row.date == day
        assert row.completed == 1
        assert row.total == 2

    def test_completion_rate(self, log_service, log_repo, habit):
        log_service.toggle_completion(habit.id, date(2024, 1, 1))
        log_service.toggle_completion(habit.id, date(2024, 1, 2))
        log_service.toggle_completion(habit.id, date(2024, 1, 3))
        log_service.toggle_completion(habit.id, date(2024, 1, 3))

        rate = log_repo.get_completion_rate(habit.id, date(2024, 1, 1), date(2024, 1, 31))
        assert (rate.completed, rate.total, rate.percentage) == (2, 3, 67)

    def test_completion_rate_empty_range(self, log_repo, habit):
        rate = log_repo.get_completion_rate(habit.id, date(2024, 1, 1), date(2024, 1, 31))
        assert (rate.completed, rate.total, rate.percentage) == (0, 0, 0)


class TestToggleCompletion:
    def test_first_toggle_creates_completed_log(self, log_service, habit):
        log = log_service.toggle_completion(habit.id, date(2024, 1, 1))
        assert log.completed is True
        assert log.completed_at is not None

    def test_second_toggle_flips_same_row(self, log_service, habit, db):
        day = date(2024, 1, 1)
        first = log_service.toggle_completion(habit.id, day)
        second = log_service.toggle_completion(habit.id, day)

        assert second.id == first.id
        assert second.completed is False
        assert second.completed_at is None
        assert count_logs(db, habit.id, day) == 1

    def test_any_sequence_of_toggles_keeps_one_row_per_day(self, log_service, habit, db):
        days = [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 1), date(2024, 1, 1)]
        for day in days:
            log_service.toggle_completion(habit.id, day)

        assert count_logs(db, habit.id, date(2024, 1, 1)) == 1
        assert count_logs(db, habit.id, date(2024, 1, 2)) == 1
        assert log_service.get_logs_for_date(date(2024, 1, 1))[0].completed is True

    def test_concurrent_toggles_are_serialized(self, log_service, habit, db):
        day = date(2024, 1, 1)
        with ThreadPoolExecutor(max_workers=4) as pool:
            list(pool.map(lambda _: log_service.toggle_completion(habit.id, day), range(8)))

        assert count_logs(db, habit.id, day) == 1
        assert log_service.get_logs_for_date(day)[0].completed is False

    def test_toggle_refreshes_cached_streak(self, log_service, habit_repo, habit):
        for day in (date(2024, 1, 8), date(2024, 1, 9), date(2024, 1, 10)):
            log_service.toggle_completion(habit.id, day)

        stored = habit_repo.get_by_id(habit.id)
        assert stored.streak == 3
        assert stored.last_completed_date == date(2024, 1, 10)

        log_service.toggle_completion(habit.id, date(2024, 1, 9))
        stored = habit_repo.get_by_id(habit.id)
        assert stored.streak == 1

    def test_log_completion_is_idempotent(self, log_service, habit, db):
        day = date(2024, 1, 1)
        log_service.log_completion(habit.id, day)
        log = log_service.log_completion(habit.id, day)

        assert log.completed is True
        assert count_logs(db, habit.id, day) == 1

    def test_delete_log(self, log_service, habit_repo, habit):
        day = date(2024, 1, 1)
        log_service.toggle_completion(habit.id, day)

        assert log_service.delete_log(habit.id, day) is True
        assert log_service.delete_log(habit.id, day) is False
        assert log_service.get_logs_for_habit(habit.id) == []
        assert habit_repo.get_by_id(habit.id).streak == 0

    def test_get_all_logs(self, log_service, habit):
        log_service.toggle_completion(habit.id, date(2019, 12, 31))
        log_service.toggle_completion(habit.id, date(2024, 1, 1))

        logs = log_service.get_all_logs(today=date(2024, 6, 1))
        assert [log.date for log in logs] == [date(2024, 1, 1)]


@pytest.mark.parametrize(
    "completed,total,expected",
    [
        (0, 0, 0),
        (5, 0, 0),
        (0, 4, 0),
        (1, 3, 33),
        (2, 3, 67),
        (1, 8, 13),
        (4, 4, 100),
    ],
)
def test_completion_percentage(completed, total, expected):
    assert completion_percentage(completed, total) == expected
