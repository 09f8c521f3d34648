"""
Tests for application startup wiring and the keyed lock.
"""

import json
import threading
import time

import steadfast
from steadfast.app import SteadfastApp
from steadfast.config import VERSION
from steadfast.db.legacy_store import HABITS_KEY, LegacyKeyValueStore
from steadfast.models import DEFAULT_HABITS
from steadfast.services import KeyedLock


class TestSteadfastApp:
    def test_first_start_seeds_defaults(self, tmp_path):
        app = SteadfastApp(tmp_path / "app.db", tmp_path / "legacy.json").start()
        try:
            names = [h.name for h in app.habits.list_habits()]
            assert names == [t.name for t in DEFAULT_HABITS]
            assert app.migration_report is not None
            assert app.migration_report.success is True
        finally:
            app.stop()

    def test_restart_does_not_reseed_or_remigrate(self, tmp_path):
        paths = (tmp_path / "app.db", tmp_path / "legacy.json")
        SteadfastApp(*paths).start().stop()

        app = SteadfastApp(*paths).start()
        try:
            assert app.migration_report is None
            assert len(app.habits.list_habits()) == len(DEFAULT_HABITS)
        finally:
            app.stop()

    def test_legacy_habits_replace_defaults(self, tmp_path):
        store = LegacyKeyValueStore(tmp_path / "legacy.json")
        store.set_item(
            HABITS_KEY,
            json.dumps(
                [{"id": "1", "name": "Fasting", "frequency": "weekly", "createdAt": "2023-01-01T00:00:00Z"}]
            ),
        )

        app = SteadfastApp(tmp_path / "app.db", tmp_path / "legacy.json").start()
        try:
            assert app.migration_report.habits_imported == 1
            assert [h.name for h in app.habits.list_habits()] == ["Fasting"]
        finally:
            app.stop()

    def test_stop_closes_database(self, tmp_path):
        app = SteadfastApp(tmp_path / "app.db", tmp_path / "legacy.json").start()
        app.stop()
        assert app.db.is_open is False


class TestKeyedLock:
    def test_locks_are_released(self):
        locks = KeyedLock()
        with locks.hold("a"):
            with locks.hold("b"):
                assert len(locks) == 2
        assert len(locks) == 0

    def test_same_key_is_exclusive(self):
        locks = KeyedLock()
        active = []
        overlaps = []

        def worker():
            with locks.hold("key"):
                active.append(1)
                if len(active) > 1:
                    overlaps.append(True)
                time.sleep(0.01)
                active.pop()

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert overlaps == []
        assert len(locks) == 0


def test_package_version_matches_config():
    assert steadfast.__version__ == VERSION
