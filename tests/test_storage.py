"""
Unit tests for the JSON storage of the scheduler and the preferences.

Storage contract:
- Missing/invalid file -> empty scheduler / default prefs (no crash)
- Save then load gives back an equal scheduler
- A failed save is reported as a STORAGE Failure and keeps the old file
"""

import json
import tempfile
import unittest
from datetime import date, time
from pathlib import Path
from unittest.mock import patch

from ezschedule.errors import Failure, FailureKind
from ezschedule.model import Event, UserPrefs
from ezschedule.scheduler import Scheduler
from ezschedule.storage import JsonSchedulerStorage, JsonUserPrefsStorage, StorageManager


def ev(name: str = "Meeting", d: str = "2026-03-10", start: str = "10:00", end: str = "11:00") -> Event:
    return Event(name, date.fromisoformat(d), time.fromisoformat(start), time.fromisoformat(end))


class TestSchedulerStorage(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.dir = Path(tmp.name)
        self.path = self.dir / "scheduler.json"

    def test_load_missing_file_returns_empty(self) -> None:
        self.assertEqual(JsonSchedulerStorage(self.path).load_scheduler(), Scheduler())

    def test_save_and_load_roundtrip(self) -> None:
        scheduler = Scheduler([ev(name="Team Meeting"), ev(name="Lunch", start="12:00", end="13:00")])
        storage = JsonSchedulerStorage(self.path)

        self.assertIsNone(storage.save_scheduler(scheduler))
        self.assertEqual(storage.load_scheduler(), scheduler)

        data = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertEqual(
            data["events"][0],
            {"name": "Team Meeting", "date": "2026-03-10", "start": "10:00", "end": "11:00"},
        )

    def test_roundtrip_keeps_every_event_field(self) -> None:
        scheduler = Scheduler(
            [
                ev(name="Team  Sync \u00e9t\u00e9", start="23:59", end="23:59"),
                ev(name="A", d="2026-01-01", start="00:00", end="00:01"),
            ]
        )
        storage = JsonSchedulerStorage(self.path)

        self.assertIsNone(storage.save_scheduler(scheduler))
        loaded = storage.load_scheduler()

        self.assertEqual(loaded, scheduler)
        self.assertEqual(list(loaded.events), list(scheduler.events))

    def test_event_that_cannot_be_stored_exactly_is_rejected(self) -> None:
        # names are stored as-is, times as HH:MM
        with self.assertRaises(ValueError):
            Event(" A ", date(2026, 1, 1), time(10, 0), time(11, 0))
        with self.assertRaises(ValueError):
            Event("A", date(2026, 1, 1), time(10, 0, 30), time(11, 0))

    def test_save_creates_parent_dirs(self) -> None:
        path = self.dir / "nested" / "deeper" / "scheduler.json"
        self.assertIsNone(JsonSchedulerStorage(path).save_scheduler(Scheduler([ev()])))
        self.assertTrue(path.exists())

    def test_load_corrupt_files_returns_empty(self) -> None:
        bad_contents = [
            "{not json",
            "[]",
            '{"events": {}}',
            '{"events": [{"name": "A", "date": "2026-13-01", "start": "10:00", "end": "11:00"}]}',
            '{"events": [{"name": "A", "date": "2026-03-10", "start": "10:00"}]}',
            '{"events": [{"name": " ", "date": "2026-03-10", "start": "10:00", "end": "11:00"}]}',
            '{"events": ["A"]}',
        ]
        storage = JsonSchedulerStorage(self.path)
        for content in bad_contents:
            self.path.write_text(content, encoding="utf-8")
            self.assertEqual(storage.load_scheduler(), Scheduler(), content)

    def test_load_duplicates_returns_empty(self) -> None:
        entry = {"name": "A", "date": "2026-03-10", "start": "10:00", "end": "11:00"}
        self.path.write_text(json.dumps({"events": [entry, entry]}), encoding="utf-8")
        self.assertEqual(JsonSchedulerStorage(self.path).load_scheduler(), Scheduler())

    def test_load_keeps_overlapping_events(self) -> None:
        entries = [
            {"name": "A", "date": "2026-03-10", "start": "10:00", "end": "12:00"},
            {"name": "B", "date": "2026-03-10", "start": "11:00", "end": "13:00"},
        ]
        self.path.write_text(json.dumps({"events": entries}), encoding="utf-8")
        self.assertEqual(len(JsonSchedulerStorage(self.path).load_scheduler()), 2)

    def test_save_failure_is_reported(self) -> None:
        # parent "directory" is a regular file -> OSError on save
        blocker = self.dir / "blocker"
        blocker.write_text("x", encoding="utf-8")
        res = JsonSchedulerStorage(blocker / "scheduler.json").save_scheduler(Scheduler([ev()]))
        self.assertIsInstance(res, Failure)
        assert res is not None
        self.assertEqual(res.kind, FailureKind.STORAGE)
        self.assertTrue(res.message)

    def test_failed_save_keeps_previous_file(self) -> None:
        storage = JsonSchedulerStorage(self.path)
        storage.save_scheduler(Scheduler([ev(name="Old")]))
        before = self.path.read_text(encoding="utf-8")

        with patch.object(Path, "replace", side_effect=OSError("disk full")):
            res = storage.save_scheduler(Scheduler([ev(name="New")]))

        self.assertEqual(res, Failure.storage("disk full"))
        self.assertEqual(self.path.read_text(encoding="utf-8"), before)
        self.assertEqual([p.name for p in self.dir.iterdir()], ["scheduler.json"])


class TestUserPrefsStorage(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.dir = Path(tmp.name)
        self.path = self.dir / "preferences.json"
        self.default_scheduler = self.dir / "scheduler.json"

    def test_missing_file_gives_defaults(self) -> None:
        prefs = JsonUserPrefsStorage(self.path, self.default_scheduler).load_user_prefs()
        self.assertEqual(prefs, UserPrefs(self.default_scheduler))

    def test_default_scheduler_path_next_to_prefs(self) -> None:
        prefs = JsonUserPrefsStorage(self.path).load_user_prefs()
        self.assertEqual(prefs.scheduler_file_path, self.dir / "scheduler.json")

    def test_roundtrip(self) -> None:
        storage = JsonUserPrefsStorage(self.path, self.default_scheduler)
        prefs = UserPrefs(self.dir / "elsewhere" / "events.json")
        self.assertIsNone(storage.save_user_prefs(prefs))
        self.assertEqual(storage.load_user_prefs(), prefs)

    def test_invalid_file_gives_defaults(self) -> None:
        storage = JsonUserPrefsStorage(self.path, self.default_scheduler)
        for content in ("{oops", "[1, 2]", '{"scheduler_file_path": 3}', '{"scheduler_file_path": ""}'):
            self.path.write_text(content, encoding="utf-8")
            self.assertEqual(storage.load_user_prefs(), UserPrefs(self.default_scheduler), content)


class TestStorageManager(unittest.TestCase):
    def test_delegates_to_both_stores(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            sched_path = Path(d) / "scheduler.json"
            prefs_path = Path(d) / "preferences.json"
            manager = StorageManager(JsonSchedulerStorage(sched_path), JsonUserPrefsStorage(prefs_path))

            self.assertEqual(manager.scheduler_file_path, sched_path)
            self.assertEqual(manager.user_prefs_file_path, prefs_path)

            scheduler = Scheduler([ev()])
            self.assertIsNone(manager.save_scheduler(scheduler))
            self.assertEqual(manager.load_scheduler(), scheduler)

            prefs = UserPrefs(sched_path)
            self.assertIsNone(manager.save_user_prefs(prefs))
            self.assertEqual(manager.load_user_prefs(), prefs)


if __name__ == "__main__":
    unittest.main()
