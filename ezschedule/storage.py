"""
Persistent storage for the scheduler and the user preferences.

This module manages two independent files:

    <data dir>/scheduler.json     {"events": [{"name", "date", "start", "end"}, ...]}
    <data dir>/preferences.json   {"scheduler_file_path": "..."}

Design rationale:
- loading never crashes startup: a missing or broken file means a fresh start
- saving never fails silently: I/O errors come back as a STORAGE Failure
- files are replaced atomically (temp file + rename), so a failed save
  leaves the previous file untouched
"""

from __future__ import annotations

import json
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from ezschedule.conflicts import find_conflicts
from ezschedule.errors import DuplicateEventError, Failure
from ezschedule.model import DATE_FORMAT, TIME_FORMAT, Event, UserPrefs
from ezschedule.scheduler import Scheduler

logger = logger.bind(module="ezschedule.storage")


class DataFormatError(ValueError):
    """Persisted data does not match the expected schema."""


# ---------------------------------------------------------------------------
# JSON <-> objects
# ---------------------------------------------------------------------------


def event_to_dict(event: Event) -> dict[str, str]:
    return {
        "name": event.name,
        "date": event.date.strftime(DATE_FORMAT),
        "start": event.start_time.strftime(TIME_FORMAT),
        "end": event.end_time.strftime(TIME_FORMAT),
    }


def event_from_dict(data: Any) -> Event:
    """
    Build an Event from its JSON form. Raises DataFormatError on any bad field.
    """
    if not isinstance(data, dict):
        raise DataFormatError(f"Event entry must be an object, got {type(data).__name__}")

    missing = [k for k in ("name", "date", "start", "end") if not isinstance(data.get(k), str)]
    if missing:
        raise DataFormatError(f"Event entry is missing field(s): {', '.join(missing)}")

    try:
        return Event(
            name=data["name"].strip(),
            date=datetime.strptime(data["date"].strip(), DATE_FORMAT).date(),
            start_time=datetime.strptime(data["start"].strip(), TIME_FORMAT).time(),
            end_time=datetime.strptime(data["end"].strip(), TIME_FORMAT).time(),
        )
    except ValueError as e:
        raise DataFormatError(f"Invalid event entry {data!r}: {e}") from e


def scheduler_to_dict(scheduler: Scheduler) -> dict[str, Any]:
    return {"events": [event_to_dict(ev) for ev in scheduler.events]}


def scheduler_from_dict(data: Any) -> Scheduler:
    if not isinstance(data, dict) or not isinstance(data.get("events"), list):
        raise DataFormatError('Scheduler file must be an object with an "events" list')

    scheduler = Scheduler()
    for entry in data["events"]:
        try:
            scheduler.add_event(event_from_dict(entry))
        except DuplicateEventError as e:
            raise DataFormatError("Events list contains duplicate event(s).") from e
    return scheduler


def _write_atomic(path: Path, payload: Any) -> None:
    """
    Write JSON to `path` via a temp file in the same directory, then rename.

    Raises OSError/TypeError/ValueError; the temp file is removed on failure.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(payload, indent=2, ensure_ascii=False)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# Scheduler storage
# ---------------------------------------------------------------------------


class JsonSchedulerStorage:
    """
    Stores the scheduler's events in one JSON file.
    """

    def __init__(self, file_path: str | Path):
        self.file_path = Path(file_path)

    def load_scheduler(self) -> Scheduler:
        """
        Load the scheduler. Returns an empty Scheduler if the file does not
        exist or cannot be read/understood.
        """
        if not self.file_path.exists():
            logger.debug(f"No scheduler file at {self.file_path}, starting with an empty scheduler")
            return Scheduler()

        try:
            scheduler = scheduler_from_dict(_read_json(self.file_path))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError, DataFormatError) as e:
            logger.warning(f"Could not load scheduler from {self.file_path}, starting with an empty scheduler: {e}")
            return Scheduler()

        # Hand-edited files can contain clashing events; keep them, but say so
        for a, b in find_conflicts(list(scheduler.events)):
            logger.warning(f"Loaded events overlap: {a.name!r} and {b.name!r} on {a.date}")

        logger.debug(f"Loaded {len(scheduler)} events from {self.file_path}")
        return scheduler

    def save_scheduler(self, scheduler: Scheduler) -> Optional[Failure]:
        """
        Save the scheduler. Returns None on success, a STORAGE Failure otherwise.
        """
        try:
            self._write(scheduler_to_dict(scheduler))
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Failed to save scheduler to {self.file_path}: {e}")
            return Failure.storage(str(e))

        logger.debug(f"Saved {len(scheduler)} events to {self.file_path}")
        return None

    def _write(self, payload: dict[str, Any]) -> None:
        _write_atomic(self.file_path, payload)


# ---------------------------------------------------------------------------
# Preferences storage
# ---------------------------------------------------------------------------


class JsonUserPrefsStorage:
    """
    Stores the user preferences in one JSON file.
    """

    def __init__(self, file_path: str | Path, default_scheduler_path: str | Path | None = None):
        self.file_path = Path(file_path)
        self.default_scheduler_path = (
            Path(default_scheduler_path) if default_scheduler_path is not None else self.file_path.parent / "scheduler.json"
        )

    def _defaults(self) -> UserPrefs:
        return UserPrefs(scheduler_file_path=self.default_scheduler_path)

    def load_user_prefs(self) -> UserPrefs:
        """
        Load preferences. Missing or invalid file -> defaults.
        """
        if not self.file_path.exists():
            logger.debug(f"No preferences file at {self.file_path}, using defaults")
            return self._defaults()

        try:
            data = _read_json(self.file_path)
            raw_path = data.get("scheduler_file_path")
        except (OSError, json.JSONDecodeError, UnicodeDecodeError, AttributeError) as e:
            logger.warning(f"Could not load preferences from {self.file_path}, using defaults: {e}")
            return self._defaults()

        if not isinstance(raw_path, str) or not raw_path.strip():
            logger.warning(f"Preferences file {self.file_path} has no scheduler_file_path, using default")
            return self._defaults()

        return UserPrefs(scheduler_file_path=Path(raw_path.strip()))

    def save_user_prefs(self, prefs: UserPrefs) -> Optional[Failure]:
        try:
            _write_atomic(self.file_path, {"scheduler_file_path": str(prefs.scheduler_file_path)})
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Failed to save preferences to {self.file_path}: {e}")
            return Failure.storage(str(e))
        return None


# ---------------------------------------------------------------------------
# Facade
# ---------------------------------------------------------------------------


class StorageManager:
    """
    One object for Logic and the front ends to talk to; delegates to the two stores.
    """

    def __init__(self, scheduler_storage: JsonSchedulerStorage, user_prefs_storage: JsonUserPrefsStorage):
        self.scheduler_storage = scheduler_storage
        self.user_prefs_storage = user_prefs_storage

    @property
    def scheduler_file_path(self) -> Path:
        return self.scheduler_storage.file_path

    @property
    def user_prefs_file_path(self) -> Path:
        return self.user_prefs_storage.file_path

    def load_scheduler(self) -> Scheduler:
        return self.scheduler_storage.load_scheduler()

    def save_scheduler(self, scheduler: Scheduler) -> Optional[Failure]:
        return self.scheduler_storage.save_scheduler(scheduler)

    def load_user_prefs(self) -> UserPrefs:
        return self.user_prefs_storage.load_user_prefs()

    def save_user_prefs(self, prefs: UserPrefs) -> Optional[Failure]:
        return self.user_prefs_storage.save_user_prefs(prefs)
