"""
Central data model definitions used across the project.

This module defines the Event value object and the user preferences so that:
- parser, commands, storage and UI share the same field names and types
- overlap, ordering and equality rules live in exactly one place
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from pathlib import Path
from typing import Optional


COMPLETED_STATUS = "Event completed"

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"


def _check_time(label: str, value: object) -> None:
    if not isinstance(value, time):
        raise ValueError(f"Event {label} time must be a datetime.time, got {value!r}")
    # stored as HH:MM
    if value.second or value.microsecond or value.tzinfo is not None:
        raise ValueError(f"Event {label} time must be a whole minute without timezone, got {value!r}")


@dataclass(frozen=True)
class Event:
    """
    Represents one scheduled event (single date & time slot).

    Guarantees: all four fields are present and typed, the name carries no
    surrounding whitespace and both times are whole minutes, so every Event
    survives a save and load unchanged. Whether start_time is before
    end_time is checked by the commands that create events, not here.
    """

    name: str
    date: date
    start_time: time
    end_time: time

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Event name must be a non-blank string")
        if self.name != self.name.strip():
            raise ValueError(f"Event name must not start or end with whitespace, got {self.name!r}")
        # datetime is a subclass of date, but mixing them breaks comparisons
        if not isinstance(self.date, date) or isinstance(self.date, datetime):
            raise ValueError(f"Event date must be a datetime.date, got {self.date!r}")
        _check_time("start", self.start_time)
        _check_time("end", self.end_time)

    # ------------------------------------------------------------------
    # Identity / overlap
    # ------------------------------------------------------------------

    def is_same_event(self, other: Optional["Event"]) -> bool:
        """
        Weaker notion of equality between two events.

        Currently identical to full equality (name, date, start, end).
        """
        if other is self:
            return True
        return (
            other is not None
            and other.name == self.name
            and other.date == self.date
            and other.start_time == self.start_time
            and other.end_time == self.end_time
        )

    def is_event_overlap(self, other: "Event") -> bool:
        """
        Return True if other falls on the same date and its time slot overlaps this one.

        Touching slots (one ends exactly when the other starts) do not overlap.
        Not symmetric: see conflicts.events_overlap for the two-way check.
        """
        return self.date == other.date and self._is_time_overlap(other)

    def _is_time_overlap(self, other: "Event") -> bool:
        return (
            self._starts_inside(other)
            or self._ends_inside(other)
            or self._is_contained_by(other)
            or self._has_equal_times(other)
        )

    def _starts_inside(self, other: "Event") -> bool:
        return self.start_time < other.start_time < self.end_time

    def _ends_inside(self, other: "Event") -> bool:
        return self.start_time < other.end_time < self.end_time

    def _is_contained_by(self, other: "Event") -> bool:
        return other.start_time < self.start_time and other.end_time > self.end_time

    def _has_equal_times(self, other: "Event") -> bool:
        return other.start_time == self.start_time and other.end_time == self.end_time

    # ------------------------------------------------------------------
    # Derived display values
    # ------------------------------------------------------------------

    def get_completed_status(self, now: Optional[datetime] = None) -> str:
        """
        "Event completed" if the event is over, otherwise "".

        Computed against the current moment (or `now`), never persisted.
        """
        now = now or datetime.now()
        today = now.date()
        if self.date < today:
            return COMPLETED_STATUS
        if self.date > today:
            return ""
        return COMPLETED_STATUS if self.end_time < now.time() else ""

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def compare_to(self, other: "Event") -> int:
        """
        Order by date, then by start time. Used for display order only.
        """
        if other is self:
            return 0
        mine = (self.date, self.start_time)
        theirs = (other.date, other.start_time)
        if mine < theirs:
            return -1
        if mine > theirs:
            return 1
        return 0

    def __lt__(self, other: "Event") -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return self.compare_to(other) < 0

    def __str__(self) -> str:
        return (
            f"{self.name}"
            f"\nDate: {self.date.strftime(DATE_FORMAT)}"
            f"\nStart Time: {self.start_time.strftime(TIME_FORMAT)}"
            f"\nEnd Time: {self.end_time.strftime(TIME_FORMAT)}"
        )


@dataclass
class UserPrefs:
    """
    User preferences, stored separately from the events (preferences.json).
    """

    scheduler_file_path: Path = field(default_factory=lambda: Path("data") / "scheduler.json")
