"""
Conflict detection.

Event.is_event_overlap only looks at the slot from one side, so two events
are checked in both directions here. For valid slots (start < end) the
two-way check is the usual strict overlap rule:

    start < other_end AND end > other_start
"""

from __future__ import annotations

from typing import Iterable, Optional

from ezschedule.model import Event


def events_overlap(a: Event, b: Event) -> bool:
    return a.is_event_overlap(b) or b.is_event_overlap(a)


def find_overlaps(candidate: Event, events: Iterable[Event], ignore: Optional[Event] = None) -> list[Event]:
    """
    Return the events that overlap `candidate`, in the order given.

    `ignore` is skipped (used when editing: an event may not clash with itself).
    """
    out: list[Event] = []
    for ev in events:
        if ignore is not None and ev == ignore:
            continue
        if events_overlap(candidate, ev):
            out.append(ev)
    return out


def find_conflicts(events: list[Event]) -> list[tuple[Event, Event]]:
    """
    Find overlapping event pairs (A,B), each pair appears once (i<j).
    """
    conflicts: list[tuple[Event, Event]] = []

    # O(n^2) is fine for a personal schedule
    for i in range(len(events)):
        for j in range(i + 1, len(events)):
            if events_overlap(events[i], events[j]):
                conflicts.append((events[i], events[j]))

    return conflicts
