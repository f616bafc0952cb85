"""
In-memory event store.

- Scheduler: all events, no two equal events, insertion order kept
- EventListView: read-only snapshot handed out to callers
- Model: the scheduler + user prefs + the current display filter

Only Logic (through commands) mutates a Model.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, Optional, overload

from ezschedule.conflicts import find_overlaps
from ezschedule.errors import DuplicateEventError, EventNotFoundError, UnsupportedOperationError
from ezschedule.model import Event, UserPrefs


EventPredicate = Callable[[Event], bool]


def show_all_events(event: Event) -> bool:
    return True


class EventListView(Sequence):
    """
    Immutable snapshot of a list of events.

    Reading works like a tuple; every list-style mutator raises
    UnsupportedOperationError instead of AttributeError so misuse is explicit.
    """

    __slots__ = ("_events",)

    def __init__(self, events: Iterable[Event] = ()) -> None:
        self._events: tuple[Event, ...] = tuple(events)

    @overload
    def __getitem__(self, index: int) -> Event: ...

    @overload
    def __getitem__(self, index: slice) -> "EventListView": ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return EventListView(self._events[index])
        return self._events[index]

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(self._events)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, EventListView):
            return self._events == other._events
        if isinstance(other, (list, tuple)):
            return list(self._events) == list(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._events)

    def __repr__(self) -> str:
        return f"EventListView({list(self._events)!r})"

    def _unsupported(self, *args: Any, **kwargs: Any) -> None:
        raise UnsupportedOperationError("Event list is read-only")

    append = insert = extend = remove = pop = clear = sort = reverse = _unsupported
    __setitem__ = __delitem__ = __iadd__ = __imul__ = _unsupported


class Scheduler:
    """
    Collection of events with no duplicates (by full equality).

    Overlaps are NOT checked here; the commands check them before adding.
    """

    def __init__(self, events: Iterable[Event] = ()) -> None:
        self._events: list[Event] = []
        for ev in events:
            self.add_event(ev)

    @property
    def events(self) -> EventListView:
        return EventListView(self._events)

    def has_event(self, event: Event) -> bool:
        return any(ev.is_same_event(event) for ev in self._events)

    def add_event(self, event: Event) -> None:
        if self.has_event(event):
            raise DuplicateEventError(f"Event already exists: {event.name!r}")
        self._events.append(event)

    def set_event(self, target: Event, edited: Event) -> None:
        """
        Replace `target` with `edited` in place.
        """
        idx = self._index_of(target)
        if not target.is_same_event(edited) and self.has_event(edited):
            raise DuplicateEventError(f"Event already exists: {edited.name!r}")
        self._events[idx] = edited

    def delete_event(self, event: Event) -> None:
        idx = self._index_of(event)
        del self._events[idx]

    def clear(self) -> None:
        self._events = []

    def _index_of(self, event: Event) -> int:
        for i, ev in enumerate(self._events):
            if ev is event or ev == event:
                return i
        raise EventNotFoundError(f"Event not found: {event.name!r}")

    def __len__(self) -> int:
        return len(self._events)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Scheduler):
            return NotImplemented
        return self._events == other._events

    def __repr__(self) -> str:
        return f"Scheduler({self._events!r})"


@dataclass
class Model:
    """
    The scheduler, the user prefs and what is currently displayed.

    Two models are equal when their scheduler contents and prefs are equal;
    the display filter does not take part in equality.
    """

    scheduler: Scheduler = field(default_factory=Scheduler)
    user_prefs: UserPrefs = field(default_factory=UserPrefs)
    predicate: EventPredicate = field(default=show_all_events, compare=False, repr=False)

    def has_event(self, event: Event) -> bool:
        return self.scheduler.has_event(event)

    def has_overlapping_event(self, event: Event, ignore: Optional[Event] = None) -> bool:
        return bool(find_overlaps(event, self.scheduler.events, ignore=ignore))

    def add_event(self, event: Event) -> None:
        self.scheduler.add_event(event)
        self.update_filtered_event_list(show_all_events)

    def set_event(self, target: Event, edited: Event) -> None:
        self.scheduler.set_event(target, edited)

    def delete_event(self, event: Event) -> None:
        self.scheduler.delete_event(event)

    def clear(self) -> None:
        self.scheduler.clear()

    def update_filtered_event_list(self, predicate: EventPredicate) -> None:
        self.predicate = predicate

    def get_filtered_event_list(self) -> EventListView:
        """
        Snapshot of the events matching the current filter, in display order.
        """
        return EventListView(sorted(ev for ev in self.scheduler.events if self.predicate(ev)))
