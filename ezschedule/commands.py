"""
Commands (validated units of work) and their execution.

Each command kind is a small frozen dataclass carrying its own payload.
The parser produces them, `execute_command()` runs them against a Model:

    add n/NAME d/DATE s/START e/END
    edit INDEX [n/NAME] [d/DATE] [s/START] [e/END]
    delete INDEX
    find KEYWORD [MORE_KEYWORDS]...
    list
    clear
    help
    exit

Preconditions (valid index, no duplicate, no overlap, start before end) are
checked BEFORE the model is touched, so a failed command never leaves a
half-applied change behind.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from ezschedule.errors import Failure
from ezschedule.model import Event
from ezschedule.scheduler import Model, show_all_events


# ---------------------------------------------------------------------------
# Shared messages
# ---------------------------------------------------------------------------

MESSAGE_UNKNOWN_COMMAND = "Unknown command"
MESSAGE_INVALID_COMMAND_FORMAT = "Invalid command format! \n{}"
MESSAGE_INVALID_EVENT_DISPLAYED_INDEX = "The event index provided is invalid"
MESSAGE_EVENTS_LISTED_OVERVIEW = "{} events listed!"
MESSAGE_DUPLICATE_EVENT = "This event already exists in the scheduler"
MESSAGE_EVENT_OVERLAP = "Another event already exists at the chosen time"
MESSAGE_START_AFTER_END = "Start time must be before end time"


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of a successful command, shown to the user.
    """

    feedback_to_user: str
    show_help: bool = False
    exit: bool = False


# ---------------------------------------------------------------------------
# Command kinds
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AddCommand:
    COMMAND_WORD: ClassVar[str] = "add"
    MUTATES: ClassVar[bool] = True
    MESSAGE_USAGE: ClassVar[str] = (
        "add: Adds an event to the scheduler. "
        "Parameters: n/NAME d/DATE s/START_TIME e/END_TIME\n"
        "Example: add n/CS2103 Lecture d/2026-03-10 s/10:00 e/12:00"
    )
    MESSAGE_SUCCESS: ClassVar[str] = "New event added: {}"

    event: Event


@dataclass(frozen=True)
class EditDescriptor:
    """
    The fields to change on an existing event; None means "keep".
    """

    name: Optional[str] = None
    date: Optional[dt.date] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None

    def is_any_field_edited(self) -> bool:
        return any(v is not None for v in (self.name, self.date, self.start_time, self.end_time))

    def apply_to(self, event: Event) -> Event:
        return Event(
            name=self.name if self.name is not None else event.name,
            date=self.date if self.date is not None else event.date,
            start_time=self.start_time if self.start_time is not None else event.start_time,
            end_time=self.end_time if self.end_time is not None else event.end_time,
        )


@dataclass(frozen=True)
class EditCommand:
    COMMAND_WORD: ClassVar[str] = "edit"
    MUTATES: ClassVar[bool] = True
    MESSAGE_USAGE: ClassVar[str] = (
        "edit: Edits the event identified by the index number used in the displayed event list. "
        "Parameters: INDEX (must be a positive integer) [n/NAME] [d/DATE] [s/START_TIME] [e/END_TIME]\n"
        "Example: edit 1 s/09:00 e/10:30"
    )
    MESSAGE_SUCCESS: ClassVar[str] = "Edited Event: {}"
    MESSAGE_NOT_EDITED: ClassVar[str] = "At least one field to edit must be provided."

    index: int
    descriptor: EditDescriptor


@dataclass(frozen=True)
class DeleteCommand:
    COMMAND_WORD: ClassVar[str] = "delete"
    MUTATES: ClassVar[bool] = True
    MESSAGE_USAGE: ClassVar[str] = (
        "delete: Deletes the event identified by the index number used in the displayed event list. "
        "Parameters: INDEX (must be a positive integer)\n"
        "Example: delete 1"
    )
    MESSAGE_SUCCESS: ClassVar[str] = "Deleted Event: {}"

    index: int


@dataclass(frozen=True)
class FindCommand:
    COMMAND_WORD: ClassVar[str] = "find"
    MUTATES: ClassVar[bool] = False
    MESSAGE_USAGE: ClassVar[str] = (
        "find: Finds all events whose names contain any of the specified keywords (case-insensitive) "
        "and displays them as a list with index numbers. "
        "Parameters: KEYWORD [MORE_KEYWORDS]...\n"
        "Example: find lecture tutorial"
    )

    keywords: tuple[str, ...]

    def matches(self, event: Event) -> bool:
        words = {w.lower() for w in event.name.split()}
        return any(k.lower() in words for k in self.keywords)


@dataclass(frozen=True)
class ListCommand:
    COMMAND_WORD: ClassVar[str] = "list"
    MUTATES: ClassVar[bool] = False
    MESSAGE_USAGE: ClassVar[str] = "list: Lists all events."
    MESSAGE_SUCCESS: ClassVar[str] = "Listed all events"


@dataclass(frozen=True)
class ClearCommand:
    COMMAND_WORD: ClassVar[str] = "clear"
    MUTATES: ClassVar[bool] = True
    MESSAGE_USAGE: ClassVar[str] = "clear: Deletes all events."
    MESSAGE_SUCCESS: ClassVar[str] = "Scheduler has been cleared!"


@dataclass(frozen=True)
class HelpCommand:
    COMMAND_WORD: ClassVar[str] = "help"
    MUTATES: ClassVar[bool] = False
    MESSAGE_USAGE: ClassVar[str] = "help: Shows program usage instructions."


@dataclass(frozen=True)
class ExitCommand:
    COMMAND_WORD: ClassVar[str] = "exit"
    MUTATES: ClassVar[bool] = False
    MESSAGE_USAGE: ClassVar[str] = "exit: Exits the program."
    MESSAGE_SUCCESS: ClassVar[str] = "Exiting Scheduler as requested ..."


Command = Union[
    AddCommand,
    EditCommand,
    DeleteCommand,
    FindCommand,
    ListCommand,
    ClearCommand,
    HelpCommand,
    ExitCommand,
]

ALL_COMMANDS = (
    AddCommand,
    EditCommand,
    DeleteCommand,
    FindCommand,
    ListCommand,
    ClearCommand,
    HelpCommand,
    ExitCommand,
)


def help_text() -> str:
    return "\n\n".join(cls.MESSAGE_USAGE for cls in ALL_COMMANDS)


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------


def _check_new_event(model: Model, event: Event, replacing: Optional[Event] = None) -> Optional[Failure]:
    """
    Validate an event before it goes into the model. Returns a Failure or None.
    """
    if not event.start_time < event.end_time:
        return Failure.command(MESSAGE_START_AFTER_END)

    is_unchanged = replacing is not None and event.is_same_event(replacing)
    if not is_unchanged and model.has_event(event):
        return Failure.command(MESSAGE_DUPLICATE_EVENT)

    if model.has_overlapping_event(event, ignore=replacing):
        return Failure.command(MESSAGE_EVENT_OVERLAP)

    return None


def _event_at(model: Model, index: int) -> Optional[Event]:
    """
    1-based lookup in the displayed list. None if out of range.
    """
    shown = model.get_filtered_event_list()
    if index < 1 or index > len(shown):
        return None
    return shown[index - 1]


def _cmd_add(cmd: AddCommand, model: Model) -> Union[CommandResult, Failure]:
    failure = _check_new_event(model, cmd.event)
    if failure is not None:
        return failure

    model.add_event(cmd.event)
    return CommandResult(AddCommand.MESSAGE_SUCCESS.format(cmd.event))


def _cmd_edit(cmd: EditCommand, model: Model) -> Union[CommandResult, Failure]:
    target = _event_at(model, cmd.index)
    if target is None:
        return Failure.command(MESSAGE_INVALID_EVENT_DISPLAYED_INDEX)

    if not cmd.descriptor.is_any_field_edited():
        return Failure.command(EditCommand.MESSAGE_NOT_EDITED)

    edited = cmd.descriptor.apply_to(target)
    failure = _check_new_event(model, edited, replacing=target)
    if failure is not None:
        return failure

    model.set_event(target, edited)
    model.update_filtered_event_list(show_all_events)
    return CommandResult(EditCommand.MESSAGE_SUCCESS.format(edited))


def _cmd_delete(cmd: DeleteCommand, model: Model) -> Union[CommandResult, Failure]:
    target = _event_at(model, cmd.index)
    if target is None:
        return Failure.command(MESSAGE_INVALID_EVENT_DISPLAYED_INDEX)

    model.delete_event(target)
    return CommandResult(DeleteCommand.MESSAGE_SUCCESS.format(target))


def _cmd_find(cmd: FindCommand, model: Model) -> CommandResult:
    model.update_filtered_event_list(cmd.matches)
    n = len(model.get_filtered_event_list())
    return CommandResult(MESSAGE_EVENTS_LISTED_OVERVIEW.format(n))


def _cmd_list(model: Model) -> CommandResult:
    model.update_filtered_event_list(show_all_events)
    return CommandResult(ListCommand.MESSAGE_SUCCESS)


def _cmd_clear(model: Model) -> CommandResult:
    model.clear()
    model.update_filtered_event_list(show_all_events)
    return CommandResult(ClearCommand.MESSAGE_SUCCESS)


def execute_command(command: Command, model: Model) -> Union[CommandResult, Failure]:
    """
    Run one command against the model.

    Returns a CommandResult on success or a COMMAND Failure when a
    precondition does not hold (model unchanged in that case).
    """
    if isinstance(command, AddCommand):
        return _cmd_add(command, model)
    if isinstance(command, EditCommand):
        return _cmd_edit(command, model)
    if isinstance(command, DeleteCommand):
        return _cmd_delete(command, model)
    if isinstance(command, FindCommand):
        return _cmd_find(command, model)
    if isinstance(command, ListCommand):
        return _cmd_list(model)
    if isinstance(command, ClearCommand):
        return _cmd_clear(model)
    if isinstance(command, HelpCommand):
        return CommandResult(help_text(), show_help=True)
    if isinstance(command, ExitCommand):
        return CommandResult(ExitCommand.MESSAGE_SUCCESS, exit=True)

    raise TypeError(f"Unhandled command: {command!r}")
