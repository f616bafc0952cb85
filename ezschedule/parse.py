"""
Parsing (command text -> Command).

- Splits the command word from its arguments
- Tokenizes prefixed arguments (n/ d/ s/ e/)
- Validates every field value (name, date, time, index)
- Returns either a Command or a PARSE Failure; never raises for bad input

Format rules:
- dates: YYYY-MM-DD
- times: HH:MM (24-hour clock)
- a prefix given twice: the last value wins
"""

from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Dict, List, Optional, Tuple, Union

from ezschedule.commands import (
    MESSAGE_INVALID_COMMAND_FORMAT,
    MESSAGE_UNKNOWN_COMMAND,
    AddCommand,
    ClearCommand,
    Command,
    DeleteCommand,
    EditCommand,
    EditDescriptor,
    ExitCommand,
    FindCommand,
    HelpCommand,
    ListCommand,
)
from ezschedule.errors import Failure
from ezschedule.model import DATE_FORMAT, TIME_FORMAT, Event


# ---------------------------------------------------------------------------
# Prefixes & constraint messages
# ---------------------------------------------------------------------------

PREFIX_NAME = "n/"
PREFIX_DATE = "d/"
PREFIX_START = "s/"
PREFIX_END = "e/"

ALL_PREFIXES = (PREFIX_NAME, PREFIX_DATE, PREFIX_START, PREFIX_END)

MESSAGE_NAME_CONSTRAINTS = "Names should only contain alphanumeric characters and spaces, and it should not be blank"
MESSAGE_DATE_CONSTRAINTS = "Dates should be in the format YYYY-MM-DD and be a valid calendar date"
MESSAGE_TIME_CONSTRAINTS = "Times should be in the format HH:MM (24-hour clock)"
MESSAGE_INVALID_INDEX = "Index is not a non-zero unsigned integer."

_COMMAND_FORMAT = re.compile(r"^(?P<word>\S+)(?P<arguments>.*)$", re.DOTALL)
_NAME_FORMAT = re.compile(r"^[^\W_]+(?: [^\W_]+)*$")
_DATE_FORMAT = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_FORMAT = re.compile(r"^\d{2}:\d{2}$")


class _FieldError(Exception):
    """Internal: a single argument failed validation. Turned into a Failure below."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def tokenize(arguments: str, prefixes: Tuple[str, ...] = ALL_PREFIXES) -> Tuple[str, Dict[str, List[str]]]:
    """
    Split "PREAMBLE p1/VALUE p2/VALUE ..." into the preamble and a dict of values per prefix.

    A prefix only counts at the start of the string or after whitespace,
    so "a/b" inside a name is left alone.
    """
    if not prefixes:
        return arguments.strip(), {}

    pattern = re.compile(r"(?:^|(?<=\s))(" + "|".join(re.escape(p) for p in prefixes) + ")")
    matches = list(pattern.finditer(arguments))

    if not matches:
        return arguments.strip(), {}

    preamble = arguments[: matches[0].start()].strip()
    values: Dict[str, List[str]] = {}
    for i, m in enumerate(matches):
        value_end = matches[i + 1].start() if i + 1 < len(matches) else len(arguments)
        value = arguments[m.end() : value_end].strip()
        values.setdefault(m.group(1), []).append(value)

    return preamble, values


def _last(values: Dict[str, List[str]], prefix: str) -> Optional[str]:
    found = values.get(prefix)
    return found[-1] if found else None


def parse_name(text: str) -> str:
    name = " ".join(text.split())
    if not name or not _NAME_FORMAT.match(name):
        raise _FieldError(MESSAGE_NAME_CONSTRAINTS)
    return name


def parse_date(text: str) -> date:
    raw = text.strip()
    if not _DATE_FORMAT.match(raw):
        raise _FieldError(MESSAGE_DATE_CONSTRAINTS)
    try:
        return datetime.strptime(raw, DATE_FORMAT).date()
    except ValueError:
        raise _FieldError(MESSAGE_DATE_CONSTRAINTS) from None


def parse_time(text: str) -> time:
    raw = text.strip()
    if not _TIME_FORMAT.match(raw):
        raise _FieldError(MESSAGE_TIME_CONSTRAINTS)
    try:
        return datetime.strptime(raw, TIME_FORMAT).time()
    except ValueError:
        raise _FieldError(MESSAGE_TIME_CONSTRAINTS) from None


def parse_index(text: str) -> int:
    raw = text.strip()
    if not (raw.isascii() and raw.isdigit()) or int(raw) < 1:
        raise _FieldError(MESSAGE_INVALID_INDEX)
    return int(raw)


def _invalid_format(usage: str) -> Failure:
    return Failure.parse(MESSAGE_INVALID_COMMAND_FORMAT.format(usage))


# ---------------------------------------------------------------------------
# Per-command parsers
# ---------------------------------------------------------------------------


def _parse_add(arguments: str) -> Union[Command, Failure]:
    preamble, values = tokenize(arguments)

    if preamble or any(_last(values, p) is None for p in ALL_PREFIXES):
        return _invalid_format(AddCommand.MESSAGE_USAGE)

    try:
        event = Event(
            name=parse_name(_last(values, PREFIX_NAME) or ""),
            date=parse_date(_last(values, PREFIX_DATE) or ""),
            start_time=parse_time(_last(values, PREFIX_START) or ""),
            end_time=parse_time(_last(values, PREFIX_END) or ""),
        )
    except _FieldError as e:
        return Failure.parse(str(e))

    return AddCommand(event)


def _parse_edit(arguments: str) -> Union[Command, Failure]:
    preamble, values = tokenize(arguments)

    try:
        index = parse_index(preamble)
    except _FieldError:
        return _invalid_format(EditCommand.MESSAGE_USAGE)

    name_s = _last(values, PREFIX_NAME)
    date_s = _last(values, PREFIX_DATE)
    start_s = _last(values, PREFIX_START)
    end_s = _last(values, PREFIX_END)

    try:
        descriptor = EditDescriptor(
            name=parse_name(name_s) if name_s is not None else None,
            date=parse_date(date_s) if date_s is not None else None,
            start_time=parse_time(start_s) if start_s is not None else None,
            end_time=parse_time(end_s) if end_s is not None else None,
        )
    except _FieldError as e:
        return Failure.parse(str(e))

    if not descriptor.is_any_field_edited():
        return Failure.parse(EditCommand.MESSAGE_NOT_EDITED)

    return EditCommand(index, descriptor)


def _parse_delete(arguments: str) -> Union[Command, Failure]:
    try:
        return DeleteCommand(parse_index(arguments))
    except _FieldError:
        return _invalid_format(DeleteCommand.MESSAGE_USAGE)


def _parse_find(arguments: str) -> Union[Command, Failure]:
    keywords = tuple(arguments.split())
    if not keywords:
        return _invalid_format(FindCommand.MESSAGE_USAGE)
    return FindCommand(keywords)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_command(user_input: str) -> Union[Command, Failure]:
    """
    Parse one line of user input into a Command.

    Returns a PARSE Failure for unknown command words and malformed arguments.
    """
    m = _COMMAND_FORMAT.match((user_input or "").strip())
    if not m:
        return _invalid_format(HelpCommand.MESSAGE_USAGE)

    word = m.group("word")
    arguments = m.group("arguments")

    if word == AddCommand.COMMAND_WORD:
        return _parse_add(arguments)
    if word == EditCommand.COMMAND_WORD:
        return _parse_edit(arguments)
    if word == DeleteCommand.COMMAND_WORD:
        return _parse_delete(arguments)
    if word == FindCommand.COMMAND_WORD:
        return _parse_find(arguments)
    if word == ListCommand.COMMAND_WORD:
        return ListCommand()
    if word == ClearCommand.COMMAND_WORD:
        return ClearCommand()
    if word == HelpCommand.COMMAND_WORD:
        return HelpCommand()
    if word == ExitCommand.COMMAND_WORD:
        return ExitCommand()

    return Failure.parse(MESSAGE_UNKNOWN_COMMAND)
