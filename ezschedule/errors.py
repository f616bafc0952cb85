"""
Failure values and precondition errors.

Failures travel through the command pipeline as return values:

    parse  -> Failure(kind=PARSE)
    execute -> Failure(kind=COMMAND)
    save   -> Failure(kind=STORAGE)   (wrapped as COMMAND by Logic)

The exception classes below are only raised when the event store is used
incorrectly (e.g. adding a duplicate without checking first). Commands check
these preconditions themselves and report a Failure instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FailureKind(str, Enum):
    PARSE = "parse"
    COMMAND = "command"
    STORAGE = "storage"


@dataclass(frozen=True)
class Failure:
    """
    A reported failure: what stage it came from and a human-readable message.
    """

    kind: FailureKind
    message: str

    @classmethod
    def parse(cls, message: str) -> "Failure":
        return cls(FailureKind.PARSE, message)

    @classmethod
    def command(cls, message: str) -> "Failure":
        return cls(FailureKind.COMMAND, message)

    @classmethod
    def storage(cls, message: str) -> "Failure":
        return cls(FailureKind.STORAGE, message)

    def __str__(self) -> str:
        return self.message


class DuplicateEventError(ValueError):
    """Raised when an equal event is already stored."""


class EventNotFoundError(LookupError):
    """Raised when the event to delete/replace is not stored."""


class UnsupportedOperationError(TypeError):
    """Raised on any attempt to modify a read-only event list."""
