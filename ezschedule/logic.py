"""
Logic: runs one line of user input through parse -> execute -> save -> report.

The Model and StorageManager are handed in at construction; Logic is the only
thing that mutates the model.

Note on saving: when a mutating command succeeds but the save fails, the
change stays in memory and the caller gets a COMMAND Failure whose message is
FILE_OPS_ERROR_MESSAGE + the I/O error. Nothing is rolled back.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

from loguru import logger

from ezschedule.commands import CommandResult, execute_command
from ezschedule.errors import Failure
from ezschedule.model import UserPrefs
from ezschedule.parse import parse_command
from ezschedule.scheduler import EventListView, Model, Scheduler
from ezschedule.storage import StorageManager

logger = logger.bind(module="ezschedule.logic")


class Logic:
    FILE_OPS_ERROR_MESSAGE = "Could not save data to file: "

    def __init__(self, model: Model, storage: StorageManager):
        self.model = model
        self.storage = storage

    def execute(self, command_text: str) -> Union[CommandResult, Failure]:
        """
        Execute one command line. Returns a CommandResult, or a Failure of
        kind PARSE / COMMAND. Never raises for bad user input or I/O errors.
        """
        logger.info(f"[USER COMMAND] {command_text!r}")

        command = parse_command(command_text)
        if isinstance(command, Failure):
            logger.info(f"Parse failed: {command.message}")
            return command

        result = execute_command(command, self.model)
        if isinstance(result, Failure):
            logger.info(f"Command failed: {result.message}")
            return result

        if command.MUTATES:
            saved = self.storage.save_scheduler(self.model.scheduler)
            if saved is not None:
                return Failure.command(self.FILE_OPS_ERROR_MESSAGE + saved.message)

        return result

    def get_scheduler(self) -> Scheduler:
        return self.model.scheduler

    def get_filtered_event_list(self) -> EventListView:
        return self.model.get_filtered_event_list()

    def get_scheduler_file_path(self) -> Path:
        return self.storage.scheduler_file_path

    def get_user_prefs(self) -> UserPrefs:
        return self.model.user_prefs

    def shutdown(self) -> None:
        """
        Save the user preferences. Called once when a front end stops.
        """
        failure = self.storage.save_user_prefs(self.model.user_prefs)
        if failure is not None:
            logger.warning(f"Preferences not saved: {failure.message}")
