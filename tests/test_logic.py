"""
Tests for the Logic orchestrator (parse -> execute -> save -> report).

Persistence goes to a temporary folder so no real user data is touched.
"""

import tempfile
import unittest
from datetime import date, time
from pathlib import Path
from typing import Any

from ezschedule.commands import (
    MESSAGE_INVALID_EVENT_DISPLAYED_INDEX,
    MESSAGE_UNKNOWN_COMMAND,
    AddCommand,
    CommandResult,
    ListCommand,
)
from ezschedule.errors import Failure, FailureKind, UnsupportedOperationError
from ezschedule.logic import Logic
from ezschedule.model import Event, UserPrefs
from ezschedule.scheduler import Model, Scheduler
from ezschedule.storage import JsonSchedulerStorage, JsonUserPrefsStorage, StorageManager

DUMMY_IO_ERROR = OSError("dummy exception")

EVENT_A = Event("Alice Birthday", date(2026, 5, 1), time(18, 0), time(20, 0))
ADD_EVENT_A = "add n/Alice Birthday d/2026-05-01 s/18:00 e/20:00"


class IoErrorThrowingSchedulerStorage(JsonSchedulerStorage):
    """Scheduler storage whose every write fails with DUMMY_IO_ERROR."""

    def _write(self, payload: dict[str, Any]) -> None:
        raise DUMMY_IO_ERROR


class RecordingSchedulerStorage(JsonSchedulerStorage):
    def __init__(self, file_path: Path):
        super().__init__(file_path)
        self.saves = 0

    def save_scheduler(self, scheduler: Scheduler):
        self.saves += 1
        return super().save_scheduler(scheduler)


class TestLogic(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.tmp = Path(tmp.name)

        self.model = Model()
        self.scheduler_storage = RecordingSchedulerStorage(self.tmp / "scheduler.json")
        storage = StorageManager(self.scheduler_storage, JsonUserPrefsStorage(self.tmp / "userPrefs.json"))
        self.logic = Logic(self.model, storage)

    # helpers ----------------------------------------------------------

    def assert_command_success(self, command_text: str, expected_message: str, expected_model: Model) -> None:
        result = self.logic.execute(command_text)
        self.assertIsInstance(result, CommandResult)
        assert isinstance(result, CommandResult)
        self.assertEqual(result.feedback_to_user, expected_message)
        self.assertEqual(self.model, expected_model)

    def assert_failure(self, command_text: str, kind: FailureKind, expected_message: str, expected_model=None) -> None:
        if expected_model is None:
            expected_model = Model(Scheduler(self.model.scheduler.events), UserPrefs())
        result = self.logic.execute(command_text)
        self.assertEqual(result, Failure(kind, expected_message))
        self.assertEqual(self.model, expected_model)

    # tests ------------------------------------------------------------

    def test_execute_invalid_command_format_is_parse_failure(self) -> None:
        self.assert_failure("uicfhmowqewca", FailureKind.PARSE, MESSAGE_UNKNOWN_COMMAND)
        self.assertEqual(self.scheduler_storage.saves, 0)

    def test_execute_command_execution_error_is_command_failure(self) -> None:
        self.assert_failure("delete 9", FailureKind.COMMAND, MESSAGE_INVALID_EVENT_DISPLAYED_INDEX)
        self.assertEqual(self.scheduler_storage.saves, 0)

    def test_execute_valid_command_success(self) -> None:
        self.assert_command_success(ListCommand.COMMAND_WORD, ListCommand.MESSAGE_SUCCESS, Model())

    def test_list_does_not_save(self) -> None:
        self.logic.execute("list")
        self.assertEqual(self.scheduler_storage.saves, 0)
        self.assertFalse((self.tmp / "scheduler.json").exists())

    def test_add_saves_to_disk(self) -> None:
        expected = Model()
        expected.add_event(EVENT_A)
        self.assert_command_success(ADD_EVENT_A, AddCommand.MESSAGE_SUCCESS.format(EVENT_A), expected)

        self.assertEqual(self.scheduler_storage.saves, 1)
        self.assertEqual(JsonSchedulerStorage(self.tmp / "scheduler.json").load_scheduler(), Scheduler([EVENT_A]))

    def test_delete_saves_to_disk(self) -> None:
        self.logic.execute(ADD_EVENT_A)
        self.assert_command_success("delete 1", "Deleted Event: " + str(EVENT_A), Model())
        self.assertEqual(JsonSchedulerStorage(self.tmp / "scheduler.json").load_scheduler(), Scheduler())

    def test_storage_io_error_is_command_failure_without_rollback(self) -> None:
        storage = StorageManager(
            IoErrorThrowingSchedulerStorage(self.tmp / "ioExceptionScheduler.json"),
            JsonUserPrefsStorage(self.tmp / "ioExceptionUserPrefs.json"),
        )
        self.logic = Logic(self.model, storage)

        expected_model = Model()
        expected_model.add_event(EVENT_A)
        expected_message = Logic.FILE_OPS_ERROR_MESSAGE + str(DUMMY_IO_ERROR)

        self.assert_failure(ADD_EVENT_A, FailureKind.COMMAND, expected_message, expected_model)
        self.assertEqual(expected_message, "Could not save data to file: dummy exception")
        self.assertFalse((self.tmp / "ioExceptionScheduler.json").exists())

    def test_get_filtered_event_list_modify_list_raises(self) -> None:
        with self.assertRaises(UnsupportedOperationError):
            self.logic.get_filtered_event_list().remove(0)

    def test_getters(self) -> None:
        self.assertIs(self.logic.get_scheduler(), self.model.scheduler)
        self.assertEqual(self.logic.get_scheduler_file_path(), self.tmp / "scheduler.json")
        self.assertEqual(self.logic.get_user_prefs(), UserPrefs())

    def test_shutdown_saves_prefs(self) -> None:
        self.logic.shutdown()
        self.assertTrue((self.tmp / "userPrefs.json").exists())


if __name__ == "__main__":
    unittest.main()
