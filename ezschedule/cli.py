"""
CLI (Command Line Interface).

Run one scheduler command straight from the terminal, e.g.:

    ezschedule add n/Team Meeting d/2026-03-10 s/10:00 e/11:00
    ezschedule list
    ezschedule delete 1

or start the interactive session by giving no command:

    ezschedule
    ezschedule --data-dir ~/my-schedule

Exit codes: 0 success, 1 command failure, 2 parse failure.

Note:
- The interactive UI lives in ezschedule/interactive.py
- This CLI prints plain text (no rich formatting)
"""

from __future__ import annotations

import argparse
from pathlib import Path

from loguru import logger

from ezschedule.config import Settings, setup_logging
from ezschedule.errors import Failure, FailureKind
from ezschedule.logic import Logic
from ezschedule.model import DATE_FORMAT, TIME_FORMAT, Event
from ezschedule.scheduler import Model
from ezschedule.storage import JsonSchedulerStorage, JsonUserPrefsStorage, StorageManager

logger = logger.bind(module="ezschedule.cli")


def build_logic(settings: Settings) -> Logic:
    """
    Load preferences and events from disk and wire up Logic.

    Missing or broken files never stop startup; storage falls back to an
    empty scheduler / default preferences.
    """
    prefs_storage = JsonUserPrefsStorage(settings.user_prefs_file_path, settings.default_scheduler_file_path)
    prefs = prefs_storage.load_user_prefs()

    storage = StorageManager(JsonSchedulerStorage(prefs.scheduler_file_path), prefs_storage)
    model = Model(storage.load_scheduler(), prefs)

    logger.info(f"Using scheduler file {storage.scheduler_file_path} ({len(model.scheduler)} events)")
    return Logic(model, storage)


def _event_line(index: int, ev: Event) -> str:
    bits = [
        f"{index}. {ev.name}",
        f"{ev.date.strftime(DATE_FORMAT)} {ev.start_time.strftime(TIME_FORMAT)}-{ev.end_time.strftime(TIME_FORMAT)}",
    ]
    status = ev.get_completed_status()
    if status:
        bits.append(status)
    return " | ".join(bits)


def _run_once(logic: Logic, command_text: str) -> int:
    """
    Execute a single command, print the outcome, return the exit code.
    """
    result = logic.execute(command_text)

    if isinstance(result, Failure):
        print(result.message)
        return 2 if result.kind == FailureKind.PARSE else 1

    print(result.feedback_to_user)
    if not (result.show_help or result.exit):
        events = logic.get_filtered_event_list()
        if not events:
            print("No events.")
        for i, ev in enumerate(events, start=1):
            print(_event_line(i, ev))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser.
    """
    parser = argparse.ArgumentParser(prog="ezschedule", description="EzSchedule CLI")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Folder holding scheduler.json and preferences.json (overrides EZSCHEDULE_DATA_DIR)",
    )
    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="Command to run once (e.g. 'list'); omit to start the interactive session",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Runs one command or the interactive session,
    and exits via SystemExit with a return code.
    """
    args = build_parser().parse_args(argv)

    settings = Settings.from_env()
    if args.data_dir is not None:
        settings.data_dir = args.data_dir.expanduser()
    setup_logging(settings)

    logic = build_logic(settings)

    if not args.command:
        from ezschedule.interactive import run_interactive

        run_interactive(logic)
        raise SystemExit(0)

    code = _run_once(logic, " ".join(args.command))
    logic.shutdown()
    raise SystemExit(code)
