from __future__ import annotations

from datetime import date
from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ezschedule.errors import Failure
from ezschedule.logic import Logic
from ezschedule.model import DATE_FORMAT, TIME_FORMAT
from ezschedule.scheduler import EventListView


def _weekday_short(d: date) -> str:
    names = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    return names[d.weekday()]


def run_interactive(logic: Logic, console: Optional[Console] = None) -> None:
    """
    Read-execute-print loop. Stops on "exit", EOF or Ctrl-C and saves preferences.
    """
    console = console or Console()

    _print_header(console, logic)
    _print_events(console, logic.get_filtered_event_list())

    while True:
        try:
            text = console.input("\n[bold cyan]ezschedule>[/] ")
        except (EOFError, KeyboardInterrupt):
            console.print("\nBye.")
            break

        if not text.strip():
            continue

        result = logic.execute(text)

        if isinstance(result, Failure):
            console.print(f"[bold red]{escape(result.message)}[/]")
            continue

        console.print(escape(result.feedback_to_user))

        if result.exit:
            break
        if not result.show_help:
            _print_events(console, logic.get_filtered_event_list())

    logic.shutdown()


def _print_header(console: Console, logic: Logic) -> None:
    console.print("\n=== EzSchedule (interactive) ===")
    console.print(f"Data: {escape(str(logic.get_scheduler_file_path()))} | events={len(logic.get_scheduler())}")
    console.print("Type 'help' for the list of commands, 'exit' to quit.")


def _print_events(console: Console, events: EventListView) -> None:
    if not events:
        console.print("No events.")
        return

    table = Table(box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Date")
    table.add_column("Time")
    table.add_column("Status")

    for i, ev in enumerate(events, start=1):
        status = ev.get_completed_status()
        table.add_row(
            str(i),
            f"[bold]{escape(ev.name)}[/]",
            f"{ev.date.strftime(DATE_FORMAT)} ({_weekday_short(ev.date)})",
            f"{ev.start_time.strftime(TIME_FORMAT)}-{ev.end_time.strftime(TIME_FORMAT)}",
            f"[green]{status}[/]" if status else "",
        )

    console.print(table)
