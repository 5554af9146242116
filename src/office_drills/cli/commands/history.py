"""History commands: show-history, delete-record, export-history, stats."""

import json
from dataclasses import asdict
from datetime import date
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.metrics import stats_by_period
from ...io.serializers import ValidationError
from .. import views
from ..app import DataDirOption, app, get_history


def _load_sessions(history):
    try:
        return history.load_history()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


@app.command("show-history")
def show_history(
    data_dir: DataDirOption = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-l", help="Show only the N most recent sessions"),
    ] = None,
) -> None:
    """
    Display recorded breaks, newest first.
    """
    sessions = _load_sessions(get_history(data_dir))
    if limit is not None:
        sessions = sessions[: max(limit, 0)]
    views.print_history(sessions)


@app.command("delete-record")
def delete_record(
    record_id: Annotated[int, typer.Argument(help="Session # as shown by show-history")],
    data_dir: DataDirOption = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation"),
    ] = False,
) -> None:
    """
    Delete a recorded break by its number in show-history.
    """
    history = get_history(data_dir)
    sessions = _load_sessions(history)
    if record_id < 1 or record_id > len(sessions):
        views.print_error(f"Enter a number between 1 and {len(sessions)}")
        raise typer.Exit(1)

    target = sessions[record_id - 1]
    if not yes and not views.confirm_action(
        f"Delete break on {target.date} {target.timestamp.strftime('%H:%M')}?"
    ):
        views.print_info("Cancelled.")
        return

    history.delete_session_at(record_id - 1)
    views.print_success(f"Deleted session #{record_id}: {target.date}")


@app.command("export-history")
def export_history(
    file: Annotated[
        Optional[Path],
        typer.Argument(help="Output CSV file (default: print to stdout)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Export history as CSV, one row per exercise.
    """
    history = get_history(data_dir)
    _load_sessions(history)
    text = history.export_csv()
    if file is None:
        print(text, end="")
        return
    file.write_text(text, encoding="utf-8")
    views.print_success(f"Exported history to {file}")


@app.command()
def stats(
    data_dir: DataDirOption = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
) -> None:
    """
    Show break counts and completion rates for today, week, month and all time.
    """
    sessions = _load_sessions(get_history(data_dir))
    by_period = stats_by_period(sessions, date.today())

    if json_out:
        print(json.dumps({k: asdict(v) for k, v in by_period.items()}, indent=2))
        return

    views.console.print(views.format_stats_table(by_period))
