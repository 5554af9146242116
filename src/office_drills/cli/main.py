"""
CLI entry point using Typer.

Provides commands for micro-break reminders:
- start: Run the break timer and walk through exercises
- break-now: Take a break immediately
- preview: Show which exercises the next break would offer
- list-exercises / add-exercise / edit-exercise / delete-exercise: Manage the catalog
- import-exercises / export-exercises / reset-exercises: Catalog files
- show-history / delete-record / export-history / stats: Break history
- show-settings / set-settings: Preferences
- export-all / clear-data: Back up or wipe everything
"""

from typing import Annotated

import typer

from ..utils.logging import set_verbosity
from . import views
from .app import app, get_history
from .commands import breaks, data, exercises, history, settings  # noqa: F401 (registers commands)
from .commands.breaks import break_now, preview, start
from .commands.data import clear_data, export_all
from .commands.exercises import list_exercises
from .commands.history import show_history, stats
from .commands.settings import show_settings


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """
    Micro-break reminder. Run without a command for interactive mode.
    """
    set_verbosity(verbose)
    if ctx.invoked_subcommand is not None:
        return

    views.console.print()
    views.console.print("[bold cyan]office-drills[/bold cyan] micro-break reminder")
    views.console.print()

    menu = {
        "1": ("start",          "Start break timer"),
        "2": ("break-now",      "Take a break now"),
        "3": ("preview",        "Preview next break"),
        "4": ("list-exercises", "List exercises"),
        "5": ("show-history",   "Show break history"),
        "6": ("stats",          "Statistics"),
        "s": ("show-settings",  "Show settings"),
        "d": ("delete-record",  "Delete a break by #"),
        "e": ("export-all",     "Export all data"),
        "x": ("clear-data",     "Clear all data"),
        "0": ("quit",           "Quit"),
    }

    for key, (_, desc) in menu.items():
        views.console.print(f"  \\[{key}] {desc}")

    views.console.print()
    choice = views.console.input("Choose \\[1]: ").strip() or "1"

    if choice == "0":
        raise typer.Exit(0)

    chosen = {k: v[0] for k, v in menu.items()}.get(choice)
    if chosen is None:
        views.print_error(f"Unknown choice: {choice}")
        raise typer.Exit(1)

    if chosen == "start":
        ctx.invoke(start)
    elif chosen == "break-now":
        ctx.invoke(break_now)
    elif chosen == "preview":
        ctx.invoke(preview)
    elif chosen == "list-exercises":
        ctx.invoke(list_exercises)
    elif chosen == "show-history":
        ctx.invoke(show_history)
    elif chosen == "stats":
        ctx.invoke(stats)
    elif chosen == "show-settings":
        ctx.invoke(show_settings)
    elif chosen == "delete-record":
        _menu_delete_record()
    elif chosen == "export-all":
        ctx.invoke(export_all)
    elif chosen == "clear-data":
        ctx.invoke(clear_data)


def _menu_delete_record() -> None:
    """Interactive delete helper called from the main menu."""
    store = get_history(None)
    sessions = history._load_sessions(store)

    if not sessions:
        views.print_info("No breaks to delete.")
        return

    views.print_history(sessions)

    while True:
        raw = views.console.input("Delete break # (Enter to cancel): ").strip()
        if not raw:
            views.print_info("Cancelled.")
            return
        try:
            record_id = int(raw)
        except ValueError:
            views.print_error("Enter a number")
            continue
        if record_id < 1 or record_id > len(sessions):
            views.print_error(f"Enter a number between 1 and {len(sessions)}")
            continue
        break

    target = sessions[record_id - 1]
    if not views.confirm_action(f"Delete break on {target.date}?"):
        views.print_info("Cancelled.")
        return

    store.delete_session_at(record_id - 1)
    views.print_success(f"Deleted break #{record_id}: {target.date}")


if __name__ == "__main__":
    app()
