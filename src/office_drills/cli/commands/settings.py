"""Settings commands: show-settings, set-settings."""

import json
from dataclasses import replace
from typing import Annotated, Optional

import typer

from ...core.models import ALL_CATEGORIES, CATEGORIES, is_category_filter
from ...io.serializers import settings_to_dict
from .. import views
from ..app import DataDirOption, app, get_settings_store


@app.command("show-settings")
def show_settings(
    data_dir: DataDirOption = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
) -> None:
    """
    Show current settings.
    """
    settings = get_settings_store(data_dir).load()
    if json_out:
        print(json.dumps(settings_to_dict(settings), indent=2))
        return
    views.console.print(views.format_settings_display(settings))


@app.command("set-settings")
def set_settings(
    data_dir: DataDirOption = None,
    interval: Annotated[
        Optional[int],
        typer.Option("--interval", "-i", help="Minutes between breaks"),
    ] = None,
    category: Annotated[
        Optional[str],
        typer.Option("--category", "-c", help=f"{ALL_CATEGORIES} or one of: {', '.join(CATEGORIES)}"),
    ] = None,
    cooldown: Annotated[
        Optional[int],
        typer.Option("--cooldown", help="Recent exercises to avoid repeating (0 = off)"),
    ] = None,
    auto_start: Annotated[
        Optional[bool],
        typer.Option("--auto-start/--no-auto-start", help="Restart the timer after each break"),
    ] = None,
    notifications: Annotated[
        Optional[bool],
        typer.Option("--notifications/--no-notifications", help="Notify when a break is due"),
    ] = None,
    sound: Annotated[
        Optional[bool],
        typer.Option("--sound/--no-sound", help="Ring the bell with notifications"),
    ] = None,
    volume: Annotated[
        Optional[float],
        typer.Option("--volume", help="Sound volume between 0 and 1"),
    ] = None,
    reset: Annotated[
        bool,
        typer.Option("--reset", help="Restore default settings"),
    ] = False,
) -> None:
    """
    Change settings. Only the given options are updated.
    """
    store = get_settings_store(data_dir)

    if reset:
        settings = store.reset()
        views.print_success("Settings reset to defaults")
        views.console.print(views.format_settings_display(settings))
        return

    if category is not None and not is_category_filter(category):
        views.print_error(
            f"Unknown category: {category}. Valid: {ALL_CATEGORIES}, {', '.join(CATEGORIES)}"
        )
        raise typer.Exit(1)

    changes = {
        "interval": interval,
        "selected_category": category,
        "cooldown_exercises": cooldown,
        "auto_start": auto_start,
        "notifications_enabled": notifications,
        "sound_enabled": sound,
        "sound_volume": volume,
    }
    changes = {k: v for k, v in changes.items() if v is not None}
    if not changes:
        views.print_info("Nothing to change. See --help for options.")
        return

    try:
        settings = replace(store.load(), **changes)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store.save(settings)
    views.print_success("Settings saved")
    views.console.print(views.format_settings_display(settings))
