"""Whole-store commands: export-all and clear-data."""

from datetime import date
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.config import BACKUP_FILENAME_TEMPLATE
from ...io.catalog_store import ExerciseCatalog
from ...io.history_store import HistoryStore
from ...io.serializers import ValidationError, backup_to_json
from ...io.settings_store import SettingsStore
from ...utils.logging import get_logger
from .. import views
from ..app import DataDirOption, app, get_store

logger = get_logger(__name__)


@app.command("export-all")
def export_all(
    file: Annotated[
        Optional[Path],
        typer.Argument(help="Output file (default: office-drills-backup-<date>.json)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Back up settings, exercises and break history to one JSON file.
    """
    store = get_store(data_dir)
    try:
        text = backup_to_json(
            SettingsStore(store).load(),
            ExerciseCatalog(store).load(),
            HistoryStore(store).load_history(),
        )
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if file is None:
        file = Path(BACKUP_FILENAME_TEMPLATE.format(date=date.today().isoformat()))
    file.write_text(text + "\n", encoding="utf-8")
    views.print_success(f"Exported all data to {file}")


@app.command("clear-data")
def clear_data(
    data_dir: DataDirOption = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation"),
    ] = False,
) -> None:
    """
    Delete all history and restore default exercises and settings.
    """
    if not yes and not views.confirm_action(
        "This will delete ALL your data permanently. Are you sure?"
    ):
        views.print_info("Cancelled.")
        return

    store = get_store(data_dir)
    HistoryStore(store).clear_history()
    ExerciseCatalog(store).reset_to_defaults()
    SettingsStore(store).reset()
    logger.info("Cleared all data in %s", store.base_dir)
    views.print_success("All data cleared")
