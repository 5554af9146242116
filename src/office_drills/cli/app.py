"""Shared Typer app object, shared option types, and store utilities."""

import random
from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.config import get_default_data_dir
from ..core.engine import BreakEngine
from ..core.scheduler import RealtimeScheduler, Scheduler
from ..io.catalog_store import ExerciseCatalog
from ..io.history_store import HistoryStore
from ..io.notifier import ConsoleNotifier, Notifier
from ..io.settings_store import SettingsStore
from ..io.store import JsonDirectoryStore
from . import views

# Shared --data-dir option type used across all commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option(
        "--data-dir",
        "-D",
        help="Directory holding catalog, settings and history (default: ~/.office-drills)",
    ),
]

app = typer.Typer(
    name="office-drills",
    help="Micro-break reminder that walks you through short desk exercises.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def get_store(data_dir: Path | None) -> JsonDirectoryStore:
    """Get the JSON store for the given directory or the default location."""
    if data_dir is None:
        data_dir = get_default_data_dir()
    return JsonDirectoryStore(data_dir)


def get_catalog(data_dir: Path | None) -> ExerciseCatalog:
    return ExerciseCatalog(get_store(data_dir))


def get_history(data_dir: Path | None) -> HistoryStore:
    return HistoryStore(get_store(data_dir))


def get_settings_store(data_dir: Path | None) -> SettingsStore:
    return SettingsStore(get_store(data_dir))


def get_engine(
    data_dir: Path | None,
    scheduler: Scheduler | None = None,
    notifier: Notifier | None = None,
    seed: int | None = None,
) -> BreakEngine:
    """Build a BreakEngine over the on-disk stores."""
    store = get_store(data_dir)
    settings_store = SettingsStore(store)
    if notifier is None:
        notifier = ConsoleNotifier(views.console, sound=settings_store.load().sound_enabled)
    return BreakEngine(
        settings_store=settings_store,
        catalog=ExerciseCatalog(store),
        history=HistoryStore(store),
        notifier=notifier,
        scheduler=scheduler or RealtimeScheduler(),
        rng=random.Random(seed) if seed is not None else None,
    )
