"""Catalog commands: list, add, edit, delete, import, export and reset exercises."""

from dataclasses import replace
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.config import DEFAULT_EXERCISE_DURATION, DEFAULT_NEW_EXERCISE_CATEGORY
from ...core.models import ALL_CATEGORIES, CATEGORIES, is_category
from ...io.serializers import CatalogImportError, ValidationError
from .. import views
from ..app import DataDirOption, app, get_catalog


def _load_exercises(catalog):
    try:
        return catalog.load()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


@app.command("list-exercises")
def list_exercises(
    data_dir: DataDirOption = None,
    category: Annotated[
        Optional[str],
        typer.Option("--category", "-c", help="Only show this category"),
    ] = None,
    search: Annotated[
        Optional[str],
        typer.Option("--search", "-s", help="Case-insensitive match on name or description"),
    ] = None,
) -> None:
    """
    List the exercise catalog.
    """
    if category is not None and category != ALL_CATEGORIES and not is_category(category):
        views.print_error(f"Unknown category: {category}. Valid: {', '.join(CATEGORIES)}")
        raise typer.Exit(1)

    exercises = _load_exercises(get_catalog(data_dir))
    if category not in (None, ALL_CATEGORIES):
        exercises = [e for e in exercises if e.category == category]
    if search:
        needle = search.lower()
        exercises = [
            e for e in exercises
            if needle in e.name.lower() or needle in e.description.lower()
        ]
    views.print_exercises(exercises)


@app.command("add-exercise")
def add_exercise(
    name: Annotated[str, typer.Option("--name", "-n", help="Exercise name")],
    data_dir: DataDirOption = None,
    category: Annotated[
        str,
        typer.Option("--category", "-c", help=f"One of: {', '.join(CATEGORIES)}"),
    ] = DEFAULT_NEW_EXERCISE_CATEGORY,
    duration: Annotated[
        int,
        typer.Option("--duration", "-d", help="Duration in seconds"),
    ] = DEFAULT_EXERCISE_DURATION,
    description: Annotated[
        str,
        typer.Option("--description", help="Short description"),
    ] = "",
    instruction: Annotated[
        Optional[list[str]],
        typer.Option("--instruction", "-i", help="Instruction step (repeat for more steps)"),
    ] = None,
) -> None:
    """
    Add a new exercise to the catalog.
    """
    if not name.strip():
        views.print_error("Name must not be empty")
        raise typer.Exit(1)
    if not is_category(category):
        views.print_error(f"Unknown category: {category}. Valid: {', '.join(CATEGORIES)}")
        raise typer.Exit(1)
    if duration <= 0:
        views.print_error("Duration must be positive")
        raise typer.Exit(1)

    catalog = get_catalog(data_dir)
    _load_exercises(catalog)
    exercise = catalog.create(
        name=name.strip(),
        category=category,
        duration=duration,
        description=description,
        instructions=instruction or [],
    )
    views.print_success(f"Added {exercise.name} ({exercise.category}, {exercise.duration}s) as {exercise.id}")


@app.command("edit-exercise")
def edit_exercise(
    exercise_id: Annotated[str, typer.Argument(help="ID of the exercise to edit")],
    data_dir: DataDirOption = None,
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="New name"),
    ] = None,
    category: Annotated[
        Optional[str],
        typer.Option("--category", "-c", help=f"One of: {', '.join(CATEGORIES)}"),
    ] = None,
    duration: Annotated[
        Optional[int],
        typer.Option("--duration", "-d", help="Duration in seconds"),
    ] = None,
    description: Annotated[
        Optional[str],
        typer.Option("--description", help="Short description"),
    ] = None,
    instruction: Annotated[
        Optional[list[str]],
        typer.Option("--instruction", "-i", help="Replace the steps (repeat for more steps)"),
    ] = None,
) -> None:
    """
    Edit an exercise in place. Only the given fields change; the id is kept.
    """
    changes: dict = {}
    if name is not None:
        if not name.strip():
            views.print_error("Name must not be empty")
            raise typer.Exit(1)
        changes["name"] = name.strip()
    if category is not None:
        if not is_category(category):
            views.print_error(f"Unknown category: {category}. Valid: {', '.join(CATEGORIES)}")
            raise typer.Exit(1)
        changes["category"] = category
    if duration is not None:
        if duration <= 0:
            views.print_error("Duration must be positive")
            raise typer.Exit(1)
        changes["duration"] = duration
    if description is not None:
        changes["description"] = description
    if instruction:
        changes["instructions"] = list(instruction)

    catalog = get_catalog(data_dir)
    _load_exercises(catalog)
    try:
        exercise = catalog.get(exercise_id)
    except KeyError:
        views.print_error(f"No exercise with id {exercise_id}")
        raise typer.Exit(1)

    if not changes:
        views.print_info("Nothing to change.")
        return

    updated = replace(exercise, **changes)
    catalog.update(updated)
    views.print_success(f"Updated {updated.name} ({updated.category}, {updated.duration}s)")


@app.command("delete-exercise")
def delete_exercise(
    exercise_id: Annotated[str, typer.Argument(help="ID of the exercise to delete")],
    data_dir: DataDirOption = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation"),
    ] = False,
) -> None:
    """
    Delete an exercise from the catalog.
    """
    catalog = get_catalog(data_dir)
    _load_exercises(catalog)
    try:
        exercise = catalog.get(exercise_id)
    except KeyError:
        views.print_error(f"No exercise with id {exercise_id}")
        raise typer.Exit(1)

    if not yes and not views.confirm_action(f"Delete {exercise.name}?"):
        views.print_info("Cancelled.")
        return

    catalog.delete(exercise_id)
    views.print_success(f"Deleted {exercise.name}")


@app.command("import-exercises")
def import_exercises(
    file: Annotated[Path, typer.Argument(help="JSON file with an array of exercises")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Import exercises from a JSON file (each import adds new copies).
    """
    if not file.exists():
        views.print_error(f"File not found: {file}")
        raise typer.Exit(1)

    catalog = get_catalog(data_dir)
    _load_exercises(catalog)
    try:
        summary = catalog.import_file(file)
    except CatalogImportError as e:
        views.print_error(f"Import failed: {e}")
        raise typer.Exit(1)

    views.print_success(f"Imported {summary.accepted} exercises")
    if summary.rejected:
        views.print_warning(f"Skipped {summary.rejected} records without a name or valid category")


@app.command("export-exercises")
def export_exercises(
    file: Annotated[
        Optional[Path],
        typer.Argument(help="Output file (default: print to stdout)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Export the catalog as pretty-printed JSON.
    """
    catalog = get_catalog(data_dir)
    _load_exercises(catalog)
    text = catalog.export_json()
    if file is None:
        print(text)
        return
    file.write_text(text + "\n", encoding="utf-8")
    views.print_success(f"Exported exercises to {file}")


@app.command("reset-exercises")
def reset_exercises(
    data_dir: DataDirOption = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation"),
    ] = False,
) -> None:
    """
    Restore the default catalog and clear the exercise cooldown.
    """
    if not yes and not views.confirm_action(
        "This will reset all exercises to defaults. Are you sure?"
    ):
        views.print_info("Cancelled.")
        return

    get_catalog(data_dir).reset_to_defaults()
    views.print_success("Exercises reset to defaults")
