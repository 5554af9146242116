"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of exercises, timer state and history.
"""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core.metrics import HistoryStats
from ..core.models import BreakSession, Exercise, ExerciseOutcome, Settings, TimerState

console = Console()

_STATUS_STYLES = {
    "Completed": "green",
    "Skipped": "yellow",
    "Incomplete": "dim",
}

_PHASE_LABELS = {
    "idle": "[dim]Stopped[/dim]",
    "running": "[green]Running[/green]",
    "paused": "[yellow]Paused[/yellow]",
    "expired": "[bold magenta]Break due[/bold magenta]",
}


def format_clock(seconds: int) -> str:
    """Format seconds as M:SS, or H:MM:SS from one hour up."""
    hours, rest = divmod(max(seconds, 0), 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_timer_status(state: TimerState) -> str:
    """One-line timer status for spinners and prompts."""
    line = f"{_PHASE_LABELS[state.phase]}  {format_clock(state.time_remaining)} until next break"
    if state.next_break_time is not None:
        line += f"  (at {state.next_break_time.strftime('%H:%M:%S')})"
    return line


def format_exercise_table(exercises: list[Exercise], title: str = "Exercises") -> Table:
    """
    Create a Rich table listing exercises.

    Args:
        exercises: Exercises to display
        title: Table title

    Returns:
        Rich Table object
    """
    table = Table(title=f"{title} ({len(exercises)})")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Category", style="magenta")
    table.add_column("Duration", justify="right")
    table.add_column("Description")

    for i, exercise in enumerate(exercises, 1):
        table.add_row(
            str(i),
            exercise.id,
            exercise.name,
            exercise.category,
            f"{exercise.duration}s",
            exercise.description,
        )

    return table


def print_exercises(exercises: list[Exercise], title: str = "Exercises") -> None:
    if not exercises:
        console.print("[yellow]No exercises found.[/yellow]")
        return
    console.print(format_exercise_table(exercises, title))


def print_exercise_card(exercise: Exercise, position: int, total: int) -> None:
    """
    Show one exercise of a break with its numbered instructions.

    Args:
        exercise: Exercise to show
        position: 0-based position in the break
        total: Number of exercises in the break
    """
    lines = [f"[dim]{exercise.category}[/dim]", "", exercise.description, ""]
    if exercise.instructions:
        lines.append("[bold]Instructions:[/bold]")
        lines.extend(f"  {n}. {step}" for n, step in enumerate(exercise.instructions, 1))
    lines.append("")
    lines.append(f"Duration: {format_clock(exercise.duration)}")

    console.print()
    console.print(
        Panel(
            "\n".join(lines),
            title=f"Exercise {position + 1} of {total}: [bold]{exercise.name}[/bold]",
            border_style="cyan",
        )
    )


def _fmt_outcome(outcome: ExerciseOutcome) -> str:
    style = _STATUS_STYLES[outcome.status]
    return f"[{style}]{outcome.exercise_name} ({outcome.status})[/{style}]"


def format_session_table(sessions: list[BreakSession]) -> Table:
    """
    Create a Rich table displaying session history.

    Args:
        sessions: List of sessions to display (newest first)

    Returns:
        Rich Table object
    """
    table = Table(title="Break History")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("Time")
    table.add_column("Category", style="magenta")
    table.add_column("Exercises")
    table.add_column("Done", justify="right", style="bold")
    table.add_column("Duration", justify="right")

    for i, session in enumerate(sessions, 1):
        table.add_row(
            str(i),
            session.date,
            session.timestamp.strftime("%H:%M"),
            session.category,
            ", ".join(_fmt_outcome(e) for e in session.exercises) or "-",
            f"{session.completed_count}/{len(session.exercises)}",
            format_clock(session.total_duration),
        )

    return table


def print_history(sessions: list[BreakSession]) -> None:
    """
    Print session history to console.

    Args:
        sessions: Sessions to display
    """
    if not sessions:
        console.print("[yellow]No sessions recorded yet.[/yellow]")
        return

    console.print(format_session_table(sessions))


def print_session_summary(session: BreakSession) -> None:
    console.print()
    console.print(
        f"[bold green]Break completed![/bold green] "
        f"Completed {session.completed_count} of {len(session.exercises)} exercises "
        f"({format_clock(session.total_duration)})."
    )


def format_stats_table(stats: dict[str, HistoryStats]) -> Table:
    """Side-by-side stats for each period returned by stats_by_period."""
    labels = {"today": "Today", "week": "Last 7 days", "month": "Last 30 days", "all": "All time"}
    table = Table(title="Break Stats")
    table.add_column("Period", style="cyan")
    table.add_column("Sessions", justify="right")
    table.add_column("Exercises done", justify="right")
    table.add_column("Minutes", justify="right")
    table.add_column("Completion", justify="right", style="bold")

    for key, s in stats.items():
        table.add_row(
            labels.get(key, key),
            str(s.total_sessions),
            f"{s.completed_exercises}/{s.total_exercises}",
            str(s.total_duration_minutes),
            f"{s.completion_rate}%",
        )
    return table


def format_settings_display(settings: Settings) -> str:
    """
    Format settings as text block.

    Args:
        settings: Settings to display

    Returns:
        Formatted string
    """
    lines = [
        "Settings",
        f"- Break interval:   {settings.interval} min",
        f"- Category:         {settings.selected_category}",
        f"- Cooldown:         {settings.cooldown_exercises} exercises",
        f"- Auto-start:       {'yes' if settings.auto_start else 'no'}",
        f"- Notifications:    {'on' if settings.notifications_enabled else 'off'}",
        f"- Sound:            {'on' if settings.sound_enabled else 'off'}"
        f" (volume {settings.sound_volume:.0%})",
    ]
    return "\n".join(lines)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} \\[y/N]: ")
    return response.lower() in ("y", "yes")
