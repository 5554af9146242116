"""
Notification port.

``fire(title, body)`` is fire-and-forget: no delivery guarantee and no
callback. ConsoleNotifier prints to the terminal and rings the bell when
sound is on.
"""

from typing import Protocol

from rich.console import Console
from rich.panel import Panel


class Notifier(Protocol):
    def fire(self, title: str, body: str) -> None: ...


class NullNotifier:
    """Discards every notification."""

    def fire(self, title: str, body: str) -> None:
        return None


class ConsoleNotifier:
    """
    Shows notifications as a Rich panel.

    Args:
        console: Target console
        sound: Ring the terminal bell with each notification
    """

    def __init__(self, console: Console, sound: bool = True):
        self.console = console
        self.sound = sound

    def fire(self, title: str, body: str) -> None:
        self.console.print(Panel(body, title=f"[bold]{title}[/bold]", border_style="green"))
        if self.sound:
            self.console.bell()
