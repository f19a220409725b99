"""Terminal-safe Console wrapper for Rich library.

Wraps Rich's Console to sanitize Unicode icons on terminals that don't
support UTF-8, and adds the error/warning helpers used by the CLI.
"""
from rich.console import Console
from rich.markup import escape
from typing import Any
from .logger import sanitize_for_terminal, is_utf8_capable


class SafeConsole(Console):
    """Console that sanitizes Unicode output for non-UTF-8 terminals.

    All constructor arguments are passed through to Rich's Console.
    """

    def __init__(self, *args, **kwargs):
        self._needs_sanitization = not is_utf8_capable()

        if self._needs_sanitization:
            kwargs['legacy_windows'] = True

        super().__init__(*args, **kwargs)

    def print(self, *objects: Any, **kwargs) -> None:
        """Print with automatic Unicode sanitization.

        Args:
            *objects: Objects to print (same as Rich Console.print)
            **kwargs: Keyword arguments (same as Rich Console.print)
        """
        if self._needs_sanitization:
            objects = tuple(
                sanitize_for_terminal(obj) if isinstance(obj, str) else obj
                for obj in objects
            )
        super().print(*objects, **kwargs)

    def error(self, message: str) -> None:
        """Print an error line. The message is escaped, not parsed as markup."""
        self.print(f"[bold red]Error:[/bold red] {escape(message)}")

    def warn(self, message: str) -> None:
        """Print a warning line. The message is escaped, not parsed as markup."""
        self.print(f"[bold yellow]⚠ Warning:[/bold yellow] {escape(message)}")
