"""Rich formatting helpers for the lgtm-ci CLI.

Status lines go to stderr; stdout is reserved for ``key=value`` outputs.
Rich auto-detects TTY and degrades gracefully when piped (no ANSI codes).
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape


def get_console() -> Console:
    """Create a Rich Console on stderr."""
    return Console(stderr=True, soft_wrap=True)


def _status(label: str, style: str, message: str, console: Console) -> None:
    console.print(f"[{style}]{escape(label)}[/{style}] {escape(message)}")


def format_info(message: str, console: Console) -> None:
    _status("[INFO]", "blue", message, console)


def format_success(message: str, console: Console) -> None:
    _status("[SUCCESS]", "green", message, console)


def format_warning(message: str, console: Console) -> None:
    _status("[WARN]", "yellow", message, console)


def format_error(message: str, console: Console) -> None:
    """Print a single ``[ERROR]`` line. Line breaks in ``message`` are folded."""
    _status("[ERROR]", "bold red", " ".join(message.splitlines()), console)
