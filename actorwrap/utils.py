"""Shared utility functions for actorwrap.

Provides name sanitisation, duration formatting and the Rich-based console
helpers used by the CLI.  The merge engine itself never prints; only the
command layer calls the ``print_*`` helpers.
"""

from __future__ import annotations

import re

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()

ACTOR_NAME_MIN_LENGTH = 3
ACTOR_NAME_MAX_LENGTH = 63


# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def sanitize_actor_name(name: str) -> str:
    """Convert an arbitrary bot name to a valid actor name.

    * Lowercases the input.
    * Replaces every character other than ``a-z``, ``0-9`` and ``-`` with a
      hyphen (underscores included).
    * Collapses consecutive hyphens and strips leading/trailing hyphens.
    * Pads names shorter than 3 characters and truncates at 63.

    Examples::

        sanitize_actor_name("books_scraper") -> "books-scraper"
        sanitize_actor_name("  My Bot!  ") -> "my-bot"
        sanitize_actor_name("x") -> "x-apify-actor"
    """
    result = re.sub(r"[^a-z0-9-]", "-", name.strip().lower())
    result = re.sub(r"-+", "-", result).strip("-")
    if len(result) < ACTOR_NAME_MIN_LENGTH:
        result = f"{result}-apify-actor".lstrip("-")
    return result[:ACTOR_NAME_MAX_LENGTH].rstrip("-")


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
        format_duration(3661.0) -> "1h 1m 1s"
    """
    if seconds < 0:
        return "0.0s"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = seconds % 60

    parts: list[str] = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")

    if hours > 0 or minutes > 0:
        parts.append(f"{int(secs)}s")
    else:
        parts.append(f"{secs:.1f}s")

    return " ".join(parts)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(escape(key), escape(str(value)))

    console.print(table)
    console.print()


def print_info(message: str) -> None:
    """Print a plain informational message."""
    console.print(escape(message))


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
