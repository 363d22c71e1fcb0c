"""Shared utility functions for skelgen.

Provides Rich-based progress reporting (phase headers, status lines and
summary tables) plus small formatting helpers.  Every module prints through
the single ``console`` defined here so that output can be silenced or
captured in one place.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

console = Console()


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(0.04)   -> "0.0s"
        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0.0s"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


def pluralize(count: int, noun: str) -> str:
    """Return ``"1 file"`` / ``"3 files"`` style phrases."""
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


PHASE_NAMES: dict[int, str] = {
    1: "RESOLVE",
    2: "VALIDATE",
    3: "COPY",
    4: "SUBSTITUTE",
    5: "MANIFEST",
    6: "DONE",
}

PHASE_COLORS: dict[int, str] = {
    1: "bright_cyan",
    2: "bright_yellow",
    3: "bright_green",
    4: "bright_magenta",
    5: "bright_blue",
    6: "bright_green",
}


def set_quiet(quiet: bool) -> None:
    """Silence (or re-enable) all non-error console output."""
    console.quiet = quiet


def print_phase_header(phase: int, name: str) -> None:
    """Print a phase header using Rich.

    Renders a full-width rule with the phase number and name, coloured
    according to the phase.

    Args:
        phase: Phase number (1-6).
        name: Phase display name.
    """
    color = PHASE_COLORS.get(phase, "white")
    console.print(
        Rule(
            f"[bold {color}] {phase}. {name.upper()} [/bold {color}]",
            style=color,
        )
    )


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
        table.add_row(key, escape(str(value)))

    console.print(table)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message, even when the console is quiet."""
    was_quiet = console.quiet
    console.quiet = False
    try:
        console.print(f"[bold red]{escape(message)}[/bold red]")
    finally:
        console.quiet = was_quiet


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
