"""Shared utility functions for the example harness.

Provides the Rich console every module prints through, coloured message
helpers, duration formatting and random identifier generation.
"""

from __future__ import annotations

import random

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule

console = Console(highlight=False, soft_wrap=True)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_header(title: str, value: str) -> None:
    """Print a bold white *title* followed by a blue *value*."""
    console.print(f"[bold bright_white]{escape(title)}[/bold bright_white] [blue]{escape(value)}[/blue]")


def print_field(label: str, value: object) -> None:
    """Print a ``label: value`` line with the value highlighted in blue."""
    console.print(f"{escape(label)}: [blue]{escape(str(value))}[/blue]")


def print_rule(title: str = "") -> None:
    """Print a full-width separator rule."""
    console.print()
    console.print(Rule(title, style="bright_white"))


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bright_green]{escape(message)}[/bright_green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bright_red]{escape(message)}[/bright_red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")


def print_info(message: str) -> None:
    """Print an informational instruction line."""
    console.print(f"> [magenta]{escape(message)}[/magenta]")


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
# Identifier helpers
# ---------------------------------------------------------------------------


def random_identifier(
    length: int,
    alphabet: str,
    rng: random.Random | None = None,
) -> str:
    """Return *length* characters drawn uniformly from *alphabet*.

    Only meant to avoid collisions within a single run, not as a secure token.

    Examples::

        random_identifier(10, "abcdefgh") -> "cahhbgdeaf"
    """
    if length < 1:
        raise ValueError("length must be >= 1")
    if not alphabet:
        raise ValueError("alphabet must not be empty")
    chooser = rng or random
    return "".join(chooser.choice(alphabet) for _ in range(length))
