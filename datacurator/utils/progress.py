"""
Console output and verbosity utilities for DataCurator.

Library code reports through these helpers instead of printing directly,
so the CLI can switch between quiet, normal and verbose output.
"""

from __future__ import annotations

from contextlib import contextmanager
from enum import IntEnum
from typing import Any, Callable, Generator

from rich.console import Console
from rich.status import Status


class VerbosityLevel(IntEnum):
    """Verbosity levels for console output."""

    QUIET = 0      # Minimal output (errors only)
    NORMAL = 1     # Standard output (default)
    VERBOSE = 2    # Detailed output (debug info)


# Global verbosity setting
_verbosity: VerbosityLevel = VerbosityLevel.NORMAL
_console: Console | None = None


def get_console() -> Console:
    """Get the global Rich console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_verbosity(level: VerbosityLevel) -> None:
    """Set the global verbosity level."""
    global _verbosity
    _verbosity = level


def get_verbosity() -> VerbosityLevel:
    """Get the current verbosity level."""
    return _verbosity


def is_quiet() -> bool:
    return _verbosity == VerbosityLevel.QUIET


def is_verbose() -> bool:
    return _verbosity == VerbosityLevel.VERBOSE


def print_info(message: str, **kwargs: Any) -> None:
    """Print info message (hidden in quiet mode)."""
    if _verbosity >= VerbosityLevel.NORMAL:
        get_console().print(message, **kwargs)


def print_success(message: str, **kwargs: Any) -> None:
    """Print success message (hidden in quiet mode)."""
    if _verbosity >= VerbosityLevel.NORMAL:
        get_console().print(f"[green]✓[/green] {message}", **kwargs)


def print_warning(message: str, **kwargs: Any) -> None:
    """Print warning message (always shown)."""
    get_console().print(f"[yellow]⚠[/yellow] {message}", **kwargs)


def print_error(message: str, **kwargs: Any) -> None:
    """Print error message (always shown)."""
    get_console().print(f"[red]✗[/red] {message}", **kwargs)


def print_debug(message: str, **kwargs: Any) -> None:
    """Print debug message (only in verbose mode)."""
    if _verbosity >= VerbosityLevel.VERBOSE:
        get_console().print(f"[dim]{message}[/dim]", **kwargs)


@contextmanager
def spinner(description: str) -> Generator[Callable[[str], None], None, None]:
    """
    Display a spinner for indeterminate operations.

    Args:
        description: Initial description

    Yields:
        Function to update the spinner description
    """
    if is_quiet():
        yield lambda x: None
        return

    with Status(description, console=get_console()) as status:
        yield status.update
