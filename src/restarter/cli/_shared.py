"""Shared CLI utilities.

This module provides the exit codes and error output helpers used by the
command-line interface.
"""

from enum import IntEnum
from typing import TYPE_CHECKING, Never

if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "USAGE",
    "ExitCode",
    "exit_with_error",
    "get_error_console",
]

USAGE = (
    "Usage: restarter [--child-detach] [--log-level LEVEL] [--log-format FORMAT] "
    "<primary_cmd> <primary_args...> [--- <backup_cmd> <backup_args...>]"
)


class ExitCode(IntEnum):
    """Exit codes for the restarter CLI."""

    SUCCESS = 0
    USAGE_ERROR = 1
    STARTUP_ERROR = 1


def get_error_console() -> "Console":  # noqa: UP037
    """Get a Rich console configured for error output to stderr.

    Returns:
        Console instance writing to stderr.
    """
    from rich.console import Console

    return Console(stderr=True, highlight=False)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.USAGE_ERROR,
    *,
    console: "Console | None" = None,  # noqa: UP037
) -> Never:
    """Print an error message and exit with the specified code.

    Args:
        message: The error message to display.
        code: The exit code to use (defaults to USAGE_ERROR).
        console: Optional Rich console for output. If not provided,
            a new stderr console will be created.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    if console is None:
        console = get_error_console()

    console.print(message, markup=False)
    raise SystemExit(code)
