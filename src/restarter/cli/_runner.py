"""Async runner for the restarter CLI.

This module wires the supervisor together from parsed command-line
options and runs it under anyio.
"""

from typing import TYPE_CHECKING

import anyio

from restarter.supervisor import LogEventSink, Supervisor, SupervisorConfig

if TYPE_CHECKING:
    from collections.abc import Sequence

    from structlog.typing import FilteringBoundLogger

    from restarter.supervisor import CommandSpec


END_OF_OPTIONS = "--"
COMMAND_SEPARATOR = "---"

# Options that consume the following token as their value.
VALUE_OPTIONS = frozenset({"--log-level", "--log-format"})


def separate_options(
    argv: "Sequence[str]",  # noqa: UP037
) -> tuple[list[str], list[str]]:
    """Separate restarter's own options from the supervised command line.

    Options are read only up to the first token that does not start with a
    hyphen, or up to a ``--`` which is dropped. Every token from the command
    on, including hyphenated arguments and later ``--`` tokens, belongs to
    the command and is returned unchanged.

    Args:
        argv: Raw command-line arguments, without the program name.

    Returns:
        The option tokens and the command tokens.
    """
    tokens = list(argv)
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token == END_OF_OPTIONS:
            return tokens[:index], tokens[index + 1 :]
        if not token.startswith("-") or token == COMMAND_SEPARATOR:
            break
        index += 2 if token in VALUE_OPTIONS else 1
    return tokens[:index], tokens[index:]


def as_cli_tokens(argv: "Sequence[str]") -> list[str]:  # noqa: UP037
    """Return ``argv`` with an end-of-options marker before the command.

    Args:
        argv: Raw command-line arguments, without the program name.

    Returns:
        Tokens for the cyclopts app that never expose the command's
        arguments to option parsing.
    """
    options, command = separate_options(argv)
    return [*options, END_OF_OPTIONS, *command]


def split_commands(
    tokens: "tuple[str, ...] | list[str]",  # noqa: UP037
    separator: str = COMMAND_SEPARATOR,
) -> "tuple[CommandSpec, CommandSpec | None]":  # noqa: UP037
    """Split positional tokens into primary and backup commands.

    Only the first separator splits. A separator with nothing after it is
    treated as absent and dropped.

    Args:
        tokens: Positional command-line tokens.
        separator: Token separating the primary from the backup command.

    Returns:
        The primary command and the backup command, or None.
    """
    tokens = tuple(tokens)
    if separator not in tokens:
        return tokens, None
    index = tokens.index(separator)
    if index == len(tokens) - 1:
        return tokens[:index], None
    return tokens[:index], tokens[index + 1 :]


def build_supervisor(
    primary: "CommandSpec",  # noqa: UP037
    backup: "CommandSpec | None",  # noqa: UP037
    *,
    detach: bool,
    logger: "FilteringBoundLogger",  # noqa: UP037
) -> Supervisor:
    """Create a supervisor that logs its lifecycle events.

    Args:
        primary: The first-priority command.
        backup: The fallback command, or None.
        detach: Run children in their own session and leave them running
            on shutdown.
        logger: Logger for supervisor output.

    Returns:
        A configured Supervisor.
    """
    return Supervisor(
        primary,
        backup,
        SupervisorConfig(detach=detach),
        logger=logger,
        event_sink=LogEventSink(logger),
    )


def run_supervisor(supervisor: Supervisor) -> None:
    """Run the supervisor until a termination signal ends it."""
    anyio.run(supervisor.serve)
