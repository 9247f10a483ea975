"""The command-line interface for restarter."""

import sys
from collections.abc import Sequence
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console

from restarter.exceptions import StartupError
from restarter.utils import LogFormatType, LogLevelType, create_logger

from . import _runner
from ._shared import USAGE, ExitCode, exit_with_error

HELP = "Keep a command running, failing over to a backup while it crash-loops."


def _register(app: App, error_console: Console | None = None) -> None:
    @app.default
    def restarter(
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
        child_detach: Annotated[
            bool,
            Parameter(
                name="--child-detach",
                negative="",
                help="Leave the child process running when restarter exits.",
            ),
        ] = False,
        log_level: Annotated[
            LogLevelType, Parameter(name="--log-level", help="Log level.")
        ] = "info",
        log_format: Annotated[
            LogFormatType, Parameter(name="--log-format", help="Log output format.")
        ] = "text",
    ) -> None:
        """Run a command and restart it whenever it exits.

        Separate a backup command from the primary with ``---``. The backup
        is launched instead of the primary while more than three restarts
        happened within the last hour. Options go before the command;
        everything from the command on is passed to it unchanged.

        Args:
            tokens: Primary command, optionally followed by ``---`` and the
                backup command.
            child_detach: Start the child in its own session and exit
                without signaling it.
            log_level: Minimum level of supervisor log entries.
            log_format: Format of supervisor log entries.
        """
        primary, backup = _runner.split_commands(tokens)
        if not primary:
            exit_with_error(USAGE, ExitCode.USAGE_ERROR, console=error_console)

        logger = create_logger(level=log_level, log_format=log_format)
        if child_detach:
            logger.info("running with --child-detach flag set")

        supervisor = _runner.build_supervisor(
            primary, backup, detach=child_detach, logger=logger
        )
        try:
            supervisor.verify()
        except StartupError as e:
            exit_with_error(str(e), ExitCode.STARTUP_ERROR, console=error_console)

        logger.info(
            "starting",
            primary=" ".join(primary),
            backup=" ".join(backup) if backup else None,
        )
        _runner.run_supervisor(supervisor)


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="restarter",
        help=HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )
    _register(app, error_console)
    return app


app = create_app()


def run(tokens: Sequence[str] | None = None, *, cli: App | None = None) -> None:
    """Run restarter with command-line ``tokens``.

    Only the options in front of the command are parsed by cyclopts; the
    command and its arguments reach the supervisor unchanged.

    Args:
        tokens: Arguments without the program name. Uses ``sys.argv`` if None.
        cli: App to run. Creates a new one if None.
    """
    if tokens is None:
        tokens = sys.argv[1:]
    if cli is None:
        cli = create_app()
    cli(_runner.as_cli_tokens(tokens))


def main() -> None:
    """Default entrypoint for the `restarter` CLI."""
    run()


if __name__ == "__main__":
    main()
