import io

import pytest
from cyclopts import App
from pytest_mock import MockerFixture
from rich.console import Console

from restarter.cli import ExitCode, create_app
from restarter.cli import run as run_restarter
from restarter.cli._runner import as_cli_tokens, separate_options, split_commands
from restarter.supervisor import Supervisor


class TestSplitCommands:
    def test_primary_only(self) -> None:
        assert split_commands(["server", "--port", "80"]) == (
            ("server", "--port", "80"),
            None,
        )

    def test_primary_and_backup(self) -> None:
        assert split_commands(["server", "a", "---", "fallback", "b"]) == (
            ("server", "a"),
            ("fallback", "b"),
        )

    def test_trailing_separator_is_ignored(self) -> None:
        assert split_commands(["server", "---"]) == (("server",), None)

    def test_only_first_separator_splits(self) -> None:
        assert split_commands(["a", "---", "b", "---", "c"]) == (
            ("a",),
            ("b", "---", "c"),
        )

    def test_leading_separator_leaves_no_primary(self) -> None:
        primary, backup = split_commands(["---", "fallback"])

        assert primary == ()
        assert backup == ("fallback",)

    def test_empty(self) -> None:
        assert split_commands([]) == ((), None)


class TestSeparateOptions:
    def test_options_stop_at_command(self) -> None:
        assert separate_options(["--child-detach", "server", "--child-detach"]) == (
            ["--child-detach"],
            ["server", "--child-detach"],
        )

    def test_value_options_consume_next_token(self) -> None:
        assert separate_options(["--log-level", "debug", "server", "-v"]) == (
            ["--log-level", "debug"],
            ["server", "-v"],
        )

    def test_inline_option_value(self) -> None:
        assert separate_options(["--log-format=json", "server"]) == (
            ["--log-format=json"],
            ["server"],
        )

    def test_end_of_options_marker_is_dropped(self) -> None:
        assert separate_options(["--", "-weird-name", "a"]) == (
            [],
            ["-weird-name", "a"],
        )

    def test_later_double_dash_belongs_to_command(self) -> None:
        assert separate_options(["grep", "-r", "--", "x"]) == (
            [],
            ["grep", "-r", "--", "x"],
        )

    def test_leading_separator_starts_command(self) -> None:
        assert separate_options(["---", "fallback"]) == ([], ["---", "fallback"])

    def test_no_command(self) -> None:
        assert separate_options(["--child-detach"]) == (["--child-detach"], [])

    def test_cli_tokens_mark_end_of_options(self) -> None:
        assert as_cli_tokens(["--child-detach", "grep", "-r", "--", "x"]) == [
            "--child-detach",
            "--",
            "grep",
            "-r",
            "--",
            "x",
        ]


@pytest.fixture
def error_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def cli(error_output: io.StringIO) -> App:
    return create_app(
        console=Console(file=io.StringIO()),
        error_console=Console(file=error_output, width=200),
        exit_on_error=False,
    )


def invoke(app: App, tokens: list[str]) -> int:
    try:
        run_restarter(tokens, cli=app)
    except SystemExit as e:
        return int(e.code or 0)
    return 0


class TestRestarterCommand:
    def test_runs_primary_command(self, cli: App, mocker: MockerFixture) -> None:
        run = mocker.patch("restarter.cli._runner.run_supervisor")

        code = invoke(cli, ["sleep", "5"])

        assert code == ExitCode.SUCCESS
        run.assert_called_once()
        supervisor: Supervisor = run.call_args.args[0]
        assert supervisor.primary == ("sleep", "5")
        assert supervisor.backup is None
        assert supervisor.config.detach is False

    def test_parses_backup_command(self, cli: App, mocker: MockerFixture) -> None:
        run = mocker.patch("restarter.cli._runner.run_supervisor")

        _ = invoke(cli, ["sleep", "5", "---", "true"])

        supervisor: Supervisor = run.call_args.args[0]
        assert supervisor.primary == ("sleep", "5")
        assert supervisor.backup == ("true",)

    def test_trailing_separator_means_no_backup(
        self, cli: App, mocker: MockerFixture
    ) -> None:
        run = mocker.patch("restarter.cli._runner.run_supervisor")

        _ = invoke(cli, ["sleep", "5", "---"])

        supervisor: Supervisor = run.call_args.args[0]
        assert supervisor.backup is None

    def test_child_detach_flag(self, cli: App, mocker: MockerFixture) -> None:
        run = mocker.patch("restarter.cli._runner.run_supervisor")

        _ = invoke(cli, ["--child-detach", "sleep", "5"])

        supervisor: Supervisor = run.call_args.args[0]
        assert supervisor.config.detach is True

    def test_no_command_prints_usage(
        self, cli: App, mocker: MockerFixture, error_output: io.StringIO
    ) -> None:
        run = mocker.patch("restarter.cli._runner.run_supervisor")

        code = invoke(cli, [])

        assert code == ExitCode.USAGE_ERROR
        assert "Usage: restarter" in error_output.getvalue()
        run.assert_not_called()

    def test_missing_executable_exits_before_loop(
        self, cli: App, mocker: MockerFixture, error_output: io.StringIO
    ) -> None:
        run = mocker.patch("restarter.cli._runner.run_supervisor")

        code = invoke(cli, ["definitely-not-a-real-command-xyz"])

        assert code == ExitCode.STARTUP_ERROR
        assert "no such executable: definitely-not-a-real-command-xyz" in (
            error_output.getvalue()
        )
        run.assert_not_called()

    def test_missing_backup_executable_exits(
        self, cli: App, mocker: MockerFixture, error_output: io.StringIO
    ) -> None:
        run = mocker.patch("restarter.cli._runner.run_supervisor")

        code = invoke(cli, ["sleep", "5", "---", "definitely-not-a-backup-xyz"])

        assert code == ExitCode.STARTUP_ERROR
        assert "definitely-not-a-backup-xyz" in error_output.getvalue()
        run.assert_not_called()


class TestCommandArgumentsPassThrough:
    @pytest.mark.parametrize(
        "tokens",
        [
            ["sh", "-c", "x", "--log-level", "debug"],
            ["grep", "-r", "--", "x"],
            ["sleep", "5", "--child-detach"],
            ["sh", "-c", "x", "--help"],
            ["sh", "--log-format=json"],
        ],
    )
    def test_arguments_reach_child_unchanged(
        self, cli: App, mocker: MockerFixture, tokens: list[str]
    ) -> None:
        run_supervisor = mocker.patch("restarter.cli._runner.run_supervisor")

        code = invoke(cli, tokens)

        assert code == ExitCode.SUCCESS
        supervisor: Supervisor = run_supervisor.call_args.args[0]
        assert supervisor.primary == tuple(tokens)
        assert supervisor.config.detach is False

    def test_backup_arguments_reach_child_unchanged(
        self, cli: App, mocker: MockerFixture
    ) -> None:
        run_supervisor = mocker.patch("restarter.cli._runner.run_supervisor")

        _ = invoke(
            cli, ["--child-detach", "sleep", "5", "---", "grep", "-r", "--", "x"]
        )

        supervisor: Supervisor = run_supervisor.call_args.args[0]
        assert supervisor.primary == ("sleep", "5")
        assert supervisor.backup == ("grep", "-r", "--", "x")
        assert supervisor.config.detach is True

    def test_options_after_command_do_not_configure_restarter(
        self, cli: App, mocker: MockerFixture
    ) -> None:
        _ = mocker.patch("restarter.cli._runner.run_supervisor")
        create_logger = mocker.patch(
            "restarter.cli._app.create_logger", autospec=True
        )

        _ = invoke(cli, ["sh", "-c", "x", "--log-level", "debug"])

        create_logger.assert_called_once_with(level="info", log_format="text")

    def test_leading_options_configure_restarter(
        self, cli: App, mocker: MockerFixture
    ) -> None:
        _ = mocker.patch("restarter.cli._runner.run_supervisor")
        create_logger = mocker.patch(
            "restarter.cli._app.create_logger", autospec=True
        )

        _ = invoke(cli, ["--log-level", "debug", "--log-format", "json", "true"])

        create_logger.assert_called_once_with(level="debug", log_format="json")
