"""Child process launching and control.

This module provides the ProcessLauncher that spawns supervised commands
and the ChildProcess handle used to wait on and signal them.
"""

import shutil
import subprocess
from typing import TYPE_CHECKING, final

import anyio
import anyio.abc

from restarter.exceptions import (
    ExecutableNotFoundError,
    SignalForwardError,
    SpawnError,
)

if TYPE_CHECKING:
    from ._models import CommandSpec


def resolve_executable(name: str) -> str:
    """Resolve an executable on the search path.

    Args:
        name: Executable name or path.

    Returns:
        The resolved path to the executable.

    Raises:
        ExecutableNotFoundError: If the executable cannot be found.
    """
    resolved = shutil.which(name)
    if resolved is None:
        msg = f"no such executable: {name}"
        raise ExecutableNotFoundError(msg, executable=name)
    return resolved


def verify_executables(*names: str) -> None:
    """Check that every named executable can be resolved.

    Raises:
        ExecutableNotFoundError: For the first executable that is missing.
    """
    for name in names:
        _ = resolve_executable(name)


@final
class ChildProcess:
    """Handle to a running supervised child.

    Attributes:
        command: The command the child was started with.
        detached: Whether the child runs in its own session.
    """

    __slots__ = ("_process", "command", "detached")

    def __init__(
        self,
        process: anyio.abc.Process,
        command: "CommandSpec",  # noqa: UP037
        *,
        detached: bool = False,
    ) -> None:
        self._process = process
        self.command = command
        self.detached = detached

    def __repr__(self) -> str:
        return f"ChildProcess(pid={self.pid}, command={self.command!r})"

    @property
    def pid(self) -> int:
        """Return the process ID of the child."""
        return self._process.pid

    @property
    def returncode(self) -> int | None:
        """Return the exit status, or None while the child is running."""
        return self._process.returncode

    async def wait(self) -> int:
        """Block until the child exits.

        Returns:
            The exit status. Negative values mean the child was killed by
            that signal number.
        """
        return await self._process.wait()

    def forward_signal(self, sig: int) -> None:
        """Deliver a signal to the child.

        Args:
            sig: The signal number to send.

        Raises:
            SignalForwardError: If the child has already exited or the
                signal could not be delivered.
        """
        if self._process.returncode is not None:
            msg = f"child {self.pid} already exited"
            raise SignalForwardError(msg, signal=sig, pid=self.pid)
        try:
            self._process.send_signal(sig)
        except OSError as e:
            msg = f"failed to send signal {sig} to child {self.pid}: {e}"
            raise SignalForwardError(msg, signal=sig, pid=self.pid, cause=e) from e


@final
class ProcessLauncher:
    """Spawns supervised commands.

    The child inherits the supervisor's stdout and stderr so its output
    is passed through unbuffered. Its stdin is connected to the null device.
    """

    __slots__ = ()

    async def spawn(
        self,
        command: "CommandSpec",  # noqa: UP037
        *,
        detach: bool = False,
    ) -> ChildProcess:
        """Start a command.

        Args:
            command: Executable and arguments.
            detach: Start the child in a new session (and therefore a new
                process group) so signals aimed at the supervisor's terminal
                or group do not reach it and it can outlive the supervisor.

        Returns:
            A handle to the running child.

        Raises:
            SpawnError: If the command could not be started.
        """
        if not command:
            msg = "cannot spawn an empty command"
            raise SpawnError(msg, command=tuple(command))
        try:
            process = await anyio.open_process(
                list(command),
                stdin=subprocess.DEVNULL,
                stdout=None,
                stderr=None,
                start_new_session=detach,
            )
        except OSError as e:
            msg = f"failed to start process {command[0]!r}: {e}"
            raise SpawnError(msg, command=tuple(command), cause=e) from e

        return ChildProcess(process, tuple(command), detached=detach)
