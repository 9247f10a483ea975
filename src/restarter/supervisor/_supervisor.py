"""Restart loop for a single supervised command.

This module provides the Supervisor class that launches a command, waits
for it to exit, and launches it again forever, failing over to a backup
command while the primary is crash-looping.
"""

import signal
import threading
import time
from typing import TYPE_CHECKING, final

import anyio
import anyio.abc
import pendulum

from restarter.exceptions import SpawnError

from ._active import ActiveChildSlot
from ._backoff import RapidRestartThrottle
from ._history import RestartHistory
from ._launcher import ProcessLauncher, verify_executables
from ._models import (
    SupervisorConfig,
    SupervisorEvent,
    SupervisorEventType,
    SupervisorState,
)
from ._selector import select_command
from ._signals import TERMINATION_SIGNALS, SignalBridge, terminate_process

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from structlog.typing import FilteringBoundLogger

    from ._models import CommandSpec
    from ._protocol import ChildHandle, EventSink, Launcher


def _get_timestamp() -> str:
    """Get current timestamp in ISO 8601 format."""
    return pendulum.now("UTC").to_iso8601_string()


@final
class Supervisor:
    """Keeps one child command running.

    Every exit, whatever its status, is followed by a restart. Only a
    termination signal handled by the SignalBridge, or ``cancel()``, stops
    the loop, and cancellation is checked once per iteration: a child that
    is being waited on is not interrupted by it.
    """

    __slots__ = (
        "_cancel_event",
        "_clock",
        "_event_sink",
        "_history",
        "_launch_count",
        "_launcher",
        "_logger",
        "_slot",
        "_state",
        "_throttle",
        "backup",
        "config",
        "primary",
    )

    def __init__(  # noqa: PLR0913
        self,
        primary: "CommandSpec",  # noqa: UP037
        backup: "CommandSpec | None" = None,  # noqa: UP037
        config: SupervisorConfig | None = None,
        *,
        logger: "FilteringBoundLogger",  # noqa: UP037
        event_sink: "EventSink",  # noqa: UP037
        launcher: "Launcher | None" = None,  # noqa: UP037
        clock: "Callable[[], float]" = time.monotonic,  # noqa: UP037
    ) -> None:
        """Initialize the supervisor.

        Args:
            primary: The first-priority command.
            backup: The fallback command, or None.
            config: Restart policy. Uses the defaults if None.
            logger: Logger for loop diagnostics.
            event_sink: Sink for lifecycle events.
            launcher: Process launcher. Uses ProcessLauncher if None.
            clock: Monotonic clock used for restart-window arithmetic.
        """
        self.primary: CommandSpec = tuple(primary)
        self.backup: CommandSpec | None = tuple(backup) if backup else None
        self.config = config or SupervisorConfig()
        self._logger = logger
        self._event_sink = event_sink
        self._launcher: Launcher = launcher or ProcessLauncher()
        self._clock = clock
        self._history = RestartHistory(self.config.restart_window)
        self._throttle = RapidRestartThrottle(
            threshold=self.config.rapid_restart_threshold,
            delay_seconds=self.config.backoff_delay,
        )
        self._slot = ActiveChildSlot()
        self._cancel_event = threading.Event()
        self._state = SupervisorState.STARTING
        self._launch_count = 0

    @property
    def state(self) -> SupervisorState:
        """Return the current loop state."""
        return self._state

    @property
    def history(self) -> RestartHistory:
        """Return the restart history."""
        return self._history

    @property
    def active_child(self) -> "ChildHandle | None":  # noqa: UP037
        """Return the currently running child, if any."""
        return self._slot.get()

    @property
    def launch_count(self) -> int:
        """Return the number of children successfully spawned."""
        return self._launch_count

    @property
    def cancelled(self) -> bool:
        """Check whether the loop has been asked to stop."""
        return self._cancel_event.is_set()

    def verify(self) -> None:
        """Check that the configured executables exist.

        Raises:
            ExecutableNotFoundError: If the primary, or a configured backup,
                cannot be resolved.
        """
        names = [self.primary[0]]
        if self.backup:
            names.append(self.backup[0])
        verify_executables(*names)

    def cancel(self) -> None:
        """Ask the loop to stop after the current iteration."""
        if self._state != SupervisorState.STOPPED:
            self._state = SupervisorState.CANCELLED
        self._cancel_event.set()

    async def emit_event(
        self,
        event_type: SupervisorEventType,
        *,
        command: "CommandSpec | None" = None,  # noqa: UP037
        pid: int | None = None,
        exit_code: int | None = None,
        message: str | None = None,
    ) -> None:
        """Emit a lifecycle event to the event sink.

        Args:
            event_type: Type of event to emit.
            command: Command the event relates to.
            pid: Process ID, if applicable.
            exit_code: Exit code if the process terminated.
            message: Optional message for the event.
        """
        event = SupervisorEvent(
            event_type=event_type,
            timestamp=_get_timestamp(),
            command=command,
            pid=pid,
            exit_code=exit_code,
            message=message,
        )
        try:
            await self._event_sink.write_event(event)
        except Exception as e:  # noqa: BLE001
            # Sink errors should not stop supervision
            self._logger.error("event_sink_failed", error=str(e))  # noqa: TRY400

    def _transition(self, state: SupervisorState) -> None:
        # A cancelled loop stays cancelled until it stops.
        if not self.cancelled:
            self._state = state

    async def _throttle_if_rapid(self) -> None:
        delay = self._throttle.delay(self._history.most_recent(), self._clock())
        if delay <= 0:
            return
        await self.emit_event(
            SupervisorEventType.BACKOFF,
            message=(
                f"last restart <{self._throttle.threshold:g}s ago, "
                f"buffering for {delay:g}s"
            ),
        )
        await anyio.sleep(delay)

    async def run_once(self) -> int | None:
        """Run a single iteration of the restart loop.

        Returns:
            The child's exit status, or None if the command failed to spawn.
        """
        self._transition(SupervisorState.LAUNCHING)
        await self._throttle_if_rapid()

        now = self._clock()
        command = select_command(
            self._history,
            now,
            self.primary,
            self.backup,
            self.config.max_restarts_in_window,
        )
        if command != self.primary:
            await self.emit_event(
                SupervisorEventType.FAILOVER,
                command=command,
                message="too many recent restarts, using backup command",
            )

        # A failed spawn still counts toward restart pressure.
        _ = self._history.record(now)

        self._logger.info("launching", command=" ".join(command))
        try:
            child = await self._launcher.spawn(command, detach=self.config.detach)
        except SpawnError as e:
            await self.emit_event(
                SupervisorEventType.SPAWN_FAILED, command=command, message=str(e)
            )
            return None

        self._launch_count += 1
        self._slot.publish(child)
        self._transition(SupervisorState.RUNNING)
        await self.emit_event(
            SupervisorEventType.LAUNCHED, command=command, pid=child.pid
        )

        try:
            exit_code = await child.wait()
        finally:
            _ = self._slot.clear()

        self._transition(SupervisorState.EXITED)
        await self.emit_event(
            SupervisorEventType.EXITED,
            command=command,
            pid=child.pid,
            exit_code=exit_code,
            message=f"process died with exit code {exit_code}",
        )
        return exit_code

    async def run(self) -> None:
        """Run the restart loop until cancelled."""
        try:
            while not self.cancelled:
                _ = await self.run_once()
        finally:
            self._state = SupervisorState.STOPPED
        await self.emit_event(
            SupervisorEventType.STOPPED,
            message=f"{self._launch_count} children launched",
        )

    async def serve(
        self,
        signals: "AsyncIterator[int] | None" = None,  # noqa: UP037
        *,
        terminate: "Callable[[int], None]" = terminate_process,  # noqa: UP037
    ) -> None:
        """Run the restart loop alongside a SignalBridge.

        Returns once the loop has stopped; the signal listener is then
        cancelled.

        Args:
            signals: Stream of received signal numbers. Listens for SIGINT
                and SIGTERM if None.
            terminate: Called with the exit status when a signal ends the
                supervisor.
        """
        bridge = SignalBridge(
            self._slot,
            detach=self.config.detach,
            on_cancel=self.cancel,
            logger=self._logger,
            terminate=terminate,
        )

        async def listen(
            *, task_status: anyio.abc.TaskStatus[None] = anyio.TASK_STATUS_IGNORED
        ) -> None:
            if signals is not None:
                task_status.started()
                await bridge.run(signals)
                return
            with anyio.open_signal_receiver(*TERMINATION_SIGNALS) as received:
                task_status.started()
                await bridge.run(_as_ints(received))

        async with anyio.create_task_group() as tg:
            # The receiver is installed before the first child is launched.
            await tg.start(listen)
            await self.run()
            tg.cancel_scope.cancel()


async def _as_ints(
    received: "AsyncIterator[signal.Signals]",  # noqa: UP037
) -> "AsyncIterator[int]":  # noqa: UP037
    async for signum in received:
        yield int(signum)
