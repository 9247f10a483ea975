"""Termination signal handling for the supervisor.

The SignalBridge runs next to the restart loop for the supervisor's whole
lifetime. The first SIGINT or SIGTERM either ends the supervisor at once
(detach mode, the child is left alone) or is forwarded to the active child
before the supervisor cancels its loop and exits.
"""

import os
import signal
import sys
from typing import TYPE_CHECKING, final

from restarter.exceptions import SignalForwardError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from structlog.typing import FilteringBoundLogger

    from ._active import ActiveChildSlot

TERMINATION_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def terminate_process(code: int) -> None:
    """Exit the supervisor immediately.

    Standard streams are flushed, then the process ends without running
    interpreter or event-loop cleanup, so nothing is done to the child on
    the way out.

    Args:
        code: Process exit status.
    """
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (OSError, ValueError):
            continue
    os._exit(code)


def signal_name(sig: int) -> str:
    """Return the symbolic name of a signal number."""
    try:
        return signal.Signals(sig).name
    except ValueError:
        return str(sig)


@final
class SignalBridge:
    """Routes termination signals to the supervised child.

    Attributes:
        detach: Exit without touching the child when a signal arrives.
        handled: Signal number that was acted on, once one has arrived.
    """

    __slots__ = ("_logger", "_on_cancel", "_slot", "_terminate", "detach", "handled")

    def __init__(
        self,
        slot: "ActiveChildSlot",  # noqa: UP037
        *,
        detach: bool,
        on_cancel: "Callable[[], None]",  # noqa: UP037
        logger: "FilteringBoundLogger",  # noqa: UP037
        terminate: "Callable[[int], None]" = terminate_process,  # noqa: UP037
    ) -> None:
        """Initialize the bridge.

        Args:
            slot: Holder of the currently running child.
            detach: Leave the child running and exit when a signal arrives.
            on_cancel: Called to stop the restart loop.
            logger: Logger for signal handling messages.
            terminate: Called with the exit status to end the supervisor.
        """
        self._slot = slot
        self._on_cancel = on_cancel
        self._logger = logger
        self._terminate = terminate
        self.detach = detach
        self.handled: int | None = None

    async def run(self, signals: "AsyncIterator[int]") -> None:  # noqa: UP037
        """Handle the first signal from ``signals``.

        Args:
            signals: Stream of received signal numbers.
        """
        async for signum in signals:
            if signum not in TERMINATION_SIGNALS:
                continue
            self.handle(signum)
            break

    def handle(self, signum: int) -> None:
        """Act on a received termination signal.

        Args:
            signum: The received signal number.
        """
        self.handled = signum
        name = signal_name(signum)
        self._logger.info("signal_received", signal=name)

        if self.detach:
            self._logger.info("leaving_child_running", signal=name)
            self._terminate(0)
            return

        child = self._slot.get()
        if child is not None:
            self._logger.info("forwarding_signal", signal=name, pid=child.pid)
            try:
                child.forward_signal(signum)
            except SignalForwardError as e:
                self._logger.error(  # noqa: TRY400
                    "signal_forward_failed", signal=name, pid=e.pid, error=str(e)
                )

        self._on_cancel()
        self._terminate(0)
