"""Protocol definitions for the supervisor system.

This module defines the interfaces that decouple the restart loop from
process and output implementations:
- EventSink: Protocol for consuming lifecycle events
- ChildHandle: Protocol for a running child
- Launcher: Protocol for spawning children
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ._models import CommandSpec, SupervisorEvent


@runtime_checkable
class EventSink(Protocol):
    """Protocol for consuming supervisor lifecycle events.

    The protocol is async so sinks can do non-blocking I/O.
    """

    async def write_event(self, event: "SupervisorEvent") -> None:  # noqa: UP037
        """Record a lifecycle event.

        Args:
            event: The lifecycle event to record.
        """
        ...


@runtime_checkable
class ChildHandle(Protocol):
    """Protocol for a running supervised child."""

    @property
    def pid(self) -> int:
        """Return the process ID of the child."""
        ...

    async def wait(self) -> int:
        """Block until the child exits and return its exit status."""
        ...

    def forward_signal(self, sig: int) -> None:
        """Deliver a signal to the child.

        Raises:
            SignalForwardError: If the signal could not be delivered.
        """
        ...


@runtime_checkable
class Launcher(Protocol):
    """Protocol for spawning supervised children."""

    async def spawn(
        self,
        command: "CommandSpec",  # noqa: UP037
        *,
        detach: bool = False,
    ) -> ChildHandle:
        """Start a command.

        Raises:
            SpawnError: If the command could not be started.
        """
        ...
