"""Event sink implementations for the supervisor system.

This module provides the structured-logging implementation of the
EventSink protocol.
"""

from typing import TYPE_CHECKING, final

from ._models import SupervisorEventType

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from ._models import SupervisorEvent

_WARNING_EVENTS = frozenset(
    {
        SupervisorEventType.EXITED,
        SupervisorEventType.SPAWN_FAILED,
        SupervisorEventType.FAILOVER,
    }
)


@final
class LogEventSink:
    """Event sink that writes each event as a structured log entry.

    Exits, spawn failures and failovers are logged at warning level,
    everything else at info.
    """

    __slots__ = ("_logger",)

    def __init__(self, logger: "FilteringBoundLogger") -> None:  # noqa: UP037
        """Initialize the sink.

        Args:
            logger: Logger that receives the entries.
        """
        self._logger = logger

    async def write_event(self, event: "SupervisorEvent") -> None:  # noqa: UP037
        """Log a lifecycle event.

        Args:
            event: The lifecycle event to record.
        """
        fields: dict[str, object] = {"event_time": event.timestamp}
        if event.command is not None:
            fields["command"] = " ".join(event.command)
        if event.pid is not None:
            fields["pid"] = event.pid
        if event.exit_code is not None:
            fields["exit_code"] = event.exit_code
        if event.message:
            fields["message"] = event.message

        if event.event_type in _WARNING_EVENTS:
            self._logger.warning(event.event_type.value, **fields)
        else:
            self._logger.info(event.event_type.value, **fields)
