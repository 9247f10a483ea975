"""Data models for the supervisor system.

This module defines the core data types for child supervision:
- SupervisorState: Lifecycle states of the restart loop
- SupervisorEventType: Types of lifecycle events
- SupervisorEvent: Immutable event records
- SupervisorConfig: Restart policy configuration
"""

from dataclasses import dataclass
from enum import StrEnum

from restarter.exceptions import ConfigValidationError

# A command vector: executable followed by its arguments.
CommandSpec = tuple[str, ...]

DEFAULT_RESTART_WINDOW = 3600.0
DEFAULT_MAX_RESTARTS_IN_WINDOW = 3
DEFAULT_RAPID_RESTART_THRESHOLD = 10.0
DEFAULT_BACKOFF_DELAY = 1.0


class SupervisorState(StrEnum):
    """Restart loop states.

    The loop moves STARTING -> LAUNCHING -> RUNNING -> EXITED -> LAUNCHING
    and so on until it is cancelled:
    - STARTING: Executables are being verified, no child launched yet
    - LAUNCHING: A command is being selected and spawned
    - RUNNING: A child is running and being waited on
    - EXITED: The child has exited and will be restarted
    - CANCELLED: Shutdown was requested, the loop will not iterate again
    - STOPPED: The loop has returned
    """

    STARTING = "starting"
    LAUNCHING = "launching"
    RUNNING = "running"
    EXITED = "exited"
    CANCELLED = "cancelled"
    STOPPED = "stopped"


class SupervisorEventType(StrEnum):
    """Types of supervisor lifecycle events.

    - BACKOFF: The last restart was recent, the loop is throttling
    - FAILOVER: Restart pressure selected the backup command
    - LAUNCHED: A child process has been spawned
    - SPAWN_FAILED: A child command could not be started
    - EXITED: A child process has exited (any status)
    - STOPPED: The restart loop has finished
    """

    BACKOFF = "backoff"
    FAILOVER = "failover"
    LAUNCHED = "launched"
    SPAWN_FAILED = "spawn_failed"
    EXITED = "exited"
    STOPPED = "stopped"


@dataclass(frozen=True, slots=True)
class SupervisorEvent:
    """Immutable supervisor lifecycle event.

    Attributes:
        event_type: Type of lifecycle event.
        timestamp: ISO 8601 formatted wall-clock timestamp.
        command: The command the event relates to, if any.
        pid: Process ID if applicable.
        exit_code: Exit code if the process terminated.
        message: Optional human-readable message.
    """

    event_type: SupervisorEventType
    timestamp: str
    command: CommandSpec | None = None
    pid: int | None = None
    exit_code: int | None = None
    message: str | None = None


@dataclass(frozen=True, slots=True)
class SupervisorConfig:
    """Restart policy for a supervised child.

    Fixed at startup. Durations are in seconds.

    Attributes:
        detach: Start children in their own session and leave them running
            when the supervisor receives a termination signal.
        restart_window: Trailing span over which restarts are counted.
        max_restarts_in_window: Restarts tolerated in the window before the
            backup command is selected.
        rapid_restart_threshold: A restart this soon after the previous one
            is throttled.
        backoff_delay: Fixed sleep applied to a throttled restart.
    """

    detach: bool = False
    restart_window: float = DEFAULT_RESTART_WINDOW
    max_restarts_in_window: int = DEFAULT_MAX_RESTARTS_IN_WINDOW
    rapid_restart_threshold: float = DEFAULT_RAPID_RESTART_THRESHOLD
    backoff_delay: float = DEFAULT_BACKOFF_DELAY

    def __post_init__(self) -> None:
        for key in ("restart_window", "rapid_restart_threshold", "backoff_delay"):
            value = getattr(self, key)
            if value < 0:
                msg = f"{key} must not be negative, got {value!r}"
                raise ConfigValidationError(
                    msg, key=key, value=value, expected="non-negative number"
                )
        if self.max_restarts_in_window < 0:
            msg = (
                "max_restarts_in_window must not be negative, "
                f"got {self.max_restarts_in_window!r}"
            )
            raise ConfigValidationError(
                msg,
                key="max_restarts_in_window",
                value=self.max_restarts_in_window,
                expected="non-negative integer",
            )
