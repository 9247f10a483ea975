"""Restarter exceptions."""

from typing import Any


class RestarterError(Exception):
    """Base exception for restarter errors."""


class ConfigValidationError(RestarterError):
    """Raised when supervisor configuration fails validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected


# =============================================================================
# Supervisor Exceptions
# =============================================================================


class SupervisorError(RestarterError):
    """Base exception for supervisor errors."""


class StartupError(SupervisorError):
    """Raised when the supervisor cannot enter its restart loop.

    Startup errors are fatal: the process exits before any child is launched.
    """


class ExecutableNotFoundError(StartupError, LookupError):
    """Raised when a configured executable cannot be resolved on the PATH.

    Attributes:
        executable: The executable name that could not be resolved.
    """

    def __init__(self, message: str, *, executable: str) -> None:
        """Initialize with error message and executable context.

        Args:
            message: Human-readable error message.
            executable: The executable name that could not be resolved.
        """
        super().__init__(message)
        self.executable: str = executable


class SpawnError(SupervisorError):
    """Raised when a child command fails to start.

    A spawn failure is transient: the supervisor logs it and loops.

    Attributes:
        command: The command that failed to start.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self,
        message: str,
        *,
        command: tuple[str, ...] = (),
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and command context.

        Args:
            message: Human-readable error message.
            command: The command that failed to start.
            cause: The underlying exception that caused the failure.
        """
        super().__init__(message)
        self.command: tuple[str, ...] = command
        self.cause: Exception | None = cause


class SignalForwardError(SupervisorError):
    """Raised when a signal cannot be delivered to the child process.

    Attributes:
        signal: The signal number that could not be delivered.
        pid: Process ID of the child, if known.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self,
        message: str,
        *,
        signal: int,
        pid: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and signal context.

        Args:
            message: Human-readable error message.
            signal: The signal number that could not be delivered.
            pid: Process ID of the child, if known.
            cause: The underlying exception that caused the failure.
        """
        super().__init__(message)
        self.signal: int = signal
        self.pid: int | None = pid
        self.cause: Exception | None = cause
