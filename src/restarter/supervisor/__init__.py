"""Supervisor package for keeping a single child command running.

This package restarts a command whenever it exits, throttles restarts
that follow each other closely, fails over to a backup command while the
primary is crash-looping, and forwards termination signals to the child.

Key Components:
    - SupervisorConfig: Restart policy configuration
    - RestartHistory: Bounded-window record of restarts
    - RapidRestartThrottle: Fixed delay for rapid restarts
    - select_command: Primary/backup selection rule
    - ProcessLauncher: Child process spawner
    - ActiveChildSlot: Synchronized holder of the running child
    - SignalBridge: Termination signal forwarding
    - Supervisor: The restart loop
    - LogEventSink: Structured-logging event sink

Example:
    >>> from restarter.supervisor import LogEventSink, Supervisor
    >>> from restarter.utils import create_logger
    >>> logger = create_logger()
    >>> supervisor = Supervisor(
    ...     ("my-server", "--port", "8080"),
    ...     ("my-server-safe-mode",),
    ...     logger=logger,
    ...     event_sink=LogEventSink(logger),
    ... )
    >>> await supervisor.serve()  # Blocks until a termination signal
"""

from ._active import ActiveChildSlot
from ._backoff import RapidRestartThrottle
from ._history import RestartHistory, RestartRecord
from ._launcher import (
    ChildProcess,
    ProcessLauncher,
    resolve_executable,
    verify_executables,
)
from ._models import (
    CommandSpec,
    SupervisorConfig,
    SupervisorEvent,
    SupervisorEventType,
    SupervisorState,
)
from ._output import LogEventSink
from ._protocol import ChildHandle, EventSink, Launcher
from ._selector import select_command
from ._signals import TERMINATION_SIGNALS, SignalBridge, terminate_process
from ._supervisor import Supervisor

__all__ = [
    "TERMINATION_SIGNALS",
    "ActiveChildSlot",
    "ChildHandle",
    "ChildProcess",
    "CommandSpec",
    "EventSink",
    "Launcher",
    "LogEventSink",
    "ProcessLauncher",
    "RapidRestartThrottle",
    "RestartHistory",
    "RestartRecord",
    "SignalBridge",
    "Supervisor",
    "SupervisorConfig",
    "SupervisorEvent",
    "SupervisorEventType",
    "SupervisorState",
    "resolve_executable",
    "select_command",
    "terminate_process",
    "verify_executables",
]
