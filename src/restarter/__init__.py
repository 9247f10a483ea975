"""restarter: keep a command running, fail over when it crash-loops."""

from restarter.supervisor import Supervisor, SupervisorConfig

__all__ = ["Supervisor", "SupervisorConfig"]
