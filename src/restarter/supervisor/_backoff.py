"""Fixed throttle for rapid restarts.

A child that dies immediately would otherwise be relaunched in a tight
loop. The throttle adds a constant delay when the previous restart is
recent. It is deliberately linear: every throttled restart waits the same
amount, however long the crash loop has been going on.
"""

from dataclasses import dataclass

from ._models import DEFAULT_BACKOFF_DELAY, DEFAULT_RAPID_RESTART_THRESHOLD


@dataclass(frozen=True, slots=True)
class RapidRestartThrottle:
    """Delay calculator for restarts that follow each other closely.

    Attributes:
        threshold: A restart less than this many seconds after the previous
            one is considered rapid.
        delay_seconds: Seconds to wait before a rapid restart.
    """

    threshold: float = DEFAULT_RAPID_RESTART_THRESHOLD
    delay_seconds: float = DEFAULT_BACKOFF_DELAY

    def is_rapid(self, last_restart: float | None, now: float) -> bool:
        """Check whether a restart at ``now`` follows ``last_restart`` closely.

        Args:
            last_restart: Monotonic timestamp of the previous restart, or None
                if there has not been one.
            now: Current monotonic timestamp.

        Returns:
            True if the previous restart is within the threshold.
        """
        if last_restart is None:
            return False
        return now - last_restart < self.threshold

    def delay(self, last_restart: float | None, now: float) -> float:
        """Calculate the delay before the next restart.

        Args:
            last_restart: Monotonic timestamp of the previous restart, or None.
            now: Current monotonic timestamp.

        Returns:
            ``delay_seconds`` for a rapid restart, otherwise 0.
        """
        return self.delay_seconds if self.is_rapid(last_restart, now) else 0.0
