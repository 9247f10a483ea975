"""Bounded-window restart history.

Restart timestamps are taken from a monotonic clock, so a wall-clock
adjustment can neither expire records early nor keep them alive forever.
"""

from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, final

from ._models import DEFAULT_RESTART_WINDOW

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(frozen=True, slots=True)
class RestartRecord:
    """A single restart decision.

    Attributes:
        at: Monotonic timestamp, in seconds, of the restart.
    """

    at: float


@final
class RestartHistory:
    """Insertion-ordered record of recent restarts.

    After any call to ``prune(now)`` every retained record is at most
    ``window`` seconds old. A record exactly ``window`` seconds old is kept.
    """

    __slots__ = ("_records", "window")

    def __init__(self, window: float = DEFAULT_RESTART_WINDOW) -> None:
        """Initialize an empty history.

        Args:
            window: Retention window in seconds.
        """
        self.window = window
        self._records: deque[RestartRecord] = deque()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> "Iterator[RestartRecord]":  # noqa: UP037
        return iter(self._records)

    def record(self, now: float) -> RestartRecord:
        """Append a restart at ``now``.

        Args:
            now: Monotonic timestamp of the restart.

        Returns:
            The appended record.
        """
        entry = RestartRecord(at=now)
        self._records.append(entry)
        return entry

    def prune(self, now: float) -> int:
        """Drop every record older than the window.

        Args:
            now: Monotonic timestamp to measure ages against.

        Returns:
            The number of records removed.
        """
        before = len(self._records)
        self._records = deque(r for r in self._records if now - r.at <= self.window)
        return before - len(self._records)

    def exceeds_threshold(self, now: float, max_restarts: int) -> bool:
        """Prune, then report whether more than ``max_restarts`` remain.

        Args:
            now: Monotonic timestamp to measure ages against.
            max_restarts: Number of restarts tolerated within the window.

        Returns:
            True if the window holds strictly more than ``max_restarts``.
        """
        _ = self.prune(now)
        return len(self._records) > max_restarts

    def most_recent(self) -> float | None:
        """Return the timestamp of the last restart, or None if empty."""
        if not self._records:
            return None
        return self._records[-1].at

    def clear(self) -> None:
        """Forget every recorded restart."""
        self._records.clear()
