"""Synchronized holder for the currently running child."""

import threading
from typing import TYPE_CHECKING, final

if TYPE_CHECKING:
    from ._protocol import ChildHandle


@final
class ActiveChildSlot:
    """Single slot holding the active child handle.

    The restart loop publishes and clears the handle; the signal listener
    reads it. Every access goes through a lock.
    """

    __slots__ = ("_child", "_lock")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._child: ChildHandle | None = None

    def publish(self, child: "ChildHandle") -> None:  # noqa: UP037
        """Make ``child`` the active child."""
        with self._lock:
            self._child = child

    def clear(self) -> "ChildHandle | None":  # noqa: UP037
        """Empty the slot and return what it held."""
        with self._lock:
            child, self._child = self._child, None
            return child

    def get(self) -> "ChildHandle | None":  # noqa: UP037
        """Return the active child, or None."""
        with self._lock:
            return self._child
