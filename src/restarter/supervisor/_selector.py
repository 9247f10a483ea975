"""Primary/backup command selection."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._history import RestartHistory
    from ._models import CommandSpec


def select_command(
    history: "RestartHistory",  # noqa: UP037
    now: float,
    primary: "CommandSpec",  # noqa: UP037
    backup: "CommandSpec | None",  # noqa: UP037
    max_restarts_in_window: int,
) -> "CommandSpec":  # noqa: UP037
    """Choose the command to launch next.

    The backup is chosen only while the history holds more than
    ``max_restarts_in_window`` restarts. The decision is made afresh on every
    call, so once old restarts age out of the window the primary is selected
    again even if the backup is running fine.

    Args:
        history: Restart history; pruned as a side effect.
        now: Current monotonic timestamp.
        primary: The first-priority command.
        backup: The fallback command, or None/empty if not configured.
        max_restarts_in_window: Restarts tolerated before failing over.

    Returns:
        The backup command under restart pressure, otherwise the primary.
    """
    # Always evaluated so the history is pruned even without a backup.
    under_pressure = history.exceeds_threshold(now, max_restarts_in_window)
    if under_pressure and backup:
        return backup
    return primary
