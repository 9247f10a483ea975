import os
import signal
import subprocess
import sys
import time
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import pytest


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.integration)


# Child that records every termination signal it receives, one name per line,
# and writes its pid to a marker file once its handlers are installed. It
# lingers for a while after a signal so tests can tell whether the supervisor
# waited for it.
RECORDING_CHILD = """
import os
import signal
import sys
import time
from pathlib import Path

received = Path(sys.argv[1])
ready = Path(sys.argv[2])
deadline = time.monotonic() + 30


def handle(signum, frame):
    global deadline
    with received.open("a") as f:
        f.write(signal.Signals(signum).name + "\\n")
    deadline = min(deadline, time.monotonic() + 3)


signal.signal(signal.SIGINT, handle)
signal.signal(signal.SIGTERM, handle)
ready.write_text(str(os.getpid()))

while time.monotonic() < deadline:
    time.sleep(0.05)
"""


@dataclass(frozen=True, slots=True)
class RecordingChild:
    """Paths used by the signal-recording child script."""

    script: Path
    received: Path
    ready: Path

    def command(self) -> list[str]:
        return [sys.executable, str(self.script), str(self.received), str(self.ready)]

    def wait_ready(self, timeout: float = 15.0) -> int:
        """Wait for the child to start and return its pid."""
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if self.ready.exists() and self.ready.read_text():
                return int(self.ready.read_text())
            time.sleep(0.05)
        msg = "child did not start in time"
        raise TimeoutError(msg)

    def received_signals(self) -> list[str]:
        if not self.received.exists():
            return []
        return self.received.read_text().splitlines()


def is_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    return True


def kill_quietly(pid: int) -> None:
    try:
        os.kill(pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


@pytest.fixture
def recording_child(tmp_path: Path) -> Iterator[RecordingChild]:
    script = tmp_path / "recording_child.py"
    script.write_text(RECORDING_CHILD)
    child = RecordingChild(
        script=script,
        received=tmp_path / "received.txt",
        ready=tmp_path / "ready.txt",
    )
    yield child
    if child.ready.exists() and child.ready.read_text():
        kill_quietly(int(child.ready.read_text()))


def start_restarter(
    *args: str, log_path: Path | None = None
) -> subprocess.Popen[bytes]:
    """Run the restarter CLI in a subprocess.

    The supervisor's stderr is piped, or written to ``log_path`` when given.
    A child that outlives the supervisor inherits that stream, so tests that
    leave a child running must use a log file and ``wait()`` rather than
    ``communicate()``.
    """
    command = [sys.executable, "-m", "restarter", *args]
    if log_path is None:
        return subprocess.Popen(  # noqa: S603
            command, stdout=subprocess.DEVNULL, stderr=subprocess.PIPE
        )
    with log_path.open("wb") as log:
        return subprocess.Popen(  # noqa: S603
            command, stdout=subprocess.DEVNULL, stderr=log
        )
