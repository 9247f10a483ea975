"""Command-line interface for restarter."""

from ._app import app, create_app, main, run
from ._shared import ExitCode

__all__ = ["ExitCode", "app", "create_app", "main", "run"]
