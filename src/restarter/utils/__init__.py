"""Utilities for restarter."""

from ._logging import LogFormatType, LogLevelType, create_logger

__all__ = ["LogFormatType", "LogLevelType", "create_logger"]
