"""Core module exports."""

from smartdiff.core.errors import (
    ConfigError,
    ErrorCode,
    InputError,
    RemoteError,
    SmartDiffError,
)
from smartdiff.core.logging import configure_logging, end_run, start_run
from smartdiff.core.progress import pluralize, spinner, status

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "InputError",
    "RemoteError",
    "SmartDiffError",
    # Logging
    "configure_logging",
    "end_run",
    "start_run",
    # Progress
    "pluralize",
    "spinner",
    "status",
]
