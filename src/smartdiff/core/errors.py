"""smartdiff error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Input
- 4xxx: Remote

Malformed patches and ambiguous block keys are never errors: the core
degrades to showing more, less-merged entries. Only the I/O collaborators
(config files, user input, the remote API) raise.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Input (3xxx)
    INPUT_INVALID_PR_URL = 3001

    # Remote (4xxx)
    REMOTE_REQUEST_FAILED = 4001
    REMOTE_TIMEOUT = 4002
    REMOTE_NOT_A_FILE = 4003
    REMOTE_NO_CONTENT = 4004
    REMOTE_FILE_TOO_LARGE = 4005
    REMOTE_TOO_MANY_FILES = 4006


@dataclass(frozen=True, slots=True)
class SmartDiffError(Exception):
    """Base error with structured context for CLI and JSON output."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'REMOTE_TIMEOUT')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(SmartDiffError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class InputError(SmartDiffError):
    """Problems with what the user handed us."""

    @classmethod
    def invalid_pr_url(cls, url: str) -> "InputError":
        return cls(
            code=ErrorCode.INPUT_INVALID_PR_URL,
            message="That does not look like a valid GitHub PR URL.",
            details={"url": url},
        )


class RemoteError(SmartDiffError):
    """Failures while talking to the repository host."""

    @classmethod
    def request_failed(cls, url: str, reason: str, *, status: int | None = None) -> "RemoteError":
        return cls(
            code=ErrorCode.REMOTE_REQUEST_FAILED,
            message=f"Request to {url} failed: {reason}",
            retryable=status is not None and status >= 500,
            details={"url": url, "reason": reason, "status": status},
        )

    @classmethod
    def timeout(cls, url: str, timeout_sec: float) -> "RemoteError":
        return cls(
            code=ErrorCode.REMOTE_TIMEOUT,
            message=f"Request to {url} timed out after {timeout_sec:g}s",
            retryable=True,
            details={"url": url, "timeout_sec": timeout_sec},
        )

    @classmethod
    def not_a_file(cls, path: str) -> "RemoteError":
        return cls(
            code=ErrorCode.REMOTE_NOT_A_FILE,
            message=f"Expected file but received directory for {path}",
            details={"path": path},
        )

    @classmethod
    def no_content(cls, path: str) -> "RemoteError":
        return cls(
            code=ErrorCode.REMOTE_NO_CONTENT,
            message=f"No content available for {path}",
            details={"path": path},
        )

    @classmethod
    def file_too_large(cls, path: str, size: int, limit: int) -> "RemoteError":
        return cls(
            code=ErrorCode.REMOTE_FILE_TOO_LARGE,
            message=f"File {path} is too large to parse ({size} > {limit} bytes).",
            details={"path": path, "size": size, "limit": limit},
        )

    @classmethod
    def too_many_files(cls, count: int, limit: int) -> "RemoteError":
        return cls(
            code=ErrorCode.REMOTE_TOO_MANY_FILES,
            message=f"This PR has {count} files. Please try a smaller PR.",
            details={"count": count, "limit": limit},
        )
