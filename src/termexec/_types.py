"""
Core type definitions for termexec.

Uses frozen dataclasses and enums; every value here is created once per
call and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from termexec.errors import CommandFailed


class ErrorKind(Enum):
    """Closed set of failure categories for a non-successful command."""

    COMMAND_NOT_FOUND = "COMMAND_NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    INTERRUPTED = "INTERRUPTED"
    KILLED = "KILLED"
    TIMEOUT = "TIMEOUT"
    COMMAND_FAILED = "COMMAND_FAILED"
    EXECUTION_ERROR = "EXECUTION_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


@dataclass(frozen=True, slots=True)
class CommandRequest:
    """A single command invocation."""

    command: str
    timeout_ms: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.command, str):
            raise TypeError("command must be a string")
        if self.timeout_ms is not None:
            if isinstance(self.timeout_ms, bool) or not isinstance(self.timeout_ms, int):
                raise TypeError("timeout_ms must be an integer")
            if self.timeout_ms <= 0:
                raise ValueError(f"timeout_ms must be positive, got {self.timeout_ms}")


@dataclass(frozen=True, slots=True)
class Classification:
    """Outcome of classifying a failed command."""

    kind: ErrorKind
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class SpawnFailure:
    """The process could not be started, so no exit status exists."""

    message: str
    cause: BaseException | None = None


@dataclass(frozen=True, slots=True)
class PolicyDecision:
    """Result of evaluating a command against allow/deny lists."""

    allowed: bool
    base_command: str
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Immutable result from command execution."""

    success: bool
    exit_code: int
    stdout: str
    stderr: str
    command: str
    working_directory: str
    duration_ms: int
    error_kind: ErrorKind | None = None
    error_message: str | None = None
    hint: str | None = None
    timed_out: bool = False

    def raise_for_status(self) -> None:
        """Raise CommandFailed if the command did not succeed."""
        if not self.success:
            raise CommandFailed(
                f"{self.error_kind.value if self.error_kind else 'FAILED'}: "
                f"{self.error_message or self.stderr or self.stdout}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Return the wire representation used by the adapters."""
        data: dict[str, Any] = {
            "success": self.success,
            "exitCode": self.exit_code,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "command": self.command,
            "workingDirectory": self.working_directory,
            "durationMs": self.duration_ms,
        }
        if not self.success:
            data["errorKind"] = self.error_kind.value if self.error_kind else None
            data["errorMessage"] = self.error_message
            if self.hint is not None:
                data["hint"] = self.hint
        return data
