"""
Exception hierarchy for termexec.
"""

from __future__ import annotations


class TermexecError(Exception):
    """Base class for all termexec errors."""


class ConfigurationError(TermexecError, ValueError):
    """Raised when executor or server configuration is invalid."""


class PolicyViolation(TermexecError):
    """
    Raised when a command is refused by the command policy.

    A refused command never reaches the executor, so this is reported
    separately from the error kinds of a command that ran and failed.

    Attributes:
        command: The command that was refused.
        base_command: The base command token the policy matched on.
        reason: Why the command was refused.
    """

    def __init__(self, reason: str, command: str = "", base_command: str = "") -> None:
        self.command = command
        self.base_command = base_command
        self.reason = reason
        super().__init__(f"Policy violation: {reason}")


class ExecutorClosed(TermexecError, RuntimeError):
    """Raised when an executor is used after close()."""


class CommandFailed(TermexecError):
    """Raised by ExecutionResult.raise_for_status() for unsuccessful commands."""
