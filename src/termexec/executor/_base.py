"""
Abstract base class for command executors.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from termexec._types import CommandRequest, ExecutionResult


class Executor(ABC):
    """
    Abstract base for all executor implementations.

    An executor runs one command per call and always answers with an
    ExecutionResult; failures of the command itself never raise.
    """

    @abstractmethod
    async def execute(
        self, request: CommandRequest | str, *, timeout_ms: int | None = None
    ) -> ExecutionResult:
        """
        Execute a shell command and return the result.

        Args:
            request: A CommandRequest, or a bare command string.
            timeout_ms: Timeout for a bare command string. Ignored when a
                        CommandRequest is given.

        Returns:
            ExecutionResult with output, exit code, timing and, on failure,
            the error classification.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """
        Release executor resources.

        Idempotent - safe to call multiple times.
        """
        ...

    async def __aenter__(self) -> Executor:
        """Enter async context manager."""
        return self

    async def __aexit__(self, *args: object) -> None:
        """Exit async context manager, cleaning up resources."""
        await self.close()
