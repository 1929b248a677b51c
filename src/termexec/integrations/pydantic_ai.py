"""
PydanticAI integration for termexec.

Provides helpers to create PydanticAI-compatible tools.
"""

from __future__ import annotations

from typing import Callable

try:
    from pydantic_ai import RunContext
except ImportError:
    raise ImportError(
        "PydanticAI integration requires 'pydantic-ai'. "
        "Install with `pip install termexec[pydantic-ai]`"
    )

from termexec.api import CommandToolkit, create_command_tool
from termexec.integrations._common import run_for_agent
from termexec.security.policy import CommandPolicy


def create_shell_tool(
    toolkit: CommandToolkit | None = None,
    *,
    cwd: str | None = None,
    policy: CommandPolicy | None = None,
) -> Callable:
    """
    Create a PydanticAI tool function for shell command execution.

    Example:
        >>> from pydantic_ai import Agent
        >>> shell_tool = create_shell_tool(policy=CommandPolicy.allow_only({"ls", "cat"}))
        >>> agent = Agent("openai:gpt-4o", tools=[shell_tool])
    """
    if toolkit is None:
        toolkit = create_command_tool(cwd=cwd, policy=policy)

    async def execute_command(
        ctx: RunContext,
        command: str,
        timeout: int | None = None,
    ) -> str:
        """
        Execute a shell command and return its output and exit status.

        Args:
            command: The shell command line to run.
            timeout: Optional timeout in milliseconds.
        """
        return await run_for_agent(toolkit, command, timeout)

    return execute_command
