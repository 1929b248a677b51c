"""
Main entry point: create_command_tool factory function.

This is the primary API for giving an AI agent a shell command tool.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from termexec._types import CommandRequest, ExecutionResult
from termexec.config import ExecutorConfig
from termexec.executor._base import Executor
from termexec.executor.local import LocalExecutor
from termexec.security.policy import CommandPolicy


@dataclass
class CommandToolkit:
    """
    Toolkit returned by create_command_tool(): a policy in front of an executor.

    Attributes:
        executor: The executor that runs allowed commands.
        policy: The command policy in effect.
        config: The configuration the toolkit was built from.
    """

    executor: Executor
    policy: CommandPolicy
    config: ExecutorConfig

    async def execute(self, command: str, *, timeout_ms: int | None = None) -> ExecutionResult:
        """
        Check a command against the policy and run it.

        Raises:
            PolicyViolation: If the policy refuses the command. Refused
                             commands are never started.
        """
        request = CommandRequest(command, timeout_ms)
        self.policy.check_command(request.command)
        return await self.executor.execute(request)

    async def close(self) -> None:
        """Clean up executor resources."""
        await self.executor.close()

    async def __aenter__(self) -> CommandToolkit:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()


def create_command_tool(
    *,
    cwd: Path | str | None = None,
    env: dict[str, str] | None = None,
    config: ExecutorConfig | None = None,
    policy: CommandPolicy | None = None,
    executor: Executor | None = None,
) -> CommandToolkit:
    """
    Create a shell command tool for AI agents.

    Args:
        cwd: Working directory for commands. Defaults to the process's
             current directory at call time.
        env: Environment for commands. Defaults to the process environment.
        config: Timeouts, shell and allow/deny lists. Defaults to
                ExecutorConfig.from_env().
        policy: Command policy. Defaults to one built from the config's
                allow/deny lists.
        executor: Custom executor. Defaults to a LocalExecutor.

    Returns:
        CommandToolkit with an execute() method.

    Example:
        >>> toolkit = create_command_tool(policy=CommandPolicy.allow_only({"ls", "cat"}))
        >>> result = await toolkit.execute("ls -la")
        >>> print(result.stdout)
    """
    config = config or ExecutorConfig.from_env()

    if policy is None:
        policy = CommandPolicy(
            allowed_commands=set(config.allowed_commands),
            denied_commands=set(config.denied_commands),
        )

    if executor is None:
        executor = LocalExecutor(cwd=cwd, env=env, config=config)

    return CommandToolkit(executor=executor, policy=policy, config=config)


async def run_command(
    command: str,
    *,
    timeout_ms: int | None = None,
    policy: CommandPolicy | None = None,
) -> ExecutionResult:
    """Run a single command with a throwaway toolkit."""
    async with create_command_tool(policy=policy) as toolkit:
        return await toolkit.execute(command, timeout_ms=timeout_ms)
