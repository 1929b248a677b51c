"""Tests for create_command_tool API."""

from __future__ import annotations

from pathlib import Path

import pytest

from termexec import (
    CommandPolicy,
    ErrorKind,
    ExecutorConfig,
    LocalExecutor,
    PolicyViolation,
    create_command_tool,
    run_command,
)
from termexec.api import CommandToolkit


class TestCreateCommandTool:
    """Tests for the create_command_tool factory function."""

    async def test_creates_toolkit(self, temp_dir: Path) -> None:
        """Should create a working toolkit."""
        toolkit = create_command_tool(cwd=temp_dir, config=ExecutorConfig())
        try:
            result = await toolkit.execute("echo 'hello'")
            assert result.stdout == "hello\n"
            assert result.working_directory == str(temp_dir)
        finally:
            await toolkit.close()

    async def test_policy_from_config(self, temp_dir: Path) -> None:
        """Allow/deny lists in the config become the toolkit's policy."""
        config = ExecutorConfig(denied_commands=frozenset({"rm"}))
        toolkit = create_command_tool(cwd=temp_dir, config=config)
        try:
            assert toolkit.policy.denied_commands == {"rm"}
            with pytest.raises(PolicyViolation):
                await toolkit.execute("rm test.txt")
        finally:
            await toolkit.close()

    async def test_refused_command_never_runs(self, temp_dir: Path) -> None:
        """A refused command must not touch the filesystem."""
        target = temp_dir / "keep.txt"
        target.write_text("keep")
        toolkit = create_command_tool(
            cwd=temp_dir,
            config=ExecutorConfig(),
            policy=CommandPolicy.allow_only({"ls"}),
        )
        try:
            with pytest.raises(PolicyViolation) as exc_info:
                await toolkit.execute("rm keep.txt")
            assert exc_info.value.base_command == "rm"
            assert target.exists()
        finally:
            await toolkit.close()

    async def test_failures_are_results_not_exceptions(self, toolkit: CommandToolkit) -> None:
        result = await toolkit.execute("exit 3")
        assert not result.success
        assert result.error_kind is ErrorKind.COMMAND_FAILED

    async def test_passes_timeout(self, toolkit: CommandToolkit) -> None:
        result = await toolkit.execute("sleep 5", timeout_ms=200)
        assert result.error_kind is ErrorKind.TIMEOUT

    async def test_invalid_timeout(self, toolkit: CommandToolkit) -> None:
        with pytest.raises(ValueError):
            await toolkit.execute("ls", timeout_ms=0)

    async def test_custom_executor(self, temp_dir: Path) -> None:
        executor = LocalExecutor(cwd=temp_dir)
        toolkit = create_command_tool(executor=executor, config=ExecutorConfig())
        assert toolkit.executor is executor
        await toolkit.close()

    async def test_context_manager(self, temp_dir: Path) -> None:
        """Should work as async context manager."""
        async with create_command_tool(cwd=temp_dir, config=ExecutorConfig()) as toolkit:
            result = await toolkit.execute("echo 'context manager'")
            assert "context manager" in result.stdout


class TestRunCommand:
    async def test_runs_once(self) -> None:
        result = await run_command("echo once")
        assert result.stdout == "once\n"

    async def test_applies_policy(self) -> None:
        with pytest.raises(PolicyViolation):
            await run_command("rm -rf /", policy=CommandPolicy.allow_only({"ls", "cat"}))
