"""Pytest configuration and fixtures for termexec tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio

from termexec import CommandPolicy, ExecutorConfig, LocalExecutor, create_command_tool
from termexec.api import CommandToolkit


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory(prefix="termexec_test_") as tmp:
        yield Path(tmp).resolve()


@pytest.fixture
def config() -> ExecutorConfig:
    """Default configuration, independent of TERMEXEC_* variables."""
    return ExecutorConfig()


@pytest_asyncio.fixture
async def executor(temp_dir: Path, config: ExecutorConfig) -> AsyncGenerator[LocalExecutor, None]:
    """Create a LocalExecutor rooted in a temporary directory."""
    (temp_dir / "test.txt").write_text("hello world")

    executor = LocalExecutor(cwd=temp_dir, config=config)
    try:
        yield executor
    finally:
        await executor.close()


@pytest_asyncio.fixture
async def toolkit(temp_dir: Path, config: ExecutorConfig) -> AsyncGenerator[CommandToolkit, None]:
    """Create a CommandToolkit with no command restrictions."""
    (temp_dir / "test.txt").write_text("hello world")

    toolkit = create_command_tool(cwd=temp_dir, config=config)
    try:
        yield toolkit
    finally:
        await toolkit.close()


@pytest.fixture
def allow_policy() -> CommandPolicy:
    """Policy that only allows a few read-only commands."""
    return CommandPolicy.allow_only({"ls", "cat", "echo", "grep"})


@pytest.fixture
def deny_policy() -> CommandPolicy:
    """Policy that refuses rm."""
    return CommandPolicy.deny({"rm"})
