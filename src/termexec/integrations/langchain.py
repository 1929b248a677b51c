"""LangChain integration for termexec."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

from termexec.integrations._common import run_for_agent

if TYPE_CHECKING:
    from termexec.api import CommandToolkit

HAS_LANGCHAIN = False
_StructuredTool: Any = None

try:
    import langchain_core.tools

    _StructuredTool = langchain_core.tools.StructuredTool
    HAS_LANGCHAIN = True
except ImportError:
    pass


def _run_sync(coro: Coroutine[Any, Any, str]) -> str:
    """Run a coroutine to completion from synchronous code.

    Inside a thread that already runs an event loop, the coroutine gets its
    own loop in a worker thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    with ThreadPoolExecutor(max_workers=1) as pool:
        return pool.submit(asyncio.run, coro).result()


def create_langchain_tools(toolkit: CommandToolkit) -> dict[str, Any]:
    """
    Create LangChain tools from a CommandToolkit.

    Args:
        toolkit: The command toolkit to wrap.

    Returns:
        Dictionary with an `execute_command` StructuredTool. The tool works
        both with `invoke` and `ainvoke`.

    Raises:
        ImportError: If langchain-core is not installed.

    Example:
        >>> toolkit = create_command_tool()
        >>> tools = create_langchain_tools(toolkit)
        >>> agent = create_react_agent(llm, list(tools.values()))
    """
    if not HAS_LANGCHAIN:
        raise ImportError(
            "LangChain integration requires langchain-core. "
            "Install with: pip install termexec[langchain]"
        )

    async def aexecute_command(command: str, timeout: int | None = None) -> str:
        """Execute a shell command. Timeout is in milliseconds."""
        return await run_for_agent(toolkit, command, timeout)

    def execute_command(command: str, timeout: int | None = None) -> str:
        """Execute a shell command. Timeout is in milliseconds."""
        return _run_sync(run_for_agent(toolkit, command, timeout))

    command_tool = _StructuredTool.from_function(
        func=execute_command,
        coroutine=aexecute_command,
        name="execute_command",
        description=(
            "Execute a shell command and return stdout, stderr, exit code and timing. "
            "Optional timeout in milliseconds."
        ),
    )

    return {"execute_command": command_tool}
