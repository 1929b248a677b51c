"""Tests for the MCP server adapter."""

from __future__ import annotations

import json

import pytest
from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from termexec import CommandPolicy, ExecutorConfig
from termexec.api import CommandToolkit
from termexec.formatting import OutputFormat
from termexec.server import _build_parser, config_from_args, create_server, handle_execute_command


class TestHandleExecuteCommand:
    async def test_success_returns_json(self, toolkit: CommandToolkit) -> None:
        output = await handle_execute_command(toolkit, "echo hello")
        data = json.loads(output)
        assert data["success"] is True
        assert data["stdout"] == "hello\n"

    async def test_success_returns_text(self, toolkit: CommandToolkit) -> None:
        output = await handle_execute_command(
            toolkit, "echo hello", output_format=OutputFormat.TEXT
        )
        assert output.startswith("✅")

    async def test_failure_raises_tool_error(self, toolkit: CommandToolkit) -> None:
        with pytest.raises(ToolError) as exc_info:
            await handle_execute_command(toolkit, "exit 5")
        data = json.loads(str(exc_info.value))
        assert data["exitCode"] == 5
        assert data["errorKind"] == "COMMAND_FAILED"

    async def test_timeout_argument(self, toolkit: CommandToolkit) -> None:
        with pytest.raises(ToolError, match="TIMEOUT"):
            await handle_execute_command(toolkit, "sleep 5", timeout=200)

    async def test_policy_refusal(self, toolkit: CommandToolkit) -> None:
        toolkit.policy = CommandPolicy.allow_only({"ls"})
        with pytest.raises(ToolError, match="POLICY_VIOLATION"):
            await handle_execute_command(toolkit, "rm -rf /")

    async def test_invalid_timeout(self, toolkit: CommandToolkit) -> None:
        with pytest.raises(ToolError, match="Invalid arguments"):
            await handle_execute_command(toolkit, "ls", timeout=-1)


class TestCreateServer:
    async def test_registers_execute_command(self, toolkit: CommandToolkit) -> None:
        server = create_server(toolkit)
        assert isinstance(server, FastMCP)
        tools = await server.list_tools()
        assert [tool.name for tool in tools] == ["execute_command"]
        schema = tools[0].inputSchema
        assert "command" in schema["properties"]
        assert "timeout" in schema["properties"]


class TestCommandLine:
    def test_overrides(self) -> None:
        args = _build_parser().parse_args(
            ["--format", "text", "--allow", "ls", "--allow", "cat", "--max-timeout", "60000"]
        )
        config = config_from_args(args, ExecutorConfig())
        assert config.output_format == "text"
        assert config.allowed_commands == frozenset({"ls", "cat"})
        assert config.max_timeout_ms == 60_000
        assert config.default_timeout_ms == 30_000

    def test_no_overrides_keeps_base(self) -> None:
        base = ExecutorConfig(denied_commands=frozenset({"rm"}))
        args = _build_parser().parse_args([])
        assert config_from_args(args, base) == base

    def test_deny_extends_base(self) -> None:
        base = ExecutorConfig(denied_commands=frozenset({"rm"}))
        args = _build_parser().parse_args(["--deny", "dd"])
        assert config_from_args(args, base).denied_commands == frozenset({"rm", "dd"})
