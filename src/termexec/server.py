"""
MCP server exposing the `execute_command` tool over stdio.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from collections.abc import Sequence

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from termexec.api import CommandToolkit, create_command_tool
from termexec.config import ExecutorConfig
from termexec.errors import ConfigurationError, PolicyViolation
from termexec.formatting import OutputFormat, render, render_policy_violation

logger = logging.getLogger(__name__)

SERVER_NAME = "termexec"


async def handle_execute_command(
    toolkit: CommandToolkit,
    command: str,
    timeout: int | None = None,
    output_format: OutputFormat = OutputFormat.JSON,
) -> str:
    """
    Run a command for the MCP tool and render the outcome.

    Returns:
        The rendered result of a successful command.

    Raises:
        ToolError: With the rendered result when the command failed, was
                   refused by the policy or had invalid arguments, so the
                   protocol marks the tool call as an error.
    """
    try:
        result = await toolkit.execute(command, timeout_ms=timeout)
    except PolicyViolation as exc:
        raise ToolError(render_policy_violation(exc, output_format)) from exc
    except (TypeError, ValueError) as exc:
        raise ToolError(f"Invalid arguments: {exc}") from exc

    rendered = render(result, output_format)
    if not result.success:
        raise ToolError(rendered)
    return rendered


def create_server(
    toolkit: CommandToolkit, output_format: OutputFormat = OutputFormat.JSON
) -> FastMCP:
    """Build a FastMCP server with the execute_command tool bound to `toolkit`."""
    mcp = FastMCP(SERVER_NAME)

    @mcp.tool()
    async def execute_command(command: str, timeout: int | None = None) -> str:
        """
        Execute a shell command. Returns stdout, stderr, exit code and timing.

        Args:
            command: The shell command to execute. Pipes, redirects and
                     substitutions are interpreted by the shell.
            timeout: Optional timeout in milliseconds (default 30000, max 300000).
        """
        return await handle_execute_command(toolkit, command, timeout, output_format)

    return mcp


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="termexec-mcp",
        description="MCP server that executes shell commands.",
    )
    parser.add_argument(
        "--format",
        choices=[f.value for f in OutputFormat],
        default=None,
        help="Output format for tool results (default: json, or TERMEXEC_OUTPUT_FORMAT).",
    )
    parser.add_argument(
        "--allow",
        action="append",
        default=[],
        metavar="CMD",
        help="Only allow this base command. Repeatable.",
    )
    parser.add_argument(
        "--deny",
        action="append",
        default=[],
        metavar="CMD",
        help="Refuse this base command. Repeatable.",
    )
    parser.add_argument("--default-timeout", type=int, default=None, metavar="MS")
    parser.add_argument("--max-timeout", type=int, default=None, metavar="MS")
    parser.add_argument("--shell", default=None, help="Shell used to run commands.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser


def config_from_args(args: argparse.Namespace, base: ExecutorConfig) -> ExecutorConfig:
    """Overlay command line options on a configuration."""
    overrides: dict[str, object] = {}
    if args.format:
        overrides["output_format"] = args.format
    if args.allow:
        overrides["allowed_commands"] = base.allowed_commands | frozenset(args.allow)
    if args.deny:
        overrides["denied_commands"] = base.denied_commands | frozenset(args.deny)
    if args.default_timeout is not None:
        overrides["default_timeout_ms"] = args.default_timeout
    if args.max_timeout is not None:
        overrides["max_timeout_ms"] = args.max_timeout
    if args.shell:
        overrides["shell"] = args.shell
    return dataclasses.replace(base, **overrides)


def main(argv: Sequence[str] | None = None) -> None:
    """Console entry point: run the MCP server on stdio."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    # stdout carries the protocol, so logs go to stderr
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args, ExecutorConfig.from_env())
    except ConfigurationError as exc:
        parser.error(str(exc))

    toolkit = create_command_tool(config=config)
    mcp = create_server(toolkit, OutputFormat(config.output_format))

    logger.info("termexec MCP server is running...")
    mcp.run()


if __name__ == "__main__":
    main()
