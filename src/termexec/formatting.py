"""
Rendering of execution results for agents and humans.
"""

from __future__ import annotations

import json
from enum import Enum

from termexec._types import ExecutionResult
from termexec.errors import PolicyViolation

POLICY_VIOLATION_KIND = "POLICY_VIOLATION"


class OutputFormat(Enum):
    """How results are rendered by the adapters."""

    JSON = "json"
    TEXT = "text"


def render_json(result: ExecutionResult) -> str:
    """Render a result as an indented JSON object."""
    return json.dumps(result.to_dict(), indent=2)


def render_text(result: ExecutionResult) -> str:
    """
    Render a result as plain text.

    Layout: a status line, the command, stdout, a stderr block when
    stderr is non-empty, and a hint line when there is one.
    """
    if result.success:
        lines = [f"✅ Command succeeded (exit code 0, {result.duration_ms}ms)"]
    else:
        kind = result.error_kind.value if result.error_kind else "FAILED"
        lines = [
            f"❌ {kind}: {result.error_message} "
            f"(exit code {result.exit_code}, {result.duration_ms}ms)"
        ]

    lines.append(f"$ {result.command}")

    if result.stdout:
        lines.append(result.stdout.rstrip("\n"))

    if result.stderr:
        lines.append("stderr:")
        lines.append(result.stderr.rstrip("\n"))

    if result.hint:
        lines.append(f"💡 Hint: {result.hint}")

    return "\n".join(lines)


def render(result: ExecutionResult, fmt: OutputFormat | str = OutputFormat.JSON) -> str:
    """Render a result in the requested format."""
    if OutputFormat(fmt) is OutputFormat.TEXT:
        return render_text(result)
    return render_json(result)


def render_policy_violation(
    violation: PolicyViolation, fmt: OutputFormat | str = OutputFormat.JSON
) -> str:
    """Render a refused command. It is reported apart from commands that ran."""
    if OutputFormat(fmt) is OutputFormat.TEXT:
        return f"🚫 Command blocked by policy: {violation.reason}\n$ {violation.command}"
    return json.dumps(
        {
            "success": False,
            "errorKind": POLICY_VIOLATION_KIND,
            "errorMessage": violation.reason,
            "command": violation.command,
            "baseCommand": violation.base_command,
        },
        indent=2,
    )
