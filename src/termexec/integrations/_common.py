"""Shared glue for the framework integrations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from termexec.errors import PolicyViolation
from termexec.formatting import OutputFormat, render, render_policy_violation

if TYPE_CHECKING:
    from termexec.api import CommandToolkit


async def run_for_agent(
    toolkit: CommandToolkit,
    command: str,
    timeout: int | None = None,
    output_format: OutputFormat = OutputFormat.TEXT,
) -> str:
    """Run a command and render the outcome, including refusals, as a string."""
    try:
        result = await toolkit.execute(command, timeout_ms=timeout)
    except PolicyViolation as exc:
        return render_policy_violation(exc, output_format)
    return render(result, output_format)
