"""
Command policy with allow/deny lists on the base command token.

This is not a sandbox: it only decides which leading command may run.
Base command extraction is a best-effort heuristic that does not
understand shell quoting or command substitution, so `"rm" -rf /` or
`$(echo rm) -rf /` are not recognised as `rm`.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from termexec._types import PolicyDecision
from termexec.errors import PolicyViolation

logger = logging.getLogger(__name__)

_PIPE_OR_REDIRECT = re.compile(r"[|<>]")


def base_command(command: str) -> str:
    """
    Extract the base command token from a command line.

    Takes the first whitespace-delimited word and cuts it at the first
    pipe or redirect character, so `ls|wc` yields `ls`.
    """
    parts = command.strip().split()
    if not parts:
        return ""
    return _PIPE_OR_REDIRECT.split(parts[0], maxsplit=1)[0]


def evaluate(
    command: str,
    allow_list: Iterable[str] | None = None,
    deny_list: Iterable[str] | None = None,
) -> PolicyDecision:
    """
    Decide whether a command may run.

    Args:
        command: The full command line.
        allow_list: If non-empty, only these base commands may run.
        deny_list: If non-empty, these base commands may not run.
                   Ignored when an allow list is in effect.

    Returns:
        PolicyDecision, with a reason when the command is refused.
    """
    allowed = set(allow_list or ())
    denied = set(deny_list or ())
    base = base_command(command)

    if allowed:
        if base not in allowed:
            return PolicyDecision(
                allowed=False,
                base_command=base,
                reason=(
                    f"Command '{base}' is not in the allowed commands list. "
                    f"Allowed commands: {', '.join(sorted(allowed))}"
                ),
            )
    elif denied and base in denied:
        return PolicyDecision(
            allowed=False,
            base_command=base,
            reason=(
                f"Command '{base}' is in the denied commands list. "
                f"Denied commands: {', '.join(sorted(denied))}"
            ),
        )

    return PolicyDecision(allowed=True, base_command=base)


@dataclass
class CommandPolicy:
    """
    Configurable allow/deny policy for command execution.

    Empty sets mean no restriction. When `allowed_commands` is non-empty
    it takes precedence and `denied_commands` is not consulted.
    """

    allowed_commands: set[str] = field(default_factory=set)
    denied_commands: set[str] = field(default_factory=set)

    @classmethod
    def unrestricted(cls) -> CommandPolicy:
        """Create a policy that lets every command through."""
        return cls()

    @classmethod
    def allow_only(cls, allowed: Iterable[str]) -> CommandPolicy:
        """
        Create a policy that only allows the given base commands.

        Args:
            allowed: Command names that may run (e.g., {"ls", "cat", "grep"}).
        """
        return cls(allowed_commands=set(allowed))

    @classmethod
    def deny(cls, denied: Iterable[str]) -> CommandPolicy:
        """Create a policy that refuses the given base commands."""
        return cls(denied_commands=set(denied))

    @property
    def is_restricted(self) -> bool:
        return bool(self.allowed_commands or self.denied_commands)

    def evaluate(self, command: str) -> PolicyDecision:
        """Evaluate a command without raising."""
        return evaluate(command, self.allowed_commands, self.denied_commands)

    def check_command(self, command: str) -> str:
        """
        Validate a command against the policy.

        Returns:
            The command, unchanged.

        Raises:
            PolicyViolation: If the command is refused.
        """
        decision = self.evaluate(command)
        if not decision.allowed:
            logger.warning(f"Refusing command '{decision.base_command}': {decision.reason}")
            raise PolicyViolation(decision.reason or "", command, decision.base_command)
        return command

    def add_allowed_command(self, command: str) -> None:
        """Add a command name to the allow list."""
        self.allowed_commands.add(command)

    def add_denied_command(self, command: str) -> None:
        """Add a command name to the deny list."""
        self.denied_commands.add(command)
