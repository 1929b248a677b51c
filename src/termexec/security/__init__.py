"""Command policy module for termexec."""

from termexec.errors import PolicyViolation
from termexec.security.policy import CommandPolicy, base_command, evaluate

__all__ = ["CommandPolicy", "PolicyViolation", "base_command", "evaluate"]
