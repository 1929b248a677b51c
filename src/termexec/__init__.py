"""
Top-level facade for termexec.
"""

from termexec._types import (
    Classification,
    CommandRequest,
    ErrorKind,
    ExecutionResult,
    PolicyDecision,
)
from termexec.api import CommandToolkit, create_command_tool, run_command
from termexec.classify import classify
from termexec.config import ExecutorConfig
from termexec.errors import (
    CommandFailed,
    ConfigurationError,
    ExecutorClosed,
    PolicyViolation,
    TermexecError,
)
from termexec.executor import Executor, LocalExecutor
from termexec.security.policy import CommandPolicy, evaluate

__all__ = [
    "Classification",
    "CommandFailed",
    "CommandPolicy",
    "CommandRequest",
    "CommandToolkit",
    "ConfigurationError",
    "ErrorKind",
    "ExecutionResult",
    "Executor",
    "ExecutorClosed",
    "ExecutorConfig",
    "LocalExecutor",
    "PolicyDecision",
    "PolicyViolation",
    "TermexecError",
    "classify",
    "create_command_tool",
    "evaluate",
    "run_command",
]
