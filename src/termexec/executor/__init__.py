"""
Executor backends.
"""

from termexec.executor._base import Executor
from termexec.executor.local import LocalExecutor

__all__ = ["Executor", "LocalExecutor"]
