"""
Executor configuration.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from termexec.errors import ConfigurationError

DEFAULT_TIMEOUT_MS = 30_000
MAX_TIMEOUT_MS = 300_000
DEFAULT_SHELL = "/bin/sh"

ENV_PREFIX = "TERMEXEC_"


def _split_names(value: str | None) -> frozenset[str]:
    if not value:
        return frozenset()
    return frozenset(name.strip() for name in value.split(",") if name.strip())


def _int_from_env(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class ExecutorConfig:
    """Execution limits, shell and command policy configuration."""

    default_timeout_ms: int = DEFAULT_TIMEOUT_MS
    max_timeout_ms: int = MAX_TIMEOUT_MS
    shell: str = DEFAULT_SHELL
    allowed_commands: frozenset[str] = field(default_factory=frozenset)
    denied_commands: frozenset[str] = field(default_factory=frozenset)
    output_format: str = "json"

    def __post_init__(self) -> None:
        if self.default_timeout_ms <= 0:
            raise ConfigurationError("default_timeout_ms must be positive")
        if self.max_timeout_ms <= 0:
            raise ConfigurationError("max_timeout_ms must be positive")
        if self.default_timeout_ms > self.max_timeout_ms:
            raise ConfigurationError(
                f"default_timeout_ms ({self.default_timeout_ms}) exceeds "
                f"max_timeout_ms ({self.max_timeout_ms})"
            )
        if not self.shell:
            raise ConfigurationError("shell must not be empty")
        if self.output_format not in ("json", "text"):
            raise ConfigurationError(
                f"Unknown output format: {self.output_format}. Use 'json' or 'text'."
            )

    def effective_timeout_ms(self, requested_ms: int | None) -> int:
        """Clamp a requested timeout to the configured maximum."""
        return min(requested_ms or self.default_timeout_ms, self.max_timeout_ms)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ExecutorConfig:
        """
        Build a configuration from TERMEXEC_* environment variables.

        Recognised variables: TERMEXEC_DEFAULT_TIMEOUT_MS, TERMEXEC_MAX_TIMEOUT_MS,
        TERMEXEC_SHELL, TERMEXEC_ALLOWED_COMMANDS, TERMEXEC_DENIED_COMMANDS
        (comma separated) and TERMEXEC_OUTPUT_FORMAT.
        """
        env = os.environ if environ is None else environ
        return cls(
            default_timeout_ms=_int_from_env(
                env, f"{ENV_PREFIX}DEFAULT_TIMEOUT_MS", DEFAULT_TIMEOUT_MS
            ),
            max_timeout_ms=_int_from_env(env, f"{ENV_PREFIX}MAX_TIMEOUT_MS", MAX_TIMEOUT_MS),
            shell=env.get(f"{ENV_PREFIX}SHELL") or DEFAULT_SHELL,
            allowed_commands=_split_names(env.get(f"{ENV_PREFIX}ALLOWED_COMMANDS")),
            denied_commands=_split_names(env.get(f"{ENV_PREFIX}DENIED_COMMANDS")),
            output_format=(env.get(f"{ENV_PREFIX}OUTPUT_FORMAT") or "json").lower(),
        )
