"""Tests for ExecutorConfig."""

from __future__ import annotations

import pytest

from termexec import ConfigurationError, ExecutorConfig


class TestExecutorConfig:
    def test_defaults(self) -> None:
        config = ExecutorConfig()
        assert config.default_timeout_ms == 30_000
        assert config.max_timeout_ms == 300_000
        assert config.shell == "/bin/sh"
        assert config.allowed_commands == frozenset()
        assert config.output_format == "json"

    def test_clamps_to_maximum(self) -> None:
        config = ExecutorConfig()
        assert config.effective_timeout_ms(None) == 30_000
        assert config.effective_timeout_ms(10_000_000) == 300_000

    def test_rejects_non_positive_timeouts(self) -> None:
        with pytest.raises(ConfigurationError):
            ExecutorConfig(default_timeout_ms=0)
        with pytest.raises(ConfigurationError):
            ExecutorConfig(max_timeout_ms=-1)

    def test_rejects_default_above_max(self) -> None:
        with pytest.raises(ConfigurationError, match="exceeds"):
            ExecutorConfig(default_timeout_ms=10_000, max_timeout_ms=5_000)

    def test_rejects_unknown_format(self) -> None:
        with pytest.raises(ConfigurationError, match="format"):
            ExecutorConfig(output_format="xml")

    def test_configuration_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            ExecutorConfig(shell="")


class TestFromEnv:
    def test_empty_environment_gives_defaults(self) -> None:
        assert ExecutorConfig.from_env({}) == ExecutorConfig()

    def test_reads_variables(self) -> None:
        config = ExecutorConfig.from_env(
            {
                "TERMEXEC_DEFAULT_TIMEOUT_MS": "1000",
                "TERMEXEC_MAX_TIMEOUT_MS": "2000",
                "TERMEXEC_SHELL": "/bin/bash",
                "TERMEXEC_ALLOWED_COMMANDS": "ls, cat,,grep ",
                "TERMEXEC_DENIED_COMMANDS": "rm",
                "TERMEXEC_OUTPUT_FORMAT": "TEXT",
            }
        )
        assert config.default_timeout_ms == 1_000
        assert config.max_timeout_ms == 2_000
        assert config.shell == "/bin/bash"
        assert config.allowed_commands == frozenset({"ls", "cat", "grep"})
        assert config.denied_commands == frozenset({"rm"})
        assert config.output_format == "text"

    def test_invalid_integer(self) -> None:
        with pytest.raises(ConfigurationError, match="TERMEXEC_MAX_TIMEOUT_MS"):
            ExecutorConfig.from_env({"TERMEXEC_MAX_TIMEOUT_MS": "lots"})

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TERMEXEC_DENIED_COMMANDS", "dd,mkfs")
        assert ExecutorConfig.from_env().denied_commands == frozenset({"dd", "mkfs"})
