"""Configuration data structures and loading.

Provides immutable configuration loaded from ~/.foundryctl/config.toml.
Loaded once at the CLI entry point and stored in FoundryContext.

Example config:
  default_model = "phi-4-mini"
  executable = "C:\\\\Tools\\\\foundry.exe"
  start_timeout_seconds = 8

  [ready]
  attempts = 30
  delay_seconds = 2

  [cache]
  attempts = 60
  delay_seconds = 5

  [model_id]
  load_attempts = 3
  attempts = 10
  delay_seconds = 2
"""

import os
import tomllib
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from foundryctl.core.types import RetryPolicy

DEFAULT_MODEL = "phi-3.5-mini"
MODEL_ENV_VAR = "FOUNDRYCTL_MODEL"


@dataclass(frozen=True)
class FoundryConfig:
    """Immutable configuration data.

    All fields are read-only after construction.
    """

    default_model: str = DEFAULT_MODEL
    executable: Path | None = None
    start_timeout_seconds: float = 8.0
    ready_policy: RetryPolicy = field(default_factory=lambda: RetryPolicy(attempts=30, delay=2.0))
    cache_policy: RetryPolicy = field(default_factory=lambda: RetryPolicy(attempts=60, delay=5.0))
    load_attempts: int = 3
    model_id_policy: RetryPolicy = field(
        default_factory=lambda: RetryPolicy(attempts=10, delay=2.0)
    )


def _number(data: Mapping[str, Any], key: str, default: float, where: str) -> float:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{key}' in {where} must be a number, got {value!r}")
    return float(value)


def _count(data: Mapping[str, Any], key: str, default: int, where: str) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"'{key}' in {where} must be a positive integer, got {value!r}")
    return value


def _section(data: Mapping[str, Any], name: str, where: str) -> Mapping[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ValueError(f"[{name}] in {where} must be a table")
    return section


def _policy(section: Mapping[str, Any], default: RetryPolicy, where: str) -> RetryPolicy:
    return RetryPolicy(
        attempts=_count(section, "attempts", default.attempts, where),
        delay=_number(section, "delay_seconds", default.delay, where),
    )


def parse_config(data: Mapping[str, Any], where: str, environ: Mapping[str, str]) -> FoundryConfig:
    """Build FoundryConfig from parsed TOML data.

    Args:
        data: Parsed TOML document
        where: Source description used in error messages
        environ: Environment; FOUNDRYCTL_MODEL overrides default_model

    Raises:
        ValueError: If a value has the wrong type or range
    """
    defaults = FoundryConfig()

    default_model = data.get("default_model", defaults.default_model)
    if not isinstance(default_model, str) or not default_model.strip():
        raise ValueError(f"'default_model' in {where} must be a non-empty string")
    env_model = environ.get(MODEL_ENV_VAR)
    if env_model:
        default_model = env_model

    executable_value = data.get("executable")
    executable: Path | None = None
    if executable_value is not None:
        if not isinstance(executable_value, str):
            raise ValueError(f"'executable' in {where} must be a string path")
        executable = Path(executable_value).expanduser()

    model_id_section = _section(data, "model_id", where)

    return FoundryConfig(
        default_model=default_model.strip(),
        executable=executable,
        start_timeout_seconds=_number(
            data, "start_timeout_seconds", defaults.start_timeout_seconds, where
        ),
        ready_policy=_policy(_section(data, "ready", where), defaults.ready_policy, where),
        cache_policy=_policy(_section(data, "cache", where), defaults.cache_policy, where),
        load_attempts=_count(model_id_section, "load_attempts", defaults.load_attempts, where),
        model_id_policy=_policy(model_id_section, defaults.model_id_policy, where),
    )


class ConfigOps(ABC):
    """Abstract interface for configuration access.

    Provides dependency injection for config loading, enabling in-memory
    implementations for tests without touching the filesystem.
    """

    @abstractmethod
    def exists(self) -> bool:
        """Check if a config file exists."""
        ...

    @abstractmethod
    def load(self) -> FoundryConfig:
        """Load configuration, falling back to defaults when absent.

        Raises:
            ValueError: If the config is malformed
        """
        ...

    @abstractmethod
    def path(self) -> Path:
        """Get the path to the config file (for messages and debugging)."""
        ...


class FilesystemConfigOps(ConfigOps):
    """Production implementation that reads ~/.foundryctl/config.toml."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def exists(self) -> bool:
        return self.path().exists()

    def load(self) -> FoundryConfig:
        config_path = self.path()
        if not config_path.exists():
            return parse_config({}, str(config_path), self._environ)

        try:
            data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {config_path}: {e}") from e
        return parse_config(data, str(config_path), self._environ)

    def path(self) -> Path:
        return Path.home() / ".foundryctl" / "config.toml"


class InMemoryConfigOps(ConfigOps):
    """Test implementation that holds config in memory."""

    def __init__(self, config: FoundryConfig | None = None) -> None:
        """Initialize in-memory config ops.

        Args:
            config: Config to return (None = no config file, defaults apply)
        """
        self._config = config

    def exists(self) -> bool:
        return self._config is not None

    def load(self) -> FoundryConfig:
        if self._config is None:
            return FoundryConfig()
        return self._config

    def path(self) -> Path:
        return Path("/fake/foundryctl/config.toml")
