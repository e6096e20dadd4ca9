"""Tests for configuration parsing and loading."""

from pathlib import Path

import pytest

from foundryctl.core.global_config import (
    DEFAULT_MODEL,
    FilesystemConfigOps,
    FoundryConfig,
    InMemoryConfigOps,
    parse_config,
)
from foundryctl.core.types import RetryPolicy


def test_defaults() -> None:
    config = FoundryConfig()

    assert config.default_model == DEFAULT_MODEL == "phi-3.5-mini"
    assert config.executable is None
    assert config.start_timeout_seconds == 8.0
    assert config.ready_policy == RetryPolicy(attempts=30, delay=2.0)
    assert config.cache_policy == RetryPolicy(attempts=60, delay=5.0)
    assert config.load_attempts == 3
    assert config.model_id_policy == RetryPolicy(attempts=10, delay=2.0)


def test_parse_empty_document_gives_defaults() -> None:
    assert parse_config({}, "config.toml", {}) == FoundryConfig()


def test_parse_full_document() -> None:
    data = {
        "default_model": "phi-4-mini",
        "executable": "/opt/foundry/bin/foundry",
        "start_timeout_seconds": 15,
        "ready": {"attempts": 5, "delay_seconds": 1},
        "cache": {"attempts": 10, "delay_seconds": 0.5},
        "model_id": {"load_attempts": 2, "attempts": 4, "delay_seconds": 3},
    }

    config = parse_config(data, "config.toml", {})

    assert config.default_model == "phi-4-mini"
    assert config.executable == Path("/opt/foundry/bin/foundry")
    assert config.start_timeout_seconds == 15.0
    assert config.ready_policy == RetryPolicy(attempts=5, delay=1.0)
    assert config.cache_policy == RetryPolicy(attempts=10, delay=0.5)
    assert config.load_attempts == 2
    assert config.model_id_policy == RetryPolicy(attempts=4, delay=3.0)


def test_environment_overrides_default_model() -> None:
    config = parse_config({"default_model": "phi-4"}, "config.toml", {"FOUNDRYCTL_MODEL": "qwen"})

    assert config.default_model == "qwen"


@pytest.mark.parametrize(
    "data",
    [
        {"default_model": ""},
        {"default_model": 3},
        {"executable": 42},
        {"start_timeout_seconds": "soon"},
        {"start_timeout_seconds": True},
        {"ready": {"attempts": 0}},
        {"cache": {"attempts": 2.5}},
        {"cache": {"delay_seconds": -1}},
        {"model_id": "fast"},
    ],
)
def test_parse_rejects_invalid_values(data: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        parse_config(data, "config.toml", {})


def test_filesystem_ops_missing_file_gives_defaults(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    ops = FilesystemConfigOps(environ={})

    assert not ops.exists()
    assert ops.load() == FoundryConfig()
    assert ops.path() == tmp_path / ".foundryctl" / "config.toml"


def test_filesystem_ops_reads_toml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    config_dir = tmp_path / ".foundryctl"
    config_dir.mkdir()
    (config_dir / "config.toml").write_text(
        'default_model = "phi-4-mini"\n\n[ready]\nattempts = 3\n', encoding="utf-8"
    )

    config = FilesystemConfigOps(environ={}).load()

    assert config.default_model == "phi-4-mini"
    assert config.ready_policy == RetryPolicy(attempts=3, delay=2.0)


def test_filesystem_ops_invalid_toml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    config_dir = tmp_path / ".foundryctl"
    config_dir.mkdir()
    (config_dir / "config.toml").write_text("default_model = \n", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid TOML"):
        FilesystemConfigOps(environ={}).load()


def test_in_memory_ops() -> None:
    assert not InMemoryConfigOps().exists()
    assert InMemoryConfigOps().load() == FoundryConfig()

    config = FoundryConfig(default_model="phi-4")
    ops = InMemoryConfigOps(config)
    assert ops.exists()
    assert ops.load() is config
