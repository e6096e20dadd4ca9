"""Persistence of the discovered LLM endpoint for the host application.

After the endpoint is discovered, (base_url, model_id) is handed to a
SettingsStore. The filesystem store keeps it under [llm] in
~/.foundryctl/settings.toml, preserving any other keys and comments.
"""

import tomllib
from abc import ABC, abstractmethod
from pathlib import Path

import tomlkit

from foundryctl.core.types import EndpointInfo

PROVIDER_NAME = "foundry"


class SettingsStore(ABC):
    """Abstract settings store for the discovered endpoint."""

    @abstractmethod
    def update_llm_endpoint(self, base_url: str, model_id: str) -> None:
        """Record the endpoint the host should send inference requests to."""
        ...

    @abstractmethod
    def load_llm_endpoint(self) -> EndpointInfo | None:
        """Return the recorded endpoint, or None if none was recorded."""
        ...


class FilesystemSettingsStore(SettingsStore):
    """Production store writing a TOML settings file with tomlkit."""

    def __init__(self, settings_path: Path | None = None) -> None:
        self._path = settings_path or Path.home() / ".foundryctl" / "settings.toml"

    @property
    def path(self) -> Path:
        return self._path

    def update_llm_endpoint(self, base_url: str, model_id: str) -> None:
        if self._path.exists():
            with self._path.open("r", encoding="utf-8") as f:
                doc = tomlkit.load(f)
        else:
            doc = tomlkit.document()
            doc.add(tomlkit.comment("Settings written by foundryctl"))

        if "llm" not in doc:
            doc["llm"] = tomlkit.table()

        doc["llm"]["provider"] = PROVIDER_NAME  # type: ignore[index]
        doc["llm"]["base_url"] = base_url  # type: ignore[index]
        doc["llm"]["model_id"] = model_id  # type: ignore[index]

        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("w", encoding="utf-8") as f:
            tomlkit.dump(doc, f)

    def load_llm_endpoint(self) -> EndpointInfo | None:
        if not self._path.exists():
            return None

        data = tomllib.loads(self._path.read_text(encoding="utf-8"))
        llm = data.get("llm")
        if not isinstance(llm, dict):
            return None

        base_url = llm.get("base_url")
        model_id = llm.get("model_id")
        if not isinstance(base_url, str) or not isinstance(model_id, str):
            return None
        return EndpointInfo(base_url=base_url, model_id=model_id)


class InMemorySettingsStore(SettingsStore):
    """Test implementation that keeps the endpoint in memory."""

    def __init__(self, endpoint: EndpointInfo | None = None) -> None:
        self._endpoint = endpoint
        self._updates: list[tuple[str, str]] = []

    @property
    def updates(self) -> list[tuple[str, str]]:
        """(base_url, model_id) pairs passed to update_llm_endpoint().

        This property is for test assertions only.
        """
        return self._updates

    def update_llm_endpoint(self, base_url: str, model_id: str) -> None:
        self._updates.append((base_url, model_id))
        self._endpoint = EndpointInfo(base_url=base_url, model_id=model_id)

    def load_llm_endpoint(self) -> EndpointInfo | None:
        return self._endpoint
