"""Pydantic models for JSON output schemas.

These models validate the JSON emitted by commands that support --json.
"""

from pydantic import BaseModel, ConfigDict

from foundryctl.core.types import EndpointInfo, ServiceSnapshot


class StatusResponse(BaseModel):
    """JSON response schema for `foundryctl status --json`.

    Attributes:
        installed: Whether Foundry Local is installed
        running: Whether the service answers
        endpoint_url: Inference base URL (None unless running)
        model_id: Resolved id of the loaded model (None unless running)
        model: The configured default model
        model_cached: Whether the default model is in the local cache
    """

    model_config = ConfigDict(strict=True)

    installed: bool
    running: bool
    endpoint_url: str | None
    model_id: str | None
    model: str
    model_cached: bool

    @staticmethod
    def from_snapshot(snapshot: ServiceSnapshot, model: str) -> "StatusResponse":
        return StatusResponse(
            installed=snapshot.installed,
            running=snapshot.running,
            endpoint_url=snapshot.endpoint_url,
            model_id=snapshot.model_id,
            model=model,
            model_cached=snapshot.model_cached,
        )


class EndpointResponse(BaseModel):
    """JSON response schema for `foundryctl configure --json`."""

    model_config = ConfigDict(strict=True)

    base_url: str
    model_id: str

    @staticmethod
    def from_info(info: EndpointInfo) -> "EndpointResponse":
        return EndpointResponse(base_url=info.base_url, model_id=info.model_id)
