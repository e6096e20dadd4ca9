"""Data models shared by the prober, driver and status aggregator.

Nothing here is persisted. Every value is rebuilt from the external
service's console output on each query.
"""

from dataclasses import dataclass
from enum import Enum

API_VERSION_SEGMENT = "/v1"


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a single external program invocation."""

    exit_success: bool
    stdout: str
    stderr: str
    exit_code: int = 0

    @staticmethod
    def ok(stdout: str = "", stderr: str = "") -> "CommandResult":
        """Build a successful result (exit code 0)."""
        return CommandResult(exit_success=True, stdout=stdout, stderr=stderr, exit_code=0)

    @staticmethod
    def failed(exit_code: int = 1, stdout: str = "", stderr: str = "") -> "CommandResult":
        """Build a failed result with the given non-zero exit code."""
        return CommandResult(exit_success=False, stdout=stdout, stderr=stderr, exit_code=exit_code)


class ModelStatus(Enum):
    """Traffic-light state printed in front of each loaded model."""

    UNKNOWN = "unknown"
    LOADING = "loading"
    READY = "ready"
    STOPPED = "stopped"


@dataclass(frozen=True)
class ModelDescriptor:
    """One model row from the loaded-models listing."""

    alias: str
    resolved_id: str
    status_indicator: ModelStatus


@dataclass(frozen=True)
class EndpointInfo:
    """OpenAI-compatible endpoint discovered from the running service.

    `base_url` always ends in the API version segment, never in the
    operational sub-path the status command prints.
    """

    base_url: str
    model_id: str

    def __post_init__(self) -> None:
        if not self.base_url.endswith(API_VERSION_SEGMENT):
            raise ValueError(
                f"Endpoint base URL must end in {API_VERSION_SEGMENT}: {self.base_url}"
            )
        if not self.model_id:
            raise ValueError("Endpoint model id must not be empty")


@dataclass(frozen=True)
class ServiceSnapshot:
    """Point-in-time view of the service, built fresh on every status query."""

    installed: bool
    running: bool
    endpoint_url: str | None
    model_id: str | None
    model_cached: bool

    def __post_init__(self) -> None:
        if not self.installed and self.running:
            raise ValueError("A service that is not installed cannot be running")
        if not self.running and (self.endpoint_url is not None or self.model_id is not None):
            raise ValueError("A stopped service cannot report an endpoint or model id")

    @staticmethod
    def not_installed() -> "ServiceSnapshot":
        """Snapshot for a machine without the product installed."""
        return ServiceSnapshot(
            installed=False,
            running=False,
            endpoint_url=None,
            model_id=None,
            model_cached=False,
        )


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to poll and how long to wait in between.

    Attributes:
        attempts: Total number of attempts, including the first one
        delay: Seconds to wait before the first retry
        backoff_factor: Multiplier applied to the delay after each retry
            (1.0 keeps the delay fixed)
    """

    attempts: int
    delay: float
    backoff_factor: float = 1.0

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ValueError(f"RetryPolicy.attempts must be positive, got {self.attempts}")
        if self.delay < 0:
            raise ValueError(f"RetryPolicy.delay must not be negative, got {self.delay}")
        if self.backoff_factor < 1.0:
            raise ValueError(
                f"RetryPolicy.backoff_factor must be at least 1.0, got {self.backoff_factor}"
            )

    def delay_before(self, attempt: int) -> float:
        """Seconds to sleep before the given zero-based attempt.

        Example with delay=2, backoff_factor=2: 0, 2, 4, 8 for attempts 0..3.
        """
        if attempt == 0:
            return 0.0
        return self.delay * (self.backoff_factor ** (attempt - 1))
