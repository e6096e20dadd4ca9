import pytest

from foundryctl.core.types import CommandResult, EndpointInfo, RetryPolicy, ServiceSnapshot


def test_command_result_constructors() -> None:
    assert CommandResult.ok("out") == CommandResult(True, "out", "", 0)
    assert CommandResult.failed(3, stderr="err") == CommandResult(False, "", "err", 3)


def test_endpoint_info_requires_version_segment() -> None:
    with pytest.raises(ValueError, match="/v1"):
        EndpointInfo(base_url="http://127.0.0.1:5273/openai/status", model_id="m:1")


def test_endpoint_info_requires_model_id() -> None:
    with pytest.raises(ValueError, match="model id"):
        EndpointInfo(base_url="http://127.0.0.1:5273/v1", model_id="")


def test_snapshot_not_installed_cannot_run() -> None:
    with pytest.raises(ValueError):
        ServiceSnapshot(
            installed=False, running=True, endpoint_url=None, model_id=None, model_cached=False
        )


def test_snapshot_stopped_service_has_no_endpoint() -> None:
    with pytest.raises(ValueError):
        ServiceSnapshot(
            installed=True,
            running=False,
            endpoint_url="http://127.0.0.1:5273/v1",
            model_id=None,
            model_cached=False,
        )


def test_snapshot_not_installed_defaults() -> None:
    snapshot = ServiceSnapshot.not_installed()

    assert not snapshot.installed
    assert not snapshot.running
    assert snapshot.endpoint_url is None
    assert snapshot.model_id is None
    assert not snapshot.model_cached


@pytest.mark.parametrize(
    ("attempts", "delay", "factor"),
    [(0, 1.0, 1.0), (3, -1.0, 1.0), (3, 1.0, 0.5)],
)
def test_retry_policy_validation(attempts: int, delay: float, factor: float) -> None:
    with pytest.raises(ValueError):
        RetryPolicy(attempts=attempts, delay=delay, backoff_factor=factor)


def test_retry_policy_delays() -> None:
    policy = RetryPolicy(attempts=4, delay=2.0, backoff_factor=2.0)

    assert [policy.delay_before(i) for i in range(4)] == [0.0, 2.0, 4.0, 8.0]
    assert RetryPolicy(attempts=3, delay=5.0).delay_before(2) == 5.0
