"""Tests for FakeCommandRunner test infrastructure.

These tests verify that FakeCommandRunner replays scripted console output
reliably, so prober and CLI tests can depend on it.
"""

import pytest

from foundryctl.core.errors import ProcessSpawnError
from foundryctl.core.types import CommandResult
from tests.fakes.runner import FakeCommandRunner, FakeRunningProcess


def test_fake_runner_unscripted_command_fails() -> None:
    """Test that commands without a scripted response fail with 127."""
    runner = FakeCommandRunner()

    result = runner.run(["foundry", "service", "status"])

    assert not result.exit_success
    assert result.exit_code == 127


def test_fake_runner_matches_arguments_after_program() -> None:
    """Test that responses keyed by arguments apply to any program path."""
    runner = FakeCommandRunner({("--version",): CommandResult.ok("1.0")})

    assert runner.run(["foundry", "--version"]).stdout == "1.0"
    assert runner.run(["C:\\foundry.exe", "--version"]).stdout == "1.0"


def test_fake_runner_full_argv_takes_precedence() -> None:
    """Test that a full-argv key wins over an argument key."""
    runner = FakeCommandRunner(
        {
            ("--version",): CommandResult.ok("generic"),
            ("/opt/foundry", "--version"): CommandResult.ok("specific"),
        }
    )

    assert runner.run(["/opt/foundry", "--version"]).stdout == "specific"
    assert runner.run(["foundry", "--version"]).stdout == "generic"


def test_fake_runner_consumes_response_lists() -> None:
    """Test that list responses are replayed in order, last one repeating."""
    runner = FakeCommandRunner(
        {("cache", "list"): [CommandResult.ok("first"), CommandResult.ok("second")]}
    )

    outputs = [runner.run(["foundry", "cache", "list"]).stdout for _ in range(3)]

    assert outputs == ["first", "second", "second"]


def test_fake_runner_records_calls() -> None:
    """Test that run() and spawn() calls are recorded separately."""
    runner = FakeCommandRunner()

    runner.run(["foundry", "service", "list"])
    runner.spawn(["foundry", "service", "start"])

    assert runner.calls == [["foundry", "service", "list"]]
    assert runner.spawn_calls == [["foundry", "service", "start"]]
    assert runner.calls_for("service", "list") == [["foundry", "service", "list"]]


def test_fake_runner_missing_program_raises() -> None:
    """Test that missing programs raise ProcessSpawnError for run and spawn."""
    runner = FakeCommandRunner(missing_programs=["foundry"])

    with pytest.raises(ProcessSpawnError):
        runner.run(["foundry", "--help"])
    with pytest.raises(ProcessSpawnError):
        runner.spawn(["foundry", "service", "start"])


def test_fake_running_process_replays_polls() -> None:
    """Test that polls are replayed and output is available after exit."""
    child = FakeRunningProcess(polls=[None, None, 0], result=CommandResult.ok("done"))

    with_running = [child.poll(), child.poll()]
    with pytest.raises(RuntimeError):
        child.output()

    assert with_running == [None, None]
    assert child.poll() == 0
    assert child.poll() == 0
    assert child.output().stdout == "done"
    assert child.poll_count == 4
