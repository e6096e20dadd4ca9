"""Tests for the install command."""

from click.testing import CliRunner

from foundryctl.cli.cli import cli
from foundryctl.core.context import FoundryContext
from foundryctl.core.driver import installer_argv
from foundryctl.core.types import CommandResult
from tests.fakes.runner import FakeCommandRunner
from tests.test_utils.foundry_output import VERSION, installed_and_running


def _not_installed_runner() -> FakeCommandRunner:
    return FakeCommandRunner(
        {
            ("--help",): CommandResult.failed(exit_code=127),
            tuple(installer_argv()): CommandResult.ok("Successfully installed"),
            ("--version",): CommandResult.ok(VERSION),
        }
    )


def test_install_when_already_installed_skips_prompt() -> None:
    runner = FakeCommandRunner(installed_and_running())
    ctx = FoundryContext.for_test(runner=runner)

    result = CliRunner().invoke(cli, ["install"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Foundry Local 0.3.9267.43123 is installed." in result.output
    assert "winget" not in result.output


def test_install_asks_before_running_installer() -> None:
    runner = _not_installed_runner()
    ctx = FoundryContext.for_test(runner=runner)

    result = CliRunner().invoke(cli, ["install"], obj=ctx, input="y\n")

    assert result.exit_code == 0, result.output
    assert "Install Foundry Local with winget?" in result.output
    assert installer_argv() in runner.calls


def test_install_declined() -> None:
    runner = _not_installed_runner()
    ctx = FoundryContext.for_test(runner=runner)

    result = CliRunner().invoke(cli, ["install"], obj=ctx, input="n\n")

    assert result.exit_code == 1
    assert installer_argv() not in runner.calls


def test_install_yes_skips_prompt() -> None:
    runner = _not_installed_runner()
    ctx = FoundryContext.for_test(runner=runner)

    result = CliRunner().invoke(cli, ["install", "--yes"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Install Foundry Local with winget?" not in result.output
    assert installer_argv() in runner.calls


def test_install_on_unsupported_platform() -> None:
    ctx = FoundryContext.for_test(runner=_not_installed_runner(), platform="linux")

    result = CliRunner().invoke(cli, ["install", "-y"], obj=ctx)

    assert result.exit_code == 1
    assert "only supported on Windows (current platform: linux)" in result.output
