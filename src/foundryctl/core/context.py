"""Application context with dependency injection."""

import sys
from dataclasses import dataclass

from foundryctl.core.background import BackgroundTaskRunner, ThreadBackgroundTaskRunner
from foundryctl.core.driver import FoundryDriver
from foundryctl.core.global_config import ConfigOps, FilesystemConfigOps, FoundryConfig
from foundryctl.core.locator import default_program
from foundryctl.core.prober import FoundryProber
from foundryctl.core.runner.abc import CommandRunner
from foundryctl.core.runner.real import RealCommandRunner
from foundryctl.core.settings_store import FilesystemSettingsStore, SettingsStore
from foundryctl.core.time.abc import Time
from foundryctl.core.time.real import RealTime


@dataclass(frozen=True)
class FoundryContext:
    """Immutable context holding all dependencies for foundryctl operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    runner: CommandRunner
    time: Time
    prober: FoundryProber
    driver: FoundryDriver
    settings_store: SettingsStore
    background: BackgroundTaskRunner
    config: FoundryConfig
    platform: str

    @staticmethod
    def for_test(
        runner: CommandRunner | None = None,
        time: Time | None = None,
        settings_store: SettingsStore | None = None,
        background: BackgroundTaskRunner | None = None,
        config: FoundryConfig | None = None,
        platform: str = "win32",
        program: str = "foundry",
    ) -> "FoundryContext":
        """Create test context with optional pre-configured dependencies.

        Unspecified dependencies use in-memory test defaults: an empty
        FakeCommandRunner, FakeTime, InMemorySettingsStore, an inline
        background runner and default configuration. No fallback install
        paths are configured, so installation checks depend only on the
        scripted runner.

        Example:
            >>> runner = FakeCommandRunner(responses={("--help",): CommandResult.ok()})
            >>> ctx = FoundryContext.for_test(runner=runner)
        """
        from tests.fakes.background import InlineBackgroundTaskRunner
        from tests.fakes.runner import FakeCommandRunner
        from tests.fakes.time import FakeTime

        from foundryctl.core.settings_store import InMemorySettingsStore

        runner = runner if runner is not None else FakeCommandRunner()
        time = time if time is not None else FakeTime()
        if settings_store is None:
            settings_store = InMemorySettingsStore()
        prober = FoundryProber(runner, program)
        return FoundryContext(
            runner=runner,
            time=time,
            prober=prober,
            driver=FoundryDriver(runner, prober, time, platform),
            settings_store=settings_store,
            background=background if background is not None else InlineBackgroundTaskRunner(),
            config=config if config is not None else FoundryConfig(),
            platform=platform,
        )


def create_context(config_ops: ConfigOps | None = None) -> FoundryContext:
    """Create production context with real implementations.

    Called once at CLI entry point. Loads configuration and resolves the
    foundry executable for this machine.

    Raises:
        ValueError: If the config file is malformed
    """
    config = (config_ops or FilesystemConfigOps()).load()
    platform = sys.platform
    program, fallback_paths = default_program(platform, config.executable)

    runner = RealCommandRunner()
    time = RealTime()
    prober = FoundryProber(runner, program, fallback_paths)
    return FoundryContext(
        runner=runner,
        time=time,
        prober=prober,
        driver=FoundryDriver(runner, prober, time, platform),
        settings_store=FilesystemSettingsStore(),
        background=ThreadBackgroundTaskRunner(),
        config=config,
        platform=platform,
    )
