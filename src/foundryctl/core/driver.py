"""State-changing operations on the Foundry Local service.

The service moves through UNINSTALLED -> INSTALLED_STOPPED -> STARTING ->
RUNNING_UNREADY -> READY, but none of these states is observed directly.
Each operation asks the prober whether work is needed, runs the verb, and
confirms the transition by polling again under a bounded RetryPolicy.

Every operation is idempotent: calling it when the target state already
holds does no work (load_model relies on the foundry CLI itself treating a
repeated load as a no-op).
"""

import logging
from enum import Enum

from foundryctl.core.errors import (
    CommandFailedError,
    OperationTimeoutError,
    ParseNotFoundError,
    PlatformUnsupportedError,
    RetryExhaustedError,
)
from foundryctl.core.parsing import reports_not_running
from foundryctl.core.prober import FoundryProber
from foundryctl.core.retry import poll_until, retry_call
from foundryctl.core.runner.abc import CommandRunner, RunningProcess
from foundryctl.core.time.abc import Time
from foundryctl.core.types import EndpointInfo, RetryPolicy

logger = logging.getLogger(__name__)

INSTALLER_PROGRAM = "winget"
PACKAGE_ID = "Microsoft.FoundryLocal"
INSTALL_PLATFORM = "win32"

START_POLL_INTERVAL = 0.25

DEFAULT_LOAD_ATTEMPTS = 3
DEFAULT_MODEL_ID_POLICY = RetryPolicy(attempts=10, delay=2.0)


class ServiceState(Enum):
    UNINSTALLED = "uninstalled"
    INSTALLED_STOPPED = "installed-stopped"
    STARTING = "starting"
    RUNNING_UNREADY = "running-unready"
    READY = "ready"


def installer_argv() -> list[str]:
    """Command line for installing Foundry Local with winget."""
    return [
        INSTALLER_PROGRAM,
        "install",
        "--id",
        PACKAGE_ID,
        "-e",
        "--accept-source-agreements",
        "--accept-package-agreements",
    ]


class FoundryDriver:
    """Drives install, start/stop, download and load of Foundry Local.

    Args:
        runner: Executes foundry and the installer
        prober: Read-only queries used to decide and confirm transitions
        time: Clock for polling delays and the start deadline
        platform: Value of sys.platform; installation is Windows-only
    """

    def __init__(
        self,
        runner: CommandRunner,
        prober: FoundryProber,
        time: Time,
        platform: str,
    ) -> None:
        self._runner = runner
        self._prober = prober
        self._time = time
        self._platform = platform
        self._start_child: RunningProcess | None = None

    def _foundry(self, *args: str) -> list[str]:
        return [self._prober.program, *args]

    def observe_state(self) -> ServiceState:
        """Infer the service state from a fresh round of probes.

        STARTING is only reported while a start child spawned by this
        driver is still alive and the service does not yet answer.
        """
        if not self._prober.is_installed():
            return ServiceState.UNINSTALLED

        if not self._prober.is_service_running():
            start_child = self._start_child
            if start_child is not None and start_child.poll() is None:
                return ServiceState.STARTING
            return ServiceState.INSTALLED_STOPPED

        if self._prober.is_service_ready():
            return ServiceState.READY
        return ServiceState.RUNNING_UNREADY

    def install(self) -> str:
        """Install Foundry Local if it is missing.

        Returns:
            The installed version (queried again after installing)

        Raises:
            PlatformUnsupportedError: If not installed and not on Windows
            CommandFailedError: If the installer exits non-zero
        """
        if self._prober.is_installed():
            version = self._prober.get_version()
            logger.info("Foundry Local %s is already installed", version)
            return version

        if self._platform != INSTALL_PLATFORM:
            raise PlatformUnsupportedError(self._platform)

        argv = installer_argv()
        logger.info("Installing Foundry Local with %s", INSTALLER_PROGRAM)
        result = self._runner.run(argv)
        if not result.exit_success:
            raise CommandFailedError(argv, result.exit_code, result.stderr or result.stdout)

        version = self._prober.get_version()
        logger.info("Installed Foundry Local %s", version)
        return version

    def start_with_timeout(self, timeout: float) -> None:
        """Start the service, waiting at most `timeout` seconds.

        The start verb may keep running long after the service is usable.
        If the deadline passes while it is still running, this returns
        normally and leaves the child running in the background. Callers
        must follow up with wait_for_ready() before relying on the service.

        Raises:
            ProcessSpawnError: If the start verb cannot be launched
            CommandFailedError: If the start verb exits non-zero in time
        """
        argv = self._foundry("service", "start")
        child = self._runner.spawn(argv)
        self._start_child = child
        deadline = self._time.monotonic() + timeout

        while True:
            exit_code = child.poll()
            if exit_code is not None:
                result = child.output()
                if exit_code != 0:
                    raise CommandFailedError(argv, exit_code, result.stderr or result.stdout)
                logger.info("Foundry service start completed")
                return

            if self._time.monotonic() >= deadline:
                logger.info(
                    "Foundry service start still running after %.1fs; "
                    "leaving pid %d to finish in the background",
                    timeout,
                    child.pid,
                )
                return

            self._time.sleep(START_POLL_INTERVAL)

    def ensure_service_running(self, timeout: float) -> None:
        """Start the service unless it already reports running."""
        if self._prober.is_service_running():
            logger.debug("Foundry service already running")
            return
        self.start_with_timeout(timeout)

    def stop_service(self) -> None:
        """Stop the service. Stopping a stopped service succeeds.

        Raises:
            CommandFailedError: If the stop verb fails for another reason
        """
        argv = self._foundry("service", "stop")
        result = self._runner.run(argv)
        if reports_not_running(result.stdout) or reports_not_running(result.stderr):
            logger.debug("Foundry service was not running")
            return
        if not result.exit_success:
            raise CommandFailedError(argv, result.exit_code, result.stderr)
        logger.info("Foundry service stopped")

    def ensure_model_downloaded(self, name: str) -> None:
        """Download a model into the local cache unless it is already there.

        Raises:
            CommandFailedError: If the download verb exits non-zero
        """
        if self._prober.is_model_cached(name):
            logger.debug("Model '%s' already cached", name)
            return

        argv = self._foundry("model", "download", name)
        logger.info("Downloading model '%s'", name)
        result = self._runner.run(argv)
        if not result.exit_success:
            raise CommandFailedError(argv, result.exit_code, result.stderr or result.stdout)
        logger.info("Downloaded model '%s'", name)

    def load_model(self, name: str) -> None:
        """Ask the service to load a model.

        Raises:
            CommandFailedError: If the load verb exits non-zero
        """
        argv = self._foundry("model", "load", name)
        result = self._runner.run(argv)
        if not result.exit_success:
            raise CommandFailedError(argv, result.exit_code, result.stderr or result.stdout)
        logger.info("Requested load of model '%s'", name)

    def ensure_model_loaded(
        self,
        name: str,
        load_attempts: int = DEFAULT_LOAD_ATTEMPTS,
        id_policy: RetryPolicy = DEFAULT_MODEL_ID_POLICY,
    ) -> str:
        """Load a model and wait until its resolved id is listed.

        Each attempt issues the load verb and then polls the loaded-models
        listing under id_policy. A failed load, or a load whose id never
        shows up, is retried after id_policy.delay.

        Returns:
            The resolved model id

        Raises:
            RetryExhaustedError: If no attempt produced a model id, chained
                from the last attempt's failure
        """

        def load_and_read_id() -> str:
            self.load_model(name)
            return self._wait_for_model_id(f"read model id after loading '{name}'", id_policy)

        model_id = retry_call(
            load_and_read_id,
            policy=RetryPolicy(attempts=load_attempts, delay=id_policy.delay),
            time=self._time,
            operation=f"load model '{name}'",
            retry_on=(CommandFailedError, RetryExhaustedError),
        )
        logger.info("Model '%s' loaded as %s", name, model_id)
        return model_id

    def _wait_for_model_id(self, operation: str, id_policy: RetryPolicy) -> str:
        failures: list[Exception] = []
        model_id = poll_until(
            self._prober.get_model_id,
            policy=id_policy,
            time=self._time,
            operation=operation,
            tolerate=(CommandFailedError, ParseNotFoundError),
            failures=failures,
        )
        if model_id is None:
            last_error = failures[-1] if failures else None
            raise RetryExhaustedError(operation, id_policy.attempts, last_error) from last_error
        return model_id

    def wait_for_cached(self, name: str, policy: RetryPolicy) -> None:
        """Poll the cache listing until the model appears.

        Raises:
            OperationTimeoutError: If every attempt reports not cached
        """
        cached = poll_until(
            lambda: self._prober.is_model_cached(name),
            policy=policy,
            time=self._time,
            operation=f"wait for model '{name}' in cache",
            tolerate=(CommandFailedError,),
        )
        if not cached:
            raise OperationTimeoutError(f"find model '{name}' in the cache", policy.attempts)

    def wait_for_ready(self, policy: RetryPolicy) -> None:
        """Poll the service status until it reports ready.

        Raises:
            OperationTimeoutError: If every attempt reports not ready
        """
        ready = poll_until(
            self._prober.is_service_ready,
            policy=policy,
            time=self._time,
            operation="wait for service ready",
            tolerate=(CommandFailedError,),
        )
        if not ready:
            raise OperationTimeoutError("see the Foundry service ready", policy.attempts)

    def get_endpoint_info(self, id_policy: RetryPolicy = DEFAULT_MODEL_ID_POLICY) -> EndpointInfo:
        """Discover the inference base URL and the loaded model id.

        The URL is read once; the model id usually appears in the listing
        later than the URL, so it is polled under id_policy.

        Returns:
            EndpointInfo with the normalized base URL and resolved model id

        Raises:
            CommandFailedError: If the status verb fails
            ParseNotFoundError: If the status output carries no URL
            RetryExhaustedError: If no model id appeared in time, chained from
                the last listing failure when there was one
        """
        base_url = self._prober.get_endpoint_url()
        model_id = self._wait_for_model_id("discover the loaded model id", id_policy)
        return EndpointInfo(base_url=base_url, model_id=model_id)
