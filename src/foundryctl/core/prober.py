"""Read-only queries against the foundry CLI.

Every query runs a fresh command; nothing is cached between calls. Expected
negative states (not installed, not running, not cached, no model loaded)
come back as ordinary values. Only unexpected command failures and parse
failures are raised.
"""

import logging
from collections.abc import Sequence
from pathlib import Path

from foundryctl.core.errors import (
    CommandFailedError,
    ProcessSpawnError,
)
from foundryctl.core.locator import find_installed_path
from foundryctl.core.parsing import (
    extract_endpoint_url,
    extract_model_id,
    has_no_models_loaded,
    parse_loaded_models,
    parse_model_list,
    parse_version,
    reports_in_progress,
    reports_not_running,
    reports_running_on,
    strip_ansi,
)
from foundryctl.core.runner.abc import CommandRunner
from foundryctl.core.types import CommandResult, ModelDescriptor

logger = logging.getLogger(__name__)

HELP_ARGS = ("--help",)
VERSION_ARGS = ("--version",)
SERVICE_STATUS_ARGS = ("service", "status")
SERVICE_LIST_ARGS = ("service", "list")
CACHE_LIST_ARGS = ("cache", "list")
MODEL_LIST_ARGS = ("model", "list")


class FoundryProber:
    """Stateless status queries for the Foundry Local service.

    Args:
        runner: Executes the foundry program
        program: Resolved program path or name
        fallback_paths: Well-known install locations, used by is_installed()
            and by get_version()'s second attempt
    """

    def __init__(
        self,
        runner: CommandRunner,
        program: str,
        fallback_paths: Sequence[Path] = (),
    ) -> None:
        self._runner = runner
        self._program = program
        self._fallback_paths = list(fallback_paths)

    @property
    def program(self) -> str:
        return self._program

    def _argv(self, args: Sequence[str], program: str | None = None) -> list[str]:
        return [program or self._program, *args]

    def _run(self, args: Sequence[str]) -> CommandResult:
        return self._runner.run(self._argv(args))

    def _run_checked(self, args: Sequence[str]) -> CommandResult:
        result = self._run(args)
        if not result.exit_success:
            raise CommandFailedError(self._argv(args), result.exit_code, result.stderr)
        return result

    def is_installed(self) -> bool:
        """Check whether the foundry CLI is available.

        True if the help verb runs successfully, or, as a secondary signal,
        if a well-known install path exists on disk.
        """
        try:
            result = self._run(HELP_ARGS)
            if result.exit_success:
                return True
        except ProcessSpawnError as e:
            logger.debug("foundry help check could not run: %s", e)

        return find_installed_path(self._fallback_paths) is not None

    def get_version(self) -> str:
        """Return the installed foundry version string.

        If the primary invocation fails, retries once using the well-known
        install path directly.

        Raises:
            ProcessSpawnError: If no attempt could start the program
            CommandFailedError: If the version verb exits non-zero
            ParseNotFoundError: If the version output is blank
        """
        try:
            return parse_version(self._run_checked(VERSION_ARGS).stdout)
        except (ProcessSpawnError, CommandFailedError) as first_error:
            installed = find_installed_path(self._fallback_paths)
            if installed is None or str(installed) == self._program:
                raise
            logger.debug(
                "Version check via %s failed (%s); retrying with %s",
                self._program,
                first_error,
                installed,
            )

        argv = self._argv(VERSION_ARGS, program=str(installed))
        result = self._runner.run(argv)
        if not result.exit_success:
            raise CommandFailedError(argv, result.exit_code, result.stderr)
        return parse_version(result.stdout)

    def is_service_running(self) -> bool:
        """Check whether the service process is up.

        "not running" / "not responding" in either stream means False
        regardless of exit code. Any other non-zero exit is an error.

        Raises:
            CommandFailedError: On a non-zero exit without a recognizable
                not-running phrase
        """
        args = SERVICE_STATUS_ARGS
        result = self._run(args)
        if reports_not_running(result.stdout) or reports_not_running(result.stderr):
            return False
        if not result.exit_success:
            raise CommandFailedError(self._argv(args), result.exit_code, result.stderr)
        return True

    def is_service_ready(self) -> bool:
        """Check whether the service has finished starting up.

        The service can report itself as running while startup work is
        still in progress; ready means a "running on" address is printed
        and nothing is in progress.

        Raises:
            CommandFailedError: On a non-zero exit without a recognizable
                not-running phrase
        """
        args = SERVICE_STATUS_ARGS
        result = self._run(args)
        combined = f"{result.stdout}\n{result.stderr}"
        if reports_not_running(combined):
            return False
        if not result.exit_success:
            raise CommandFailedError(self._argv(args), result.exit_code, result.stderr)
        return reports_running_on(result.stdout) and not reports_in_progress(combined)

    def list_cached_models(self) -> list[str]:
        """Return names of models in the local cache.

        A "not running" answer means the cache store is offline and is
        reported as an empty cache.
        """
        args = CACHE_LIST_ARGS
        result = self._run(args)
        if reports_not_running(result.stdout) or reports_not_running(result.stderr):
            return []
        if not result.exit_success:
            raise CommandFailedError(self._argv(args), result.exit_code, result.stderr)
        return parse_model_list(result.stdout)

    def is_model_cached(self, name: str) -> bool:
        """Check whether a model is in the local cache.

        Case-insensitive substring match of the name against each line of
        the cache listing. An offline cache store reads as not cached.
        """
        args = CACHE_LIST_ARGS
        result = self._run(args)
        if reports_not_running(result.stdout) or reports_not_running(result.stderr):
            return False
        if not result.exit_success:
            raise CommandFailedError(self._argv(args), result.exit_code, result.stderr)

        needle = name.lower()
        return any(needle in line.lower() for line in strip_ansi(result.stdout).splitlines())

    def get_endpoint_url(self) -> str:
        """Return the normalized inference base URL from the status output.

        Raises:
            CommandFailedError: If the status verb exits non-zero
            ParseNotFoundError: If the output carries no URL
        """
        return extract_endpoint_url(self._run_checked(SERVICE_STATUS_ARGS).stdout)

    def get_model_id(self) -> str | None:
        """Return the resolved id of the loaded model (single attempt).

        Returns:
            The model id, or None when the service reports that no models
            are loaded or that it is not running

        Raises:
            CommandFailedError: If the listing verb exits non-zero
            ParseNotFoundError: If a model seems loaded but no id is readable
        """
        args = SERVICE_LIST_ARGS
        result = self._run(args)
        if has_no_models_loaded(result.stdout):
            return None
        if reports_not_running(result.stdout) or reports_not_running(result.stderr):
            return None
        if not result.exit_success:
            raise CommandFailedError(self._argv(args), result.exit_code, result.stderr)
        return extract_model_id(result.stdout)

    def list_loaded_models(self) -> list[ModelDescriptor]:
        """Return every model row of the loaded-models listing."""
        result = self._run_checked(SERVICE_LIST_ARGS)
        if has_no_models_loaded(result.stdout):
            return []
        return parse_loaded_models(result.stdout)

    def list_available_models(self) -> list[str]:
        """Return model aliases from the catalog listing."""
        return parse_model_list(self._run_checked(MODEL_LIST_ARGS).stdout)
