"""Production CommandRunner using subprocess."""

import logging
import subprocess
import tempfile
from collections.abc import Sequence
from typing import IO

from foundryctl.core.errors import ProcessSpawnError, format_command
from foundryctl.core.runner.abc import CommandRunner, RunningProcess
from foundryctl.core.types import CommandResult

logger = logging.getLogger(__name__)

LOG_OUTPUT_LIMIT = 500


def abbreviate(text: str, limit: int = LOG_OUTPUT_LIMIT) -> str:
    """Shorten command output for log records.

    Args:
        text: Raw output
        limit: Maximum number of characters kept

    Returns:
        Stripped text, cut at limit with a marker noting how much was dropped
    """
    stripped = text.strip()
    if len(stripped) <= limit:
        return stripped
    return f"{stripped[:limit]}... [{len(stripped) - limit} more chars]"


def _log_exchange(argv: Sequence[str], result: CommandResult) -> None:
    logger.debug(
        "Ran %s: exit=%d stdout=%r stderr=%r",
        format_command(argv),
        result.exit_code,
        abbreviate(result.stdout),
        abbreviate(result.stderr),
    )


def _read_back(stream: IO[bytes]) -> str:
    stream.seek(0)
    return stream.read().decode("utf-8", errors="replace")


class RealRunningProcess(RunningProcess):
    """Child started by RealCommandRunner.spawn().

    Output goes to anonymous temporary files instead of pipes so a child
    that outlives the caller's interest never blocks on a full pipe.
    """

    def __init__(
        self,
        argv: Sequence[str],
        process: subprocess.Popen[bytes],
        stdout_file: IO[bytes],
        stderr_file: IO[bytes],
    ) -> None:
        self._argv = list(argv)
        self._process = process
        self._stdout_file = stdout_file
        self._stderr_file = stderr_file

    @property
    def pid(self) -> int:
        return self._process.pid

    def poll(self) -> int | None:
        return self._process.poll()

    def output(self) -> CommandResult:
        exit_code = self._process.poll()
        if exit_code is None:
            raise RuntimeError(f"Process {self.pid} is still running")

        result = CommandResult(
            exit_success=exit_code == 0,
            stdout=_read_back(self._stdout_file),
            stderr=_read_back(self._stderr_file),
            exit_code=exit_code,
        )
        self._stdout_file.close()
        self._stderr_file.close()
        _log_exchange(self._argv, result)
        return result


class RealCommandRunner(CommandRunner):
    """Production implementation using subprocess.

    All invocations run actual programs. Output is decoded as UTF-8 with
    replacement so status glyphs and stray bytes never raise.
    """

    def run(self, argv: Sequence[str]) -> CommandResult:
        try:
            completed = subprocess.run(
                list(argv),
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except FileNotFoundError as e:
            raise ProcessSpawnError(argv, "program not found") from e
        except OSError as e:
            raise ProcessSpawnError(argv, str(e)) from e

        result = CommandResult(
            exit_success=completed.returncode == 0,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            exit_code=completed.returncode,
        )
        _log_exchange(argv, result)
        return result

    def spawn(self, argv: Sequence[str]) -> RunningProcess:
        stdout_file = tempfile.TemporaryFile()
        stderr_file = tempfile.TemporaryFile()
        try:
            process = subprocess.Popen(
                list(argv),
                stdin=subprocess.DEVNULL,
                stdout=stdout_file,
                stderr=stderr_file,
            )
        except OSError as e:
            stdout_file.close()
            stderr_file.close()
            reason = "program not found" if isinstance(e, FileNotFoundError) else str(e)
            raise ProcessSpawnError(argv, reason) from e

        logger.debug("Spawned %s as pid %d", format_command(argv), process.pid)
        return RealRunningProcess(argv, process, stdout_file, stderr_file)
