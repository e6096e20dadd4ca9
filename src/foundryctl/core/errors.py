"""Error kinds raised by the Foundry integration layer.

Every message is a single line so the CLI boundary can show it as-is.
Expected negative states (not installed, not running, not cached) are
returned as plain values by the prober and never raised.
"""

from collections.abc import Sequence


def _one_line(text: str) -> str:
    return " ".join(text.split())


def format_command(command: Sequence[str]) -> str:
    """Render an argv list the way a user would type it."""
    return " ".join(str(arg) for arg in command)


class FoundryError(RuntimeError):
    """Base class for every failure surfaced by this package."""


class NotInstalledError(FoundryError):
    def __init__(self) -> None:
        super().__init__("Foundry Local is not installed.")


class PlatformUnsupportedError(FoundryError):
    def __init__(self, platform: str) -> None:
        self.platform = platform
        super().__init__(
            f"Automatic installation of Foundry Local is only supported on Windows "
            f"(current platform: {platform})."
        )


class ProcessSpawnError(FoundryError):
    """The external program could not be started at all."""

    def __init__(self, command: Sequence[str], reason: str) -> None:
        self.command = list(command)
        self.reason = reason
        super().__init__(f"Could not run '{format_command(command)}': {_one_line(reason)}")


class CommandFailedError(FoundryError):
    """The external program ran and exited non-zero."""

    def __init__(self, command: Sequence[str], exit_code: int, stderr: str) -> None:
        self.command = list(command)
        self.exit_code = exit_code
        self.stderr = stderr
        message = f"'{format_command(command)}' exited with status {exit_code}"
        detail = _one_line(stderr)
        if detail:
            message += f": {detail}"
        super().__init__(message)


class ParseNotFoundError(FoundryError):
    """A field could not be recovered from the program's console output."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Could not find {field} in Foundry output.")


class OperationTimeoutError(FoundryError):
    def __init__(self, operation: str, attempts: int) -> None:
        self.operation = operation
        self.attempts = attempts
        super().__init__(f"Timed out waiting to {operation} after {attempts} attempts.")


class RetryExhaustedError(FoundryError):
    def __init__(self, operation: str, attempts: int, last_error: Exception | None) -> None:
        self.operation = operation
        self.attempts = attempts
        self.last_error = last_error
        message = f"Failed to {operation} after {attempts} attempts"
        if last_error is not None:
            message += f": {_one_line(str(last_error))}"
        super().__init__(message)
