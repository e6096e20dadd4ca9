"""Process invocation interface.

This module provides a clean abstraction over external program execution,
so the prober and driver can be tested with scripted console output.

Architecture:
- CommandRunner: Abstract base class defining the interface
- RealCommandRunner: Production implementation using subprocess
- FakeCommandRunner (tests/fakes): In-memory scripted implementation

No timeout is applied here. Every verb except "service start" returns
promptly; the start verb is bounded by the driver, which spawns it as a
child and stops waiting at its own deadline.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from foundryctl.core.types import CommandResult


class RunningProcess(ABC):
    """Handle to a child process started without waiting for it."""

    @property
    @abstractmethod
    def pid(self) -> int:
        """Operating system process id of the child."""
        ...

    @abstractmethod
    def poll(self) -> int | None:
        """Return the exit code if the child has exited, else None."""
        ...

    @abstractmethod
    def output(self) -> CommandResult:
        """Collect the child's result.

        Only valid once poll() has returned an exit code.

        Raises:
            RuntimeError: If the child is still running
        """
        ...


class CommandRunner(ABC):
    """Abstract interface for running external programs.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    @abstractmethod
    def run(self, argv: Sequence[str]) -> CommandResult:
        """Run a program to completion and capture its output.

        Args:
            argv: Program followed by its arguments

        Returns:
            CommandResult with exit status and decoded stdout/stderr

        Raises:
            ProcessSpawnError: If the program is missing or cannot be started
        """
        ...

    @abstractmethod
    def spawn(self, argv: Sequence[str]) -> RunningProcess:
        """Start a program without waiting for it to exit.

        Args:
            argv: Program followed by its arguments

        Returns:
            Handle for polling the child

        Raises:
            ProcessSpawnError: If the program is missing or cannot be started
        """
        ...
