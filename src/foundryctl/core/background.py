"""Fire-and-forget execution of long-running workflows.

Starting the service and preparing a model can take minutes. The operation
that triggers such a workflow hands it to a BackgroundTaskRunner and
returns at once. The outcome is never reported back to the submitter; it
is only visible in the log and in later status snapshots.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable

logger = logging.getLogger(__name__)


class BackgroundTaskRunner(ABC):
    """Abstract runner for detached tasks."""

    @abstractmethod
    def submit(self, name: str, task: Callable[[], object]) -> None:
        """Run task independently of the caller.

        Args:
            name: Description used in log records
            task: Zero-argument callable; its return value is discarded
        """
        ...


def run_logged(name: str, task: Callable[[], object]) -> None:
    """Run a task, logging its outcome instead of raising."""
    logger.info("Background task '%s' started", name)
    try:
        task()
    except Exception as e:
        logger.warning("Background task '%s' failed: %s", name, e)
        return
    logger.info("Background task '%s' finished", name)


class ThreadBackgroundTaskRunner(BackgroundTaskRunner):
    """Runs each task on its own thread.

    Threads are non-daemon so a CLI process stays alive until its
    background work completes, even after the command itself returned.
    """

    def submit(self, name: str, task: Callable[[], object]) -> None:
        thread = threading.Thread(
            target=run_logged,
            args=(name, task),
            name=f"foundryctl-{name}",
            daemon=False,
        )
        thread.start()
