import logging
import threading

import pytest

from foundryctl.core.background import ThreadBackgroundTaskRunner, run_logged


def test_run_logged_reports_success(caplog: pytest.LogCaptureFixture) -> None:
    calls: list[str] = []

    with caplog.at_level(logging.INFO, logger="foundryctl.core.background"):
        run_logged("prepare", lambda: calls.append("ran"))

    assert calls == ["ran"]
    assert "Background task 'prepare' finished" in caplog.text


def test_run_logged_swallows_and_logs_failure(caplog: pytest.LogCaptureFixture) -> None:
    def fail() -> None:
        raise RuntimeError("model download failed")

    with caplog.at_level(logging.WARNING, logger="foundryctl.core.background"):
        run_logged("prepare", fail)

    assert "Background task 'prepare' failed: model download failed" in caplog.text


def test_thread_runner_runs_task_on_named_thread() -> None:
    done = threading.Event()
    names: list[str] = []

    def task() -> None:
        names.append(threading.current_thread().name)
        done.set()

    ThreadBackgroundTaskRunner().submit("prepare model phi-4-mini", task)

    assert done.wait(timeout=10)
    assert names == ["foundryctl-prepare model phi-4-mini"]
