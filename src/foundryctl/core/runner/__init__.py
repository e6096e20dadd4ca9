from foundryctl.core.runner.abc import CommandRunner, RunningProcess
from foundryctl.core.runner.real import RealCommandRunner, RealRunningProcess, abbreviate

__all__ = [
    "CommandRunner",
    "RealCommandRunner",
    "RealRunningProcess",
    "RunningProcess",
    "abbreviate",
]
