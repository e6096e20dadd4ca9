from foundryctl.core.time.abc import Time
from foundryctl.core.time.real import RealTime

__all__ = [
    "RealTime",
    "Time",
]
