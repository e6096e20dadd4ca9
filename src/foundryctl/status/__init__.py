"""Status snapshot collection."""

from foundryctl.status.aggregator import collect_status

__all__ = ["collect_status"]
