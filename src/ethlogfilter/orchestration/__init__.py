"""Wiring of the node client and the filter-logs use case."""

from ethlogfilter.orchestration.orchestrator import run_filter_logs

__all__ = [
    "run_filter_logs",
]
