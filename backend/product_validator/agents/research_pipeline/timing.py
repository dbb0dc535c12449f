"""
Latency instrumentation for the research pipeline.

Every line has the form ``[TIMING] <scope>: <event> (<ms>ms)`` so one run can
be followed end to end: a pair of lines per node, one per SERP query and a
per-platform summary at the end of the discussion search.
"""

import functools
import time
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Callable, Dict, List, Optional


def _elapsed_ms(since: float) -> float:
    return (time.perf_counter() - since) * 1000


def log_timing(scope: str, event: str, duration_ms: Optional[float] = None) -> None:
    suffix = f" ({duration_ms:.0f}ms)" if duration_ms is not None else ""
    print(f"[TIMING] {scope}: {event}{suffix}")


def timed_node(node_name: str):
    """Log the wall time of an async graph node, also when it raises."""
    def decorator(node: Callable[..., Awaitable[Any]]):
        @functools.wraps(node)
        async def wrapper(state, *args, **kwargs):
            started = time.perf_counter()
            log_timing(node_name, "node started")
            try:
                return await node(state, *args, **kwargs)
            finally:
                log_timing(node_name, "node finished", _elapsed_ms(started))
        return wrapper
    return decorator


class StepTimer:
    """
    Collects call latencies inside one node, grouped by label.

    The discussion search makes up to 20 SERP calls, so the summary reports
    the call count and slowest call per label next to the summed time.

    Usage:
        timer = StepTimer("discussions")
        async with timer.async_step("serp:reddit.com"):
            await search_with_google_dorks(query)
        timer.summary()
    """

    def __init__(self, scope: str):
        self.scope = scope
        self.started = time.perf_counter()
        self.calls: Dict[str, List[float]] = {}

    @asynccontextmanager
    async def async_step(self, label: str):
        started = time.perf_counter()
        try:
            yield
        finally:
            duration = _elapsed_ms(started)
            self.calls.setdefault(label, []).append(duration)
            log_timing(self.scope, label, duration)

    def summary(self) -> float:
        """Log per-label totals and the node's overall time; return the latter."""
        for label, durations in self.calls.items():
            log_timing(
                self.scope,
                f"{label} x{len(durations)}, slowest {max(durations):.0f}ms",
                sum(durations),
            )
        total = _elapsed_ms(self.started)
        log_timing(self.scope, "total", total)
        return total
