from __future__ import annotations

import threading
from typing import Iterable

from hostmon.models.cpu import CpuSnapshot
from hostmon.models.disk import DiskCapacity, DiskHealth, DiskMetrics
from hostmon.models.memory import MemoryMetrics


def usage_percent(used: float, total: float) -> float:
    """``used`` as a percentage of ``total``; 0 when ``total`` is not positive."""
    if total <= 0:
        return 0.0
    return 100.0 * used / total


def _clamp_percent(value: float) -> float:
    return max(0.0, min(100.0, value))


class CpuUsageTracker:
    """Derives CPU usage from the delta between consecutive counter samples.

    Holds the previous aggregate snapshot. The read of the prior snapshot and
    its replacement happen under one lock so concurrent samples never compute
    against the same prior value.
    """

    def __init__(self) -> None:
        self._previous = CpuSnapshot()
        self._lock = threading.Lock()

    @property
    def previous(self) -> CpuSnapshot:
        return self._previous

    def sample(self, per_core: Iterable[tuple[float, float]]) -> float:
        idle = 0.0
        total = 0.0
        for core_idle, core_total in per_core:
            idle += core_idle
            total += core_total
        current = CpuSnapshot(idle=idle, total=total)

        with self._lock:
            prior = self._previous
            self._previous = current

        # No prior sample: the first reading is defined as zero.
        if prior.total == 0 and prior.idle == 0:
            return 0.0

        total_delta = current.total - prior.total
        if total_delta <= 0:
            return 0.0
        idle_delta = current.idle - prior.idle
        return _clamp_percent(100.0 - 100.0 * idle_delta / total_delta)

    def reset(self) -> None:
        with self._lock:
            self._previous = CpuSnapshot()


def memory_metrics(total: int, free: int) -> MemoryMetrics:
    free = max(0, min(free, total))
    used = total - free
    return MemoryMetrics(
        total=total,
        used=used,
        free=free,
        usage_percent=usage_percent(used, total),
    )


def disk_metrics(capacity: DiskCapacity, health: DiskHealth) -> DiskMetrics:
    return DiskMetrics(
        total=capacity.total,
        used=capacity.used,
        free=capacity.free,
        usage_percent=usage_percent(capacity.used, capacity.total),
        health=health,
    )
