from __future__ import annotations

import logging
import platform
import time
from pathlib import Path

import psutil

from hostmon.models.disk import DiskCapacity

logger = logging.getLogger(__name__)

UNKNOWN_CPU = "Unknown CPU"
_CPUINFO = Path("/proc/cpuinfo")


def read_cpu_times() -> list[tuple[float, float]]:
    """Return ``(idle, total)`` time counters for every logical core.

    ``total`` is the sum of every time bucket the OS reports for the core,
    minus guest time, which Linux already counts inside user and nice.
    An empty list is returned when the counters cannot be read.
    """
    try:
        per_core = psutil.cpu_times(percpu=True)
    except (OSError, RuntimeError, NotImplementedError):
        logger.debug("CPU time counters unavailable", exc_info=True)
        return []
    return [(core.idle, _total_time(core)) for core in per_core]


def _total_time(core) -> float:
    total = float(sum(core))
    total -= getattr(core, "guest", 0.0)
    total -= getattr(core, "guest_nice", 0.0)
    return total


def read_cpu_count() -> int:
    try:
        return psutil.cpu_count(logical=True) or 0
    except (OSError, RuntimeError, NotImplementedError):
        return 0


def read_cpu_model() -> str:
    if platform.system() == "Linux":
        try:
            for line in _CPUINFO.read_text(errors="replace").splitlines():
                # x86 says "model name", many ARM kernels only "Model" or "Hardware"
                key, _, value = line.partition(":")
                if key.strip() in ("model name", "Model", "Hardware") and value.strip():
                    return value.strip()
        except OSError:
            logger.debug("Cannot read %s", _CPUINFO)
    return platform.processor().strip() or UNKNOWN_CPU


def read_memory() -> tuple[int, int]:
    """Return ``(total, free)`` physical memory in bytes, ``(0, 0)`` if unreadable."""
    try:
        vm = psutil.virtual_memory()
    except (OSError, RuntimeError):
        logger.debug("Memory counters unavailable", exc_info=True)
        return 0, 0
    return int(vm.total), int(vm.available)


def read_root_usage(path: str = "/") -> DiskCapacity | None:
    try:
        usage = psutil.disk_usage(path)
    except OSError:
        logger.debug("Cannot stat %s", path, exc_info=True)
        return None
    return DiskCapacity(total=usage.total, used=usage.used, free=usage.free)


def read_identity() -> tuple[str, str, str, float]:
    """Return ``(system, release, machine, uptime_seconds)``."""
    uptime = max(0.0, time.time() - psutil.boot_time())
    return platform.system(), platform.release(), platform.machine(), uptime
