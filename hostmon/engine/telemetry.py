from __future__ import annotations

import asyncio
import logging
import platform
from typing import Awaitable, Callable

from hostmon.config import settings
from hostmon.errors import SourceUnavailable, TelemetryError
from hostmon.engine.normalizer import CpuUsageTracker, disk_metrics, memory_metrics
from hostmon.models import (
    AggregateSnapshot,
    CpuMetrics,
    DiskMetrics,
    MemoryMetrics,
    MetricCategory,
    PlatformKind,
    Reading,
    SystemIdentity,
)
from hostmon.sources import counters
from hostmon.sources.diagnostics import DiagnosticSource, select_diagnostic_source

logger = logging.getLogger(__name__)

FALLBACK_IDENTITY = SystemIdentity()
FALLBACK_CPU = CpuMetrics()
FALLBACK_MEMORY = MemoryMetrics()
FALLBACK_DISK = DiskMetrics()


class TelemetryFacade:
    """Single entry point for the display layer.

    Every query is total: failures anywhere in the pipeline are logged and
    turned into a fallback value of the right shape. ``read_*`` methods also
    report whether the value is real (``Reading.ok``); ``get_*`` return the
    bare value.
    """

    def __init__(
        self,
        source: DiagnosticSource | None = None,
        platform_kind: PlatformKind | None = None,
    ) -> None:
        self.platform_kind = platform_kind or PlatformKind.from_system(platform.system())
        self.source = source or select_diagnostic_source(
            self.platform_kind,
            timeout=settings.tool_timeout,
            devices=settings.smart_devices,
            volume=settings.windows_volume,
        )
        self.cpu_tracker = CpuUsageTracker()
        logger.debug(
            "TelemetryFacade using %s diagnostics on %s",
            self.source.name,
            self.platform_kind,
        )

    # ── readings ────────────────────────────────────────

    async def read_system_identity(self) -> Reading[SystemIdentity]:
        return await self._guarded(MetricCategory.SYSTEM, self._system_identity, FALLBACK_IDENTITY)

    async def read_cpu_metrics(self) -> Reading[CpuMetrics]:
        return await self._guarded(MetricCategory.CPU, self._cpu_metrics, FALLBACK_CPU)

    async def read_memory_metrics(self) -> Reading[MemoryMetrics]:
        return await self._guarded(MetricCategory.MEMORY, self._memory_metrics, FALLBACK_MEMORY)

    async def read_disk_metrics(self) -> Reading[DiskMetrics]:
        return await self._guarded(MetricCategory.DISK, self._disk_metrics, FALLBACK_DISK)

    async def read(self, category: MetricCategory) -> Reading:
        readers = {
            MetricCategory.SYSTEM: self.read_system_identity,
            MetricCategory.CPU: self.read_cpu_metrics,
            MetricCategory.MEMORY: self.read_memory_metrics,
            MetricCategory.DISK: self.read_disk_metrics,
        }
        return await readers[category]()

    # ── plain values ────────────────────────────────────

    async def get_system_identity(self) -> SystemIdentity:
        return (await self.read_system_identity()).data

    async def get_cpu_metrics(self) -> CpuMetrics:
        return (await self.read_cpu_metrics()).data

    async def get_memory_metrics(self) -> MemoryMetrics:
        return (await self.read_memory_metrics()).data

    async def get_disk_metrics(self) -> DiskMetrics:
        return (await self.read_disk_metrics()).data

    async def get_aggregate_snapshot(self) -> AggregateSnapshot:
        system, cpu, memory, disk = await asyncio.gather(
            self.read_system_identity(),
            self.read_cpu_metrics(),
            self.read_memory_metrics(),
            self.read_disk_metrics(),
        )
        return AggregateSnapshot(
            system=system.data,
            cpu=cpu.data,
            memory=memory.data,
            disk=disk.data,
        )

    # ── pipelines ───────────────────────────────────────

    async def _system_identity(self) -> SystemIdentity:
        os_name, version, arch, uptime = counters.read_identity()
        return SystemIdentity(
            platform=self.platform_kind,
            os_name=os_name or "Unknown",
            version=version or "Unknown",
            arch=arch or "Unknown",
            uptime_seconds=uptime,
        )

    async def _cpu_metrics(self) -> CpuMetrics:
        usage = self.cpu_tracker.sample(counters.read_cpu_times())
        return CpuMetrics(
            model=counters.read_cpu_model(),
            cores=counters.read_cpu_count(),
            usage_percent=usage,
        )

    async def _memory_metrics(self) -> MemoryMetrics:
        total, free = counters.read_memory()
        return memory_metrics(total, free)

    async def _disk_metrics(self) -> DiskMetrics:
        capacity = await self.source.read_capacity()
        if capacity is None:
            raise SourceUnavailable(f"no disk capacity from {self.source.name} source")
        health = await self.source.read_health()
        return disk_metrics(capacity, health)

    # ── failure isolation ───────────────────────────────

    @staticmethod
    async def _guarded(category: MetricCategory, op: Callable[[], Awaitable], fallback) -> Reading:
        try:
            data = await op()
        except asyncio.CancelledError:
            raise
        except TelemetryError as exc:
            logger.warning("Telemetry query [%s] unavailable: %s", category, exc)
            return Reading(category=category, ok=False, data=fallback, error=str(exc))
        except Exception as exc:
            logger.exception("Telemetry query [%s] failed, returning fallback", category)
            return Reading(category=category, ok=False, data=fallback, error=str(exc) or type(exc).__name__)
        return Reading(category=category, data=data)
