from __future__ import annotations

import asyncio
import logging
import time

from hostmon.config import Settings
from hostmon.engine.event_bus import MetricBus
from hostmon.engine.telemetry import TelemetryFacade
from hostmon.models.snapshot import MetricCategory, MetricEvent, Reading

logger = logging.getLogger(__name__)


class MetricPoller:
    """Reads one metric category through the facade on a fixed cadence.

    Every reading goes onto the bus, including fallbacks with ``ok=False``.
    ``failures`` counts consecutive failed reads and ``last_duration`` is the
    wall time of the latest read, so a hung tool shows up in ``status()``.
    """

    def __init__(
        self,
        bus: MetricBus,
        facade: TelemetryFacade,
        category: MetricCategory,
        interval: float = 5.0,
    ) -> None:
        self.bus = bus
        self.facade = facade
        self.category = category
        self.interval = interval
        self.name = f"{category.value}_poller"
        self.last_duration: float | None = None
        self.failures = 0
        self._running = False
        self._task: asyncio.Task | None = None

    # ── lifecycle ────────────────────────────────────────

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._loop())
        logger.info("Poller [%s] started (interval=%.1fs)", self.name, self.interval)

    async def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Poller [%s] stopped", self.name)

    # ── polling ─────────────────────────────────────────

    async def poll_once(self) -> Reading:
        started = time.monotonic()
        reading = await self.facade.read(self.category)
        self.last_duration = time.monotonic() - started

        if reading.ok:
            if self.failures:
                logger.info("Poller [%s] recovered after %d failed reads", self.name, self.failures)
            self.failures = 0
        else:
            self.failures += 1
            if self.failures == 1:
                logger.warning("Poller [%s] read failed: %s", self.name, reading.error)
        if self.last_duration > self.interval:
            logger.warning(
                "Poller [%s] read took %.2fs, longer than its %.1fs interval",
                self.name, self.last_duration, self.interval,
            )

        self.bus.publish(MetricEvent(reading=reading))
        return reading

    async def _loop(self) -> None:
        while self._running:
            started = time.monotonic()
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                raise
            except Exception:
                self.failures += 1
                logger.exception("Poller [%s] error during poll", self.name)
            # Sleep out the rest of the interval so slow reads keep the cadence.
            await asyncio.sleep(max(0.0, self.interval - (time.monotonic() - started)))

    # ── introspection ───────────────────────────────────

    @property
    def running(self) -> bool:
        return self._running

    def status(self) -> dict:
        return {
            "name": self.name,
            "category": self.category.value,
            "interval": self.interval,
            "running": self._running,
            "last_duration": self.last_duration,
            "failures": self.failures,
        }


def build_pollers(bus: MetricBus, facade: TelemetryFacade, settings: Settings) -> list[MetricPoller]:
    """One poller per category at the configured cadence."""
    intervals = {
        MetricCategory.SYSTEM: settings.identity_interval,
        MetricCategory.CPU: settings.cpu_interval,
        MetricCategory.MEMORY: settings.memory_interval,
        MetricCategory.DISK: settings.disk_interval,
    }
    return [
        MetricPoller(bus, facade, category, interval=interval)
        for category, interval in intervals.items()
    ]
