from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from hostmon.models.snapshot import MetricCategory, MetricEvent

logger = logging.getLogger(__name__)

Subscriber = Callable[[MetricEvent], Awaitable[None]]


class MetricBus:
    """Latest-value relay from pollers to display-side subscribers.

    Each category holds only its newest reading. Publishing over a reading
    that has not been relayed yet replaces it, so a slow subscriber catches
    up on current values instead of working through a backlog.
    """

    def __init__(self) -> None:
        self._latest: dict[MetricCategory, MetricEvent] = {}
        self._dirty: set[MetricCategory] = set()
        self._wakeup = asyncio.Event()
        self._subscribers: list[Subscriber] = []
        self._running = False
        self._relay_task: asyncio.Task | None = None

    # ── lifecycle ────────────────────────────────────────

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._relay_task = asyncio.create_task(self._relay_loop())
        logger.info("MetricBus started")

    async def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        if self._relay_task:
            self._relay_task.cancel()
            try:
                await self._relay_task
            except asyncio.CancelledError:
                pass
            self._relay_task = None
        await self._flush()
        logger.info("MetricBus stopped")

    # ── publish / subscribe ─────────────────────────────

    def publish(self, event: MetricEvent) -> None:
        replaced = event.category in self._dirty
        self._latest[event.category] = event
        self._dirty.add(event.category)
        self._wakeup.set()
        if replaced:
            logger.debug("Unrelayed %s reading replaced by %s", event.category, event.id)

    def latest(self, category: MetricCategory) -> MetricEvent | None:
        return self._latest.get(category)

    def latest_all(self) -> list[MetricEvent]:
        return [self._latest[c] for c in MetricCategory if c in self._latest]

    def subscribe(self, callback: Subscriber) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        self._subscribers.remove(callback)

    # ── internals ───────────────────────────────────────

    async def _relay_loop(self) -> None:
        while self._running:
            await self._wakeup.wait()
            self._wakeup.clear()
            await self._flush()

    async def _flush(self) -> None:
        # Readings published while a subscriber is awaited land back in _dirty.
        while self._dirty:
            category = self._dirty.pop()
            await self._dispatch(self._latest[category])

    async def _dispatch(self, event: MetricEvent) -> None:
        for sub in list(self._subscribers):
            try:
                await sub(event)
            except Exception:
                logger.exception("Subscriber %s failed for %s reading %s", sub, event.category, event.id)

    # ── introspection ───────────────────────────────────

    @property
    def pending(self) -> int:
        """Categories holding a reading not yet relayed."""
        return len(self._dirty)

    @property
    def running(self) -> bool:
        return self._running

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
