from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import StrEnum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny

from hostmon.models.cpu import CpuMetrics
from hostmon.models.disk import DiskMetrics
from hostmon.models.memory import MemoryMetrics
from hostmon.models.system import SystemIdentity

T = TypeVar("T", SystemIdentity, CpuMetrics, MemoryMetrics, DiskMetrics)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MetricCategory(StrEnum):
    SYSTEM = "system"
    CPU = "cpu"
    MEMORY = "memory"
    DISK = "disk"


class Reading(BaseModel, Generic[T]):
    """A metrics value plus an explicit success flag.

    ``ok`` is False when ``data`` is the fallback produced after a failure,
    which lets consumers tell "genuinely zero" from "unavailable".
    """

    model_config = ConfigDict(frozen=True)

    category: MetricCategory
    ok: bool = True
    data: T
    error: str | None = None
    taken_at: datetime = Field(default_factory=_utcnow)


class AggregateSnapshot(BaseModel):
    """All four categories sampled as close together as possible."""

    model_config = ConfigDict(frozen=True)

    system: SystemIdentity
    cpu: CpuMetrics
    memory: MemoryMetrics
    disk: DiskMetrics
    taken_at: datetime = Field(default_factory=_utcnow)


class MetricEvent(BaseModel):
    """A reading published by a poller onto the metric bus."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    reading: SerializeAsAny[Reading]
    timestamp: datetime = Field(default_factory=_utcnow)

    @property
    def category(self) -> MetricCategory:
        return self.reading.category
