from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class HealthStatus(StrEnum):
    GOOD = "good"
    # Declared for consumers; the parsers only ever report GOOD or UNKNOWN.
    WARNING = "warning"
    CRITICAL = "critical"
    UNKNOWN = "unknown"


class DiskHealth(BaseModel):
    """Drive diagnostics as reported by the platform tool.

    Every optional field is ``None`` when the tool did not report it.
    ``None`` never means zero.
    """

    model_config = ConfigDict(frozen=True)

    temperature_c: int | None = None
    power_on_hours: int | None = None
    power_cycle_count: int | None = None
    reallocated_sectors: int | None = None
    pending_sectors: int | None = None
    health_status: HealthStatus = HealthStatus.UNKNOWN
    smart_available: bool = False
    life_remaining_percent: int | None = None
    wear_leveling: int | None = None
    model: str | None = None
    serial: str | None = None


class DiskCapacity(BaseModel):
    """Raw capacity triple for one volume, in bytes."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(default=0, ge=0)
    used: int = Field(default=0, ge=0)
    free: int = Field(default=0, ge=0)


class DiskMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: int = Field(default=0, ge=0)
    used: int = Field(default=0, ge=0)
    free: int = Field(default=0, ge=0)
    usage_percent: float = 0.0
    health: DiskHealth | None = None
