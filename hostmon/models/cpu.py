from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CpuSnapshot(BaseModel):
    """Aggregate idle/total time counters summed across logical cores."""

    model_config = ConfigDict(frozen=True)

    idle: float = 0.0
    total: float = 0.0


class CpuMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    model: str = "Unknown CPU"
    cores: int = Field(default=0, ge=0)
    usage_percent: float = Field(default=0.0, ge=0, le=100)
