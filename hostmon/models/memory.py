from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class MemoryMetrics(BaseModel):
    """Physical memory usage in bytes."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(default=0, ge=0)
    used: int = Field(default=0, ge=0)
    free: int = Field(default=0, ge=0)
    usage_percent: float = 0.0
