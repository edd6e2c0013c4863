from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class PlatformKind(StrEnum):
    WINDOWS = "windows"
    LINUX = "linux"
    MACOS = "macos"
    OTHER = "other"

    @classmethod
    def from_system(cls, system_name: str) -> PlatformKind:
        """Map a ``platform.system()`` value onto a kind."""
        name = system_name.lower()
        if name == "windows" or name.startswith(("cygwin", "msys")):
            return cls.WINDOWS
        if name == "linux":
            return cls.LINUX
        if name == "darwin":
            return cls.MACOS
        return cls.OTHER

    @property
    def unix_like(self) -> bool:
        return self in (PlatformKind.LINUX, PlatformKind.MACOS)


class SystemIdentity(BaseModel):
    """OS identity at the moment of the query."""

    model_config = ConfigDict(frozen=True)

    platform: PlatformKind = PlatformKind.OTHER
    os_name: str = "Unknown"
    version: str = "Unknown"
    arch: str = "Unknown"
    uptime_seconds: float = Field(default=0.0, ge=0)
