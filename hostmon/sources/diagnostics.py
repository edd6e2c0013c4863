from __future__ import annotations

import logging
import shutil
from abc import ABC, abstractmethod
from typing import Sequence

from hostmon.config import (
    MIN_SMART_OUTPUT,
    SMART_CANDIDATE_DEVICES,
    TOOL_TIMEOUT_SECONDS,
    WINDOWS_SYSTEM_VOLUME,
)
from hostmon.models.disk import DiskCapacity, DiskHealth, HealthStatus
from hostmon.models.system import PlatformKind
from hostmon.parsers.df import parse_df
from hostmon.parsers.smart import parse_smart_report
from hostmon.parsers.wmic import parse_wmic_drive, parse_wmic_volume
from hostmon.sources import counters
from hostmon.sources.runner import run_tool

logger = logging.getLogger(__name__)


class DiagnosticSource(ABC):
    """Platform-specific origin of disk capacity and drive health.

    Implementations never raise for an unavailable tool; they return ``None``
    capacity or an unavailable :class:`DiskHealth` instead.
    """

    name: str = "base"

    def __init__(self, timeout: float = TOOL_TIMEOUT_SECONDS) -> None:
        self.timeout = timeout

    @abstractmethod
    async def read_capacity(self) -> DiskCapacity | None:
        """Total/used/free bytes of the system volume."""
        ...

    @abstractmethod
    async def read_health(self) -> DiskHealth:
        """Diagnostics for the system drive."""
        ...


class WindowsDiagnosticSource(DiagnosticSource):
    """Queries ``wmic`` for the fixed system volume and the disk drives."""

    name = "windows"

    def __init__(
        self,
        timeout: float = TOOL_TIMEOUT_SECONDS,
        volume: str = WINDOWS_SYSTEM_VOLUME,
    ) -> None:
        super().__init__(timeout)
        self.volume = volume

    async def read_capacity(self) -> DiskCapacity | None:
        stdout = await run_tool(
            [
                "wmic", "logicaldisk", "where", f"DeviceID='{self.volume}'",
                "get", "Size,FreeSpace", "/format:list",
            ],
            timeout=self.timeout,
        )
        if stdout is None:
            return None
        return parse_wmic_volume(stdout)

    async def read_health(self) -> DiskHealth:
        stdout = await run_tool(
            ["wmic", "diskdrive", "get", "Model,Status,SerialNumber", "/format:list"],
            timeout=self.timeout,
        )
        if stdout is None:
            return DiskHealth()
        return parse_wmic_drive(stdout)


class UnixDiagnosticSource(DiagnosticSource):
    """Reads ``df`` for the root mount and probes drives with ``smartctl``."""

    name = "unix"
    smartctl = "smartctl"

    def __init__(
        self,
        timeout: float = TOOL_TIMEOUT_SECONDS,
        devices: Sequence[str] = SMART_CANDIDATE_DEVICES,
        mount: str = "/",
    ) -> None:
        super().__init__(timeout)
        self.devices = tuple(devices)
        self.mount = mount

    async def read_capacity(self) -> DiskCapacity | None:
        stdout = await run_tool(["df", "-k", self.mount], timeout=self.timeout)
        if stdout is None:
            return None
        return parse_df(stdout)

    async def read_health(self) -> DiskHealth:
        health = DiskHealth()
        for device in self.devices:
            candidate = await self._probe(device)
            if candidate is None:
                continue
            health = _merge_reports(health, candidate)
            if health.smart_available:
                logger.debug("SMART data read from %s", device)
                break
        return health

    async def _probe(self, device: str) -> DiskHealth | None:
        if shutil.which(self.smartctl) is None:
            return None
        # smartctl reports drive state in its exit status bits, keep the text.
        stdout = await run_tool(
            [self.smartctl, "-a", device], timeout=self.timeout, allow_nonzero=True
        )
        if not stdout or len(stdout) < MIN_SMART_OUTPUT:
            return None
        return parse_smart_report(stdout)


def _merge_reports(earlier: DiskHealth, later: DiskHealth) -> DiskHealth:
    """Layer the fields ``later`` reported over ``earlier``.

    Availability follows the latest report; a good verdict is never downgraded.
    """
    update = later.model_dump(exclude_none=True, exclude={"health_status", "smart_available"})
    update["smart_available"] = later.smart_available
    if later.health_status != HealthStatus.UNKNOWN:
        update["health_status"] = later.health_status
    return earlier.model_copy(update=update)


class UnsupportedDiagnosticSource(DiagnosticSource):
    """Platforms without a known diagnostic tool."""

    name = "unsupported"

    async def read_capacity(self) -> DiskCapacity | None:
        return counters.read_root_usage()

    async def read_health(self) -> DiskHealth:
        return DiskHealth()


def select_diagnostic_source(
    kind: PlatformKind,
    timeout: float = TOOL_TIMEOUT_SECONDS,
    devices: Sequence[str] = SMART_CANDIDATE_DEVICES,
    volume: str = WINDOWS_SYSTEM_VOLUME,
) -> DiagnosticSource:
    if kind == PlatformKind.WINDOWS:
        return WindowsDiagnosticSource(timeout=timeout, volume=volume)
    if kind.unix_like:
        return UnixDiagnosticSource(timeout=timeout, devices=devices)
    return UnsupportedDiagnosticSource(timeout=timeout)
