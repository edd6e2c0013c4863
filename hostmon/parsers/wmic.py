from __future__ import annotations

from hostmon.models.disk import DiskCapacity, DiskHealth, HealthStatus


def parse_wmic_list(text: str) -> dict[str, str]:
    """Parse ``wmic ... /format:list`` output into a flat dict.

    When several records are listed (one per drive) the first non-empty value
    of each key is kept.
    """
    values: dict[str, str] = {}
    for line in text.splitlines():
        key, sep, value = line.partition("=")
        key, value = key.strip(), value.strip()
        if not sep or not key or not value:
            continue
        values.setdefault(key, value)
    return values


def parse_wmic_drive(text: str) -> DiskHealth:
    """Health from ``wmic diskdrive get Model,Status,SerialNumber /format:list``."""
    values = parse_wmic_list(text)
    ok = "Status=OK" in text
    return DiskHealth(
        smart_available=ok,
        health_status=HealthStatus.GOOD if ok else HealthStatus.UNKNOWN,
        model=values.get("Model"),
        serial=values.get("SerialNumber"),
    )


def parse_wmic_volume(text: str) -> DiskCapacity | None:
    """Capacity from ``wmic logicaldisk ... get Size,FreeSpace /format:list``."""
    values = parse_wmic_list(text)
    try:
        total = int(values["Size"])
        free = int(values["FreeSpace"])
    except (KeyError, ValueError):
        return None
    return DiskCapacity(total=total, used=max(0, total - free), free=free)
