from .event_bus import MetricBus
from .normalizer import CpuUsageTracker, disk_metrics, memory_metrics, usage_percent
from .telemetry import TelemetryFacade

__all__ = [
    "CpuUsageTracker",
    "MetricBus",
    "TelemetryFacade",
    "disk_metrics",
    "memory_metrics",
    "usage_percent",
]
