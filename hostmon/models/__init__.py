from .cpu import CpuMetrics, CpuSnapshot
from .disk import DiskCapacity, DiskHealth, DiskMetrics, HealthStatus
from .memory import MemoryMetrics
from .snapshot import AggregateSnapshot, MetricCategory, MetricEvent, Reading
from .system import PlatformKind, SystemIdentity

__all__ = [
    "AggregateSnapshot",
    "CpuMetrics",
    "CpuSnapshot",
    "DiskCapacity",
    "DiskHealth",
    "DiskMetrics",
    "HealthStatus",
    "MemoryMetrics",
    "MetricCategory",
    "MetricEvent",
    "PlatformKind",
    "Reading",
    "SystemIdentity",
]
