from .metric_poller import MetricPoller, build_pollers

__all__ = [
    "MetricPoller",
    "build_pollers",
]
