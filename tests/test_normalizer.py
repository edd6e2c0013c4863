from __future__ import annotations

import threading
import time

import pytest

from hostmon.engine.normalizer import (
    CpuUsageTracker,
    disk_metrics,
    memory_metrics,
    usage_percent,
)
from hostmon.models import CpuSnapshot, DiskCapacity, DiskHealth, HealthStatus, MemoryMetrics


class RecordingTracker(CpuUsageTracker):
    """Records every read and write of the previous snapshot.

    The read pauses briefly so unsynchronized samples would interleave.
    """

    def __init__(self) -> None:
        self.reads: list[CpuSnapshot] = []
        self.writes: list[CpuSnapshot] = []
        self.stored = CpuSnapshot()
        super().__init__()

    @property
    def _previous(self) -> CpuSnapshot:
        value = self.stored
        time.sleep(0.001)
        self.reads.append(value)
        return value

    @_previous.setter
    def _previous(self, value: CpuSnapshot) -> None:
        self.writes.append(value)
        self.stored = value


class TestUsagePercent:
    @pytest.mark.parametrize(
        "used, total, expected",
        [(0, 100, 0.0), (25, 100, 25.0), (100, 100, 100.0), (1, 3, 100 / 3)],
    )
    def test_ratio(self, used, total, expected):
        assert usage_percent(used, total) == pytest.approx(expected)

    def test_zero_total_guarded(self):
        assert usage_percent(0, 0) == 0.0
        assert usage_percent(10, 0) == 0.0


class TestCpuUsageTracker:
    def test_first_sample_is_zero(self):
        tracker = CpuUsageTracker()
        assert tracker.sample([(5000.0, 9000.0), (4000.0, 9000.0)]) == 0.0
        assert tracker.previous.idle == 9000.0
        assert tracker.previous.total == 18000.0

    def test_delta_usage(self):
        tracker = CpuUsageTracker()
        tracker.sample([(100.0, 200.0)])
        # 20 idle out of 80 elapsed -> 75% busy
        assert tracker.sample([(120.0, 280.0)]) == pytest.approx(75.0)

    def test_sums_across_cores(self):
        tracker = CpuUsageTracker()
        tracker.sample([(100.0, 200.0), (100.0, 200.0)])
        usage = tracker.sample([(150.0, 300.0), (100.0, 300.0)])
        # idle delta 50, total delta 200
        assert usage == pytest.approx(75.0)

    def test_equal_snapshots_yield_zero(self):
        tracker = CpuUsageTracker()
        tracker.sample([(100.0, 200.0)])
        assert tracker.sample([(100.0, 200.0)]) == 0.0

    def test_fully_idle_and_fully_busy(self):
        tracker = CpuUsageTracker()
        tracker.sample([(100.0, 200.0)])
        assert tracker.sample([(200.0, 300.0)]) == 0.0
        assert tracker.sample([(200.0, 400.0)]) == 100.0

    def test_clamped_when_idle_outpaces_total(self):
        tracker = CpuUsageTracker()
        tracker.sample([(100.0, 200.0)])
        assert tracker.sample([(150.0, 210.0)]) == 0.0

    def test_counter_reset_yields_zero(self):
        tracker = CpuUsageTracker()
        tracker.sample([(100.0, 200.0)])
        assert tracker.sample([(10.0, 20.0)]) == 0.0

    def test_previous_overwritten_every_call(self):
        tracker = CpuUsageTracker()
        tracker.sample([(1.0, 2.0)])
        tracker.sample([(1.0, 2.0)])
        tracker.sample([(3.0, 8.0)])
        assert (tracker.previous.idle, tracker.previous.total) == (3.0, 8.0)

    def test_empty_counter_set_degrades_to_zero(self):
        tracker = CpuUsageTracker()
        assert tracker.sample([]) == 0.0
        assert tracker.sample([(10.0, 20.0)]) == 0.0

    def test_monotonic_series_stays_in_range(self):
        tracker = CpuUsageTracker()
        idle, total = 0.0, 0.0
        for step in range(1, 50):
            idle += step % 7
            total += (step % 7) + (step % 5)
            usage = tracker.sample([(idle, total)])
            assert 0.0 <= usage <= 100.0

    def test_concurrent_samples_form_one_chain(self):
        """Every snapshot written is used as a prior exactly once, except the
        last one, which stays as the tracker's previous snapshot."""
        tracker = RecordingTracker()
        threads = [
            threading.Thread(target=tracker.sample, args=([(float(n), float(n) * 2)],))
            for n in range(1, 33)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        prior_ids = [id(s) for s in tracker.reads]
        written_ids = {id(s) for s in tracker.writes}

        assert len(tracker.writes) == 33  # initial snapshot plus one per sample
        assert len(prior_ids) == 32
        assert len(set(prior_ids)) == 32
        assert set(prior_ids) <= written_ids
        assert written_ids - set(prior_ids) == {id(tracker.stored)}

    def test_reset(self):
        tracker = CpuUsageTracker()
        tracker.sample([(100.0, 200.0)])
        tracker.reset()
        assert tracker.sample([(120.0, 280.0)]) == 0.0


class TestMemoryMetrics:
    def test_end_to_end_example(self):
        assert memory_metrics(16_000_000_000, 4_000_000_000) == MemoryMetrics(
            total=16_000_000_000,
            used=12_000_000_000,
            free=4_000_000_000,
            usage_percent=75.0,
        )

    def test_zero_total(self):
        assert memory_metrics(0, 0) == MemoryMetrics()

    def test_free_larger_than_total_is_clamped(self):
        metrics = memory_metrics(100, 150)
        assert metrics.used == 0
        assert metrics.free == 100
        assert metrics.total == metrics.used + metrics.free


class TestDiskMetrics:
    def test_attaches_health(self):
        capacity = DiskCapacity(total=107374182400, used=53687091200, free=53687091200)
        health = DiskHealth(temperature_c=42, smart_available=True)

        metrics = disk_metrics(capacity, health)

        assert metrics.usage_percent == 50.0
        assert metrics.health == health

    def test_unavailable_health_still_attached(self):
        metrics = disk_metrics(DiskCapacity(), DiskHealth())
        assert metrics.usage_percent == 0.0
        assert metrics.health is not None
        assert metrics.health.smart_available is False
        assert metrics.health.health_status == HealthStatus.UNKNOWN
