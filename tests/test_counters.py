from __future__ import annotations

from collections import namedtuple
from unittest.mock import patch

import pytest

from hostmon.engine.normalizer import CpuUsageTracker
from hostmon.models import DiskCapacity
from hostmon.sources import counters

scputimes = namedtuple("scputimes", ["user", "nice", "system", "idle", "iowait"])
svmem = namedtuple("svmem", ["total", "available", "percent", "used", "free"])
sdiskusage = namedtuple("sdiskusage", ["total", "used", "free", "percent"])
linux_scputimes = namedtuple(
    "scputimes",
    ["user", "nice", "system", "idle", "iowait", "irq", "softirq", "steal", "guest", "guest_nice"],
)


class TestCpuTimes:
    def test_idle_and_total_per_core(self):
        with patch("hostmon.sources.counters.psutil") as mock_psutil:
            mock_psutil.cpu_times.return_value = [
                scputimes(10.0, 0.0, 5.0, 80.0, 5.0),
                scputimes(20.0, 1.0, 4.0, 70.0, 5.0),
            ]
            assert counters.read_cpu_times() == [(80.0, 100.0), (70.0, 100.0)]
        mock_psutil.cpu_times.assert_called_once_with(percpu=True)

    def test_guest_time_not_counted_twice(self):
        """Guest time is already part of user (and guest_nice of nice) on Linux."""
        before = linux_scputimes(100.0, 10.0, 0.0, 100.0, 0.0, 0.0, 0.0, 0.0, 100.0, 10.0)
        after = linux_scputimes(150.0, 10.0, 0.0, 150.0, 0.0, 0.0, 0.0, 0.0, 150.0, 10.0)
        tracker = CpuUsageTracker()

        with patch("hostmon.sources.counters.psutil.cpu_times", return_value=[before]):
            assert counters.read_cpu_times() == [(100.0, 210.0)]
            tracker.sample(counters.read_cpu_times())
        with patch("hostmon.sources.counters.psutil.cpu_times", return_value=[after]):
            usage = tracker.sample(counters.read_cpu_times())

        # 50 ticks of guest work, 50 ticks idle
        assert usage == pytest.approx(50.0)

    def test_unreadable_counters_are_empty(self):
        with patch("hostmon.sources.counters.psutil.cpu_times", side_effect=OSError("denied")):
            assert counters.read_cpu_times() == []


class TestCpuModel:
    def test_proc_cpuinfo(self, tmp_path):
        cpuinfo = tmp_path / "cpuinfo"
        cpuinfo.write_text(
            "processor\t: 0\nvendor_id\t: GenuineIntel\n"
            "model name\t: Intel(R) Core(TM) i7-8650U CPU @ 1.90GHz\n"
        )
        with patch("hostmon.sources.counters.platform.system", return_value="Linux"), \
                patch("hostmon.sources.counters._CPUINFO", cpuinfo):
            assert counters.read_cpu_model() == "Intel(R) Core(TM) i7-8650U CPU @ 1.90GHz"

    def test_unknown_when_nothing_reported(self):
        with patch("hostmon.sources.counters.platform.system", return_value="Plan9"), \
                patch("hostmon.sources.counters.platform.processor", return_value=""):
            assert counters.read_cpu_model() == counters.UNKNOWN_CPU


class TestMemory:
    def test_total_and_available(self):
        with patch("hostmon.sources.counters.psutil.virtual_memory") as mock_vm:
            mock_vm.return_value = svmem(16_000_000_000, 4_000_000_000, 75.0, 11_000_000_000, 1_000_000_000)
            assert counters.read_memory() == (16_000_000_000, 4_000_000_000)

    def test_unreadable_is_zero(self):
        with patch("hostmon.sources.counters.psutil.virtual_memory", side_effect=OSError):
            assert counters.read_memory() == (0, 0)


class TestRootUsage:
    def test_disk_usage(self):
        with patch("hostmon.sources.counters.psutil.disk_usage", return_value=sdiskusage(100, 40, 60, 40.0)):
            assert counters.read_root_usage() == DiskCapacity(total=100, used=40, free=60)

    def test_unreadable(self):
        with patch("hostmon.sources.counters.psutil.disk_usage", side_effect=PermissionError):
            assert counters.read_root_usage() is None


class TestIdentity:
    def test_uptime_from_boot_time(self):
        with patch("hostmon.sources.counters.psutil.boot_time", return_value=1_000.0), \
                patch("hostmon.sources.counters.time.time", return_value=4_600.0), \
                patch("hostmon.sources.counters.platform.system", return_value="Linux"), \
                patch("hostmon.sources.counters.platform.release", return_value="6.1.0"), \
                patch("hostmon.sources.counters.platform.machine", return_value="x86_64"):
            assert counters.read_identity() == ("Linux", "6.1.0", "x86_64", 3_600.0)
