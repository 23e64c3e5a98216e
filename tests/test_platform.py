import os
from types import SimpleNamespace
from unittest import mock

import psutil
import pytest

from myaku.platform import (
    CpuInfo,
    DiskInfo,
    NetworkInfo,
    ProcessInfo,
    PsutilMetrics,
    SystemMetrics,
    create_metrics,
)


@pytest.fixture
def metrics():
    with mock.patch("time.sleep"):
        return PsutilMetrics()


def test_system_metrics_is_abstract():
    with pytest.raises(TypeError):
        SystemMetrics()


def test_create_metrics_gives_a_source():
    with mock.patch("time.sleep"):
        source = create_metrics()
    assert isinstance(source, SystemMetrics)
    assert len(source.cpu_info().per_core) >= 1


def test_cpu_total_is_average_of_cores(metrics):
    with mock.patch("psutil.cpu_percent", return_value=[10.0, 30.0]):
        metrics.refresh()
    info = metrics.cpu_info()
    assert info.per_core == [10.0, 30.0]
    assert info.total * len(info.per_core) == pytest.approx(sum(info.per_core))
    assert info.core_count >= 1


def test_cpu_no_cores_total_zero(metrics):
    with mock.patch("psutil.cpu_percent", return_value=[]), mock.patch(
        "psutil.cpu_count", return_value=None
    ):
        metrics.refresh()
    info = metrics.cpu_info()
    assert info.total == 0.0
    assert info.core_count == 0


def test_memory_info_from_psutil(metrics):
    vm = SimpleNamespace(total=1000, used=600, available=400)
    swap = SimpleNamespace(total=200, used=50)
    with mock.patch("psutil.virtual_memory", return_value=vm), mock.patch(
        "psutil.swap_memory", return_value=swap
    ):
        metrics.refresh()
    mem = metrics.memory_info()
    assert (mem.total, mem.used, mem.available) == (1000, 600, 400)
    assert (mem.swap_total, mem.swap_used) == (200, 50)


def test_disk_info_skips_unreadable_mounts(metrics):
    parts = [
        SimpleNamespace(device="disk0s1", mountpoint="/", fstype="apfs"),
        SimpleNamespace(device="disk9", mountpoint="/locked", fstype="apfs"),
    ]

    def usage(mount):
        if mount == "/locked":
            raise PermissionError(mount)
        return SimpleNamespace(total=100, used=55, free=40)

    with mock.patch("psutil.disk_partitions", return_value=parts), mock.patch(
        "psutil.disk_usage", side_effect=usage
    ):
        metrics.refresh()
    disks = metrics.disk_info()
    assert len(disks) == 1
    disk = disks[0]
    assert isinstance(disk, DiskInfo)
    assert (disk.name, disk.mount_point, disk.fs_type) == ("disk0s1", "/", "apfs")
    assert disk.available == 40
    assert disk.used + disk.available == disk.total


def test_network_info_from_counters(metrics):
    counters = {"en0": SimpleNamespace(bytes_recv=1_000_000, bytes_sent=500_000)}
    with mock.patch("psutil.net_io_counters", return_value=counters):
        metrics.refresh()
    assert metrics.network_info() == [NetworkInfo("en0", 1_000_000, 500_000)]


def test_process_list_fallbacks(metrics):
    entries = [
        SimpleNamespace(
            info={
                "pid": 100,
                "name": "alpha",
                "cpu_percent": 50.0,
                "memory_info": SimpleNamespace(rss=2048),
                "status": "running",
                "ppid": 1,
                "username": "root",
            }
        ),
        SimpleNamespace(
            info={
                "pid": 200,
                "name": None,
                "cpu_percent": None,
                "memory_info": None,
                "status": None,
                "ppid": None,
                "username": None,
            }
        ),
    ]
    with mock.patch("psutil.process_iter", return_value=entries):
        metrics.refresh()
    procs = metrics.process_list()
    assert procs[0] == ProcessInfo(100, "alpha", 50.0, 2048, "running", 1, "root")
    assert procs[1].user == "-"
    assert procs[1].memory == 0
    assert procs[1].parent_pid == 0


def test_real_process_list_contains_self(metrics):
    pids = {p.pid for p in metrics.process_list()}
    assert os.getpid() in pids


def test_real_memory_and_disks_consistent(metrics):
    mem = metrics.memory_info()
    assert 0 < mem.total
    assert mem.available <= mem.total
    for disk in metrics.disk_info():
        assert disk.used == max(disk.total - disk.available, 0)


def test_uptime_and_load(metrics):
    assert metrics.uptime_secs() >= 0
    load = metrics.load_average()
    assert len(load) == 3
    assert all(value >= 0.0 for value in load)


def test_load_average_unavailable(metrics):
    with mock.patch("psutil.getloadavg", side_effect=OSError):
        assert metrics.load_average() == (0.0, 0.0, 0.0)


def test_cpu_info_is_snapshot_copy(metrics):
    info = metrics.cpu_info()
    assert isinstance(info, CpuInfo)
    info.per_core.append(999.0)
    assert 999.0 not in metrics.cpu_info().per_core