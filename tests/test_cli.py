import json
from unittest import mock

import pytest

from myaku.cli import main, run_daemon, snapshot_json
from myaku.collector import MetricsCollector
from myaku.config import MyakuConfig
from myaku.platform import (
    CpuInfo,
    DiskInfo,
    MemoryInfo,
    NetworkInfo,
    SystemMetrics,
)


class FakeSource(SystemMetrics):
    def __init__(self, disks=None, networks=None):
        self._disks = disks if disks is not None else []
        self._networks = networks if networks is not None else []

    def refresh(self):
        pass

    def cpu_info(self):
        return CpuInfo(per_core=[10.0, 30.0], total=20.0, brand="Test CPU", core_count=2)

    def memory_info(self):
        return MemoryInfo(total=1000, used=400, available=600, swap_total=200, swap_used=50)

    def disk_info(self):
        return list(self._disks)

    def network_info(self):
        return list(self._networks)

    def process_list(self):
        return []

    def uptime_secs(self):
        return 3661

    def load_average(self):
        return (1.5, 2.0, 1.8)


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("MYAKU_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))


def _collector(**kwargs):
    collector = MetricsCollector(MyakuConfig(), FakeSource(**kwargs))
    collector.refresh()
    return collector


def test_snapshot_json_fields():
    collector = _collector(
        disks=[DiskInfo("sda1", "/", "ext4", 1000, 250, 750)],
        networks=[NetworkInfo("eth0", 5000, 3000)],
    )
    data = json.loads(snapshot_json(collector))
    assert data["cpu"]["brand"] == "Test CPU"
    assert data["cpu"]["cores"] == 2
    assert data["cpu"]["per_core"] == [10.0, 30.0]
    assert data["cpu"]["total"] == round(collector.cpu.total_usage(), 1)
    assert data["memory"]["total_bytes"] == 1000
    assert data["memory"]["swap_used_bytes"] == 50
    assert data["memory"]["ram_percent"] == round(collector.memory.ram_percent(), 1)
    assert data["disks"] == [
        {
            "mount": "/",
            "total": 1000,
            "used": 250,
            "percent": round(collector.disk.mounts[0].usage_percent(), 1),
        }
    ]
    assert data["network"] == [{"interface": "eth0", "rx_bytes": 5000, "tx_bytes": 3000}]
    assert data["uptime_seconds"] == 3661
    assert data["load_average"] == [1.5, 2.0, 1.8]


def test_snapshot_json_empty_lists():
    data = json.loads(snapshot_json(_collector()))
    assert data["disks"] == []
    assert data["network"] == []


def test_snapshot_json_escapes_names():
    collector = _collector(networks=[NetworkInfo('we"ird', 1, 2)])
    data = json.loads(snapshot_json(collector))
    assert data["network"][0]["interface"] == 'we"ird'


def test_main_without_command_prints_help(capsys, isolated_config):
    assert main([]) == 2
    assert "usage" in capsys.readouterr().out


def test_main_rejects_unknown_command(isolated_config):
    with pytest.raises(SystemExit) as excinfo:
        main(["bogus"])
    assert excinfo.value.code == 2


def test_main_snapshot_prints_json(capsys, isolated_config):
    assert main(["snapshot"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["memory"]["used_bytes"] <= data["memory"]["total_bytes"]
    assert len(data["cpu"]["per_core"]) >= 1
    assert len(data["load_average"]) == 3


def test_daemon_stops_on_interrupt():
    calls = {"long": 0}

    def fake_sleep(seconds):
        if seconds >= 0.5:
            calls["long"] += 1
            if calls["long"] > 2:
                raise KeyboardInterrupt

    with mock.patch("time.sleep", side_effect=fake_sleep):
        samples = run_daemon(MyakuConfig())
    assert samples == 2
    assert calls["long"] == 3


def test_daemon_interrupted_before_first_sample():
    def fake_sleep(seconds):
        if seconds >= 0.5:
            raise KeyboardInterrupt

    with mock.patch("time.sleep", side_effect=fake_sleep):
        assert run_daemon(MyakuConfig()) == 0