"""System metric snapshots and the sources that produce them."""

import platform as _stdlib_platform
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

import psutil

_PROCESS_ATTRS = ["pid", "name", "cpu_percent", "memory_info", "status", "ppid", "username"]
_CPU_WARMUP_SECONDS = 0.2


@dataclass
class CpuInfo:
    """CPU usage: per-core percentages (0-100), their average, brand and core count."""

    per_core: list
    total: float
    brand: str
    core_count: int


@dataclass
class MemoryInfo:
    """Memory and swap usage in bytes."""

    total: int
    used: int
    available: int
    swap_total: int
    swap_used: int


@dataclass
class DiskInfo:
    """Usage of one mounted volume, in bytes."""

    name: str
    mount_point: str
    fs_type: str
    total: int
    used: int
    available: int


@dataclass
class NetworkInfo:
    """Cumulative byte counters of one network interface."""

    interface: str
    rx_bytes: int
    tx_bytes: int


@dataclass
class ProcessInfo:
    """A running process."""

    pid: int
    name: str
    cpu: float
    memory: int
    status: str
    parent_pid: int = 0
    user: str = "-"


class SystemMetrics(ABC):
    """A source of system metrics; call ``refresh`` to take a new sample."""

    @abstractmethod
    def refresh(self) -> None:
        """Take a fresh sample of all metrics."""

    @abstractmethod
    def cpu_info(self) -> CpuInfo:
        """CPU usage per core and in total."""

    @abstractmethod
    def memory_info(self) -> MemoryInfo:
        """RAM and swap usage."""

    @abstractmethod
    def disk_info(self) -> list:
        """Usage of every mounted volume."""

    @abstractmethod
    def network_info(self) -> list:
        """Counters of every network interface."""

    @abstractmethod
    def process_list(self) -> list:
        """The running processes."""

    @abstractmethod
    def uptime_secs(self) -> int:
        """System uptime in seconds."""

    @abstractmethod
    def load_average(self) -> tuple:
        """The 1, 5 and 15 minute load averages."""


def _cpu_brand() -> str:
    try:
        for line in Path("/proc/cpuinfo").read_text(encoding="utf-8").splitlines():
            key, _, value = line.partition(":")
            if key.strip() == "model name":
                return value.strip()
    except OSError:
        pass
    return _stdlib_platform.processor() or ""


class PsutilMetrics(SystemMetrics):
    """System metrics read through psutil; values are cached between refreshes."""

    def __init__(self) -> None:
        self._brand = _cpu_brand()
        # The first CPU reading only sets a baseline; the second one yields usage.
        psutil.cpu_percent(percpu=True)
        time.sleep(_CPU_WARMUP_SECONDS)
        self.refresh()

    def refresh(self) -> None:
        self._per_core = [float(v) for v in psutil.cpu_percent(percpu=True)]
        self._physical_cores = psutil.cpu_count(logical=False)
        self._memory = self._read_memory()
        self._disks = self._read_disks()
        self._networks = self._read_networks()
        self._processes = self._read_processes()

    @staticmethod
    def _read_memory() -> MemoryInfo:
        vm = psutil.virtual_memory()
        swap = psutil.swap_memory()
        return MemoryInfo(
            total=vm.total,
            used=vm.used,
            available=vm.available,
            swap_total=swap.total,
            swap_used=swap.used,
        )

    @staticmethod
    def _read_disks() -> list:
        disks = []
        for part in psutil.disk_partitions(all=False):
            try:
                usage = psutil.disk_usage(part.mountpoint)
            except OSError:
                continue
            disks.append(
                DiskInfo(
                    name=part.device,
                    mount_point=part.mountpoint,
                    fs_type=part.fstype,
                    total=usage.total,
                    used=max(usage.total - usage.free, 0),
                    available=usage.free,
                )
            )
        return disks

    @staticmethod
    def _read_networks() -> list:
        counters = psutil.net_io_counters(pernic=True) or {}
        return [
            NetworkInfo(interface=name, rx_bytes=data.bytes_recv, tx_bytes=data.bytes_sent)
            for name, data in counters.items()
        ]

    @staticmethod
    def _read_processes() -> list:
        processes = []
        for proc in psutil.process_iter(attrs=_PROCESS_ATTRS, ad_value=None):
            info = proc.info
            mem = info.get("memory_info")
            processes.append(
                ProcessInfo(
                    pid=info["pid"],
                    name=info.get("name") or "",
                    cpu=float(info.get("cpu_percent") or 0.0),
                    memory=mem.rss if mem is not None else 0,
                    status=str(info.get("status") or ""),
                    parent_pid=info.get("ppid") or 0,
                    user=info.get("username") or "-",
                )
            )
        return processes

    def cpu_info(self) -> CpuInfo:
        per_core = list(self._per_core)
        total = sum(per_core) / len(per_core) if per_core else 0.0
        return CpuInfo(
            per_core=per_core,
            total=total,
            brand=self._brand,
            core_count=self._physical_cores or len(per_core),
        )

    def memory_info(self) -> MemoryInfo:
        return self._memory

    def disk_info(self) -> list:
        return list(self._disks)

    def network_info(self) -> list:
        return list(self._networks)

    def process_list(self) -> list:
        return list(self._processes)

    def uptime_secs(self) -> int:
        return max(int(time.time() - psutil.boot_time()), 0)

    def load_average(self) -> tuple:
        try:
            one, five, fifteen = psutil.getloadavg()
        except (AttributeError, OSError):
            return (0.0, 0.0, 0.0)
        return (float(one), float(five), float(fifteen))


def create_metrics() -> SystemMetrics:
    """Create the system metrics source for this machine."""
    return PsutilMetrics()