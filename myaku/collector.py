"""Central collector that samples every subsystem and keeps their history."""

from typing import Optional

from myaku.config import MyakuConfig
from myaku.cpu import CpuMetrics
from myaku.disk import DiskMetrics
from myaku.memory import MemoryMetrics
from myaku.network import NetworkMetrics
from myaku.platform import SystemMetrics, create_metrics

_SORT_KEYS = {
    "cpu": lambda p: p.cpu,
    "memory": lambda p: p.memory,
    "pid": lambda p: p.pid,
    "name": lambda p: p.name.lower(),
}


class MetricsCollector:
    """Samples a metrics source and records CPU, memory, disk and network history."""

    def __init__(self, config: MyakuConfig, source: Optional[SystemMetrics] = None) -> None:
        self._source = source if source is not None else create_metrics()
        history_len = config.monitoring.history_seconds
        core_count = len(self._source.cpu_info().per_core)
        self.cpu = CpuMetrics(core_count, history_len)
        self.memory = MemoryMetrics(history_len)
        self.disk = DiskMetrics(history_len)
        self.network = NetworkMetrics(history_len)
        self.uptime_secs = 0
        self.load_average = (0.0, 0.0, 0.0)

    def refresh(self) -> None:
        """Take a new sample from the source and record it."""
        source = self._source
        source.refresh()
        self.cpu.update(source.cpu_info())
        self.memory.update(source.memory_info())
        self.disk.update(source.disk_info())
        self.network.update(source.network_info())
        self.uptime_secs = source.uptime_secs()
        self.load_average = tuple(source.load_average())

    def processes(self, sort_by: str, ascending: bool) -> list:
        """Snapshot of running processes sorted by ``cpu``, ``memory``, ``pid`` or ``name``."""
        procs = list(self._source.process_list())
        procs.sort(key=_SORT_KEYS.get(sort_by, _SORT_KEYS["cpu"]))
        if not ascending:
            procs.reverse()
        return procs

    def uptime_display(self) -> str:
        """Uptime as ``"Xd Xh Xm"``, ``"Xh Xm Xs"`` or ``"Xm Xs"``."""
        s = self.uptime_secs
        days, rest = divmod(s, 86400)
        hours, rest = divmod(rest, 3600)
        minutes, seconds = divmod(rest, 60)
        if days > 0:
            return f"{days}d {hours}h {minutes}m"
        if hours > 0:
            return f"{hours}h {minutes}m {seconds}s"
        return f"{minutes}m {seconds}s"

    def load_display(self) -> str:
        one, five, fifteen = self.load_average
        return f"{one:.2f} {five:.2f} {fifteen:.2f}"