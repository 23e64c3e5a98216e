"""CPU usage history per core and in total."""

from myaku.graph import SeriesGroup, SparklineData
from myaku.platform import CpuInfo


class CpuMetrics:
    """Per-core usage history with an averaged summary series."""

    def __init__(self, core_count: int, history_len: int) -> None:
        self.cores = SeriesGroup("Core", core_count, history_len)
        self.brand = ""
        self.core_count = core_count

    def update(self, info: CpuInfo) -> None:
        """Record a new CPU sample, resizing if the core count changed."""
        if len(info.per_core) != len(self.cores.series):
            self.cores.resize(len(info.per_core), self.cores.summary.capacity())
        self.cores.push_all(info.per_core)
        self.brand = info.brand
        self.core_count = info.core_count

    def total_usage(self) -> float:
        """Latest average usage across cores, in percent."""
        latest = self.cores.summary.latest()
        return latest if latest is not None else 0.0

    def sparklines(self, color) -> list:
        """One sparkline per core."""
        return [
            SparklineData.from_ring_buffer(buf, f"Core {i}", 100.0, color)
            for i, (_, buf) in enumerate(self.cores.series)
        ]

    def total_sparkline(self, color) -> SparklineData:
        return SparklineData.from_ring_buffer(self.cores.summary, "CPU Total", 100.0, color)