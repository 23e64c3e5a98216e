"""RAM and swap usage history."""

from myaku.graph import SparklineData
from myaku.platform import MemoryInfo
from myaku.ring_buffer import RingBuffer

_UNITS = (("TB", 1024**4), ("GB", 1024**3), ("MB", 1024**2), ("KB", 1024))


def format_bytes(num_bytes: int) -> str:
    """Format a byte count with a binary unit, e.g. ``"16.0 GB"``."""
    for unit, size in _UNITS:
        if num_bytes >= size:
            return f"{num_bytes / size:.1f} {unit}"
    return f"{num_bytes} B"


def _percent(part: int, whole: int) -> float:
    return part / whole * 100.0 if whole > 0 else 0.0


class MemoryMetrics:
    """RAM and swap usage percentages over time, plus the latest snapshot."""

    def __init__(self, history_len: int) -> None:
        self.ram_history = RingBuffer(history_len)
        self.swap_history = RingBuffer(history_len)
        self.latest = MemoryInfo(total=0, used=0, available=0, swap_total=0, swap_used=0)

    def update(self, info: MemoryInfo) -> None:
        """Record a new memory sample."""
        self.ram_history.push(_percent(info.used, info.total))
        self.swap_history.push(_percent(info.swap_used, info.swap_total))
        self.latest = info

    def ram_percent(self) -> float:
        latest = self.ram_history.latest()
        return latest if latest is not None else 0.0

    def swap_percent(self) -> float:
        latest = self.swap_history.latest()
        return latest if latest is not None else 0.0

    def total_ram_display(self) -> str:
        return format_bytes(self.latest.total)

    def used_ram_display(self) -> str:
        return format_bytes(self.latest.used)

    def total_swap_display(self) -> str:
        return format_bytes(self.latest.swap_total)

    def used_swap_display(self) -> str:
        return format_bytes(self.latest.swap_used)

    def ram_sparkline(self, color) -> SparklineData:
        return SparklineData.from_ring_buffer(self.ram_history, "RAM", 100.0, color)

    def swap_sparkline(self, color) -> SparklineData:
        return SparklineData.from_ring_buffer(self.swap_history, "Swap", 100.0, color)