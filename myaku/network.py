"""Network throughput history per interface."""

from myaku.platform import NetworkInfo
from myaku.ring_buffer import RingBuffer

_RATE_UNITS = (("GB/s", 1_073_741_824.0), ("MB/s", 1_048_576.0), ("KB/s", 1024.0))


def format_rate(bytes_per_interval: float) -> str:
    """Format a byte rate, e.g. ``"1.2 MB/s"``."""
    for unit, size in _RATE_UNITS:
        if bytes_per_interval >= size:
            return f"{bytes_per_interval / size:.1f} {unit}"
    return f"{bytes_per_interval:.0f} B/s"


class InterfaceMetrics:
    """Receive and transmit throughput history of one interface."""

    def __init__(self, info: NetworkInfo, history_len: int) -> None:
        self.name = info.interface
        self.rx_history = RingBuffer(history_len)
        self.tx_history = RingBuffer(history_len)
        self._prev_rx = info.rx_bytes
        self._prev_tx = info.tx_bytes
        self.total_rx = info.rx_bytes
        self.total_tx = info.tx_bytes

    def __repr__(self) -> str:
        return f"InterfaceMetrics(name={self.name!r}, rx={self.total_rx}, tx={self.total_tx})"

    def update(self, info: NetworkInfo) -> None:
        """Push the bytes moved since the previous sample."""
        self.rx_history.push(float(max(info.rx_bytes - self._prev_rx, 0)))
        self.tx_history.push(float(max(info.tx_bytes - self._prev_tx, 0)))
        self._prev_rx = info.rx_bytes
        self._prev_tx = info.tx_bytes
        self.total_rx = info.rx_bytes
        self.total_tx = info.tx_bytes

    def current_rx(self) -> float:
        """Bytes received during the last refresh interval."""
        latest = self.rx_history.latest()
        return latest if latest is not None else 0.0

    def current_tx(self) -> float:
        """Bytes transmitted during the last refresh interval."""
        latest = self.tx_history.latest()
        return latest if latest is not None else 0.0

    def rx_display(self) -> str:
        return format_rate(self.current_rx())

    def tx_display(self) -> str:
        return format_rate(self.current_tx())


class NetworkMetrics:
    """Throughput of every network interface, with history."""

    def __init__(self, history_len: int) -> None:
        self.interfaces: list = []
        self._history_len = history_len

    def update(self, networks) -> None:
        """Record a new sample; new interfaces start from a baseline."""
        by_name = {i.name: i for i in self.interfaces}
        for info in networks:
            existing = by_name.get(info.interface)
            if existing is not None:
                existing.update(info)
            else:
                iface = InterfaceMetrics(info, self._history_len)
                self.interfaces.append(iface)
                by_name[info.interface] = iface

    def summary_lines(self) -> list:
        """One line per interface that has moved any traffic."""
        return [
            f"{i.name}: rx {i.rx_display()} tx {i.tx_display()}"
            for i in self.interfaces
            if i.total_rx > 0 or i.total_tx > 0
        ]