"""Sparkline data and multi-series history groups for charts."""

from dataclasses import dataclass, field

from myaku.ring_buffer import RingBuffer


@dataclass
class SparklineData:
    """Values normalised to 0.0-1.0, ready for rendering."""

    label: str
    points: list
    current: float
    max: float
    color: tuple

    @classmethod
    def from_ring_buffer(
        cls, buffer: RingBuffer, label: str, max_value: float, color
    ) -> "SparklineData":
        """Normalise buffer values against ``max_value``; all zero if it is not positive."""
        raw = buffer.values()
        if max_value > 0.0:
            points = [min(max(v / max_value, 0.0), 1.0) for v in raw]
        else:
            points = [0.0] * len(raw)
        latest = buffer.latest()
        return cls(
            label=str(label),
            points=points,
            current=latest if latest is not None else 0.0,
            max=max_value,
            color=tuple(color),
        )


@dataclass
class SeriesGroup:
    """Several ring buffers (e.g. one per core) plus a summary of their average."""

    label: str
    series: list = field(default_factory=list)
    summary: RingBuffer = None

    def __init__(self, label: str, count: int, capacity: int) -> None:
        self.label = str(label)
        self.series = [(f"{self.label} {i}", RingBuffer(capacity)) for i in range(count)]
        self.summary = RingBuffer(capacity)

    def push_all(self, values) -> None:
        """Push one value per series and the average of all values to the summary."""
        values = list(values)
        for (_, buf), value in zip(self.series, values):
            buf.push(value)
        if values:
            self.summary.push(sum(values) / len(values))

    def resize(self, count: int, capacity: int) -> None:
        """Grow or shrink the number of series."""
        while len(self.series) < count:
            index = len(self.series)
            self.series.append((f"{self.label} {index}", RingBuffer(capacity)))
        del self.series[count:]