"""Fixed-capacity circular buffer for metric history."""

from collections import deque
from typing import Optional


class RingBuffer:
    """Holds the most recent ``capacity`` float samples, oldest first."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("ring buffer capacity must be > 0")
        self._data: deque = deque(maxlen=capacity)

    def __repr__(self) -> str:
        return f"RingBuffer(capacity={self.capacity()}, values={self.values()!r})"

    def push(self, value: float) -> None:
        """Append a value, dropping the oldest one when full."""
        self._data.append(float(value))

    def values(self) -> list:
        """Return the values in chronological order (oldest first)."""
        return list(self._data)

    def latest(self) -> Optional[float]:
        """Return the most recent value, or None if empty."""
        return self._data[-1] if self._data else None

    def __len__(self) -> int:
        return len(self._data)

    def is_empty(self) -> bool:
        return not self._data

    def capacity(self) -> int:
        return self._data.maxlen

    def min(self) -> float:
        """Smallest stored value, or 0.0 if empty."""
        return min(self._data, default=0.0)

    def max(self) -> float:
        """Largest stored value, or 0.0 if empty."""
        return max(self._data, default=0.0)

    def average(self) -> float:
        """Mean of the stored values, or 0.0 if empty."""
        return sum(self._data) / len(self._data) if self._data else 0.0

    def clear(self) -> None:
        self._data.clear()