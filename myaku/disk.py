"""Disk usage history per mount point."""

from myaku.memory import format_bytes
from myaku.platform import DiskInfo
from myaku.ring_buffer import RingBuffer


def _usage_percent(info: DiskInfo) -> float:
    return info.used / info.total * 100.0 if info.total > 0 else 0.0


class MountMetrics:
    """Usage history and latest sizes of one mount point."""

    def __init__(self, info: DiskInfo, history_len: int) -> None:
        self.mount_point = info.mount_point
        self.name = info.name
        self.fs_type = info.fs_type
        self.usage_history = RingBuffer(history_len)
        self.total = info.total
        self.used = info.used
        self.available = info.available
        self.record_usage(info)

    def __repr__(self) -> str:
        return (
            f"MountMetrics(mount_point={self.mount_point!r}, "
            f"usage={self.usage_percent():.1f}%)"
        )

    def record_usage(self, info: DiskInfo) -> None:
        """Store the latest sizes and push the usage percentage to history."""
        self.total = info.total
        self.used = info.used
        self.available = info.available
        self.usage_history.push(_usage_percent(info))

    def usage_percent(self) -> float:
        latest = self.usage_history.latest()
        return latest if latest is not None else 0.0

    def total_display(self) -> str:
        return format_bytes(self.total)

    def used_display(self) -> str:
        return format_bytes(self.used)

    def available_display(self) -> str:
        return format_bytes(self.available)


class DiskMetrics:
    """Usage of every mounted volume, with history."""

    def __init__(self, history_len: int) -> None:
        self.mounts: list = []
        self._history_len = history_len

    def update(self, disks) -> None:
        """Record a new sample; mounts that disappeared are dropped."""
        disks = list(disks)
        by_mount = {m.mount_point: m for m in self.mounts}
        for info in disks:
            existing = by_mount.get(info.mount_point)
            if existing is not None:
                existing.record_usage(info)
            else:
                mount = MountMetrics(info, self._history_len)
                self.mounts.append(mount)
                by_mount[info.mount_point] = mount
        active = {d.mount_point for d in disks}
        self.mounts = [m for m in self.mounts if m.mount_point in active]

    def summary_lines(self) -> list:
        """One line per mount: ``"mount: XX% (used/total)"``."""
        return [
            f"{m.mount_point}: {m.usage_percent():.0f}% "
            f"({m.used_display()}/{m.total_display()})"
            for m in self.mounts
        ]