"""Command-line entry point: snapshot, metrics daemon and MCP server."""

import argparse
import json
import logging
import os
import time
from typing import Optional

from myaku import mcp
from myaku.collector import MetricsCollector
from myaku.config import MyakuConfig, load_config

log = logging.getLogger(__name__)

_MIN_DAEMON_INTERVAL_MS = 500
_LOG_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def snapshot_json(collector: MetricsCollector) -> str:
    """Render the collector's latest sample as a JSON document."""
    cpu = collector.cpu
    mem = collector.memory
    one, five, fifteen = collector.load_average

    per_core = ", ".join(
        f"{(buf.latest() or 0.0):.1f}" for _, buf in cpu.cores.series
    )
    disk_lines = ",\n".join(
        f'    {{"mount": {json.dumps(m.mount_point)}, "total": {m.total}, '
        f'"used": {m.used}, "percent": {m.usage_percent():.1f}}}'
        for m in collector.disk.mounts
    )
    net_lines = ",\n".join(
        f'    {{"interface": {json.dumps(i.name)}, "rx_bytes": {i.total_rx}, '
        f'"tx_bytes": {i.total_tx}}}'
        for i in collector.network.interfaces
    )
    lines = [
        "{",
        '  "cpu": {',
        f'    "total": {cpu.total_usage():.1f},',
        f'    "brand": {json.dumps(cpu.brand)},',
        f'    "cores": {cpu.core_count},',
        f'    "per_core": [{per_core}]',
        "  },",
        '  "memory": {',
        f'    "total_bytes": {mem.latest.total},',
        f'    "used_bytes": {mem.latest.used},',
        f'    "available_bytes": {mem.latest.available},',
        f'    "ram_percent": {mem.ram_percent():.1f},',
        f'    "swap_total_bytes": {mem.latest.swap_total},',
        f'    "swap_used_bytes": {mem.latest.swap_used},',
        f'    "swap_percent": {mem.swap_percent():.1f}',
        "  },",
        '  "disks": [',
        disk_lines,
        "  ],",
        '  "network": [',
        net_lines,
        "  ],",
        f'  "uptime_seconds": {collector.uptime_secs},',
        f'  "load_average": [{one:.2f}, {five:.2f}, {fifteen:.2f}]',
        "}",
    ]
    return "\n".join(lines)


def run_snapshot(config: MyakuConfig) -> None:
    """Take one sample and print it as JSON."""
    collector = MetricsCollector(config)
    collector.refresh()
    print(snapshot_json(collector))


def run_daemon(config: MyakuConfig) -> int:
    """Sample metrics periodically until interrupted; return the number of samples."""
    log.info("starting myaku daemon")
    log.info(
        "metrics daemon on port %s, retention %sh",
        config.daemon.metrics_port,
        config.daemon.history_retention_hours,
    )
    collector = MetricsCollector(config)
    interval = max(config.appearance.refresh_rate_ms, _MIN_DAEMON_INTERVAL_MS) / 1000.0
    samples = 0
    try:
        while True:
            time.sleep(interval)
            collector.refresh()
            samples += 1
            log.debug(
                "cpu: %.1f%%, ram: %.1f%%, uptime: %s",
                collector.cpu.total_usage(),
                collector.memory.ram_percent(),
                collector.uptime_display(),
            )
    except KeyboardInterrupt:
        log.info("daemon shutting down")
    return samples


def _setup_logging() -> None:
    level = _LOG_LEVELS.get(os.environ.get("MYAKU_LOG", "info").lower(), logging.INFO)
    logging.basicConfig(level=level)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="myaku", description="Myaku (\u8108) \u2014 GPU system monitor"
    )
    commands = parser.add_subparsers(dest="command")
    commands.add_parser("daemon", help="Run the metrics collection daemon.")
    commands.add_parser("snapshot", help="Print current system metrics as JSON to stdout.")
    commands.add_parser("mcp", help="Run as MCP server (stdio transport).")
    return parser


def main(argv: Optional[list] = None) -> int:
    """Run the command named in ``argv``; return the exit status."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging()

    if args.command is None:
        parser.print_help()
        return 2

    config = load_config()
    if args.command == "mcp":
        mcp.run()
    elif args.command == "daemon":
        run_daemon(config)
    else:
        run_snapshot(config)
    return 0