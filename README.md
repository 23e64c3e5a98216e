# myaku

A system monitor for macOS and Linux built on psutil. It samples CPU,
memory, disk and network usage, keeps a rolling history of each metric,
lists running processes, and can serve these metrics as tools over MCP
(newline-delimited JSON-RPC on stdin/stdout).

## Installation

```
pip install .
```

## Command line

```
myaku snapshot   # take one sample and print it as JSON
myaku daemon     # sample metrics periodically until Ctrl-C
myaku mcp        # run the MCP tool server on stdin/stdout
```

Run without a subcommand, `myaku` prints its help and exits with status 2.

The snapshot holds total and per-core CPU usage, CPU brand and core count,
RAM and swap figures, usage per mount point, bytes received and sent per
network interface, uptime in seconds and the 1, 5 and 15 minute load
averages.

The daemon samples every `appearance.refresh_rate_ms` milliseconds (at
least 500) and logs CPU, RAM and uptime at debug level. The log level is
taken from the `MYAKU_LOG` environment variable (`debug`, `info`, `warning`,
`error`; default `info`).

The MCP server answers `initialize`, `ping`, `tools/list` and `tools/call`,
and offers the tools `status`, `version`, `config_get`, `config_set`,
`get_cpu`, `get_memory`, `get_disk`, `get_network`, `list_processes`
(`sort_by`, `limit`, `filter`) and `kill_process` (`pid`, `signal`:
`SIGTERM`, `SIGKILL` or `SIGINT`).

## Configuration

A YAML file is taken from the `MYAKU_CONFIG` environment variable, or else
from `myaku/myaku.yaml` (or `myaku.yml`) under `$XDG_CONFIG_HOME`, falling
back to `~/.config`. Anything left out keeps its default; a file that cannot
be read or has values of the wrong type is reported in the log and the
defaults are used instead.

```yaml
appearance:
  refresh_rate_ms: 1000
monitoring:
  history_seconds: 300
processes:
  sort_by: cpu          # cpu, memory, pid or name
  sort_direction: desc  # asc or desc
alerts:
  cpu_threshold: 90.0
  memory_threshold: 85.0
  disk_threshold: 90.0
daemon:
  metrics_port: 9100
  history_retention_hours: 24
```

`myaku.config` provides the dataclasses (`MyakuConfig` and its sections),
`from_dict`, `to_dict`, `discover_config_path` and `load_config`.

## Library use

```python
from myaku.config import MyakuConfig
from myaku.collector import MetricsCollector
from myaku.platform import create_metrics

collector = MetricsCollector(MyakuConfig(), create_metrics())
collector.refresh()
print(collector.cpu.total_usage(), collector.memory.ram_percent())
print(collector.uptime_display(), collector.load_display())
for line in collector.disk.summary_lines():
    print(line)
for proc in collector.processes("memory", ascending=False)[:5]:
    print(proc.pid, proc.name, proc.memory)
```

Other building blocks:

- `myaku.ring_buffer.RingBuffer` — fixed-capacity history with `min`,
  `max` and `average`.
- `myaku.graph.SparklineData` and `SeriesGroup` — normalised chart data and
  per-core series with an averaged summary.
- `myaku.platform.SystemMetrics` — the abstract metrics source;
  `PsutilMetrics` is the psutil-backed one. Any subclass can be passed to
  `MetricsCollector`.
- `myaku.memory.format_bytes` and `myaku.network.format_rate` — human-readable
  sizes and rates.
- `myaku.input.map_key` — maps a `KeyEvent` to an `Action` (or a `Char`
  typed in filter mode) with vim-style bindings for the `Mode`s dashboard,
  process and filter.

## What it does not do

- There is no interactive display: no dashboard window or terminal screen
  and no scrollable process table. The key mapping in `myaku.input` is
  provided, but nothing in the package draws a view.
- The daemon does not serve metrics over the network; `daemon.metrics_port`
  and `daemon.history_retention_hours` are only logged, and no history is
  stored on disk.
- The MCP tools `config_get` and `config_set` neither read nor change the
  configuration; they answer with a note instead.
- Alert thresholds and `monitoring.show_*` flags are read but not acted on.

## Tests

```
pip install ".[test]"
pytest
```