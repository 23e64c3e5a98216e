"""Model Context Protocol server exposing system metrics and process control over stdio."""

import json
import logging
import signal as _signal
import sys
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, TextIO

import psutil

from myaku.platform import _cpu_brand

log = logging.getLogger(__name__)

SERVER_NAME = "myaku"
VERSION = "0.1.0"
DESCRIPTION = "Myaku (\u8108) \u2014 GPU system monitor for macOS and Linux"
PSUTIL_VERSION = psutil.__version__
PROTOCOL_VERSION = "2024-11-05"
INSTRUCTIONS = (
    "Myaku GPU system monitor \u2014 CPU, memory, disk, network metrics and process management."
)
CONFIG_PATH = "~/.config/myaku/myaku.yaml"
DEFAULT_PROCESS_LIMIT = 30
_CPU_SAMPLE_SECONDS = 0.2

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

_KILL_SIGNAL = getattr(_signal, "SIGKILL", _signal.SIGTERM)
_SIGNALS = {
    "SIGKILL": _KILL_SIGNAL,
    "KILL": _KILL_SIGNAL,
    "9": _KILL_SIGNAL,
    "SIGINT": _signal.SIGINT,
    "INT": _signal.SIGINT,
    "2": _signal.SIGINT,
}


class RpcError(Exception):
    """A JSON-RPC error with its code."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


@dataclass(frozen=True)
class _Tool:
    name: str
    description: str
    schema: dict
    handler: Callable[[dict], str]


def _dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def _percent(part: int, whole: int) -> float:
    return part / whole * 100.0 if whole > 0 else 0.0


def _optional_str(args: dict, name: str) -> Optional[str]:
    value = args.get(name)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{name} must be a string")
    return value


def _required_str(args: dict, name: str) -> str:
    value = _optional_str(args, name)
    if value is None:
        raise ValueError(f"missing required argument: {name}")
    return value


def _optional_uint(args: dict, name: str) -> Optional[int]:
    value = args.get(name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{name} must be a non-negative integer")
    return value


def _required_uint(args: dict, name: str) -> int:
    value = _optional_uint(args, name)
    if value is None:
        raise ValueError(f"missing required argument: {name}")
    return value


def _per_core_frequencies(count: int) -> list:
    try:
        per_core = psutil.cpu_freq(percpu=True) or []
    except (AttributeError, NotImplementedError, OSError):
        per_core = []
    if len(per_core) == count:
        return [int(f.current) for f in per_core]
    try:
        overall = psutil.cpu_freq()
    except (AttributeError, NotImplementedError, OSError):
        overall = None
    value = int(overall.current) if overall is not None else 0
    return [value] * count


class McpServer:
    """Answers MCP requests with system metrics and process management tools."""

    def __init__(self) -> None:
        self._tools = {
            tool.name: tool
            for tool in (
                _Tool(
                    "status",
                    "Get myaku application status and health information. "
                    "Returns system uptime and overview.",
                    {"type": "object", "properties": {}},
                    lambda args: self.status(),
                ),
                _Tool(
                    "version",
                    "Get myaku version information.",
                    {"type": "object", "properties": {}},
                    lambda args: self.version(),
                ),
                _Tool(
                    "config_get",
                    "Get a myaku configuration value. Pass a key for a specific value, "
                    "or omit for the full config.",
                    {
                        "type": "object",
                        "properties": {
                            "key": {
                                "type": "string",
                                "description": "Config key to retrieve. Omit for full config.",
                            }
                        },
                    },
                    lambda args: self.config_get(_optional_str(args, "key")),
                ),
                _Tool(
                    "config_set",
                    "Set a myaku configuration value at runtime.",
                    {
                        "type": "object",
                        "properties": {
                            "key": {"type": "string", "description": "Config key to set."},
                            "value": {
                                "type": "string",
                                "description": "Value to set (as JSON string).",
                            },
                        },
                        "required": ["key", "value"],
                    },
                    lambda args: self.config_set(
                        _required_str(args, "key"), _required_str(args, "value")
                    ),
                ),
                _Tool(
                    "get_cpu",
                    "Get CPU usage metrics. Returns total usage, per-core usage, "
                    "core count, and CPU brand.",
                    {"type": "object", "properties": {}},
                    lambda args: self.get_cpu(),
                ),
                _Tool(
                    "get_memory",
                    "Get memory usage metrics. Returns RAM and swap usage in bytes "
                    "and percentages.",
                    {"type": "object", "properties": {}},
                    lambda args: self.get_memory(),
                ),
                _Tool(
                    "get_disk",
                    "Get disk usage metrics. Returns usage per mount point with total, "
                    "used, and available space.",
                    {"type": "object", "properties": {}},
                    lambda args: self.get_disk(),
                ),
                _Tool(
                    "get_network",
                    "Get network interface metrics. Returns per-interface received "
                    "and transmitted bytes.",
                    {"type": "object", "properties": {}},
                    lambda args: self.get_network(),
                ),
                _Tool(
                    "list_processes",
                    "List running processes. Sort by CPU, memory, PID, or name. "
                    "Optionally filter by name.",
                    {
                        "type": "object",
                        "properties": {
                            "sort_by": {
                                "type": "string",
                                "description": "Sort by: 'cpu', 'memory', 'pid', or 'name' "
                                "(default: 'cpu').",
                            },
                            "limit": {
                                "type": "integer",
                                "minimum": 0,
                                "description": "Maximum number of processes to return "
                                "(default: 30).",
                            },
                            "filter": {
                                "type": "string",
                                "description": "Filter processes by name pattern.",
                            },
                        },
                    },
                    lambda args: self.list_processes(
                        _optional_str(args, "sort_by"),
                        _optional_uint(args, "limit"),
                        _optional_str(args, "filter"),
                    ),
                ),
                _Tool(
                    "kill_process",
                    "Send a signal to a process by PID. Default signal is SIGTERM. "
                    "Use SIGKILL for force kill.",
                    {
                        "type": "object",
                        "properties": {
                            "pid": {
                                "type": "integer",
                                "minimum": 0,
                                "description": "Process ID to send a signal to.",
                            },
                            "signal": {
                                "type": "string",
                                "description": "Signal to send: 'SIGTERM' (default), "
                                "'SIGKILL', or 'SIGINT'.",
                            },
                        },
                        "required": ["pid"],
                    },
                    lambda args: self.kill_process(
                        _required_uint(args, "pid"), _optional_str(args, "signal")
                    ),
                ),
            )
        }

    # Standard tools

    def status(self) -> str:
        """Application status with uptime and memory overview."""
        vm = psutil.virtual_memory()
        return _dumps(
            {
                "status": "running",
                "app": SERVER_NAME,
                "uptime_seconds": max(int(time.time() - psutil.boot_time()), 0),
                "total_memory_bytes": vm.total,
                "used_memory_bytes": vm.used,
            }
        )

    def version(self) -> str:
        return _dumps(
            {
                "name": SERVER_NAME,
                "version": VERSION,
                "description": DESCRIPTION,
                "psutil_version": PSUTIL_VERSION,
            }
        )

    def config_get(self, key: Optional[str] = None) -> str:
        if key is not None:
            return _dumps(
                {
                    "key": key,
                    "value": None,
                    "note": "Config queries require a running myaku instance.",
                }
            )
        return _dumps({"config_path": CONFIG_PATH})

    def config_set(self, key: str, value: str) -> str:
        return _dumps(
            {
                "key": key,
                "value": value,
                "applied": False,
                "note": "Config mutations require a running myaku instance.",
            }
        )

    # System metrics tools

    def get_cpu(self) -> str:
        """Total and per-core CPU usage, sampled over a short interval."""
        psutil.cpu_percent(percpu=True)
        time.sleep(_CPU_SAMPLE_SECONDS)
        per_core = [float(v) for v in psutil.cpu_percent(percpu=True)]
        total = sum(per_core) / len(per_core) if per_core else 0.0
        frequencies = _per_core_frequencies(len(per_core))
        cores = [
            {"core": i, "usage_percent": usage, "frequency_mhz": freq}
            for i, (usage, freq) in enumerate(zip(per_core, frequencies))
        ]
        return _dumps(
            {
                "total_usage_percent": total,
                "core_count": len(per_core),
                "brand": _cpu_brand(),
                "cores": cores,
            }
        )

    def get_memory(self) -> str:
        vm = psutil.virtual_memory()
        swap = psutil.swap_memory()
        return _dumps(
            {
                "ram": {
                    "total_bytes": vm.total,
                    "used_bytes": vm.used,
                    "available_bytes": vm.available,
                    "usage_percent": _percent(vm.used, vm.total),
                },
                "swap": {
                    "total_bytes": swap.total,
                    "used_bytes": swap.used,
                    "usage_percent": _percent(swap.used, swap.total),
                },
            }
        )

    def get_disk(self) -> str:
        entries = []
        for part in psutil.disk_partitions(all=False):
            try:
                usage = psutil.disk_usage(part.mountpoint)
            except OSError:
                continue
            used = max(usage.total - usage.free, 0)
            entries.append(
                {
                    "mount_point": part.mountpoint,
                    "name": part.device,
                    "file_system": part.fstype,
                    "total_bytes": usage.total,
                    "used_bytes": used,
                    "available_bytes": usage.free,
                    "usage_percent": _percent(used, usage.total),
                }
            )
        return _dumps({"count": len(entries), "disks": entries})

    def get_network(self) -> str:
        counters = psutil.net_io_counters(pernic=True) or {}
        entries = [
            {
                "interface": name,
                "received_bytes": data.bytes_recv,
                "transmitted_bytes": data.bytes_sent,
            }
            for name, data in counters.items()
        ]
        return _dumps({"count": len(entries), "interfaces": entries})

    def list_processes(
        self,
        sort_by: Optional[str] = None,
        limit: Optional[int] = None,
        filter_text: Optional[str] = None,
    ) -> str:
        """Running processes, sorted, optionally filtered by name and limited."""
        sort_by = sort_by if sort_by is not None else "cpu"
        limit = limit if limit is not None else DEFAULT_PROCESS_LIMIT
        needle = filter_text.lower() if filter_text is not None else None

        procs = []
        attrs = ["pid", "name", "cpu_percent", "memory_info", "status"]
        for proc in psutil.process_iter(attrs=attrs, ad_value=None):
            info = proc.info
            name = info.get("name") or ""
            if needle is not None and needle not in name.lower():
                continue
            mem = info.get("memory_info")
            procs.append(
                {
                    "pid": info["pid"],
                    "name": name,
                    "cpu_percent": float(info.get("cpu_percent") or 0.0),
                    "memory_bytes": mem.rss if mem is not None else 0,
                    "status": str(info.get("status") or ""),
                }
            )

        if sort_by in ("memory", "mem"):
            procs.sort(key=lambda p: p["memory_bytes"], reverse=True)
        elif sort_by == "pid":
            procs.sort(key=lambda p: p["pid"])
        elif sort_by == "name":
            procs.sort(key=lambda p: p["name"].lower())
        else:
            procs.sort(key=lambda p: p["cpu_percent"], reverse=True)

        procs = procs[:limit]
        return _dumps({"sort_by": sort_by, "count": len(procs), "processes": procs})

    def kill_process(self, pid: int, signal: Optional[str] = None) -> str:
        """Send SIGTERM (default), SIGKILL or SIGINT to a process."""
        signal_str = signal if signal is not None else "SIGTERM"
        signum = _SIGNALS.get(signal_str.upper(), _signal.SIGTERM)
        try:
            process = psutil.Process(pid)
        except psutil.NoSuchProcess:
            return _dumps({"error": f"process not found: {pid}"})
        try:
            process.send_signal(signum)
        except (psutil.Error, OSError):
            return _dumps(
                {
                    "ok": False,
                    "pid": pid,
                    "error": "failed to send signal (permission denied?)",
                }
            )
        return _dumps({"ok": True, "pid": pid, "signal": signal_str})

    # Protocol

    def _tool_list(self) -> list:
        return [
            {"name": t.name, "description": t.description, "inputSchema": t.schema}
            for t in self._tools.values()
        ]

    def _call_tool(self, params: dict) -> dict:
        name = params.get("name")
        tool = self._tools.get(name) if isinstance(name, str) else None
        if tool is None:
            raise RpcError(INVALID_PARAMS, f"unknown tool: {name}")
        args = params.get("arguments") or {}
        if not isinstance(args, dict):
            raise RpcError(INVALID_PARAMS, "arguments must be an object")
        try:
            text = tool.handler(args)
        except ValueError as exc:
            raise RpcError(INVALID_PARAMS, str(exc)) from exc
        return {"content": [{"type": "text", "text": text}], "isError": False}

    def _dispatch(self, method: str, params: dict) -> Any:
        if method == "initialize":
            requested = params.get("protocolVersion")
            return {
                "protocolVersion": requested if isinstance(requested, str) else PROTOCOL_VERSION,
                "capabilities": {"tools": {}},
                "serverInfo": {"name": SERVER_NAME, "version": VERSION},
                "instructions": INSTRUCTIONS,
            }
        if method == "ping":
            return {}
        if method == "tools/list":
            return {"tools": self._tool_list()}
        if method == "tools/call":
            return self._call_tool(params)
        if method.startswith("notifications/"):
            return None
        raise RpcError(METHOD_NOT_FOUND, f"method not found: {method}")

    def handle_request(self, message: Any) -> Optional[dict]:
        """Answer one JSON-RPC message; notifications get no answer (None)."""
        if not isinstance(message, dict) or not isinstance(message.get("method"), str):
            request_id = message.get("id") if isinstance(message, dict) else None
            return _error_response(request_id, INVALID_REQUEST, "invalid request")
        is_notification = "id" not in message
        request_id = message.get("id")
        params = message.get("params") or {}
        try:
            if not isinstance(params, dict):
                raise RpcError(INVALID_PARAMS, "params must be an object")
            result = self._dispatch(message["method"], params)
        except RpcError as exc:
            if is_notification:
                return None
            return _error_response(request_id, exc.code, exc.message)
        except Exception as exc:  # keep serving after an unexpected failure
            log.exception("request failed")
            if is_notification:
                return None
            return _error_response(request_id, INTERNAL_ERROR, str(exc))
        if is_notification:
            return None
        return {"jsonrpc": "2.0", "id": request_id, "result": result}

    def serve(self, stdin: TextIO, stdout: TextIO) -> None:
        """Read newline-delimited JSON-RPC messages until end of input."""
        for line in stdin:
            line = line.strip()
            if not line:
                continue
            try:
                message = json.loads(line)
            except json.JSONDecodeError as exc:
                response = _error_response(None, PARSE_ERROR, f"parse error: {exc}")
            else:
                response = self.handle_request(message)
            if response is not None:
                stdout.write(_dumps(response) + "\n")
                stdout.flush()


def _error_response(request_id: Any, code: int, message: str) -> dict:
    return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}


def run() -> None:
    """Serve MCP over standard input and output."""
    McpServer().serve(sys.stdin, sys.stdout)