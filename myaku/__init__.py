"""System monitor: metric sampling with history, process listing, JSON snapshots and an MCP tool server."""

__version__ = "0.1.0"