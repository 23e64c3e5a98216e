[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "myaku"
version = "0.1.0"
description = "System monitor: CPU, memory, disk and network metrics with history, JSON snapshots, a sampling daemon and an MCP tool server"
requires-python = ">=3.10"
dependencies = [
    "psutil",
    "pyyaml",
]
keywords = ["system-monitor", "metrics", "cpu", "memory", "processes", "mcp"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: MacOS",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
myaku = "myaku.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["myaku"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
