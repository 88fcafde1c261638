[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vflow"
version = "0.9.0"
description = "Network flow tooling: NetFlow v5 decoding, packet header parsing, header templates for packet mirroring, and collector monitoring."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "netflow",
    "flow-collector",
    "packet-decoding",
    "raw-socket",
    "influxdb",
    "opentsdb",
    "monitoring",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
vflow-monitor = "vflow.monitor.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["vflow"]

[tool.hatch.build.targets.sdist]
include = ["vflow", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
