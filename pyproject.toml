[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "switchyard"
version = "0.1.0"
description = "Building blocks for a microgrid simulator: scenario journal, telemetry history, setpoint logs, event bus and CSV recording"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "microgrid",
    "simulation",
    "battery",
    "telemetry",
    "scenario",
    "history",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["switchyard"]

[tool.hatch.build.targets.sdist]
include = ["switchyard", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
