"""Microgrid simulator building blocks: scenario journal, telemetry history, setpoint logs and event bus."""

__version__ = "0.1.0"