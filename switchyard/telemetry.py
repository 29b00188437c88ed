"""Component categories, telemetry snapshots and the metrics they publish."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Category(str, Enum):
    """Kind of simulated component; the value is its stable lowercase label."""

    GRID = "grid"
    METER = "meter"
    INVERTER = "inverter"
    BATTERY = "battery"
    EV_CHARGER = "ev-charger"
    CHP = "chp"

    def __str__(self) -> str:
        return self.value

    def slug(self) -> str:
        """Lowercase token used in file names and on the wire."""
        return self.value


class Metric(str, Enum):
    """A telemetry series recorded into history; the value is its wire name."""

    ACTIVE_POWER_W = "active_power_w"
    REACTIVE_POWER_VAR = "reactive_power_var"
    FREQUENCY_HZ = "frequency_hz"
    SOC_PCT = "soc_pct"
    ACTIVE_POWER_LOWER_BOUND_W = "active_power_lower_bound_w"
    ACTIVE_POWER_UPPER_BOUND_W = "active_power_upper_bound_w"
    REACTIVE_POWER_LOWER_BOUND_VAR = "reactive_power_lower_bound_var"
    REACTIVE_POWER_UPPER_BOUND_VAR = "reactive_power_upper_bound_var"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> "Metric":
        """Parse a metric wire name; raise ValueError if unknown."""
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"unknown metric {text!r}") from None


@dataclass
class Telemetry:
    """One telemetry snapshot; fields a component doesn't publish stay None."""

    active_power_w: float | None = None
    reactive_power_var: float | None = None
    dc_power_w: float | None = None
    frequency_hz: float | None = None
    soc_pct: float | None = None
    active_power_lower_bound_w: float | None = None
    active_power_upper_bound_w: float | None = None
    reactive_power_lower_bound_var: float | None = None
    reactive_power_upper_bound_var: float | None = None

    def metric_values(self) -> list[tuple[Metric, float]]:
        """Every published history metric with its value, in metric order."""
        pairs = []
        for metric in Metric:
            value = getattr(self, metric.value)
            if value is not None:
                pairs.append((metric, value))
        return pairs