"""Scenario summary and report snapshots, and battery SoC statistics."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence


def _iso(ts: datetime | None) -> str | None:
    if ts is None:
        return None
    text = ts.isoformat()
    return text[:-6] + "Z" if text.endswith("+00:00") else text


@dataclass(frozen=True)
class SocStats:
    """Statistics over the current SoC of every battery."""

    mean_pct: float
    median_pct: float
    mode_pct: int | None

    def to_dict(self) -> dict:
        return {"mean_pct": self.mean_pct, "median_pct": self.median_pct, "mode_pct": self.mode_pct}


def _bucket(value: float) -> int:
    if math.isnan(value):
        return 0
    clamped = min(max(value, 0.0), 100.0)
    return int(math.floor(clamped + 0.5))


def compute_soc_stats(socs: Sequence[float]) -> SocStats | None:
    """Mean, lower median and integer-bucketed mode (lowest on tie); None if empty."""
    if not socs:
        return None
    mean_pct = sum(float(v) for v in socs) / len(socs)
    ordered = sorted(socs)
    mid = len(ordered) // 2 - (1 if len(ordered) % 2 == 0 else 0)
    median_pct = float(ordered[mid])
    histogram = [0] * 101
    for v in socs:
        histogram[_bucket(v)] += 1
    mode_pct = 0
    best = 0
    for idx, count in enumerate(histogram):
        if count > best:
            best = count
            mode_pct = idx
    return SocStats(mean_pct=mean_pct, median_pct=median_pct, mode_pct=mode_pct)


@dataclass(frozen=True)
class PerBatteryReport:
    id: int
    charge_wh: float
    discharge_wh: float

    def to_dict(self) -> dict:
        return {"id": self.id, "charge_wh": self.charge_wh, "discharge_wh": self.discharge_wh}


@dataclass(frozen=True)
class PerPvReport:
    id: int
    produced_wh: float

    def to_dict(self) -> dict:
        return {"id": self.id, "produced_wh": self.produced_wh}


@dataclass(frozen=True)
class WindowAverageEntry:
    """Average main-meter active power over one 15-minute UTC window."""

    window_start: datetime
    avg_w: float

    def to_dict(self) -> dict:
        return {"window_start": _iso(self.window_start), "avg_w": self.avg_w}


@dataclass(frozen=True)
class ScenarioSummary:
    """Scenario lifecycle snapshot, without the events themselves."""

    name: str | None
    started_at: datetime | None
    ended_at: datetime | None
    elapsed_s: float
    event_count: int
    next_event_id: int

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "started_at": _iso(self.started_at),
            "ended_at": _iso(self.ended_at),
            "elapsed_s": self.elapsed_s,
            "event_count": self.event_count,
            "next_event_id": self.next_event_id,
        }


@dataclass(frozen=True)
class ScenarioReport:
    """Scenario-scoped metrics: peaks, energy integrals, SoC and window averages."""

    scenario_elapsed_s: float
    peak_main_meter_w: float
    main_meter_id: int | None
    total_battery_charged_wh: float
    total_battery_discharged_wh: float
    total_pv_produced_wh: float
    per_battery: list[PerBatteryReport] = field(default_factory=list)
    per_pv: list[PerPvReport] = field(default_factory=list)
    soc_stats: SocStats | None = None
    main_meter_window_averages: list[WindowAverageEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "scenario_elapsed_s": self.scenario_elapsed_s,
            "peak_main_meter_w": self.peak_main_meter_w,
            "main_meter_id": self.main_meter_id,
            "total_battery_charged_wh": self.total_battery_charged_wh,
            "total_battery_discharged_wh": self.total_battery_discharged_wh,
            "total_pv_produced_wh": self.total_pv_produced_wh,
            "per_battery": [b.to_dict() for b in self.per_battery],
            "per_pv": [p.to_dict() for p in self.per_pv],
            "soc_stats": self.soc_stats.to_dict() if self.soc_stats is not None else None,
            "main_meter_window_averages": [w.to_dict() for w in self.main_meter_window_averages],
        }