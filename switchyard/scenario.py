"""Scenario lifecycle, event journal and the reporter's metric accumulators."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from datetime import datetime
import math

from switchyard.telemetry import Metric

SCENARIO_EVENT_CAPACITY = 4096
"""Cap on the in-memory event ring; the oldest events age out silently."""

WINDOW_AVG_LENGTH_S = 15 * 60
"""Length of a UTC-aligned main-meter averaging window, in seconds."""

WINDOW_AVG_CAPACITY = 96
"""Number of most-recent averaging windows kept (a full UTC day)."""


def _iso(ts: datetime) -> str:
    text = ts.isoformat()
    return text[:-6] + "Z" if text.endswith("+00:00") else text


def _window_start(now: datetime) -> int:
    secs = math.floor(now.timestamp())
    quotient = secs // WINDOW_AVG_LENGTH_S if secs >= 0 else -((-secs) // WINDOW_AVG_LENGTH_S)
    return quotient * WINDOW_AVG_LENGTH_S


@dataclass(frozen=True)
class ScenarioEvent:
    """One journal entry; ``id`` is monotonic across the journal's lifetime."""

    id: int
    ts: datetime
    kind: str
    payload: str

    def to_dict(self) -> dict:
        return {"id": self.id, "ts": _iso(self.ts), "kind": self.kind, "payload": self.payload}


@dataclass
class BatteryIntegrals:
    """Absolute energy charged and discharged since the scenario started."""

    charge_wh: float = 0.0
    discharge_wh: float = 0.0


@dataclass
class PvIntegrals:
    """Absolute energy produced by a solar inverter since the scenario started."""

    produced_wh: float = 0.0


class ScenarioJournal:
    """Scenario name and lifecycle, a capped event ring, and report accumulators."""

    def __init__(self) -> None:
        self.name: str | None = None
        self.started_at: datetime | None = None
        self.ended_at: datetime | None = None
        self._events: deque[ScenarioEvent] = deque(maxlen=SCENARIO_EVENT_CAPACITY)
        self._next_id = 0
        self._peak_main_meter_active_w = 0.0
        self._per_battery: dict[int, BatteryIntegrals] = {}
        self._per_pv: dict[int, PvIntegrals] = {}
        self._window_avgs: dict[int, tuple[float, int]] = {}
        self._prev_sample_ts: datetime | None = None

    def start(self, name: str, now: datetime) -> None:
        """Begin a fresh scenario; event ids keep counting from where they were."""
        self.name = name
        self.started_at = now
        self.ended_at = None
        self._events.clear()
        self._peak_main_meter_active_w = 0.0
        self._per_battery.clear()
        self._per_pv.clear()
        self._window_avgs.clear()
        self._prev_sample_ts = now

    def is_running(self) -> bool:
        return self.started_at is not None and self.ended_at is None

    def record_sample(
        self,
        id: int,
        metric: Metric,
        value: float,
        main_meter_id: int | None,
        now: datetime,
    ) -> None:
        """Feed one history sample; only main-meter active power is tracked."""
        if not self.is_running():
            return
        if main_meter_id is None or id != main_meter_id or metric != Metric.ACTIVE_POWER_W:
            return
        v = float(value)
        if v > self._peak_main_meter_active_w:
            self._peak_main_meter_active_w = v
        start = _window_start(now)
        total, count = self._window_avgs.get(start, (0.0, 0))
        self._window_avgs[start] = (total + v, count + 1)
        while len(self._window_avgs) > WINDOW_AVG_CAPACITY:
            del self._window_avgs[min(self._window_avgs)]

    def peak_main_meter_active_w(self) -> float:
        return self._peak_main_meter_active_w

    def _integration_dt_s(self, now: datetime) -> float:
        if not self.is_running() or self._prev_sample_ts is None:
            return 0.0
        return max((now - self._prev_sample_ts).total_seconds(), 0.0)

    def record_battery_sample(self, id: int, dc_power_w: float, now: datetime) -> None:
        """Integrate a DC power sample: positive charges, negative discharges."""
        dt_s = self._integration_dt_s(now)
        if dt_s <= 0.0:
            return
        p = float(dc_power_w)
        entry = self._per_battery.setdefault(id, BatteryIntegrals())
        if p > 0.0:
            entry.charge_wh += p * dt_s / 3600.0
        elif p < 0.0:
            entry.discharge_wh += -p * dt_s / 3600.0

    def record_pv_sample(self, id: int, active_power_w: float, now: datetime) -> None:
        """Integrate a solar sample; only negative (sourcing) power counts."""
        dt_s = self._integration_dt_s(now)
        if dt_s <= 0.0:
            return
        p = float(active_power_w)
        if p < 0.0:
            self._per_pv.setdefault(id, PvIntegrals()).produced_wh += -p * dt_s / 3600.0

    def advance_sample_cursor(self, now: datetime) -> None:
        """Measure the next integration step from ``now``."""
        if self.is_running():
            self._prev_sample_ts = now

    def per_battery(self) -> dict[int, BatteryIntegrals]:
        """Battery integrals keyed by id, in ascending id order."""
        return dict(sorted(self._per_battery.items()))

    def per_pv(self) -> dict[int, PvIntegrals]:
        """Solar integrals keyed by id, in ascending id order."""
        return dict(sorted(self._per_pv.items()))

    def window_avgs(self) -> dict[int, tuple[float, int]]:
        """``{window_start_secs: (sum_w, sample_count)}``, oldest window first."""
        return dict(sorted(self._window_avgs.items()))

    def stop(self, now: datetime) -> None:
        """Mark the scenario ended; later calls keep the first stop time."""
        if self.ended_at is None:
            self.ended_at = now

    def record(self, kind: str, payload: str, ts: datetime) -> int:
        """Append an event, dropping the oldest when full; return its id."""
        id_ = self._next_id
        self._next_id += 1
        self._events.append(ScenarioEvent(id=id_, ts=ts, kind=kind, payload=payload))
        return id_

    def elapsed_s(self, now: datetime) -> float:
        """Seconds since start (0 before start), frozen once stopped."""
        if self.started_at is None:
            return 0.0
        end = self.ended_at if self.ended_at is not None else now
        return max((end - self.started_at).total_seconds(), 0.0)

    def events_since(self, from_id: int, limit: int) -> list[ScenarioEvent]:
        """Up to ``limit`` events with ``id >= from_id``, oldest first."""
        selected = []
        for event in self._events:
            if len(selected) >= limit:
                break
            if event.id >= from_id:
                selected.append(event)
        return selected

    def event_count(self) -> int:
        return len(self._events)

    def next_event_id(self) -> int:
        return self._next_id