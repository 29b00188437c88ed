"""Bounded per-metric telemetry history rings for each component."""

from __future__ import annotations

from bisect import bisect_left
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from itertools import islice
from typing import Iterator

from switchyard.telemetry import Metric, Telemetry


@dataclass(frozen=True)
class Sample:
    """One recorded value of a metric at a point in time."""

    ts: datetime
    value: float


class History:
    """Time-ordered ring of samples for one metric; the oldest evict when full."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self._ring: deque[Sample] = deque(maxlen=capacity)

    def push(self, ts: datetime, value: float) -> None:
        """Append a sample at ``ts``."""
        self._ring.append(Sample(ts=ts, value=value))

    def iter_window(self, since: datetime) -> Iterator[Sample]:
        """Samples with ``ts >= since``, oldest first."""
        cut = bisect_left(self._ring, since, key=lambda s: s.ts)
        return islice(iter(self._ring), cut, None)

    def __iter__(self) -> Iterator[Sample]:
        return iter(self._ring)

    def __len__(self) -> int:
        return len(self._ring)


class ComponentHistory:
    """All metric histories of one component, each bounded to the same capacity."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self._series: dict[Metric, History] = {}

    def push_snapshot(self, ts: datetime, snap: Telemetry) -> list[tuple[Metric, float]]:
        """Record every metric the snapshot publishes; return what was pushed."""
        pushed = snap.metric_values()
        for metric, value in pushed:
            series = self._series.get(metric)
            if series is None:
                series = self._series[metric] = History(self.capacity)
            series.push(ts, value)
        return pushed

    def get(self, metric: Metric) -> History | None:
        """History of ``metric``, or None if it was never recorded."""
        return self._series.get(metric)

    def metrics(self) -> list[Metric]:
        """Metrics that have any recorded history."""
        return list(self._series)