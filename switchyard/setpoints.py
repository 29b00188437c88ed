"""Per-component log of incoming setpoint requests and their outcomes."""

from __future__ import annotations

from bisect import bisect_left
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from itertools import islice
from typing import Iterator, Union


def _iso(ts: datetime) -> str:
    text = ts.isoformat()
    return text[:-6] + "Z" if text.endswith("+00:00") else text


class SetpointKind(str, Enum):
    ACTIVE_POWER = "active_power"
    REACTIVE_POWER = "reactive_power"
    AUGMENT_BOUNDS = "augment_bounds"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Accepted:
    """Request applied; ``effective_value`` is what the component now tracks."""

    effective_value: float | None = None

    def to_dict(self) -> dict:
        return {"kind": "accepted", "effective_value": self.effective_value}


@dataclass(frozen=True)
class Rejected:
    """Request refused before reaching the component."""

    reason: str

    def to_dict(self) -> dict:
        return {"kind": "rejected", "reason": self.reason}


SetpointOutcome = Union[Accepted, Rejected]


@dataclass(frozen=True)
class SetpointEvent:
    ts: datetime
    kind: SetpointKind
    value: float
    outcome: SetpointOutcome

    def to_dict(self) -> dict:
        return {
            "ts": _iso(self.ts),
            "kind": self.kind.value,
            "value": self.value,
            "outcome": self.outcome.to_dict(),
        }


class SetpointLog:
    """Bounded, time-ordered ring of recent setpoint events for one component."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self._ring: deque[SetpointEvent] = deque(maxlen=capacity)

    def push(self, event: SetpointEvent) -> None:
        """Append an event, evicting the oldest when full."""
        self._ring.append(event)

    def iter_window(self, since: datetime) -> Iterator[SetpointEvent]:
        """Events with ``ts >= since``, oldest first."""
        cut = bisect_left(self._ring, since, key=lambda e: e.ts)
        return islice(iter(self._ring), cut, None)

    def __len__(self) -> int:
        return len(self._ring)

    def __iter__(self) -> Iterator[SetpointEvent]:
        return iter(self._ring)