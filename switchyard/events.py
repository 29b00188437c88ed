"""World events broadcast to live subscribers, and the bus that carries them."""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from typing import Union

from switchyard.setpoints import Accepted, Rejected, SetpointEvent
from switchyard.ui_log import LogEvent

EVENT_BUS_CAPACITY = 1024
"""Events a subscriber may fall behind by before its oldest are dropped."""


def _ts_ms(ts) -> int:
    return int(ts.timestamp() * 1000)


@dataclass(frozen=True)
class TopologyChanged:
    """The world's version counter advanced; clients should refetch topology."""

    version: int

    def to_dict(self) -> dict:
        return {"kind": "topology_changed", "version": self.version}


@dataclass(frozen=True)
class SampleEvent:
    """One freshly recorded history sample."""

    id: int
    metric: str
    ts_ms: int
    value: float

    def to_dict(self) -> dict:
        return {
            "kind": "sample",
            "id": self.id,
            "metric": str(self.metric),
            "ts_ms": self.ts_ms,
            "value": self.value,
        }


@dataclass(frozen=True)
class SetpointNotice:
    """A setpoint request arrived for a component, with its outcome."""

    id: int
    ts_ms: int
    setpoint_kind: str
    value: float
    accepted: bool
    reason: str | None = None

    @classmethod
    def from_event(cls, id: int, event: SetpointEvent) -> "SetpointNotice":
        """Build the broadcast form of a logged setpoint event."""
        outcome = event.outcome
        if isinstance(outcome, Accepted):
            accepted, reason = True, None
        elif isinstance(outcome, Rejected):
            accepted, reason = False, outcome.reason
        else:
            raise TypeError(f"unknown setpoint outcome {outcome!r}")
        return cls(
            id=id,
            ts_ms=_ts_ms(event.ts),
            setpoint_kind=event.kind.value,
            value=event.value,
            accepted=accepted,
            reason=reason,
        )

    def to_dict(self) -> dict:
        return {
            "kind": "setpoint",
            "id": self.id,
            "ts_ms": self.ts_ms,
            "setpoint_kind": self.setpoint_kind,
            "value": self.value,
            "accepted": self.accepted,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class LogLine:
    """A captured log record forwarded to live subscribers."""

    ts_ms: int
    level: str
    target: str
    message: str

    @classmethod
    def from_log_event(cls, event: LogEvent) -> "LogLine":
        return cls(ts_ms=event.ts_ms, level=event.level, target=event.target, message=event.message)

    def to_dict(self) -> dict:
        return {
            "kind": "log",
            "ts_ms": self.ts_ms,
            "level": self.level,
            "target": self.target,
            "message": self.message,
        }


WorldEvent = Union[TopologyChanged, SampleEvent, SetpointNotice, LogLine]


class EventBus:
    """Fan-out of world events to any number of subscriber queues.

    Publishing never blocks: a subscriber that falls ``capacity`` events
    behind loses its oldest pending events.
    """

    def __init__(self, capacity: int = EVENT_BUS_CAPACITY) -> None:
        self.capacity = capacity
        self._subscribers: list[queue.Queue] = []
        self._lock = threading.Lock()

    def subscribe(self) -> queue.Queue:
        """Return a queue receiving every event published from now on."""
        sub: queue.Queue = queue.Queue(maxsize=self.capacity)
        with self._lock:
            self._subscribers.append(sub)
        return sub

    def unsubscribe(self, subscriber: queue.Queue) -> None:
        with self._lock:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

    def publish(self, event: WorldEvent) -> int:
        """Deliver ``event`` to every subscriber; return how many received it."""
        with self._lock:
            subscribers = list(self._subscribers)
        for sub in subscribers:
            _offer(sub, event)
        return len(subscribers)


def _offer(sub: queue.Queue, event: WorldEvent) -> None:
    while True:
        try:
            sub.put_nowait(event)
            return
        except queue.Full:
            try:
                sub.get_nowait()
            except queue.Empty:
                pass