"""Capture log records into a ring buffer and fan them out to subscribers."""

from __future__ import annotations

import logging
import queue
import threading
from collections import deque
from dataclasses import asdict, dataclass

_BUS_CAPACITY = 256


@dataclass(frozen=True)
class LogEvent:
    ts_ms: int
    level: str
    target: str
    message: str

    def to_dict(self) -> dict:
        return asdict(self)


class LogBuffer:
    """Bounded ring of the most recent log events."""

    def __init__(self, capacity: int) -> None:
        self._ring: deque[LogEvent] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def push(self, event: LogEvent) -> None:
        with self._lock:
            self._ring.append(event)

    def snapshot(self) -> list[LogEvent]:
        with self._lock:
            return list(self._ring)


class LogTap(logging.Handler):
    """Logging handler that keeps a backfill buffer and broadcasts live events."""

    def __init__(self, capacity: int, level: int = logging.INFO) -> None:
        super().__init__(level)
        self._buffer = LogBuffer(capacity)
        self._subscribers: list[queue.Queue] = []
        self._sub_lock = threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno < self.level:
            return
        event = LogEvent(
            ts_ms=int(record.created * 1000),
            level=record.levelname,
            target=record.name,
            message=record.getMessage(),
        )
        self._buffer.push(event)
        with self._sub_lock:
            subscribers = list(self._subscribers)
        for sub in subscribers:
            _offer(sub, event)

    def snapshot(self) -> list[LogEvent]:
        return self._buffer.snapshot()

    def subscribe(self) -> queue.Queue:
        """Return a queue receiving every event emitted from now on."""
        sub: queue.Queue = queue.Queue(maxsize=_BUS_CAPACITY)
        with self._sub_lock:
            self._subscribers.append(sub)
        return sub

    def unsubscribe(self, subscriber: queue.Queue) -> None:
        with self._sub_lock:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)


def _offer(sub: queue.Queue, event: LogEvent) -> None:
    # A lagging subscriber loses its oldest events rather than blocking logging.
    while True:
        try:
            sub.put_nowait(event)
            return
        except queue.Full:
            try:
                sub.get_nowait()
            except queue.Empty:
                pass


class _TapSlot:
    tap: LogTap | None = None
    lock = threading.Lock()


def install_log_tap(capacity: int, level: int = logging.INFO) -> LogTap:
    """Install the process-wide tap on the root logger once; return it."""
    with _TapSlot.lock:
        if _TapSlot.tap is None:
            tap = LogTap(capacity, level)
            logging.getLogger().addHandler(tap)
            _TapSlot.tap = tap
        return _TapSlot.tap


def get_log_tap() -> LogTap | None:
    """The process-wide tap, or None if none was installed."""
    return _TapSlot.tap