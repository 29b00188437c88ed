"""Deadlines by which the latest set-power request for each component expires."""

from __future__ import annotations

import threading
import time
from datetime import timedelta
from typing import Callable


class TimeoutTracker:
    """Thread-safe map of component id to expiry deadline.

    Adding a deadline for an id replaces any earlier one ("latest set wins").
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._deadlines: dict[int, float] = {}
        self._lock = threading.Lock()

    def add(self, id: int, lifetime: timedelta | float) -> None:
        """Schedule expiry of ``id`` after ``lifetime`` (timedelta or seconds)."""
        seconds = lifetime.total_seconds() if isinstance(lifetime, timedelta) else float(lifetime)
        with self._lock:
            self._deadlines[id] = self._clock() + seconds

    def remove_expired(self) -> list[int]:
        """Drop every deadline that has passed and return the affected ids."""
        now = self._clock()
        with self._lock:
            expired = [id_ for id_, deadline in self._deadlines.items() if deadline <= now]
            for id_ in expired:
                del self._deadlines[id_]
        return expired