"""Lock-guarded event feed for scene events exposed via the API."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SceneEvent:
    """A single scene event for the API event feed."""

    timestamp_ms: float
    category: str          # "transition", "load", "placement", "ground"
    message: str
    creature_ids: tuple[str, ...] = ()


class EventLog:
    """Bounded event log. Writers append; readers snapshot a slice.

    The oldest events fall off once ``max_events`` is reached.
    """

    __slots__ = ("_buffer", "_lock")

    def __init__(self, max_events: int = 1000) -> None:
        self._buffer: deque[SceneEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: SceneEvent) -> None:
        with self._lock:
            self._buffer.append(event)

    def since(self, timestamp_ms: float) -> list[SceneEvent]:
        """Return all events with timestamp >= *timestamp_ms*."""
        with self._lock:
            return [e for e in self._buffer if e.timestamp_ms >= timestamp_ms]

    def latest(self, count: int = 50) -> list[SceneEvent]:
        """Return the *count* most recent events."""
        with self._lock:
            items = list(self._buffer)
        return items[-count:]

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)
