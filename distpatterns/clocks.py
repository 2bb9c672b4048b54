"""Logical, generation, hybrid and vector clocks for ordering events."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Mapping


class LamportClock:
    """A scalar logical clock."""

    def __init__(self, start: int = 0) -> None:
        self._time = start
        self._lock = threading.Lock()

    def increment(self) -> None:
        """Advance the clock for a local event."""
        with self._lock:
            self._time += 1

    def update(self, other: int) -> None:
        """Merge a timestamp received from another process, then advance."""
        with self._lock:
            self._time = max(self._time, other) + 1

    def time(self) -> int:
        """Return the current logical time."""
        with self._lock:
            return self._time


class GenerationClock:
    """A monotonically increasing generation (epoch) number."""

    def __init__(self, generation: int = 0) -> None:
        self._generation = generation
        self._lock = threading.Lock()

    def next_generation(self) -> None:
        """Move on to the next generation."""
        with self._lock:
            self._generation += 1

    def current(self) -> int:
        """Return the current generation."""
        with self._lock:
            return self._generation


class HybridClock:
    """Combines wall-clock nanoseconds with a logical counter."""

    def __init__(self, wall_clock: Callable[[], int] = time.time_ns) -> None:
        self._wall_clock = wall_clock
        self._logical = 0
        self._lock = threading.Lock()

    def now(self) -> str:
        """Return a timestamp of the form ``"<nanoseconds>|<logical>"``."""
        with self._lock:
            self._logical += 1
            return f"{self._wall_clock()}|{self._logical}"


class VectorClock:
    """A per-process vector of logical counters."""

    def __init__(self, clock: Mapping[str, int] | None = None) -> None:
        self._clock: dict[str, int] = dict(clock or {})
        self._lock = threading.Lock()

    def _merge(self, message: Mapping[str, int]) -> None:
        for process_id, timestamp in message.items():
            if self._clock.get(process_id, 0) < timestamp:
                self._clock[process_id] = timestamp

    def _render(self) -> str:
        with self._lock:
            return str(dict(sorted(self._clock.items())))

    def increment(self, process_id: str) -> None:
        """Record a local event of ``process_id``."""
        with self._lock:
            self._clock[process_id] = self._clock.get(process_id, 0) + 1

    def update(self, other: VectorClock) -> None:
        """Merge another clock into this one, taking element-wise maxima."""
        snapshot = other.send_message()
        with self._lock:
            self._merge(snapshot)

    def send_message(self) -> dict[str, int]:
        """Return a copy of the clock to attach to an outgoing message."""
        with self._lock:
            return dict(self._clock)

    def receive_message(self, message: Mapping[str, int], process_id: str) -> None:
        """Merge a received clock and record the receive event."""
        with self._lock:
            self._merge(message)
            self._clock[process_id] = self._clock.get(process_id, 0) + 1

    def __str__(self) -> str:
        return self._render()

    def display(self) -> str:
        """Print the current state of the clock and return the printed text."""
        text = self._render()
        print(text)
        return text