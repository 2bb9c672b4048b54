"""Event reactors: a single-queue reactor and a multicast dispatcher."""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_STOP = object()


class Reactor:
    """Delivers emitted events to handler loops that share one event queue.

    Each registered handler runs its own loop; every emitted event is taken
    by exactly one loop, which calls its handler if the event matches.
    """

    def __init__(self) -> None:
        self._events: queue.Queue = queue.Queue()
        self._threads: list[threading.Thread] = []
        self._errors: list[BaseException] = []
        self._closed = False
        self._lock = threading.Lock()

    def _loop(self, event: str, handler: Callable[[], object]) -> None:
        while (received := self._events.get()) is not _STOP:
            if received == event:
                try:
                    handler()
                except Exception as exc:
                    self._errors.append(exc)

    def handle(self, event: str, handler: Callable[[], object]) -> None:
        """Start a loop that calls ``handler`` whenever it receives ``event``."""
        with self._lock:
            if self._closed:
                raise RuntimeError("reactor is closed")
            thread = threading.Thread(
                target=self._loop, args=(event, handler), daemon=True
            )
            self._threads.append(thread)
            thread.start()

    def emit(self, event: str) -> None:
        """Send an event to the handler loops."""
        with self._lock:
            if self._closed:
                raise RuntimeError("reactor is closed")
            self._events.put(event)

    def close(self) -> None:
        """Let the loops drain pending events, then stop them.

        Re-raises the first exception a handler raised.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            for _ in self._threads:
                self._events.put(_STOP)
        for thread in self._threads:
            thread.join()
        if self._errors:
            raise self._errors[0]

    def __enter__(self) -> Reactor:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@dataclass(frozen=True)
class Event:
    """An event carrying a string payload."""

    data: str


class MulticastReactor:
    """Copies every dispatched event into each registered handler's buffer."""

    def __init__(self, buffer_size: int = 10) -> None:
        if buffer_size < 1:
            raise ValueError("buffer size must be positive")
        self._buffer_size = buffer_size
        self._handlers: dict[str, queue.Queue] = {}
        self._lock = threading.Lock()

    def register_handler(self, name: str) -> queue.Queue:
        """Create (or replace) the bounded buffer for handler ``name``."""
        with self._lock:
            buffer: queue.Queue = queue.Queue(maxsize=self._buffer_size)
            self._handlers[name] = buffer
            return buffer

    def dispatch(self, event: Event) -> dict[str, bool]:
        """Offer ``event`` to every handler without blocking.

        Returns, for each handler name, whether the event was delivered;
        a handler whose buffer is full has the event dropped.
        """
        delivered: dict[str, bool] = {}
        with self._lock:
            for name, buffer in self._handlers.items():
                try:
                    buffer.put_nowait(event)
                except queue.Full:
                    logger.warning("Handler %s is too slow, dropping event", name)
                    delivered[name] = False
                else:
                    logger.info("Event sent to handler %s", name)
                    delivered[name] = True
        return delivered