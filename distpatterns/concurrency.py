"""Building blocks for concurrent programs: active objects, monitors,
thread pools, completion tokens, bounded buffers and reentrant locks."""

from __future__ import annotations

import queue
import threading
from collections import deque
from collections.abc import Callable
from concurrent.futures import Future
from typing import Any, TypeVar

T = TypeVar("T")

_STOP = object()


class ActiveObject:
    """Executes submitted actions one at a time on its own thread."""

    def __init__(self) -> None:
        self._requests: queue.Queue = queue.Queue()
        self._errors: list[BaseException] = []
        self._closed = False
        self._lock = threading.Lock()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        while (request := self._requests.get()) is not _STOP:
            try:
                request()
            except Exception as exc:
                self._errors.append(exc)

    def do(self, action: Callable[[], object]) -> None:
        """Queue an action to run on the object's thread."""
        with self._lock:
            if self._closed:
                raise RuntimeError("active object is closed")
            self._requests.put(action)

    def close(self) -> None:
        """Finish queued actions and stop the thread; re-raise the first failure."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._requests.put(_STOP)
        self._thread.join()
        if self._errors:
            raise self._errors[0]

    def __enter__(self) -> ActiveObject:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class Monitor:
    """Runs actions under a single mutual-exclusion lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def safe_action(self, action: Callable[[], T]) -> T:
        """Run ``action`` while holding the monitor's lock and return its result."""
        with self._lock:
            return action()


class ThreadPool:
    """A fixed number of worker threads draining a shared task queue."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("thread pool needs at least one worker")
        self._tasks: queue.Queue = queue.Queue()
        self._errors: list[BaseException] = []
        self._closed = False
        self._workers = [
            threading.Thread(target=self._worker, daemon=True) for _ in range(size)
        ]
        for worker in self._workers:
            worker.start()

    def _worker(self) -> None:
        while (task := self._tasks.get()) is not _STOP:
            try:
                task()
            except Exception as exc:
                self._errors.append(exc)
            finally:
                self._tasks.task_done()
        self._tasks.task_done()

    def submit(self, task: Callable[[], object]) -> None:
        """Queue a task for the workers."""
        if self._closed:
            raise RuntimeError("thread pool is closed")
        self._tasks.put(task)

    def wait(self) -> None:
        """Wait for all submitted tasks, then shut the workers down.

        Re-raises the first exception a task raised.
        """
        if self._closed:
            return
        self._tasks.join()
        self._closed = True
        for _ in self._workers:
            self._tasks.put(_STOP)
        for worker in self._workers:
            worker.join()
        if self._errors:
            raise self._errors[0]


def async_task(value: Any = 42, delay: float = 1.0) -> Future:
    """Start background work and return a future completed with ``value``."""
    future: Future = Future()
    timer = threading.Timer(delay, future.set_result, args=(value,))
    timer.daemon = True
    timer.start()
    return future


class BoundedBuffer:
    """A FIFO buffer whose producers wait while full and consumers while empty."""

    def __init__(self, capacity: int = 5) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._items: deque = deque()
        self._cond = threading.Condition()

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    def put(self, item: Any) -> None:
        """Append an item, waiting while the buffer is full."""
        with self._cond:
            self._cond.wait_for(lambda: len(self._items) < self._capacity)
            self._items.append(item)
            self._cond.notify_all()

    def get(self) -> Any:
        """Remove and return the oldest item, waiting while the buffer is empty."""
        with self._cond:
            self._cond.wait_for(lambda: self._items)
            item = self._items.popleft()
            self._cond.notify_all()
            return item


class ReentrantLock:
    """A lock the owning thread may acquire repeatedly."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._owner: int | None = None
        self._recursions = 0

    def acquire(self) -> None:
        """Acquire the lock, or deepen the hold if already owned."""
        me = threading.get_ident()
        with self._cond:
            if self._owner == me:
                self._recursions += 1
                return
            self._cond.wait_for(lambda: self._owner is None)
            self._owner = me
            self._recursions = 1

    def release(self) -> None:
        """Undo one acquire; the lock is freed when the count reaches zero."""
        with self._cond:
            if self._owner != threading.get_ident():
                raise RuntimeError("unlock called by non-owner")
            self._recursions -= 1
            if self._recursions == 0:
                self._owner = None
                self._cond.notify()

    def __enter__(self) -> ReentrantLock:
        self.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()


class Counter:
    """A counter whose operations are linearizable."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    def increment(self) -> None:
        """Add one."""
        with self._lock:
            self._value += 1

    def value(self) -> int:
        """Return the current count."""
        with self._lock:
            return self._value