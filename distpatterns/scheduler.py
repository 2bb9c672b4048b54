"""A priority task scheduler and a round-robin scheduler."""

from __future__ import annotations

import heapq
import itertools
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass


@dataclass(eq=False)
class Task:
    """A unit of work; higher ``priority`` runs first."""

    id: int
    priority: int
    action: Callable[[], object]


class PriorityScheduler:
    """Runs queued tasks highest priority first; priorities can change."""

    def __init__(self) -> None:
        self._heap: list[list] = []
        self._entries: dict[Task, list] = {}
        self._counter = itertools.count()
        self._cond = threading.Condition()
        self._stopped = False

    def __len__(self) -> int:
        with self._cond:
            return len(self._entries)

    def _push(self, task: Task) -> None:
        entry = [-task.priority, next(self._counter), task]
        self._entries[task] = entry
        heapq.heappush(self._heap, entry)

    def _pop(self) -> Task:
        while True:
            _, _, task = heapq.heappop(self._heap)
            if task is not None:
                del self._entries[task]
                return task

    def add_task(self, task: Task) -> None:
        """Queue a task and wake a waiting runner."""
        with self._cond:
            if task in self._entries:
                raise ValueError(f"task {task.id} is already queued")
            self._push(task)
            self._cond.notify()

    def update_priority(self, task: Task, new_priority: int) -> None:
        """Change the priority of a queued task."""
        with self._cond:
            entry = self._entries.get(task)
            if entry is None:
                raise ValueError(f"task {task.id} is not queued")
            entry[2] = None
            task.priority = new_priority
            self._push(task)

    def pop_task(self, timeout: float | None = None) -> Task | None:
        """Remove and return the highest-priority task.

        Blocks until a task is available; returns None on timeout or once
        the scheduler has been stopped.
        """
        with self._cond:
            ready = self._cond.wait_for(
                lambda: self._entries or self._stopped, timeout
            )
            if not ready or self._stopped:
                return None
            return self._pop()

    def run(self) -> None:
        """Execute tasks as they become available until stopped."""
        while (task := self.pop_task()) is not None:
            task.action()

    def stop(self) -> None:
        """Stop the scheduler, releasing any waiting runner."""
        with self._cond:
            self._stopped = True
            self._cond.notify_all()


def round_robin(
    tasks: Iterable[Callable[[], object]],
    interval: float = 1.0,
    stop_event: threading.Event | None = None,
) -> int:
    """Run tasks in turn, pausing ``interval`` seconds after each.

    Runs until ``stop_event`` is set and returns the number of tasks run.
    """
    tasks = list(tasks)
    if not tasks:
        raise ValueError("no tasks to schedule")
    stop = threading.Event() if stop_event is None else stop_event
    executed = 0
    for task in itertools.cycle(tasks):
        if stop.is_set():
            break
        task()
        executed += 1
        if stop.wait(interval):
            break
    return executed