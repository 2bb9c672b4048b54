"""Proctors: simple check runners and a service health monitor."""

from __future__ import annotations

import queue
import random
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum


class Proctor:
    """Runs a list of boolean checks and reports each outcome."""

    def __init__(self) -> None:
        self._checks: list[Callable[[], bool]] = []

    def add_check(self, check: Callable[[], bool]) -> None:
        """Add a check to run."""
        self._checks.append(check)

    def run_checks(self) -> list[bool]:
        """Run every check in order, print its outcome and return the outcomes."""
        outcomes = []
        for number, check in enumerate(self._checks):
            passed = bool(check())
            print(f"Check {number} {'passed' if passed else 'failed'}")
            outcomes.append(passed)
        return outcomes


class Status(str, Enum):
    """Health status of a service."""

    HEALTHY = "Healthy"
    UNHEALTHY = "Unhealthy"
    UNKNOWN = "Unknown"


_STATUSES = list(Status)


@dataclass
class Service:
    """A service and its last reported health."""

    name: str
    status: Status = field(default=Status.UNKNOWN)


class HealthProctor:
    """Tracks service health and raises alerts for unhealthy services."""

    def __init__(self) -> None:
        self._services: dict[str, Service] = {}
        self._lock = threading.Lock()
        self._alerts: queue.Queue = queue.Queue()
        self._stop = threading.Event()
        self._idle = threading.Condition()
        self._active = 0

    @property
    def services(self) -> dict[str, Service]:
        """A snapshot of the registered services."""
        with self._lock:
            return {
                name: Service(service.name, service.status)
                for name, service in self._services.items()
            }

    def register_service(self, name: str) -> None:
        """Register a service with unknown status."""
        with self._lock:
            self._services[name] = Service(name)

    def update_health(self, name: str, status: Status | str) -> None:
        """Record a new status for a registered service; unknown names are ignored."""
        status = Status(status)
        with self._lock:
            service = self._services.get(name)
            if service is not None:
                service.status = status

    def check_health(self) -> list[str]:
        """Inspect every service once and return the alerts raised."""
        raised = []
        with self._lock:
            for service in self._services.values():
                if service.status is Status.UNHEALTHY:
                    alert = f"ALERT: Service {service.name} is unhealthy!"
                    print(alert)
                    self._alerts.put(alert)
                    raised.append(alert)
                elif service.status is Status.UNKNOWN:
                    print(f"WARNING: Service {service.name} health status is unknown.")
        return raised

    def monitor(self, interval: float = 2.0) -> None:
        """Check health every ``interval`` seconds until stopped."""
        with self._idle:
            self._active += 1
        try:
            while not self._stop.wait(interval):
                self.check_health()
        finally:
            with self._idle:
                self._active -= 1
                self._idle.notify_all()

    def stop(self) -> list[str]:
        """Stop monitoring, wait for monitors to finish and return all alerts."""
        self._stop.set()
        with self._idle:
            self._idle.wait_for(lambda: self._active == 0)
        alerts = []
        while True:
            try:
                alerts.append(self._alerts.get_nowait())
            except queue.Empty:
                return alerts


def simulate_service(
    proctor: HealthProctor,
    name: str,
    interval: float = 1.0,
    stop_event: threading.Event | None = None,
    rng: random.Random | None = None,
) -> int:
    """Report a random status for ``name`` every ``interval`` seconds.

    Runs until ``stop_event`` is set and returns the number of updates made.
    """
    stop = threading.Event() if stop_event is None else stop_event
    chooser = random.Random() if rng is None else rng
    updates = 0
    while not stop.wait(interval):
        status = chooser.choice(_STATUSES)
        proctor.update_health(name, status)
        print(f"Service {name} updated to {status.value}")
        updates += 1
    return updates