"""Event sourcing for a bank account and a simple domain event bus."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Protocol


class AccountEvent(Protocol):
    """An event that changes a bank account."""

    def apply_to(self, account: BankAccount) -> None: ...


@dataclass(frozen=True)
class Deposit:
    """Money paid into an account."""

    amount: float

    def apply_to(self, account: BankAccount) -> None:
        account.balance += self.amount


@dataclass(frozen=True)
class Withdraw:
    """Money taken out of an account."""

    amount: float

    def apply_to(self, account: BankAccount) -> None:
        account.balance -= self.amount


@dataclass
class BankAccount:
    """An account whose state is the result of its recorded events."""

    balance: float = 0.0
    events: list[AccountEvent] = field(default_factory=list)

    def apply_event(self, event: AccountEvent) -> None:
        """Apply an event and record it."""
        event.apply_to(self)
        self.events.append(event)

    @classmethod
    def replay(cls, events: Iterable[AccountEvent]) -> BankAccount:
        """Rebuild an account from a history of events."""
        account = cls()
        for event in events:
            account.apply_event(event)
        return account


class DomainEvent(Protocol):
    """An event identified by its name."""

    @property
    def name(self) -> str: ...


@dataclass(frozen=True)
class UserRegisteredEvent:
    """A user has registered."""

    user_id: str
    email: str

    @property
    def name(self) -> str:
        return "UserRegisteredEvent"


class EventBus:
    """Publishes domain events to the handlers subscribed to their name."""

    def __init__(self) -> None:
        self._handlers: defaultdict[str, list[Callable[[DomainEvent], object]]] = (
            defaultdict(list)
        )

    def subscribe(self, event_type: str, handler: Callable[[DomainEvent], object]) -> None:
        """Call ``handler`` for every published event named ``event_type``."""
        self._handlers[event_type].append(handler)

    def publish(self, event: DomainEvent) -> None:
        """Pass ``event`` to its subscribers in subscription order."""
        for handler in list(self._handlers.get(event.name, ())):
            handler(event)