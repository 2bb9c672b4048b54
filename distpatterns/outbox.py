"""The transactional outbox: store an order and its event atomically."""

from __future__ import annotations

import os
import sqlite3
from dataclasses import dataclass, replace

DEFAULT_DATABASE = "order_outbox.db"
ORDER_PLACED = "ORDER_PLACED"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS orders (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    customer TEXT,
    total REAL
);
CREATE TABLE IF NOT EXISTS outbox_events (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    event_type TEXT,
    order_id INTEGER
);
"""


@dataclass(frozen=True)
class Order:
    """A customer order; ``id`` is assigned when it is stored."""

    customer: str = ""
    total: float = 0.0
    id: int | None = None


@dataclass(frozen=True)
class OutboxEvent:
    """An event waiting in the outbox to be published."""

    event_type: str
    order_id: int
    id: int | None = None


class OrderStore:
    """Orders and their outbox events in one SQLite database."""

    def __init__(self, database: str | os.PathLike = DEFAULT_DATABASE) -> None:
        self._conn = sqlite3.connect(os.fspath(database), check_same_thread=False)
        self._conn.executescript(_SCHEMA)

    def create_order_with_event(self, order: Order) -> tuple[Order, OutboxEvent]:
        """Save ``order`` and an ORDER_PLACED event in a single transaction.

        Returns the stored order and event with their ids filled in. If either
        insert fails, nothing is saved and the error propagates.
        """
        with self._conn:
            if order.id is None:
                cursor = self._conn.execute(
                    "INSERT INTO orders (customer, total) VALUES (?, ?)",
                    (order.customer, order.total),
                )
            else:
                cursor = self._conn.execute(
                    "INSERT INTO orders (id, customer, total) VALUES (?, ?, ?)",
                    (order.id, order.customer, order.total),
                )
            saved = replace(order, id=cursor.lastrowid)
            cursor = self._conn.execute(
                "INSERT INTO outbox_events (event_type, order_id) VALUES (?, ?)",
                (ORDER_PLACED, saved.id),
            )
            event = OutboxEvent(ORDER_PLACED, saved.id, cursor.lastrowid)
        print(f"Order created and outbox event saved: {saved}")
        return saved, event

    def orders(self) -> list[Order]:
        """Return every stored order, oldest first."""
        rows = self._conn.execute(
            "SELECT id, customer, total FROM orders ORDER BY id"
        ).fetchall()
        return [Order(customer, total, order_id) for order_id, customer, total in rows]

    def outbox_events(self) -> list[OutboxEvent]:
        """Return every outbox event, oldest first."""
        rows = self._conn.execute(
            "SELECT id, event_type, order_id FROM outbox_events ORDER BY id"
        ).fetchall()
        return [
            OutboxEvent(event_type, order_id, event_id)
            for event_id, event_type, order_id in rows
        ]

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def __enter__(self) -> OrderStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()