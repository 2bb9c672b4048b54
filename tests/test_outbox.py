import sqlite3

import pytest

from distpatterns.outbox import Order, OrderStore, OutboxEvent


@pytest.fixture
def store():
    with OrderStore(":memory:") as instance:
        yield instance


def test_order_gets_id_and_event(store):
    saved, event = store.create_order_with_event(Order("Alice", 150.0))
    assert saved.id is not None
    assert saved.customer == "Alice"
    assert saved.total == 150.0
    assert event.event_type == "ORDER_PLACED"
    assert event.order_id == saved.id


def test_input_order_is_not_modified(store):
    order = Order("Alice", 150.0)
    store.create_order_with_event(order)
    assert order.id is None


def test_orders_and_events_are_listed(store):
    first, _ = store.create_order_with_event(Order("Alice", 150.0))
    second, _ = store.create_order_with_event(Order("Bob", 20.5))
    assert store.orders() == [first, second]
    assert second.id > first.id
    events = store.outbox_events()
    assert [e.order_id for e in events] == [first.id, second.id]
    assert all(isinstance(e, OutboxEvent) for e in events)


def test_explicit_id_is_kept(store):
    saved, event = store.create_order_with_event(Order("Carol", 5.0, id=7))
    assert saved.id == 7
    assert event.order_id == 7


def test_failed_order_saves_nothing(store):
    store.create_order_with_event(Order("Alice", 150.0, id=1))
    with pytest.raises(sqlite3.IntegrityError):
        store.create_order_with_event(Order("Bob", 1.0, id=1))
    assert len(store.orders()) == 1
    assert len(store.outbox_events()) == 1
    assert store.orders()[0].customer == "Alice"


def test_data_survives_reopen(tmp_path):
    path = tmp_path / "outbox.db"
    with OrderStore(path) as first:
        saved, event = first.create_order_with_event(Order("Alice", 150.0))
    with OrderStore(path) as second:
        assert second.orders() == [saved]
        assert second.outbox_events() == [event]