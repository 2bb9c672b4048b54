"""Service workflows: orchestration, choreography, scatter-gather and
master-worker processing."""

from __future__ import annotations

import queue
import threading
import time
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed

_DONE = object()


def validate_order(order_id: int) -> str:
    """Validate an order."""
    return f"Order {order_id} validated"


def process_payment(order_id: int) -> str:
    """Process payment for an order."""
    return f"Payment for order {order_id} processed"


def update_inventory(order_id: int) -> str:
    """Update inventory for an order."""
    return f"Inventory updated for order {order_id}"


def orchestrate_order(order_id: int) -> list[str]:
    """Run all order steps concurrently and return their results as they finish."""
    steps = (validate_order, process_payment, update_inventory)
    with ThreadPoolExecutor(max_workers=len(steps)) as pool:
        futures = [pool.submit(step, order_id) for step in steps]
        results = [future.result() for future in as_completed(futures)]
    print("Order Orchestration Results:")
    for result in results:
        print(result)
    return results


def run_choreography(order_ids: Iterable[int], delay: float = 1.0) -> list[int]:
    """Pass orders through validation, payment and inventory services.

    Each service reacts to the event of the previous one. Returns the ids of
    orders whose inventory was updated, in the order it happened.
    """
    validated: queue.Queue = queue.Queue()
    paid: queue.Queue = queue.Queue()
    completed: list[int] = []

    def payment_service() -> None:
        while (order_id := validated.get()) is not _DONE:
            print(f"Processing payment for order {order_id}...")
            time.sleep(delay)
            print(f"Payment processed for order {order_id}.")
            paid.put(order_id)
        paid.put(_DONE)

    def inventory_service() -> None:
        while (order_id := paid.get()) is not _DONE:
            print(f"Updating inventory for order {order_id}...")
            time.sleep(delay)
            print(f"Inventory updated for order {order_id}.")
            completed.append(order_id)

    services = [
        threading.Thread(target=payment_service, daemon=True),
        threading.Thread(target=inventory_service, daemon=True),
    ]
    for service in services:
        service.start()
    try:
        for order_id in order_ids:
            print(f"Validating order {order_id}...")
            time.sleep(delay)
            print(f"Order {order_id} validated.")
            validated.put(order_id)
    finally:
        validated.put(_DONE)
        for service in services:
            service.join()
    return completed


def search(node: str, query: str) -> str:
    """Search one node."""
    return f"Result from {node} for query '{query}'"


def scatter_gather(nodes: Sequence[str], query: str) -> list[str]:
    """Send ``query`` to every node at once and gather the results."""
    results: list[str] = []
    if nodes:
        with ThreadPoolExecutor(max_workers=len(nodes)) as pool:
            futures = [pool.submit(search, node, query) for node in nodes]
            results = [future.result() for future in as_completed(futures)]
    print("Search Results:")
    for result in results:
        print(result)
    return results


def master_worker(tasks: Iterable[int], workers: int = 3) -> list[int]:
    """Distribute tasks over worker threads; each result is the task doubled."""
    if workers < 1:
        raise ValueError("need at least one worker")
    pending: queue.Queue = queue.Queue()
    results: list[int] = []
    lock = threading.Lock()

    def worker(worker_id: int) -> None:
        while (task := pending.get()) is not _DONE:
            print(f"Worker {worker_id} processing task {task}")
            with lock:
                results.append(task * 2)

    threads = [
        threading.Thread(target=worker, args=(worker_id,), daemon=True)
        for worker_id in range(1, workers + 1)
    ]
    for thread in threads:
        thread.start()
    for task in tasks:
        pending.put(task)
    for _ in threads:
        pending.put(_DONE)
    for thread in threads:
        thread.join()
    for result in results:
        print(f"Result: {result}")
    return results