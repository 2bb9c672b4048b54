import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from distpatterns.concurrency import (
    ActiveObject,
    BoundedBuffer,
    Counter,
    Monitor,
    ReentrantLock,
    ThreadPool,
    async_task,
)


def test_active_object_runs_actions_in_order_on_one_thread():
    results = []
    threads = set()
    with ActiveObject() as ao:
        for i in range(20):
            ao.do(lambda i=i: (results.append(i), threads.add(threading.get_ident())))
    assert results == list(range(20))
    assert len(threads) == 1
    assert threading.get_ident() not in threads


def test_active_object_rejects_work_after_close():
    ao = ActiveObject()
    ao.close()
    with pytest.raises(RuntimeError):
        ao.do(lambda: None)


def test_active_object_close_reraises_failure():
    ao = ActiveObject()
    ao.do(lambda: 1 / 0)
    with pytest.raises(ZeroDivisionError):
        ao.close()


def test_monitor_returns_action_result():
    monitor = Monitor()
    assert monitor.safe_action(lambda: "critical") == "critical"


def test_monitor_serialises_updates():
    monitor = Monitor()
    state = {"n": 0}
    per_thread, thread_count = 200, 6
    total = per_thread * thread_count
    returned = []
    returned_lock = threading.Lock()

    def bump():
        current = state["n"]
        state["n"] = current + 1
        return state["n"]

    def work():
        values = [monitor.safe_action(bump) for _ in range(per_thread)]
        with returned_lock:
            returned.extend(values)

    threads = [threading.Thread(target=work) for _ in range(thread_count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    final = monitor.safe_action(lambda: state["n"])
    assert final == total
    assert monitor.safe_action(bump) == total + 1
    assert sorted(returned) == list(range(1, total + 1))


def test_thread_pool_runs_every_task():
    pool = ThreadPool(3)
    counter = Counter()
    for _ in range(10):
        pool.submit(counter.increment)
    pool.wait()
    assert counter.value() == 10


def test_thread_pool_rejects_submit_after_wait():
    pool = ThreadPool(2)
    pool.wait()
    with pytest.raises(RuntimeError):
        pool.submit(lambda: None)


def test_thread_pool_requires_workers():
    with pytest.raises(ValueError):
        ThreadPool(0)


def test_thread_pool_wait_reraises_task_error():
    pool = ThreadPool(2)
    ran = []
    pool.submit(lambda: (_ for _ in ()).throw(KeyError("boom")))
    pool.submit(lambda: ran.append(True))
    with pytest.raises(KeyError):
        pool.wait()
    assert ran == [True]


def test_async_task_default_value():
    future = async_task(delay=0.01)
    assert future.result(timeout=2) == 42


def test_async_task_custom_value():
    future = async_task("payload", delay=0.01)
    assert future.result(timeout=2) == "payload"


def test_bounded_buffer_producer_consumer_keeps_order():
    buffer = BoundedBuffer(5)
    items = list(range(1, 11))
    consumed = []

    def consume():
        for _ in items:
            consumed.append(buffer.get())

    consumer = threading.Thread(target=consume)
    consumer.start()
    for item in items:
        buffer.put(item)
    consumer.join(timeout=2)
    assert consumed == items
    assert len(buffer) == 0


def test_bounded_buffer_blocks_when_full():
    buffer = BoundedBuffer(2)
    buffer.put("a")
    buffer.put("b")
    producer = threading.Thread(target=buffer.put, args=("c",))
    producer.start()
    producer.join(timeout=0.1)
    assert producer.is_alive()
    assert buffer.get() == "a"
    producer.join(timeout=2)
    assert not producer.is_alive()
    assert [buffer.get(), buffer.get()] == ["b", "c"]


def test_bounded_buffer_needs_capacity():
    with pytest.raises(ValueError):
        BoundedBuffer(0)


def test_reentrant_lock_excludes_other_threads_until_fully_released():
    lock = ReentrantLock()
    counter = Counter()

    def contender():
        with lock:
            counter.increment()

    lock.acquire()
    lock.acquire()
    other = threading.Thread(target=contender)
    other.start()
    lock.release()
    other.join(timeout=0.1)
    assert counter.value() == 0
    lock.release()
    other.join(timeout=2)
    assert counter.value() == 1


def test_reentrant_lock_release_by_non_owner_raises():
    lock = ReentrantLock()
    lock.acquire()
    try:
        with ThreadPoolExecutor(max_workers=1) as executor:
            future = executor.submit(lock.release)
            with pytest.raises(RuntimeError, match="unlock called by non-owner"):
                future.result(timeout=2)
    finally:
        lock.release()


def test_reentrant_lock_release_when_unheld_raises():
    with pytest.raises(RuntimeError):
        ReentrantLock().release()


def test_counter_concurrent_increments():
    counter = Counter()
    increments = 5
    threads = [threading.Thread(target=counter.increment) for _ in range(increments)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert counter.value() == increments