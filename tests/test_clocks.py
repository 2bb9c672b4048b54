import threading

from distpatterns.clocks import GenerationClock, HybridClock, LamportClock, VectorClock


def test_lamport_worked_example():
    clock = LamportClock()
    clock.increment()
    assert clock.time() == 1
    clock.update(5)
    assert clock.time() == 6


def test_lamport_update_with_older_timestamp_still_advances():
    clock = LamportClock()
    for _ in range(10):
        clock.increment()
    before = clock.time()
    clock.update(before - 5)
    assert clock.time() == before + 1


def test_lamport_update_exceeds_received():
    clock = LamportClock()
    clock.update(40)
    assert clock.time() > 40


def test_generation_clock_advances():
    clock = GenerationClock()
    assert clock.current() == 0
    clock.next_generation()
    clock.next_generation()
    assert clock.current() == 2


def test_hybrid_clock_uses_wall_time_and_counts():
    clock = HybridClock(wall_clock=lambda: 123)
    first = clock.now().split("|")
    second = clock.now().split("|")
    assert first[0] == "123"
    assert second[0] == "123"
    assert int(second[1]) == int(first[1]) + 1


def test_hybrid_clock_default_wall_clock_is_monotonic_enough():
    clock = HybridClock()
    stamps = [clock.now() for _ in range(5)]
    logical = [int(s.split("|")[1]) for s in stamps]
    assert logical == sorted(logical)
    assert len(set(logical)) == len(logical)


def test_vector_clock_message_exchange():
    vc1 = VectorClock()
    vc2 = VectorClock()
    vc1.increment("P1")
    vc2.receive_message(vc1.send_message(), "P2")
    assert vc2.send_message() == {"P1": 1, "P2": 1}
    vc2.increment("P2")
    vc1.receive_message(vc2.send_message(), "P1")
    assert vc1.send_message() == {"P1": 2, "P2": 2}


def test_vector_clock_send_message_is_a_copy():
    vc = VectorClock()
    vc.increment("A")
    message = vc.send_message()
    message["A"] = 100
    assert vc.send_message()["A"] == 1


def test_vector_clock_update_takes_maxima_without_incrementing():
    vc1 = VectorClock({"A": 3, "B": 1})
    vc2 = VectorClock({"A": 1, "B": 4, "C": 2})
    vc1.update(vc2)
    assert vc1.send_message() == {"A": 3, "B": 4, "C": 2}


def test_vector_clock_display(capsys):
    vc = VectorClock()
    vc.increment("P2")
    vc.increment("P1")
    vc.display()
    out = capsys.readouterr().out.strip()
    assert out == str({"P1": 1, "P2": 1})


def test_vector_clock_concurrent_increments():
    vc = VectorClock()
    threads_count, per_thread = 8, 100

    def work():
        for _ in range(per_thread):
            vc.increment("P")

    threads = [threading.Thread(target=work) for _ in range(threads_count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert vc.send_message()["P"] == threads_count * per_thread