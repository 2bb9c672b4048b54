import pytest

from distpatterns.workflows import (
    master_worker,
    orchestrate_order,
    process_payment,
    run_choreography,
    scatter_gather,
    search,
    update_inventory,
    validate_order,
)


def test_step_messages_name_the_order():
    assert validate_order(101) == "Order 101 validated"
    assert "101" in process_payment(101)
    assert "101" in update_inventory(101)


def test_orchestrate_order_runs_every_step():
    results = orchestrate_order(101)
    assert sorted(results) == sorted(
        [validate_order(101), process_payment(101), update_inventory(101)]
    )


def test_choreography_completes_orders_in_order():
    assert run_choreography([101, 102, 103], delay=0) == [101, 102, 103]


def test_choreography_with_no_orders():
    assert run_choreography([], delay=0) == []


def test_search_message():
    assert search("node1", "q") == "Result from node1 for query 'q'"


def test_scatter_gather_collects_every_node():
    nodes = ["node1", "node2", "node3"]
    results = scatter_gather(nodes, "example query")
    assert sorted(results) == sorted(search(n, "example query") for n in nodes)


def test_scatter_gather_without_nodes():
    assert scatter_gather([], "query") == []


def test_master_worker_doubles_tasks():
    assert sorted(master_worker(range(1, 6), workers=3)) == [2, 4, 6, 8, 10]


def test_master_worker_result_count_matches_tasks():
    tasks = list(range(50))
    results = master_worker(tasks, workers=4)
    assert len(results) == len(tasks)
    assert all(result % 2 == 0 for result in results)


def test_master_worker_needs_workers():
    with pytest.raises(ValueError):
        master_worker([1], workers=0)