# distpatterns

Small, self-contained implementations of patterns used in concurrent and
distributed systems: logical clocks, schedulers, thread pools, reactors,
health monitors, event sourcing, two-phase commit, sagas, write-ahead logs,
log replication, sharding, workflows, simplified Paxos and Raft, an
idempotent consumer, a transactional outbox and an API composition server.

Everything is built on the standard library only; there are no runtime
dependencies.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

| Module | Contents |
| --- | --- |
| `distpatterns.clocks` | `LamportClock`, `GenerationClock`, `HybridClock`, `VectorClock` |
| `distpatterns.scheduler` | `Task`, `PriorityScheduler`, `round_robin` |
| `distpatterns.concurrency` | `ActiveObject`, `Monitor`, `ThreadPool`, `async_task`, `BoundedBuffer`, `ReentrantLock`, `Counter` |
| `distpatterns.reactor` | `Reactor`, `Event`, `MulticastReactor` |
| `distpatterns.proctor` | `Proctor`, `Status`, `Service`, `HealthProctor`, `simulate_service` |
| `distpatterns.events` | `Deposit`, `Withdraw`, `BankAccount`, `UserRegisteredEvent`, `EventBus` |
| `distpatterns.transactions` | `Participant`, `Coordinator`, `run_saga` |
| `distpatterns.wal` | `write_log`, `WriteAheadLog` |
| `distpatterns.replication` | `Node`, `Leader`, `Follower`, `ReplicatedStore`, `RoundRobinBalancer`, `fnv32a`, `shard`, `elect_leader` |
| `distpatterns.workflows` | `validate_order`, `process_payment`, `update_inventory`, `orchestrate_order`, `run_choreography`, `search`, `scatter_gather`, `master_worker` |
| `distpatterns.consensus` | `Acceptor`, `Proposer`, `State`, `RaftNode` |
| `distpatterns.idempotent` | `IdempotentConsumer` |
| `distpatterns.outbox` | `Order`, `OutboxEvent`, `OrderStore` |
| `distpatterns.api_composition` | `ServiceEndpoints`, `fetch_product`, `fetch_pricing`, `fetch_review`, `get_product_details`, `make_server`, `main` |

## Examples

### Clocks

```python
from distpatterns.clocks import LamportClock, VectorClock

clock = LamportClock()
clock.increment()
clock.update(5)
clock.time()                 # 6

p1, p2 = VectorClock(), VectorClock()
p1.increment("P1")
p2.receive_message(p1.send_message(), "P2")
p2.display()                 # prints and returns "{'P1': 1, 'P2': 1}"
```

`HybridClock.now()` returns a string `"<nanoseconds>|<logical>"`; the
logical part grows by one on every call.

### Scheduling and concurrency

```python
import threading
from distpatterns.scheduler import PriorityScheduler, Task

scheduler = PriorityScheduler()
low = Task(1, 1, lambda: print("low"))
scheduler.add_task(low)
scheduler.add_task(Task(2, 5, lambda: print("high")))
scheduler.update_priority(low, 10)

runner = threading.Thread(target=scheduler.run)
runner.start()
# ... later
scheduler.stop()
runner.join()
```

Higher priorities run first. Adding a task that is already queued, or
updating one that is not, raises `ValueError`. `pop_task(timeout)` removes
the next task directly and returns `None` on timeout or after `stop()`.
`round_robin(tasks, interval, stop_event)` runs tasks in turn until the
event is set and returns how many ran.

In `distpatterns.concurrency`:

- `ActiveObject` runs actions passed to `do()` one at a time on its own
  thread; `close()` (or leaving a `with` block) waits for them and re-raises
  the first exception an action raised.
- `ThreadPool(size)` runs submitted tasks on `size` workers; `wait()` waits
  for all of them, shuts the workers down and re-raises the first failure.
- `async_task(value=42, delay=1.0)` returns a `concurrent.futures.Future`
  that is completed with `value` after `delay` seconds.
- `BoundedBuffer(capacity=5)` blocks `put()` while full and `get()` while
  empty.
- `ReentrantLock` may be acquired repeatedly by its owning thread; a release
  from another thread raises `RuntimeError`.
- `Monitor.safe_action(action)` runs `action` under a lock and returns its
  result; `Counter` is a lock-protected counter.

### Reactors and health monitoring

`Reactor.handle(event, handler)` starts a handler loop; all loops share one
event queue, so each emitted event is taken by exactly one loop.
`MulticastReactor.dispatch(event)` offers an `Event` to every registered
handler's bounded queue without blocking and returns a mapping from handler
name to whether it was delivered.

`Proctor.run_checks()` prints and returns the outcome of each check.
`HealthProctor` keeps a `Service` per registered name; `check_health()`
returns alerts for services whose `Status` is `UNHEALTHY`,
`monitor(interval)` repeats the check until `stop()`, and `stop()` returns
all alerts raised.

### Event sourcing and domain events

```python
from distpatterns.events import BankAccount, Deposit, EventBus, UserRegisteredEvent, Withdraw

account = BankAccount()
account.apply_event(Deposit(100.0))
account.apply_event(Withdraw(50.0))
BankAccount.replay(account.events).balance   # 50.0

bus = EventBus()
bus.subscribe("UserRegisteredEvent", lambda event: print(event.email))
bus.publish(UserRegisteredEvent("123", "user@example.com"))
```

### Transactions

`Coordinator(participants).start_transaction()` prepares every participant,
stopping at the first that is not ready. If all are ready each is committed
(a participant whose commit fails is rolled back) and `True` is returned;
otherwise all are rolled back and `False` is returned. Any object with
`prepare`, `commit` and `rollback` methods returning `bool` is a
`Participant`.

`run_saga(steps, compensations)` runs the steps in order; when step `i`
raises, `compensations[i-1]` down to `compensations[0]` run and the error is
re-raised.

### Write-ahead log

`write_log(entry, path="wal.log")` appends one line to a log file.
`WriteAheadLog(log_path, data_path)` appends to the log before the data
store on `write()`, and `recover()` re-applies every logged line to the data
store, returning how many were replayed.

### Replication and sharding

```python
from distpatterns.replication import Follower, Leader, RoundRobinBalancer, shard

leader = Leader("Leader", followers=[Follower("F1"), Follower("F2")])
leader.replicate_log("Log Entry 1")   # 0

shard("user1", 3)                      # FNV-1a hash of the id modulo 3
RoundRobinBalancer(["a", "b", "c"]).next_server()   # "b" on the first call
```

`ReplicatedStore` models a leader value and a follower copy written
together under a lock held for `lag` seconds. `elect_leader(nodes, now_ns)`
picks `nodes[now_ns % len(nodes)]`.

### Workflows

`orchestrate_order(order_id)` runs the three order steps concurrently and
returns their messages; `run_choreography(order_ids, delay)` passes orders
through validation, payment and inventory threads and returns the completed
ids; `scatter_gather(nodes, query)` queries all nodes at once;
`master_worker(tasks, workers=3)` returns each task doubled.

### Consensus

```python
from distpatterns.consensus import Acceptor, Proposer

acceptors = [Acceptor() for _ in range(3)]
Proposer(1, "value1", acceptors).propose()   # "value1"
```

`RaftNode` models terms, vote requests and heartbeats of a simplified
election among a list of in-process peers.

### Storage-backed patterns

`IdempotentConsumer(database="messages.db")` records message ids in SQLite;
`process_message(message_id, content)` returns `False` for an id already
seen. `OrderStore(database="order_outbox.db")` saves an `Order` and its
`ORDER_PLACED` `OutboxEvent` in one transaction and returns both with their
ids.

## Command line

The API composition server answers `GET /product?id=<id>` by querying the
product, pricing and review services and returning the combined JSON
document (HTTP 500 with the error text if a service fails):

```
distpatterns-api-composition --port 8080
```

Options: `--host`, `--port`, `--product-url`, `--pricing-url`,
`--review-url`; the product id is appended to each service URL.

## What this package does not do

- It does not connect to a message broker. `IdempotentConsumer` only
  processes the messages the caller passes to it; there are no producers or
  consumers for a queue or topic.
- The consensus and replication classes exchange messages by plain method
  calls within one process; there is no network transport, persistent Raft
  log or snapshotting.
- `OrderStore` writes events to the outbox table but nothing publishes them.
- There is no service registry, circuit breaker or read-model cache.