"""Building blocks for concurrent and distributed system patterns: clocks,
schedulers, concurrency primitives, reactors, health monitors, event
sourcing, transactions, write-ahead logs, replication, workflows, simplified
consensus, an idempotent consumer, a transactional outbox and an API
composition server."""

__version__ = "0.1.0"