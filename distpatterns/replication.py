"""Replication helpers: replicated logs, follower reads, load balancing,
hash sharding and leader selection."""

from __future__ import annotations

import itertools
import logging
import threading
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193


@dataclass
class Node:
    """A node holding an append-only log."""

    node_id: str
    log: list[str] = field(default_factory=list)

    def append_log(self, entry: str) -> int:
        """Append an entry and return its index."""
        self.log.append(entry)
        return len(self.log) - 1


@dataclass
class Follower(Node):
    """A node that copies entries from its leader."""

    def receive_log(self, entry: str, index: int) -> bool:
        """Append ``entry`` only if it is the next expected index."""
        if index != len(self.log):
            return False
        self.append_log(entry)
        print(f"Follower {self.node_id} replicated entry: {entry}")
        return True


@dataclass
class Leader(Node):
    """A node that replicates each appended entry to its followers."""

    followers: list[Follower] = field(default_factory=list)

    def replicate_log(self, entry: str) -> int:
        """Append locally, send to every follower and return the index."""
        index = self.append_log(entry)
        for follower in self.followers:
            follower.receive_log(entry, index)
        return index


class ReplicatedStore:
    """A leader value and a follower copy that is updated with some lag."""

    def __init__(
        self,
        leader_data: str = "Leader data",
        follower_data: str = "Follower data (lagged)",
        lag: float = 0.1,
    ) -> None:
        self.leader_data = leader_data
        self.follower_data = follower_data
        self.lag = lag
        self._lock = threading.Lock()

    def write_to_leader(self, data: str) -> None:
        """Write to the leader and replicate, holding the store during the lag."""
        with self._lock:
            self.leader_data = data
            self.follower_data = data
            time.sleep(self.lag)

    def read_from_follower(self) -> str:
        """Read the follower's copy."""
        with self._lock:
            return self.follower_data


class RoundRobinBalancer:
    """Picks backend servers in rotation."""

    def __init__(self, servers: Sequence[str]) -> None:
        if not servers:
            raise ValueError("no servers to balance across")
        self.servers = list(servers)
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def next_server(self) -> str:
        """Return the next server; the first call picks the second server."""
        with self._lock:
            index = next(self._counter) % len(self.servers)
        return self.servers[index]


def fnv32a(data: bytes | str) -> int:
    """Return the 32-bit FNV-1a hash of ``data``."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    value = _FNV32_OFFSET
    for byte in data:
        value = ((value ^ byte) * _FNV32_PRIME) & 0xFFFFFFFF
    return value


def shard(user_id: str, num_shards: int) -> int:
    """Map a user to a shard by hashing its id."""
    if num_shards < 1:
        raise ValueError("number of shards must be positive")
    return fnv32a(user_id) % num_shards


def elect_leader(nodes: Sequence[str], now_ns: int | None = None) -> str:
    """Pick a leader from ``nodes`` using the current time in nanoseconds."""
    if not nodes:
        raise ValueError("no nodes to elect from")
    stamp = time.time_ns() if now_ns is None else now_ns
    leader = nodes[stamp % len(nodes)]
    print(f"New leader elected: {leader}")
    return leader