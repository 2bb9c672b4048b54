"""Simplified Paxos and Raft leader election."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum


@dataclass
class Acceptor:
    """A Paxos acceptor."""

    highest_proposal_number: int = 0
    accepted_value: str | None = None

    def prepare(self, proposal_number: int) -> str | None:
        """Promise a higher-numbered proposal.

        Returns None if the promise is refused; otherwise the value already
        accepted, or an empty string when nothing has been accepted yet.
        """
        if proposal_number <= self.highest_proposal_number:
            return None
        self.highest_proposal_number = proposal_number
        return self.accepted_value or ""

    def accept(self, proposal_number: int, value: str) -> bool:
        """Accept ``value`` unless a higher proposal has been promised."""
        if proposal_number < self.highest_proposal_number:
            return False
        self.accepted_value = value
        self.highest_proposal_number = proposal_number
        return True


@dataclass
class Proposer:
    """A Paxos proposer."""

    proposal_number: int
    value: str
    acceptors: list[Acceptor] = field(default_factory=list)

    def propose(self) -> str | None:
        """Run both phases; return the value sent for acceptance, or None.

        A value already accepted by a promising acceptor is proposed in
        preference to the proposer's own value.
        """
        promises = [
            response
            for acceptor in self.acceptors
            if (response := acceptor.prepare(self.proposal_number)) is not None
        ]
        if len(promises) <= len(self.acceptors) // 2:
            return None
        chosen = next((value for value in promises if value), self.value)
        for acceptor in self.acceptors:
            acceptor.accept(self.proposal_number, chosen)
        return chosen


class State(str, Enum):
    """Role of a Raft node."""

    FOLLOWER = "Follower"
    CANDIDATE = "Candidate"
    LEADER = "Leader"


@dataclass(eq=False)
class RaftNode:
    """A Raft node taking part in leader election."""

    id: int
    state: State = State.FOLLOWER
    term: int = 0
    log: list[str] = field(default_factory=list)
    voted_for: int | None = None
    vote_count: int = 0

    def start_election(self, peers: Sequence[RaftNode]) -> bool:
        """Stand for election among ``peers``; return True if elected."""
        self.state = State.CANDIDATE
        self.term += 1
        self.vote_count = 1
        print(f"Node {self.id} starts election with term {self.term}")
        for peer in peers:
            if peer is not self and peer.request_vote(self.term):
                self.vote_count += 1
        if self.vote_count > len(peers) // 2:
            self.state = State.LEADER
            print(f"Node {self.id} became the leader for term {self.term}")
            self.send_heartbeats(peers)
            return True
        self.state = State.FOLLOWER
        return False

    def request_vote(self, term: int) -> bool:
        """Grant a vote for a newer term."""
        if term <= self.term:
            return False
        self.term = term
        self.state = State.FOLLOWER
        self.voted_for = self.id
        return True

    def send_heartbeats(self, peers: Sequence[RaftNode]) -> None:
        """Send a heartbeat to every other peer."""
        print(f"Leader {self.id} sending heartbeats")
        for peer in peers:
            if peer is not self:
                peer.receive_heartbeat(self.term)

    def receive_heartbeat(self, term: int) -> bool:
        """Follow a leader of the same or a newer term."""
        if term < self.term:
            return False
        self.term = term
        self.state = State.FOLLOWER
        print(f"Node {self.id} received heartbeat from Leader {self.term}")
        return True

    def on_timeout(self, peers: Sequence[RaftNode]) -> bool:
        """On election timeout a follower stands for election."""
        if self.state is not State.FOLLOWER:
            return False
        return self.start_election(peers)