"""Distributed transactions: two-phase commit and sagas."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Participant(Protocol):
    """A resource taking part in a two-phase commit."""

    def prepare(self) -> bool: ...

    def commit(self) -> bool: ...

    def rollback(self) -> bool: ...


@dataclass
class Coordinator:
    """Drives a two-phase commit across its participants."""

    participants: list[Participant] = field(default_factory=list)

    def start_transaction(self) -> bool:
        """Run both phases; return True if the transaction was committed.

        Preparation stops at the first participant that is not ready, and
        then every participant is rolled back. A participant whose commit
        fails is rolled back on its own.
        """
        all_ready = all(participant.prepare() for participant in self.participants)
        if all_ready:
            logger.info("All participants are ready, committing.")
            for participant in self.participants:
                if not participant.commit():
                    participant.rollback()
            return True
        logger.info("Participants are not ready, rolling back.")
        for participant in self.participants:
            participant.rollback()
        return False


def run_saga(
    steps: Sequence[Callable[[], object]],
    compensations: Sequence[Callable[[], object]],
) -> None:
    """Run steps in order; on failure undo the completed ones and re-raise.

    When step ``i`` raises, ``compensations[i-1]`` down to
    ``compensations[0]`` are run in that order before the error propagates.
    A failing compensation is logged and does not stop the others.
    """
    for index, step in enumerate(steps):
        try:
            step()
        except Exception:
            logger.warning("Error occurred, starting compensations...")
            for compensate in reversed(compensations[:index]):
                try:
                    compensate()
                except Exception:
                    logger.exception("compensation failed")
            raise