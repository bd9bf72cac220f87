"""
Tomb Hunt - Dungeon Progress
Owned state for artifacts, the entrance gate and the run outcome
"""

import threading
from typing import FrozenSet, Iterable, List, Tuple

from tomb.core.constants import (
    FLASH_CAUGHT, FLASH_ENTERED, FLASH_ESCAPED, FLASH_PASSAGE_OPEN,
    GateState, Outcome
)
from tomb.core.logger import get_logger

Cell = Tuple[int, int]


def remaining_message(remaining: int) -> str:
    if remaining == 1:
        return "1 artifact remains"
    return f"{remaining} artifacts remain"


class DungeonProgress:
    """
    Progress through one dungeon run.

    Updates are compare-and-set: each mutator checks the current state under
    a lock and reports whether it changed anything, so concurrent readers
    (renderer, triggers, pursuer) never see a half-applied update.
    """

    def __init__(self, objectives: Iterable[Cell]):
        self._lock = threading.Lock()
        self._objectives: FrozenSet[Cell] = frozenset(tuple(c) for c in objectives)
        self._collected: List[Cell] = []
        self._gate = GateState.NEVER_OPENED
        self._outcome = Outcome.IN_PROGRESS
        self._flash_text = ""

    # Read access
    @property
    def objectives(self) -> FrozenSet[Cell]:
        return self._objectives

    @property
    def remaining(self) -> FrozenSet[Cell]:
        with self._lock:
            return self._objectives.difference(self._collected)

    @property
    def collected(self) -> Tuple[Cell, ...]:
        with self._lock:
            return tuple(self._collected)

    @property
    def collected_count(self) -> int:
        with self._lock:
            return len(self._collected)

    @property
    def gate(self) -> GateState:
        return self._gate

    @property
    def outcome(self) -> Outcome:
        return self._outcome

    @property
    def flash_text(self) -> str:
        return self._flash_text

    @property
    def is_over(self) -> bool:
        return self._outcome != Outcome.IN_PROGRESS

    # Updates
    def enter(self) -> bool:
        """Seal the entrance behind the runner on first entry."""
        with self._lock:
            if self._gate != GateState.NEVER_OPENED or self.is_over:
                return False
            # Nothing to collect: the way back stays open
            if not self._objectives:
                self._gate = GateState.OPEN
                self._flash_text = FLASH_PASSAGE_OPEN
            else:
                self._gate = GateState.CLOSED
                self._flash_text = FLASH_ENTERED
        get_logger().info(f"Runner entered the dungeon, gate {self._gate.name}")
        return True

    def collect(self, cell: Cell) -> bool:
        """Collect the artifact at `cell` if it is still waiting there."""
        cell = tuple(cell)
        with self._lock:
            if self.is_over or cell not in self._objectives or cell in self._collected:
                return False
            self._collected.append(cell)
            remaining = len(self._objectives) - len(self._collected)
            if remaining > 0:
                self._flash_text = remaining_message(remaining)
            else:
                self._gate = GateState.OPEN
                self._flash_text = FLASH_PASSAGE_OPEN

        get_logger().info(f"Artifact collected at {cell}, {remaining} remaining")
        if remaining == 0:
            get_logger().info("All artifacts collected, entrance reopened")
        return True

    def mark_caught(self) -> bool:
        with self._lock:
            if self.is_over:
                return False
            self._outcome = Outcome.CAUGHT
            self._flash_text = FLASH_CAUGHT
        get_logger().info("Runner caught")
        return True

    def mark_escaped(self) -> bool:
        """Only possible once the passage has reopened."""
        with self._lock:
            if self.is_over or self._gate != GateState.OPEN:
                return False
            self._outcome = Outcome.ESCAPED
            self._flash_text = FLASH_ESCAPED
        get_logger().info("Runner escaped")
        return True
