"""
Periodic evaluation driver.

The host calls ``tick`` once per simulation tick. Each pawn is evaluated
once every ``evaluation_interval_ticks``, offset by its thing id so the
work is spread across ticks. Pawns due on the same tick are evaluated
in roster order and the first one evaluated wins any contested bed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bedassign.core.engine import AssignmentEngine
    from bedassign.core.pawn import Pawn

logger = logging.getLogger(__name__)


@dataclass
class Reassignment:
    """One pawn whose claim changed during a tick."""
    pawn_id: str
    branch: str
    bed_id: str | None

    def to_dict(self) -> dict[str, Any]:
        return {"pawn_id": self.pawn_id, "branch": self.branch, "bed_id": self.bed_id}


class AssignmentScheduler:
    """Runs the assignment engine for due pawns each tick."""

    def __init__(self, engine: AssignmentEngine, interval_ticks: int | None = None):
        self.engine = engine
        self.interval = interval_ticks or engine.config.evaluation_interval_ticks
        if self.interval < 1:
            raise ValueError("interval_ticks must be >= 1")

    def is_due(self, pawn: Pawn, tick: int) -> bool:
        return (tick + pawn.thing_id) % self.interval == 0

    def tick(self, tick: int) -> list[Reassignment]:
        """Evaluate every pawn due on *tick*."""
        due = [p for p in self.engine.colony.pawns.values() if self.is_due(p, tick)]
        return self._run(due, tick)

    def evaluate_all(self, tick: int | None = None) -> list[Reassignment]:
        """Evaluate every pawn once, in roster order."""
        return self._run(list(self.engine.colony.pawns.values()), tick)

    def _run(self, pawns: list[Pawn], tick: int | None) -> list[Reassignment]:
        if not pawns:
            return []
        self.engine.forced_beds.prune(self.engine.colony)
        self.engine.messages.current_tick = tick
        results: list[Reassignment] = []
        for pawn in pawns:
            branch = self.engine.evaluate(pawn)
            if branch is not None:
                bed = pawn.owned_bed
                results.append(Reassignment(pawn.id, branch, bed.id if bed else None))
        if results:
            logger.debug("tick %s: %d reassignment(s)", tick, len(results))
        return results
