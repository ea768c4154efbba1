"""
Forced bed store: manual bed assignments that automatic logic must respect.

An explicit pawn-id → bed-id mapping, injected into the claim manager.
Saving and loading are the host's job; ``to_dict`` / ``from_dict`` give
it a plain form to persist.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bedassign.core.bed import Bed
    from bedassign.core.colony import Colony
    from bedassign.core.pawn import Pawn

logger = logging.getLogger(__name__)


class ForcedBedStore:
    """Per-pawn manual bed overrides, independent of current claims."""

    def __init__(self, entries: dict[str, str] | None = None) -> None:
        self._entries: dict[str, str] = dict(entries or {})

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, pawn: Pawn) -> bool:
        return pawn.id in self._entries

    def bed_id_for(self, pawn: Pawn) -> str | None:
        return self._entries.get(pawn.id)

    def lookup(self, pawn: Pawn, colony: Colony) -> Bed | None:
        """The forced bed of *pawn*, or *None* if unset or despawned."""
        bed_id = self._entries.get(pawn.id)
        if bed_id is None:
            return None
        return colony.beds.get(bed_id)

    def force(self, pawn: Pawn, bed: Bed) -> None:
        self._entries[pawn.id] = bed.id
        logger.info("%s is now forced to %s", pawn.label_short, bed.label)

    def release(self, pawn: Pawn) -> bool:
        """Drop the override for *pawn*; False if there was none."""
        if self._entries.pop(pawn.id, None) is None:
            return False
        logger.info("%s no longer has a forced bed", pawn.label_short)
        return True

    def prune(self, colony: Colony) -> list[str]:
        """Remove entries whose pawn or bed no longer exists; return their pawn ids."""
        stale = [
            pawn_id for pawn_id, bed_id in self._entries.items()
            if pawn_id not in colony.pawns or bed_id not in colony.beds
        ]
        for pawn_id in stale:
            del self._entries[pawn_id]
        if stale:
            logger.debug("Pruned %d stale forced bed entries", len(stale))
        return stale

    def to_dict(self) -> dict[str, str]:
        return dict(self._entries)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ForcedBedStore:
        return cls({str(k): str(v) for k, v in d.items()})
