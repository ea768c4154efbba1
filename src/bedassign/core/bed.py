"""
Bed dataclass: a claimable sleeping structure with one or more slots.

Room statistics, designations and ideology rules are owned by the host
simulation; a bed only carries what is intrinsic to it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bedassign.core.pawn import Pawn


@dataclass(eq=False)
class Bed:
    """A sleeping resource that pawns claim ownership of."""

    # === Identity ===
    id: str
    thing_id: int
    label: str = "bed"
    map_id: str | None = None
    room_id: str | None = None

    # === Capacity ===
    sleeping_slots: int = 1
    owners: list[Pawn] = field(default_factory=list)

    # === Usage flags ===
    medical: bool = False
    for_colonists: bool = True
    humanlike: bool = True

    # === Stats ===
    rest_effectiveness: float = 1.0
    comfort: float = 0.5

    # === Ideology ===
    forbidden_ideologies: frozenset[str] = field(default_factory=frozenset)

    @property
    def free_slots(self) -> int:
        return max(0, self.sleeping_slots - len(self.owners))

    @property
    def any_unowned_slot(self) -> bool:
        return len(self.owners) < self.sleeping_slots

    def ideology_forbids(self, pawn: Pawn) -> bool:
        """True if the pawn's ideology does not allow them to be assigned here."""
        return pawn.ideology is not None and pawn.ideology in self.forbidden_ideologies

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "thing_id": int(self.thing_id),
            "label": self.label,
            "map_id": self.map_id,
            "room_id": self.room_id,
            "sleeping_slots": int(self.sleeping_slots),
            "owner_ids": [p.id for p in self.owners],
            "medical": self.medical,
            "for_colonists": self.for_colonists,
            "humanlike": self.humanlike,
            "rest_effectiveness": float(self.rest_effectiveness),
            "comfort": float(self.comfort),
            "forbidden_ideologies": sorted(self.forbidden_ideologies),
        }

    def __repr__(self) -> str:
        return (
            f"Bed(id={self.id!r}, label={self.label!r}, map={self.map_id!r}, "
            f"owners={len(self.owners)}/{self.sleeping_slots})"
        )
