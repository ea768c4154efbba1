"""
Pawn dataclass for the bed assignment engine.

A pawn is a simulated colonist. The host owns its lifecycle; the engine
reads its faction, species, traits and mood thoughts and mutates only its
ownership record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from bedassign.core.bed import Bed
from bedassign.core.thoughts import Thought


class Ownership:
    """
    A pawn's claim record.

    Keeps ``owned_bed`` and ``Bed.owners`` consistent in both directions.
    Claiming a new bed implicitly releases the previous one.
    """

    def __init__(self, pawn: Pawn) -> None:
        self.pawn = pawn
        self.owned_bed: Bed | None = None

    def claim_bed(self, bed: Bed) -> None:
        """Claim *bed*; raises ``ValueError`` on a medical or full bed."""
        if bed is self.owned_bed:
            return
        if bed.medical:
            raise ValueError(f"{bed.label} is a medical bed")
        if not bed.any_unowned_slot:
            raise ValueError(f"{bed.label} has no free sleeping slot")
        self.unclaim_bed()
        bed.owners.append(self.pawn)
        self.owned_bed = bed

    def unclaim_bed(self) -> None:
        if self.owned_bed is None:
            return
        if self.pawn in self.owned_bed.owners:
            self.owned_bed.owners.remove(self.pawn)
        self.owned_bed = None


@dataclass(eq=False)
class Pawn:
    """A colonist that may own a bed."""

    # === Identity ===
    id: str
    name: str
    thing_id: int
    map_id: str | None = None

    # === Faction / status ===
    faction: str | None = None
    host_faction: str | None = None
    is_free_colonist: bool = True
    is_slave: bool = False
    humanlike: bool = True

    # === Personality and mood (read-only for the engine) ===
    traits: set[str] = field(default_factory=set)
    thoughts: list[Thought] = field(default_factory=list)

    # === Ideology ===
    ideology: str | None = None
    spouse_only_bed_sharing: bool = False

    # === Claim record (None for pawns that can never own beds) ===
    has_ownership: bool = True
    ownership: Ownership | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.has_ownership and self.ownership is None:
            self.ownership = Ownership(self)

    @property
    def label_short(self) -> str:
        return self.name.split()[0] if self.name else self.id

    @property
    def owned_bed(self) -> Bed | None:
        return self.ownership.owned_bed if self.ownership is not None else None

    @property
    def is_free_non_slave_colonist(self) -> bool:
        return self.is_free_colonist and not self.is_slave

    def has_trait(self, name: str) -> bool:
        return name in self.traits

    def has_any_trait(self, names) -> bool:
        return any(name in self.traits for name in names)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "thing_id": int(self.thing_id),
            "map_id": self.map_id,
            "faction": self.faction,
            "host_faction": self.host_faction,
            "is_free_colonist": self.is_free_colonist,
            "is_slave": self.is_slave,
            "humanlike": self.humanlike,
            "traits": sorted(self.traits),
            "thoughts": [t.to_dict() for t in self.thoughts],
            "ideology": self.ideology,
            "spouse_only_bed_sharing": self.spouse_only_bed_sharing,
            "has_ownership": self.has_ownership,
            "owned_bed_id": self.owned_bed.id if self.owned_bed else None,
        }

    def __repr__(self) -> str:
        bed = self.owned_bed.id if self.owned_bed else None
        return f"Pawn(id={self.id!r}, name={self.name!r}, map={self.map_id!r}, bed={bed!r})"
