"""
Colony: the host simulation's read-only query surface.

Holds the pawn and bed rosters, room impressiveness, active designations
and the relationship graph. The assignment engine only reads from it;
the one mutation path is the pawns' ``Ownership`` records.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from bedassign.core.bed import Bed
from bedassign.core.pawn import Pawn
from bedassign.core.thoughts import Thought
from bedassign.social.relationships import RelationshipGraph


class Designation(str, Enum):
    """Orders a player can place on a building."""
    DECONSTRUCT = "deconstruct"
    UNINSTALL = "uninstall"
    CLAIM = "claim"
    PAINT = "paint"


REMOVAL_DESIGNATIONS = frozenset({Designation.DECONSTRUCT, Designation.UNINSTALL})


class Colony:
    """Rosters and world queries across every map of one player colony."""

    def __init__(self, player_faction: str = "player") -> None:
        self.player_faction = player_faction
        self.pawns: dict[str, Pawn] = {}
        self.beds: dict[str, Bed] = {}
        self.room_impressiveness: dict[str, float] = {}
        self.designations: dict[str, set[Designation]] = {}
        self.relationships = RelationshipGraph()

    # ------------------------------------------------------------------
    # Roster management (host side)
    # ------------------------------------------------------------------
    def add_pawn(self, pawn: Pawn) -> Pawn:
        self.pawns[pawn.id] = pawn
        return pawn

    def add_bed(self, bed: Bed) -> Bed:
        self.beds[bed.id] = bed
        return bed

    def remove_bed(self, bed_id: str) -> None:
        """Despawn a bed, releasing every owner."""
        bed = self.beds.pop(bed_id)
        for owner in list(bed.owners):
            if owner.ownership is not None:
                owner.ownership.unclaim_bed()
        self.designations.pop(bed_id, None)

    def designate(self, bed: Bed, designation: Designation) -> None:
        self.designations.setdefault(bed.id, set()).add(Designation(designation))

    def clear_designations(self, bed: Bed) -> None:
        self.designations.pop(bed.id, None)

    def set_room_impressiveness(self, room_id: str, value: float) -> None:
        self.room_impressiveness[room_id] = float(value)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def pawn(self, pawn_id: str) -> Pawn:
        """Look up a pawn; raises ``KeyError`` if unknown."""
        return self.pawns[pawn_id]

    def bed(self, bed_id: str) -> Bed:
        """Look up a bed; raises ``KeyError`` if unknown."""
        return self.beds[bed_id]

    def pawns_on_map(self, map_id: str | None) -> list[Pawn]:
        return [p for p in self.pawns.values() if map_id is not None and p.map_id == map_id]

    def beds_on_map(self, map_id: str | None) -> list[Bed]:
        return [b for b in self.beds.values() if map_id is not None and b.map_id == map_id]

    def designations_on(self, bed: Bed) -> set[Designation]:
        return set(self.designations.get(bed.id, ()))

    def bed_impressiveness(self, bed: Bed) -> float:
        """Impressiveness of the room the bed stands in; 0 outdoors."""
        if bed.room_id is None:
            return 0.0
        return self.room_impressiveness.get(bed.room_id, 0.0)

    def owned_room_impressiveness(self, pawn: Pawn) -> float:
        """Impressiveness of the pawn's bedroom; 0 without a bed."""
        bed = pawn.owned_bed
        return self.bed_impressiveness(bed) if bed is not None else 0.0

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        return {
            "player_faction": self.player_faction,
            "pawns": [p.to_dict() for p in self.pawns.values()],
            "beds": [b.to_dict() for b in self.beds.values()],
            "rooms": dict(self.room_impressiveness),
            "designations": {
                bed_id: sorted(d.value for d in designations)
                for bed_id, designations in self.designations.items()
                if designations
            },
            "relationships": self.relationships.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Colony:
        """
        Build a colony from a snapshot dict.

        Pawn ``owned_bed_id`` values are applied after all beds exist;
        unknown ids raise ``KeyError``.
        """
        colony = cls(player_faction=d.get("player_faction", "player"))
        for bd in d.get("beds", []):
            colony.add_bed(Bed(
                id=bd["id"],
                thing_id=int(bd["thing_id"]),
                label=bd.get("label", "bed"),
                map_id=bd.get("map_id"),
                room_id=bd.get("room_id"),
                sleeping_slots=int(bd.get("sleeping_slots", 1)),
                medical=bd.get("medical", False),
                for_colonists=bd.get("for_colonists", True),
                humanlike=bd.get("humanlike", True),
                rest_effectiveness=float(bd.get("rest_effectiveness", 1.0)),
                comfort=float(bd.get("comfort", 0.5)),
                forbidden_ideologies=frozenset(bd.get("forbidden_ideologies", ())),
            ))
        owned: list[tuple[Pawn, str]] = []
        for pd in d.get("pawns", []):
            pawn = colony.add_pawn(Pawn(
                id=pd["id"],
                name=pd.get("name", pd["id"]),
                thing_id=int(pd["thing_id"]),
                map_id=pd.get("map_id"),
                faction=pd.get("faction", colony.player_faction),
                host_faction=pd.get("host_faction"),
                is_free_colonist=pd.get("is_free_colonist", True),
                is_slave=pd.get("is_slave", False),
                humanlike=pd.get("humanlike", True),
                traits=set(pd.get("traits", ())),
                thoughts=[
                    Thought.named(t["name"], int(t.get("stage_index", 0)))
                    for t in pd.get("thoughts", [])
                ],
                ideology=pd.get("ideology"),
                spouse_only_bed_sharing=pd.get("spouse_only_bed_sharing", False),
                has_ownership=pd.get("has_ownership", True),
            ))
            if pd.get("owned_bed_id"):
                owned.append((pawn, pd["owned_bed_id"]))
        for pawn, bed_id in owned:
            if pawn.ownership is not None:
                pawn.ownership.claim_bed(colony.bed(bed_id))
        for room_id, value in d.get("rooms", {}).items():
            colony.set_room_impressiveness(room_id, value)
        for bed_id, designations in d.get("designations", {}).items():
            for designation in designations:
                colony.designate(colony.bed(bed_id), Designation(designation))
        colony.relationships.load_dict(d.get("relationships", {}), colony.pawns)
        return colony
