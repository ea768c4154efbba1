"""
Relationship graph: love-partner relations and opinions between pawns.

Answers the relationship queries the bed assignment engine needs:
- whether a love-partner relation exists between two pawns
- each pawn's most liked love partner (asymmetric: A's favourite may
  not have A as their own favourite)
- whether two pawns are willing to share a bed
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bedassign.core.pawn import Pawn


class LoveRelation(str, Enum):
    """Kinds of love-partner relation, strongest first."""
    SPOUSE = "spouse"
    FIANCE = "fiance"
    LOVER = "lover"


class RelationshipGraph:
    """
    Symmetric love relations plus directed opinions.

    Relations and opinions are keyed by pawn id so the graph survives
    pawns being re-created by the host.
    """

    def __init__(self) -> None:
        self._relations: dict[frozenset[str], LoveRelation] = {}
        self._opinions: dict[tuple[str, str], int] = {}

    # ------------------------------------------------------------------
    # Mutation (host side)
    # ------------------------------------------------------------------
    def add_relation(
        self, pawn_a: Pawn, pawn_b: Pawn,
        kind: LoveRelation = LoveRelation.LOVER,
    ) -> None:
        if pawn_a.id == pawn_b.id:
            raise ValueError("A pawn cannot be their own love partner")
        self._relations[frozenset((pawn_a.id, pawn_b.id))] = LoveRelation(kind)

    def remove_relation(self, pawn_a: Pawn, pawn_b: Pawn) -> None:
        self._relations.pop(frozenset((pawn_a.id, pawn_b.id)), None)

    def set_opinion(self, pawn: Pawn, other: Pawn, value: int) -> None:
        self._opinions[(pawn.id, other.id)] = int(value)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def relation(self, pawn_a: Pawn, pawn_b: Pawn) -> LoveRelation | None:
        if pawn_a is None or pawn_b is None:
            return None
        return self._relations.get(frozenset((pawn_a.id, pawn_b.id)))

    def love_partner_relation_exists(self, pawn_a: Pawn, pawn_b: Pawn) -> bool:
        return self.relation(pawn_a, pawn_b) is not None

    def opinion_of(self, pawn: Pawn, other: Pawn) -> int:
        return self._opinions.get((pawn.id, other.id), 0)

    def partner_ids(self, pawn: Pawn) -> list[str]:
        """Ids of every love partner of *pawn*, sorted for determinism."""
        ids = []
        for pair in self._relations:
            if pawn.id in pair:
                (other,) = pair - {pawn.id}
                ids.append(other)
        return sorted(ids)

    def most_liked_love_partner(
        self, pawn: Pawn, candidates: dict[str, Pawn],
    ) -> Pawn | None:
        """
        The love partner *pawn* holds in the highest opinion.

        Ties go to the stronger relation kind, then to the lower id.
        Partners missing from *candidates* are ignored.
        """
        rank = {kind: i for i, kind in enumerate(LoveRelation)}
        best: Pawn | None = None
        best_key: tuple[int, int, str] | None = None
        for other_id in self.partner_ids(pawn):
            other = candidates.get(other_id)
            if other is None:
                continue
            key = (
                -self.opinion_of(pawn, other),
                rank[self._relations[frozenset((pawn.id, other_id))]],
                other_id,
            )
            if best_key is None or key < best_key:
                best, best_key = other, key
        return best

    def willing_to_share_bed(self, pawn_a: Pawn, pawn_b: Pawn | None) -> bool:
        """False only when a spouse-only precept forbids sharing with a non-spouse."""
        if pawn_b is None:
            return True
        if pawn_a.spouse_only_bed_sharing or pawn_b.spouse_only_bed_sharing:
            return self.relation(pawn_a, pawn_b) is LoveRelation.SPOUSE
        return True

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        return {
            "relations": [
                {"pawns": sorted(pair), "kind": kind.value}
                for pair, kind in sorted(
                    self._relations.items(), key=lambda kv: sorted(kv[0]),
                )
            ],
            "opinions": [
                {"pawn": a, "other": b, "value": v}
                for (a, b), v in sorted(self._opinions.items())
            ],
        }

    def load_dict(self, d: dict[str, Any], pawns: dict[str, Pawn]) -> None:
        """Populate from ``to_dict`` output; unknown pawn ids raise ``KeyError``."""
        for rel in d.get("relations", []):
            a_id, b_id = rel["pawns"]
            self.add_relation(pawns[a_id], pawns[b_id], LoveRelation(rel.get("kind", "lover")))
        for op in d.get("opinions", []):
            self.set_opinion(pawns[op["pawn"]], pawns[op["other"]], op["value"])
