"""
Eligibility checks and low-level claim mutations.

Every bed ownership change made by the assignment engine goes through
``ClaimManager``. Each operation either succeeds or returns a falsy
result and logs why; nothing here raises on a policy rejection.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bedassign.core.colony import REMOVAL_DESIGNATIONS
from bedassign.core.forced import ForcedBedStore

if TYPE_CHECKING:
    from bedassign.core.bed import Bed
    from bedassign.core.colony import Colony
    from bedassign.core.pawn import Pawn

logger = logging.getLogger(__name__)


class ClaimManager:
    """
    Eligibility predicates plus claim / unclaim / eviction.

    The forced bed store is injected so manual assignments can be
    persisted by the host independently of this object.
    """

    def __init__(self, colony: Colony, forced_beds: ForcedBedStore | None = None):
        self.colony = colony
        self.forced_beds = forced_beds if forced_beds is not None else ForcedBedStore()

    # ------------------------------------------------------------------
    # Eligibility
    # ------------------------------------------------------------------
    def can_use_pawn(self, pawn: Pawn | None) -> bool:
        """Player-faction, free, non-slave, humanlike pawn with an ownership record."""
        if pawn is None or pawn.ownership is None:
            return False
        if pawn.faction != self.colony.player_faction or not pawn.is_free_non_slave_colonist:
            return False
        return pawn.humanlike

    def is_designated_for_removal(self, bed: Bed) -> bool:
        return bool(self.colony.designations_on(bed) & REMOVAL_DESIGNATIONS)

    def can_use_bed(self, bed: Bed | None) -> bool:
        """Non-medical humanlike colonist bed not marked for deconstruct or uninstall."""
        return (
            bed is not None
            and not bed.medical
            and bed.for_colonists
            and bed.humanlike
            and not self.is_designated_for_removal(bed)
        )

    def forced_bed(self, pawn: Pawn) -> Bed | None:
        """The pawn's manual bed, only while it is on the same map and usable."""
        if not self.can_use_pawn(pawn):
            return None
        bed = self.forced_beds.lookup(pawn, self.colony)
        if bed is not None and bed.map_id == pawn.map_id and self.can_use_bed(bed):
            return bed
        return None

    def most_liked_partner(self, pawn: Pawn | None) -> Pawn | None:
        """
        The pawn's most liked love partner, if both are usable and share a map.

        Mutuality is not checked here.
        """
        if not self.can_use_pawn(pawn):
            return None
        partner = self.colony.relationships.most_liked_love_partner(pawn, self.colony.pawns)
        if partner is not None and self.can_use_pawn(partner) and partner.map_id == pawn.map_id:
            return partner
        return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def make_space(self, pawn: Pawn, bed: Bed, lover: Pawn | None = None) -> None:
        """Kick out every owner of *bed* who is neither the pawn's nor the lover's partner."""
        if not self.can_use_pawn(pawn) or not self.can_use_bed(bed):
            return
        relationships = self.colony.relationships
        if not relationships.willing_to_share_bed(pawn, lover):
            logger.debug(
                "make space failed: %s and their lover, %s, aren't willing to share a bed",
                pawn.label_short, lover.label_short,
            )
            return
        for sleeper in reversed(list(bed.owners)):
            if (relationships.love_partner_relation_exists(pawn, sleeper)
                    and relationships.willing_to_share_bed(pawn, sleeper)):
                continue
            if (relationships.love_partner_relation_exists(lover, sleeper)
                    and self.most_liked_partner(lover) is sleeper):
                continue
            if self.unclaim(sleeper):
                logger.info(
                    "kicked %s out of %s to make room for %s",
                    sleeper.label_short, bed.label, pawn.label_short,
                )

    def claim_refusal(self, pawn: Pawn, bed: Bed) -> str | None:
        """Why *pawn* may not own *bed* at all, or *None* if nothing forbids it."""
        if not self.can_use_pawn(pawn) or not self.can_use_bed(bed):
            return "pawn or bed cannot be used"
        if pawn.map_id != bed.map_id:
            return "not on the same map"
        forced = self.forced_bed(pawn)
        if forced is not None and forced is not bed:
            return "pawn has a different forced bed"
        if bed.ideology_forbids(pawn):
            return "ideology forbids the bed"
        return None

    def claim(
        self, pawn: Pawn, bed: Bed, lover: Pawn | None = None, make_space: bool = True,
    ) -> bool:
        """
        Claim *bed* for *pawn*, evicting owners unrelated to the pawn or *lover*.

        With *make_space* off nobody is evicted and the claim only succeeds
        if a slot is already free.
        """
        if pawn.owned_bed is bed:
            logger.debug("claim failed: %s already claims %s", pawn.label_short, bed.label)
            return False
        refusal = self.claim_refusal(pawn, bed)
        if refusal is not None:
            logger.debug("claim failed for %r in %r: %s", pawn, bed, refusal)
            return False

        # Best-effort: a failing eviction must never abort the claim itself.
        if make_space:
            try:
                self.make_space(pawn, bed, lover)
            except Exception:
                logger.debug("make space raised for %s in %s", pawn.label_short, bed.label, exc_info=True)

        if not bed.any_unowned_slot:
            logger.debug("claim failed: unable to make room for %s in %s", pawn.label_short, bed.label)
            return False
        pawn.ownership.claim_bed(bed)
        logger.info("%s claimed %s", pawn.label_short, bed.label)
        return True

    def unclaim_refusal(self, pawn: Pawn) -> str | None:
        """Why *pawn*'s bed cannot be unclaimed, or *None* if it can."""
        if not self.can_use_pawn(pawn):
            return "pawn cannot be used"
        bed = pawn.owned_bed
        if bed is None:
            return "pawn has no bed"
        if self.forced_bed(pawn) is bed:
            return "bed is the pawn's forced bed"
        return None

    def can_unclaim(self, pawn: Pawn) -> bool:
        return self.unclaim_refusal(pawn) is None

    def unclaim(self, pawn: Pawn) -> bool:
        """Release the pawn's bed unless it is their valid forced bed."""
        refusal = self.unclaim_refusal(pawn)
        if refusal is not None:
            logger.debug("unclaim failed for %r: %s", pawn, refusal)
            return False
        bed = pawn.owned_bed
        pawn.ownership.unclaim_bed()
        logger.info("%s unclaimed %s", pawn.label_short, bed.label)
        return True
