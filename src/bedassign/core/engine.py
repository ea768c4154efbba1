"""
Bed assignment engine: per-pawn preference cascade.

Each evaluation runs the branches below in a fixed order and stops at
the first one that changes a claim:

1. claim the pawn's forced bed
2. avoid the Jealous mood penalty (best-first, fairness guarded)
3. avoid the Greedy mood penalty (best-first)
4. avoid the Ascetic mood penalty (worst-first)
5. claim a better empty bed
6. sleep next to a love partner
7. stop sharing a bed with a non-partner

Pawns are evaluated greedily and independently: when several pawns want
the same bed, whoever is evaluated first gets it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

import numpy as np

from bedassign.core.claims import ClaimManager
from bedassign.core.config import AssignmentConfig
from bedassign.core.forced import ForcedBedStore
from bedassign.core.messages import MessageLog
from bedassign.core.ranking import impressiveness_stage_index, ordered_beds
from bedassign.core.thoughts import Thought, ThoughtName, find_thought, suffering_from

if TYPE_CHECKING:
    from bedassign.core.bed import Bed
    from bedassign.core.colony import Colony
    from bedassign.core.pawn import Pawn

logger = logging.getLogger(__name__)

BedPredicate = Callable[["Bed"], bool]


@dataclass
class EvaluationContext:
    """State gathered once at the start of a pawn's evaluation."""

    pawn: Pawn
    current_bed: Bed | None
    lover: Pawn | None                # most liked partner, only if mutual
    lover_non_mutual: Pawn | None     # most liked partner regardless of mutuality
    thoughts: list[Thought]
    lover_thoughts: list[Thought]
    _best_first: list[Bed] | None = field(default=None, repr=False)


class AssignmentEngine:
    """Decides which bed each pawn should own and makes the claims."""

    def __init__(
        self,
        colony: Colony,
        config: AssignmentConfig | None = None,
        forced_beds: ForcedBedStore | None = None,
        messages: MessageLog | None = None,
    ):
        self.colony = colony
        self.config = config or AssignmentConfig()
        self.claims = ClaimManager(colony, forced_beds)
        self.messages = messages if messages is not None else MessageLog(self.config)

        self._cascade: list[tuple[str, Callable[[EvaluationContext], bool]]] = [
            ("jealous", self._avoid_jealous_penalty),
            ("greedy", self._avoid_greedy_penalty),
            ("ascetic", self._avoid_ascetic_penalty),
            ("better_bed", self._claim_better_bed),
            ("partner", self._avoid_partner_penalty),
            ("sharing", self._avoid_sharing_penalty),
        ]

    @property
    def forced_beds(self) -> ForcedBedStore:
        return self.claims.forced_beds

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------
    def evaluate(self, pawn: Pawn) -> str | None:
        """
        Run the cascade for one pawn.

        Returns the name of the branch that changed a claim, or *None*
        if nothing changed.
        """
        if not self.claims.can_use_pawn(pawn):
            return None

        current_bed = pawn.owned_bed
        forced = self.claims.forced_bed(pawn)
        if forced is not None:
            if forced is current_bed:
                return None
            if self.claims.claim(pawn, forced):
                self.messages.post(f"{pawn.label_short} claimed their forced bed.", [pawn])
                return "forced_bed"
        if pawn.map_id is None:
            return None

        lover_non_mutual = self.claims.most_liked_partner(pawn)
        lover = lover_non_mutual
        if lover is not None and self.claims.most_liked_partner(lover) is not pawn:
            lover = None

        ctx = EvaluationContext(
            pawn=pawn,
            current_bed=current_bed,
            lover=lover,
            lover_non_mutual=lover_non_mutual,
            thoughts=list(pawn.thoughts),
            lover_thoughts=list(lover.thoughts) if lover is not None else [],
        )
        for name, branch in self._cascade:
            if branch(ctx):
                logger.debug("%s: %s branch reassigned", pawn.label_short, name)
                return name
        return None

    # ------------------------------------------------------------------
    # Generic search
    # ------------------------------------------------------------------
    def better_bed_search(
        self,
        beds: list[Bed],
        current_bed: Bed | None,
        pawn: Pawn,
        lover: Pawn | None,
        message: str,
        lover_message: str,
        qualifies: BedPredicate | None = None,
        excluded_owner_traits: frozenset[str] = frozenset(),
    ) -> bool:
        """
        Claim the first bed ranked above *current_bed* that qualifies.

        With a mutual *lover* only beds with two or more slots count and
        both pawns claim together.
        """
        for bed in beds:
            if bed is current_bed:
                break
            if qualifies is not None and not qualifies(bed):
                continue
            others = [o for o in bed.owners if o is not pawn and o is not lover]
            if any(o.has_any_trait(excluded_owner_traits) for o in others):
                logger.debug("skipping %s: an owner must not be kicked out", bed.label)
                continue
            if lover is not None:
                if bed.sleeping_slots < 2:
                    continue
                if self._claim_together(pawn, lover, bed, current_bed):
                    self.messages.post(lover_message, [pawn, lover])
                    return True
            elif self.claims.claim(pawn, bed):
                self.messages.post(message, [pawn])
                return True
        return False

    def _claim_together(self, pawn: Pawn, lover: Pawn, bed: Bed, rollback_bed: Bed | None) -> bool:
        if pawn.owned_bed is not bed and not self.claims.claim(pawn, bed, lover):
            return False
        if lover.owned_bed is bed or self.claims.claim(lover, bed, pawn):
            return True
        logger.debug(
            "%s could not join %s in %s, rolling back",
            lover.label_short, pawn.label_short, bed.label,
        )
        if rollback_bed is None:
            self.claims.unclaim(pawn)
        else:
            self.claims.claim(pawn, rollback_bed)
        return False

    def _best_first(self, ctx: EvaluationContext) -> list[Bed]:
        if ctx._best_first is None:
            ctx._best_first = ordered_beds(self.colony, ctx.pawn.map_id, self.claims.can_use_bed)
        return ctx._best_first

    # ------------------------------------------------------------------
    # Qualification predicates
    # ------------------------------------------------------------------
    def jealousy_guard(self, pawn: Pawn) -> BedPredicate:
        """Reject beds that another colonist's own room beats by the configured margin."""
        colony = self.colony
        others = [
            p for p in colony.pawns_on_map(pawn.map_id)
            if p is not pawn
            and p.faction == colony.player_faction
            and p.host_faction is None
            and p.humanlike
            and p.ownership is not None
        ]
        owned = np.array([colony.owned_room_impressiveness(p) for p in others], dtype=float)
        margin = self.config.jealous_impressiveness_margin

        def qualifies(bed: Bed) -> bool:
            value = colony.bed_impressiveness(bed)
            return not bool(np.any(owned - value >= abs(value * margin)))

        return qualifies

    def mood_stage_improves(self, thought: Thought) -> BedPredicate:
        """Accept beds whose room would put *thought* at a better mood stage."""
        current = thought.base_mood_effect
        stages = self.config.impressiveness_stages

        def qualifies(bed: Bed) -> bool:
            stage = impressiveness_stage_index(self.colony.bed_impressiveness(bed), stages) + 1
            return thought.thought_def.stage_effect(stage) > current

        return qualifies

    # ------------------------------------------------------------------
    # Cascade branches
    # ------------------------------------------------------------------
    def _avoid_jealous_penalty(self, ctx: EvaluationContext) -> bool:
        if not self.config.avoid_jealous_penalty:
            return False
        if suffering_from(ctx.thoughts, ThoughtName.JEALOUS.value) is None:
            return False
        pawn, lover = ctx.pawn, ctx.lover
        return self.better_bed_search(
            self._best_first(ctx), ctx.current_bed, pawn, lover,
            f"{pawn.label_short} claimed a better bed to avoid the Jealous mood penalty.",
            f"Lovers {pawn.label_short} and {lover.label_short if lover else ''} claimed a better "
            f"bed together so {pawn.label_short} could avoid the Jealous mood penalty.",
            qualifies=self.jealousy_guard(pawn),
            excluded_owner_traits=self.config.excluded_traits_for("jealous"),
        )

    def _avoid_greedy_penalty(self, ctx: EvaluationContext) -> bool:
        if not self.config.avoid_greedy_penalty:
            return False
        thought = suffering_from(ctx.thoughts, ThoughtName.GREEDY.value)
        if thought is None:
            return False
        pawn, lover = ctx.pawn, ctx.lover
        return self.better_bed_search(
            self._best_first(ctx), ctx.current_bed, pawn, lover,
            f"{pawn.label_short} claimed a better bed to avoid the Greedy mood penalty.",
            f"Lovers {pawn.label_short} and {lover.label_short if lover else ''} claimed a better "
            f"bed together so {pawn.label_short} could avoid the Greedy mood penalty.",
            qualifies=self.mood_stage_improves(thought),
            excluded_owner_traits=self.config.excluded_traits_for("greedy"),
        )

    def _avoid_ascetic_penalty(self, ctx: EvaluationContext) -> bool:
        if not self.config.avoid_ascetic_penalty:
            return False
        thought = suffering_from(ctx.thoughts, ThoughtName.ASCETIC.value)
        if thought is None:
            return False
        pawn, lover = ctx.pawn, ctx.lover
        # Both lovers must want the worse room
        if lover is not None and find_thought(ctx.lover_thoughts, ThoughtName.ASCETIC.value) is None:
            return False
        worst_first = ordered_beds(
            self.colony, pawn.map_id, self.claims.can_use_bed, ascending_impressiveness=True,
        )
        return self.better_bed_search(
            worst_first, ctx.current_bed, pawn, lover,
            f"{pawn.label_short} claimed a worse bed to avoid the Ascetic mood penalty.",
            f"Lovers {pawn.label_short} and {lover.label_short if lover else ''} claimed a worse "
            f"bed together so they could both avoid the Ascetic mood penalty.",
            qualifies=self.mood_stage_improves(thought),
            excluded_owner_traits=self.config.excluded_traits_for("ascetic"),
        )

    def _is_third_wheel(self, ctx: EvaluationContext) -> bool:
        """Non-mutual lover already in a bed meant for more than two."""
        if ctx.lover is not None or ctx.lover_non_mutual is None:
            return False
        bed = ctx.lover_non_mutual.owned_bed
        return bed is not None and bed.sleeping_slots > 2

    def _claim_better_bed(self, ctx: EvaluationContext) -> bool:
        if not self.config.claim_better_beds or self._is_third_wheel(ctx):
            return False
        pawn, lover = ctx.pawn, ctx.lover

        def is_empty(bed: Bed) -> bool:
            return all(o is pawn or o is lover for o in bed.owners)

        return self.better_bed_search(
            self._best_first(ctx), ctx.current_bed, pawn, lover,
            f"{pawn.label_short} claimed a better empty bed.",
            f"Lovers {pawn.label_short} and {lover.label_short if lover else ''} claimed a better "
            f"empty bed together.",
            qualifies=is_empty,
            excluded_owner_traits=self.config.excluded_traits_for("better_bed"),
        )

    def _avoid_partner_penalty(self, ctx: EvaluationContext) -> bool:
        if not self.config.avoid_partner_penalty:
            return False
        if suffering_from(ctx.thoughts, ThoughtName.WANT_TO_SLEEP_WITH_PARTNER.value) is None:
            return False
        pawn, lover, current_bed = ctx.pawn, ctx.lover, ctx.current_bed

        if lover is None:
            other = ctx.lover_non_mutual
            if other is None:
                return False
            # Polyamorous: only move in if there is already room
            other_bed = other.owned_bed
            if (other_bed is not None and other_bed is not current_bed
                    and other_bed.any_unowned_slot
                    and self.claims.claim(pawn, other_bed, other, make_space=False)):
                self.messages.post(
                    f"{pawn.label_short} claimed the bed of their polyamorous lover "
                    f"{other.label_short}.",
                    [pawn, other],
                )
                return True
            return False

        lover_bed = lover.owned_bed
        if lover_bed is not None and lover_bed is current_bed:
            return False
        if (lover_bed is not None and lover_bed.sleeping_slots >= 2
                and self.claims.claim(pawn, lover_bed, lover)):
            self.messages.post(
                f"{pawn.label_short} claimed the bed of their lover {lover.label_short}.",
                [pawn, lover],
            )
            return True

        for bed in self._best_first(ctx):
            if bed.sleeping_slots < 2:
                continue
            evictees = self._lover_eviction_plan(bed, pawn, lover)
            if evictees is None:
                continue
            booted = [sleeper for sleeper in evictees if self.claims.unclaim(sleeper)]
            if self._claim_together(pawn, lover, bed, current_bed):
                if booted:
                    names = " and ".join(p.label_short for p in booted)
                    self.messages.post(
                        f"Lovers {pawn.label_short} and {lover.label_short} kicked {names} "
                        f"out of their bed so they could claim it together.",
                        [pawn, lover, *booted],
                    )
                else:
                    self.messages.post(
                        f"Lovers {pawn.label_short} and {lover.label_short} claimed an empty "
                        f"bed together.",
                        [pawn, lover],
                    )
                return True
        return False

    def _lover_eviction_plan(self, bed: Bed, pawn: Pawn, lover: Pawn) -> list[Pawn] | None:
        """
        Owners to kick out so *pawn* and *lover* fit in *bed*, or *None* to skip the bed.

        Owners whose own favourite is one of the pair may stay in beds for
        three or more. Owners with excluded traits, owners with partners of
        their own and owners who cannot be unclaimed abort the plan, as does anything that
        would stop the pair claiming the bed once it is cleared.
        """
        for sleeper in (pawn, lover):
            refusal = self.claims.claim_refusal(sleeper, bed)
            if refusal is not None:
                logger.debug("lover search: %s can't have %s: %s", sleeper.label_short, bed.label, refusal)
                return None
        if not self.colony.relationships.willing_to_share_bed(pawn, lover):
            logger.debug("lover search: %s and %s won't share a bed", pawn.label_short, lover.label_short)
            return None
        excluded = self.config.excluded_traits_for("lover_bed_kick")
        others = [
            p for p in bed.owners
            if p is not pawn and p is not lover and self.claims.can_use_pawn(p)
        ]
        if any(p.has_any_trait(excluded) for p in others):
            logger.debug("lover search: %s has an owner who won't be kicked out", bed.label)
            return None
        evictees: list[Pawn] = []
        for sleeper in others:
            partner = self.claims.most_liked_partner(sleeper)
            if partner is not None and (partner is pawn or partner is lover) and bed.sleeping_slots >= 3:
                continue
            if partner is None and self.claims.can_unclaim(sleeper):
                evictees.append(sleeper)
            else:
                logger.debug("lover search: %s refuses to leave %s", sleeper.label_short, bed.label)
                return None
        staying = sum(1 for p in bed.owners if p is not pawn and p is not lover and p not in evictees)
        if staying + 2 > bed.sleeping_slots:
            return None
        return evictees

    def _avoid_sharing_penalty(self, ctx: EvaluationContext) -> bool:
        if not self.config.avoid_sharing_penalty:
            return False
        if suffering_from(ctx.thoughts, ThoughtName.SHARED_BED.value) is None:
            return False
        current_bed = ctx.current_bed
        if current_bed is None:
            return False
        for partner in (ctx.lover, ctx.lover_non_mutual):
            if partner is not None and partner.owned_bed is current_bed:
                return False
        if self.claims.unclaim(ctx.pawn):
            self.messages.post(
                f"{ctx.pawn.label_short} unclaimed their bed to avoid the bed sharing mood penalty.",
                [ctx.pawn],
            )
            return True
        return False

