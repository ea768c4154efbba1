"""
Serializers for converting colony objects to JSON-safe dicts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bedassign.api.sessions import ColonySession
    from bedassign.core.bed import Bed
    from bedassign.core.pawn import Pawn


def serialize_session(session: ColonySession) -> dict[str, Any]:
    return {
        "id": session.id,
        "name": session.name,
        "pawn_count": len(session.colony.pawns),
        "bed_count": len(session.colony.beds),
        "config": session.config.to_dict(),
    }


def serialize_pawn(pawn: Pawn, session: ColonySession) -> dict[str, Any]:
    claims = session.engine.claims
    forced = claims.forced_bed(pawn)
    return {
        "id": pawn.id,
        "name": pawn.name,
        "map_id": pawn.map_id,
        "owned_bed_id": pawn.owned_bed.id if pawn.owned_bed else None,
        "forced_bed_id": forced.id if forced else None,
        "usable": claims.can_use_pawn(pawn),
        "traits": sorted(pawn.traits),
        "thoughts": [
            {"name": t.name, "stage_index": t.stage_index,
             "mood_effect": round(t.base_mood_effect, 2)}
            for t in pawn.thoughts
        ],
    }


def serialize_bed(bed: Bed, session: ColonySession) -> dict[str, Any]:
    return {
        "id": bed.id,
        "label": bed.label,
        "map_id": bed.map_id,
        "sleeping_slots": int(bed.sleeping_slots),
        "owner_ids": [p.id for p in bed.owners],
        "usable": session.engine.claims.can_use_bed(bed),
        "impressiveness": round(float(session.colony.bed_impressiveness(bed)), 2),
    }
