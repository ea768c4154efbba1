"""Evaluation, tick, forced bed and message endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request

from bedassign.api.routers.colonies import _get_session
from bedassign.api.schemas import (
    EvaluateResponse,
    ForcedBedRequest,
    MessageResponse,
    ReassignmentResponse,
    TickRequest,
)
from bedassign.api.serializers import serialize_pawn

router = APIRouter()


def _get_pawn(session, pawn_id: str):
    try:
        return session.colony.pawn(pawn_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Pawn '{pawn_id}' not found")


@router.post("/{session_id}/evaluate/{pawn_id}", response_model=EvaluateResponse)
def evaluate_pawn(session_id: str, pawn_id: str, request: Request):
    session = _get_session(request, session_id)
    pawn = _get_pawn(session, pawn_id)
    with request.app.state.session_manager.lock_for(session_id):
        branch = session.engine.evaluate(pawn)
    bed = pawn.owned_bed
    return {"pawn_id": pawn.id, "branch": branch, "bed_id": bed.id if bed else None}


@router.post("/{session_id}/tick", response_model=list[ReassignmentResponse])
def run_tick(session_id: str, req: TickRequest, request: Request):
    session = _get_session(request, session_id)
    with request.app.state.session_manager.lock_for(session_id):
        if req.tick is None:
            results = session.scheduler.evaluate_all()
        else:
            results = session.scheduler.tick(req.tick)
    return [r.to_dict() for r in results]


@router.put("/{session_id}/forced/{pawn_id}")
def force_bed(session_id: str, pawn_id: str, req: ForcedBedRequest, request: Request) -> dict[str, Any]:
    session = _get_session(request, session_id)
    pawn = _get_pawn(session, pawn_id)
    try:
        bed = session.colony.bed(req.bed_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Bed '{req.bed_id}' not found")
    with request.app.state.session_manager.lock_for(session_id):
        session.engine.forced_beds.force(pawn, bed)
        if req.claim_now:
            session.engine.evaluate(pawn)
    return serialize_pawn(pawn, session)


@router.delete("/{session_id}/forced/{pawn_id}")
def release_forced_bed(session_id: str, pawn_id: str, request: Request) -> dict[str, Any]:
    session = _get_session(request, session_id)
    pawn = _get_pawn(session, pawn_id)
    with request.app.state.session_manager.lock_for(session_id):
        released = session.engine.forced_beds.release(pawn)
    if not released:
        raise HTTPException(status_code=404, detail=f"Pawn '{pawn_id}' has no forced bed")
    return serialize_pawn(pawn, session)


@router.get("/{session_id}/messages", response_model=list[MessageResponse])
def list_messages(
    session_id: str,
    request: Request,
    limit: int | None = Query(None, ge=1, le=200),
):
    session = _get_session(request, session_id)
    return [m.to_dict() for m in session.engine.messages.recent(limit)]
