"""Colony session lifecycle, pawn and bed listing endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request

from bedassign.api.schemas import (
    BedResponse,
    ColonyResponse,
    ColonySummary,
    CreateColonyRequest,
    PawnResponse,
)
from bedassign.api.serializers import serialize_bed, serialize_pawn, serialize_session
from bedassign.core.config import AssignmentConfig

router = APIRouter()


def _get_session(request: Request, session_id: str):
    mgr = request.app.state.session_manager
    try:
        return mgr.get_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Colony '{session_id}' not found")


@router.post("", response_model=ColonyResponse)
def create_colony(req: CreateColonyRequest, request: Request):
    mgr = request.app.state.session_manager
    config = None
    try:
        if req.config is not None:
            config = AssignmentConfig.from_dict(req.config)
        session = mgr.create_session(
            req.colony, config=config, forced_beds=req.forced_beds, name=req.name,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise HTTPException(status_code=422, detail=f"Invalid colony snapshot: {exc}")
    return serialize_session(session)


@router.get("", response_model=list[ColonySummary])
def list_colonies(request: Request):
    return request.app.state.session_manager.list_sessions()


@router.get("/{session_id}", response_model=ColonyResponse)
def get_colony(session_id: str, request: Request):
    return serialize_session(_get_session(request, session_id))


@router.get("/{session_id}/snapshot")
def get_snapshot(session_id: str, request: Request) -> dict[str, Any]:
    return _get_session(request, session_id).snapshot()


@router.delete("/{session_id}")
def delete_colony(session_id: str, request: Request) -> dict[str, Any]:
    mgr = request.app.state.session_manager
    if not mgr.delete_session(session_id):
        raise HTTPException(status_code=404, detail=f"Colony '{session_id}' not found")
    return {"deleted": True}


@router.get("/{session_id}/pawns", response_model=list[PawnResponse])
def list_pawns(
    session_id: str,
    request: Request,
    map_id: str | None = Query(None),
):
    session = _get_session(request, session_id)
    pawns = session.colony.pawns.values()
    if map_id is not None:
        pawns = [p for p in pawns if p.map_id == map_id]
    return [serialize_pawn(p, session) for p in pawns]


@router.get("/{session_id}/beds", response_model=list[BedResponse])
def list_beds(
    session_id: str,
    request: Request,
    map_id: str | None = Query(None),
    usable_only: bool = Query(False),
):
    session = _get_session(request, session_id)
    beds = list(session.colony.beds.values())
    if map_id is not None:
        beds = [b for b in beds if b.map_id == map_id]
    if usable_only:
        beds = [b for b in beds if session.engine.claims.can_use_bed(b)]
    return [serialize_bed(b, session) for b in beds]
