"""Per-colony assignment settings endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

from bedassign.api.routers.colonies import _get_session
from bedassign.api.schemas import SettingsUpdate

router = APIRouter()


@router.get("/{session_id}")
def get_settings(session_id: str, request: Request) -> dict[str, Any]:
    return _get_session(request, session_id).config.to_dict()


@router.put("/{session_id}")
def update_settings(session_id: str, req: SettingsUpdate, request: Request) -> dict[str, Any]:
    session = _get_session(request, session_id)
    changes = req.model_dump(exclude_none=True)
    with request.app.state.session_manager.lock_for(session_id):
        session.config.update(**changes)
        if "evaluation_interval_ticks" in changes:
            session.scheduler.interval = session.config.evaluation_interval_ticks
    return session.config.to_dict()
