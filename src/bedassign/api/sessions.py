"""
Session manager for colonies served over the API.

Each session wraps a Colony snapshot with its own AssignmentEngine,
ForcedBedStore and scheduler. Sessions live in memory; saving them is
left to the host, which can fetch a full snapshot at any time.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Any

from bedassign.core.colony import Colony
from bedassign.core.config import AssignmentConfig
from bedassign.core.engine import AssignmentEngine
from bedassign.core.forced import ForcedBedStore
from bedassign.core.scheduler import AssignmentScheduler

logger = logging.getLogger(__name__)


@dataclass
class ColonySession:
    """A colony under management."""

    id: str
    name: str
    colony: Colony
    engine: AssignmentEngine
    scheduler: AssignmentScheduler

    @property
    def config(self) -> AssignmentConfig:
        return self.engine.config

    def snapshot(self) -> dict[str, Any]:
        """Everything needed to rebuild this session."""
        return {
            "colony": self.colony.to_dict(),
            "config": self.config.to_dict(),
            "forced_beds": self.engine.forced_beds.to_dict(),
        }


class SessionManager:
    """
    Creates, looks up and deletes colony sessions.

    Evaluation mutates shared bed state, so every mutating call on a
    session should hold ``lock_for(session_id)``.
    """

    def __init__(self, default_config: AssignmentConfig | None = None):
        self.sessions: dict[str, ColonySession] = {}
        self.default_config = default_config or AssignmentConfig()
        self._locks: dict[str, threading.Lock] = {}

    def create_session(
        self,
        colony_data: dict[str, Any],
        config: AssignmentConfig | None = None,
        forced_beds: dict[str, str] | None = None,
        name: str | None = None,
    ) -> ColonySession:
        """Build a session; malformed snapshots raise ``KeyError`` or ``ValueError``."""
        colony = Colony.from_dict(colony_data)
        if config is None:
            config = AssignmentConfig.from_dict(self.default_config.to_dict())
        store = ForcedBedStore.from_dict(forced_beds or {})
        store.prune(colony)
        engine = AssignmentEngine(colony, config=config, forced_beds=store)

        session_id = uuid.uuid4().hex[:12]
        session = ColonySession(
            id=session_id,
            name=name or f"colony-{session_id[:6]}",
            colony=colony,
            engine=engine,
            scheduler=AssignmentScheduler(engine),
        )
        self.sessions[session_id] = session
        self._locks[session_id] = threading.Lock()
        logger.info(
            "Created session %s with %d pawns and %d beds",
            session_id, len(colony.pawns), len(colony.beds),
        )
        return session

    def get_session(self, session_id: str) -> ColonySession:
        """Look up a session; raises ``KeyError`` if unknown."""
        if session_id not in self.sessions:
            raise KeyError(session_id)
        return self.sessions[session_id]

    def lock_for(self, session_id: str) -> threading.Lock:
        self.get_session(session_id)
        return self._locks[session_id]

    def list_sessions(self) -> list[dict[str, Any]]:
        return [
            {
                "id": s.id,
                "name": s.name,
                "pawn_count": len(s.colony.pawns),
                "bed_count": len(s.colony.beds),
            }
            for s in self.sessions.values()
        ]

    def delete_session(self, session_id: str) -> bool:
        if self.sessions.pop(session_id, None) is None:
            return False
        self._locks.pop(session_id, None)
        logger.info("Deleted session %s", session_id)
        return True
