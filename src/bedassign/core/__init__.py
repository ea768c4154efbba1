"""Bed assignment core: eligibility, claims, ranking and the decision cascade."""

from bedassign.core.bed import Bed
from bedassign.core.claims import ClaimManager
from bedassign.core.colony import Colony, Designation
from bedassign.core.config import AssignmentConfig
from bedassign.core.engine import AssignmentEngine
from bedassign.core.forced import ForcedBedStore
from bedassign.core.messages import MessageLog, ReassignmentMessage
from bedassign.core.pawn import Ownership, Pawn
from bedassign.core.scheduler import AssignmentScheduler, Reassignment
from bedassign.core.thoughts import Thought, ThoughtDef, ThoughtName, TraitName

__all__ = [
    "AssignmentConfig",
    "AssignmentEngine",
    "AssignmentScheduler",
    "Bed",
    "ClaimManager",
    "Colony",
    "Designation",
    "ForcedBedStore",
    "MessageLog",
    "Ownership",
    "Pawn",
    "Reassignment",
    "ReassignmentMessage",
    "Thought",
    "ThoughtDef",
    "ThoughtName",
    "TraitName",
]
