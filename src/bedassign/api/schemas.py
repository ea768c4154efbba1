"""
Pydantic models for API request/response validation.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Any


# === Colonies ===

class CreateColonyRequest(BaseModel):
    colony: dict[str, Any]
    config: dict[str, Any] | None = None
    forced_beds: dict[str, str] = Field(default_factory=dict)
    name: str | None = None


class ColonySummary(BaseModel):
    id: str
    name: str
    pawn_count: int
    bed_count: int


class ColonyResponse(ColonySummary):
    config: dict[str, Any]


class PawnResponse(BaseModel):
    id: str
    name: str
    map_id: str | None
    owned_bed_id: str | None
    forced_bed_id: str | None
    usable: bool
    traits: list[str]
    thoughts: list[dict[str, Any]]


class BedResponse(BaseModel):
    id: str
    label: str
    map_id: str | None
    sleeping_slots: int
    owner_ids: list[str]
    usable: bool
    impressiveness: float


# === Settings ===

class SettingsUpdate(BaseModel):
    avoid_jealous_penalty: bool | None = None
    avoid_greedy_penalty: bool | None = None
    avoid_ascetic_penalty: bool | None = None
    claim_better_beds: bool | None = None
    avoid_partner_penalty: bool | None = None
    avoid_sharing_penalty: bool | None = None
    output_reassignment_messages: bool | None = None
    jealous_impressiveness_margin: float | None = Field(default=None, ge=0.0)
    evaluation_interval_ticks: int | None = Field(default=None, ge=1)


# === Assignment ===

class TickRequest(BaseModel):
    tick: int | None = None  # None = evaluate every pawn


class ReassignmentResponse(BaseModel):
    pawn_id: str
    branch: str
    bed_id: str | None


class EvaluateResponse(BaseModel):
    pawn_id: str
    branch: str | None
    bed_id: str | None


class ForcedBedRequest(BaseModel):
    bed_id: str
    claim_now: bool = True


class MessageResponse(BaseModel):
    text: str
    pawn_ids: list[str]
    tick: int | None
