"""
Master configuration for the bed assignment engine.

Every cascade branch is gated by a toggle here; thresholds and excluded
owner traits are tunable rather than hardcoded.
"""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from typing import Any

from bedassign.core.thoughts import IMPRESSIVENESS_STAGES, TraitName

# Settings names as the host's settings screen stores them.
LEGACY_TOGGLE_NAMES: dict[str, str] = {
    "AvoidJealousPenalty": "avoid_jealous_penalty",
    "AvoidGreedyPenalty": "avoid_greedy_penalty",
    "AvoidAsceticPenalty": "avoid_ascetic_penalty",
    "ClaimBetterBeds": "claim_better_beds",
    "AvoidPartnerPenalty": "avoid_partner_penalty",
    "AvoidSharingPenalty": "avoid_sharing_penalty",
    "OutputReassignmentMessages": "output_reassignment_messages",
}

TOGGLES: tuple[str, ...] = tuple(LEGACY_TOGGLE_NAMES.values())


@dataclass
class AssignmentConfig:
    """
    Master configuration: cascade toggles and tunables.

    Use ``to_dict()`` / ``from_dict()`` for serialization and comparison.
    """

    # === Cascade toggles ===
    avoid_jealous_penalty: bool = True
    avoid_greedy_penalty: bool = True
    avoid_ascetic_penalty: bool = True
    claim_better_beds: bool = True
    avoid_partner_penalty: bool = True
    avoid_sharing_penalty: bool = True

    # === Notifications ===
    output_reassignment_messages: bool = True

    # === Jealous fairness guard ===
    # A bed is off-limits if any colonist's own room would beat it by this fraction.
    jealous_impressiveness_margin: float = 0.1

    # === Owners who are never kicked out, per search ===
    excluded_owner_traits: dict[str, list[str]] = field(default_factory=lambda: {
        "jealous": [TraitName.JEALOUS.value],
        "greedy": [TraitName.JEALOUS.value, TraitName.GREEDY.value],
        "ascetic": [TraitName.ASCETIC.value],
        "better_bed": [TraitName.JEALOUS.value, TraitName.GREEDY.value],
        "lover_bed_kick": [TraitName.JEALOUS.value, TraitName.GREEDY.value],
    })

    # === Room impressiveness score stage lower bounds (ascending) ===
    impressiveness_stages: list[float] = field(default_factory=lambda: [
        stage["min_score"] for stage in IMPRESSIVENESS_STAGES
    ])

    # === Scheduling ===
    evaluation_interval_ticks: int = 2500

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        d: dict[str, Any] = {}
        for k, v in self.__dict__.items():
            if k.startswith("_"):
                continue
            d[k] = copy.deepcopy(v)
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> AssignmentConfig:
        """Deserialize from a dict; accepts the CamelCase settings names too."""
        kwargs = {}
        for k, v in d.items():
            if k.startswith("_"):
                continue
            kwargs[LEGACY_TOGGLE_NAMES.get(k, k)] = v
        return cls(**kwargs)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    @classmethod
    def from_json(cls, s: str) -> AssignmentConfig:
        return cls.from_dict(json.loads(s))

    def excluded_traits_for(self, search: str) -> frozenset[str]:
        return frozenset(self.excluded_owner_traits.get(search, ()))

    def update(self, **kwargs: Any) -> None:
        """Set named fields; unknown names raise ``AttributeError``."""
        for k, v in kwargs.items():
            k = LEGACY_TOGGLE_NAMES.get(k, k)
            if k.startswith("_") or k not in self.__dataclass_fields__:
                raise AttributeError(f"Unknown setting '{k}'")
            setattr(self, k, v)

    def diff(self, other: AssignmentConfig) -> dict[str, tuple[Any, Any]]:
        """Return parameters that differ between two configs."""
        diffs: dict[str, tuple[Any, Any]] = {}
        for k in self.to_dict():
            v1 = getattr(self, k)
            v2 = getattr(other, k)
            if v1 != v2:
                diffs[k] = (v1, v2)
        return diffs
