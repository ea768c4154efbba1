"""
Trait and mood-thought definitions consumed by the assignment engine.

The mood simulation itself belongs to the host; this module only models
what the engine reads from it: which thoughts a pawn currently has, the
staged base mood effect of each thought, and the room impressiveness
score stages used to predict the effect a different bedroom would have.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class TraitName(str, Enum):
    """Personality traits that change how beds are chosen."""
    JEALOUS = "Jealous"
    GREEDY = "Greedy"
    ASCETIC = "Ascetic"


class ThoughtName(str, Enum):
    """Mood thoughts the cascade tries to get rid of."""
    JEALOUS = "Jealous"
    GREEDY = "Greedy"
    ASCETIC = "Ascetic"
    WANT_TO_SLEEP_WITH_PARTNER = "WantToSleepWithSpouseOrLover"
    SHARED_BED = "SharedBed"


# ---------------------------------------------------------------------------
# Room impressiveness score stages (lower bound of each stage, ascending)
# ---------------------------------------------------------------------------
IMPRESSIVENESS_STAGES: list[dict[str, Any]] = [
    {"label": "awful",                   "min_score": -1_000_000.0},
    {"label": "dull",                    "min_score": 20.0},
    {"label": "mediocre",                "min_score": 30.0},
    {"label": "decent",                  "min_score": 40.0},
    {"label": "slightly impressive",     "min_score": 50.0},
    {"label": "somewhat impressive",     "min_score": 65.0},
    {"label": "very impressive",         "min_score": 85.0},
    {"label": "extremely impressive",    "min_score": 120.0},
    {"label": "unbelievably impressive", "min_score": 170.0},
    {"label": "wondrously impressive",   "min_score": 240.0},
]


@dataclass(frozen=True)
class ThoughtDef:
    """
    A mood thought with one base mood effect per stage.

    ``None`` entries mark stages where the thought does not apply.
    """

    name: str
    stages: tuple[float | None, ...] = (0.0,)

    def stage_effect(self, index: int) -> float:
        """Base mood effect of *index*; missing or inactive stages count as 0."""
        if index < 0 or index >= len(self.stages):
            return 0.0
        effect = self.stages[index]
        return 0.0 if effect is None else float(effect)


# Stage 0 is "no private bedroom"; stage i + 1 matches impressiveness stage i.
DEFAULT_THOUGHT_DEFS: dict[str, ThoughtDef] = {
    ThoughtName.JEALOUS.value: ThoughtDef(ThoughtName.JEALOUS.value, (-8.0,)),
    ThoughtName.GREEDY.value: ThoughtDef(
        ThoughtName.GREEDY.value,
        (-8.0, -8.0, -6.0, -4.0, -2.0, None, None, None, None, None, None),
    ),
    ThoughtName.ASCETIC.value: ThoughtDef(
        ThoughtName.ASCETIC.value,
        (None, 5.0, 4.0, 3.0, 2.0, None, -2.0, -4.0, -6.0, -8.0, -10.0),
    ),
    ThoughtName.WANT_TO_SLEEP_WITH_PARTNER.value: ThoughtDef(
        ThoughtName.WANT_TO_SLEEP_WITH_PARTNER.value, (-3.0,),
    ),
    ThoughtName.SHARED_BED.value: ThoughtDef(ThoughtName.SHARED_BED.value, (-4.0,)),
}


@dataclass
class Thought:
    """An active mood thought on a pawn, at a given stage."""

    thought_def: ThoughtDef
    stage_index: int = 0

    @property
    def name(self) -> str:
        return self.thought_def.name

    @property
    def base_mood_effect(self) -> float:
        return self.thought_def.stage_effect(self.stage_index)

    @classmethod
    def named(cls, name: str, stage_index: int = 0) -> Thought:
        """Build a thought from the default definitions."""
        thought_def = DEFAULT_THOUGHT_DEFS.get(name) or ThoughtDef(name)
        return cls(thought_def=thought_def, stage_index=stage_index)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "stage_index": self.stage_index}


def find_thought(thoughts: list[Thought], name: str) -> Thought | None:
    """Return the first thought called *name*, or *None*."""
    for thought in thoughts:
        if thought.name == name:
            return thought
    return None


def suffering_from(thoughts: list[Thought], name: str) -> Thought | None:
    """Return the thought called *name* only if its mood effect is negative."""
    thought = find_thought(thoughts, name)
    if thought is not None and thought.base_mood_effect < 0:
        return thought
    return None

