"""
Shared test fixtures.

Factory fixtures build small colonies: a single map ("m1") with pawns
in the player faction and beds in rooms whose impressiveness the test
chooses.
"""

import itertools

import pytest

from bedassign.core.bed import Bed
from bedassign.core.colony import Colony
from bedassign.core.config import AssignmentConfig
from bedassign.core.engine import AssignmentEngine
from bedassign.core.forced import ForcedBedStore
from bedassign.core.pawn import Pawn
from bedassign.core.thoughts import Thought


@pytest.fixture
def colony():
    return Colony(player_faction="player")


@pytest.fixture
def make_pawn(colony):
    counter = itertools.count(1)

    def _make(pawn_id: str, thoughts=(), traits=(), **kwargs) -> Pawn:
        defaults = dict(
            id=pawn_id, name=pawn_id.capitalize(), thing_id=next(counter),
            map_id="m1", faction="player",
            traits=set(traits),
            thoughts=[Thought.named(t) if isinstance(t, str) else t for t in thoughts],
        )
        defaults.update(kwargs)
        return colony.add_pawn(Pawn(**defaults))

    return _make


@pytest.fixture
def make_bed(colony):
    counter = itertools.count(100)

    def _make(bed_id: str, impressiveness: float = 0.0, slots: int = 1, **kwargs) -> Bed:
        thing_id = next(counter)
        room_id = kwargs.pop("room_id", f"room-{bed_id}")
        defaults = dict(
            id=bed_id, thing_id=thing_id, label=bed_id, map_id="m1",
            room_id=room_id, sleeping_slots=slots,
        )
        defaults.update(kwargs)
        bed = colony.add_bed(Bed(**defaults))
        if room_id is not None:
            colony.set_room_impressiveness(room_id, impressiveness)
        return bed

    return _make


@pytest.fixture
def forced_beds():
    return ForcedBedStore()


@pytest.fixture
def make_engine(colony, forced_beds):
    def _make(**config_overrides) -> AssignmentEngine:
        return AssignmentEngine(
            colony, config=AssignmentConfig(**config_overrides), forced_beds=forced_beds,
        )

    return _make


@pytest.fixture
def engine(make_engine):
    return make_engine()


@pytest.fixture
def make_lovers(colony):
    def _make(a: Pawn, b: Pawn, opinion: int = 50) -> None:
        colony.relationships.add_relation(a, b)
        colony.relationships.set_opinion(a, b, opinion)
        colony.relationships.set_opinion(b, a, opinion)

    return _make
