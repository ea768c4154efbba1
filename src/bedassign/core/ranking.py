"""
Deterministic bed ranking.

Beds are ordered by room impressiveness (descending, or ascending for
the ascetic search), then rest effectiveness descending, then comfort
descending, then thing id ascending. The thing id is unique, so the
order is total and reproducible.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import numpy as np

if TYPE_CHECKING:
    from bedassign.core.bed import Bed
    from bedassign.core.colony import Colony


def rank_beds(
    beds: Sequence[Bed],
    impressiveness: Sequence[float],
    ascending_impressiveness: bool = False,
) -> list[Bed]:
    """
    Sort *beds* by the ranking chain.

    ``impressiveness[i]`` is the room impressiveness of ``beds[i]``.
    """
    if len(beds) == 0:
        return []
    if len(impressiveness) != len(beds):
        raise ValueError("impressiveness must have one value per bed")

    imp = np.asarray(impressiveness, dtype=float)
    rest = np.array([b.rest_effectiveness for b in beds], dtype=float)
    comfort = np.array([b.comfort for b in beds], dtype=float)
    ids = np.array([b.thing_id for b in beds], dtype=np.int64)

    primary = imp if ascending_impressiveness else -imp
    # lexsort sorts by the last key first
    order = np.lexsort((ids, -comfort, -rest, primary))
    return [beds[i] for i in order]


def ordered_beds(
    colony: Colony,
    map_id: str | None,
    usable,
    ascending_impressiveness: bool = False,
) -> list[Bed]:
    """Usable beds on *map_id*, ranked. *usable* is a bed predicate."""
    beds = [b for b in colony.beds_on_map(map_id) if usable(b)]
    return rank_beds(
        beds,
        [colony.bed_impressiveness(b) for b in beds],
        ascending_impressiveness=ascending_impressiveness,
    )


def impressiveness_stage_index(value: float, stage_minimums: Sequence[float]) -> int:
    """Index of the highest score stage whose lower bound is <= *value*."""
    bounds = np.asarray(stage_minimums, dtype=float)
    idx = int(np.searchsorted(bounds, value, side="right")) - 1
    return max(idx, 0)
