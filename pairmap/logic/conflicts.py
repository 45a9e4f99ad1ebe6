"""Feed pair conflict detection.

Two distribution circuits may not claim overlapping physical pairs on the same
feed cable.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from pairmap.logic.errors import FeedPairConflict


@dataclass(frozen=True)
class FeedAssignment:
    owner: object
    label: str
    feed_cable_id: object
    pair_start: int | None
    pair_end: int | None


def ranges_overlap(start: int, end: int, other_start: int, other_end: int) -> bool:
    return start <= other_end and other_start <= end


def assignments_from_circuits(circuits: Iterable[object]) -> list[FeedAssignment]:
    """Collect the feed claims of spliced circuits."""
    return [
        FeedAssignment(
            owner=circuit.id,
            label=circuit.circuit_id,
            feed_cable_id=circuit.feed_cable_id,
            pair_start=circuit.feed_pair_start,
            pair_end=circuit.feed_pair_end,
        )
        for circuit in circuits
        if circuit.is_spliced and circuit.feed_cable_id is not None
    ]


def find_feed_conflict(
    feed_cable_id: object,
    pair_start: int,
    pair_end: int,
    assignments: Iterable[FeedAssignment],
    exclude: object | None = None,
) -> FeedAssignment | None:
    for assignment in assignments:
        if exclude is not None and assignment.owner == exclude:
            continue
        if assignment.feed_cable_id != feed_cable_id:
            continue
        if assignment.pair_start is None or assignment.pair_end is None:
            continue
        if ranges_overlap(pair_start, pair_end, assignment.pair_start, assignment.pair_end):
            return assignment
    return None


def ensure_no_feed_conflict(
    feed_cable_id: object,
    pair_start: int,
    pair_end: int,
    assignments: Iterable[FeedAssignment],
    exclude: object | None = None,
) -> None:
    conflict = find_feed_conflict(feed_cable_id, pair_start, pair_end, assignments, exclude=exclude)
    if conflict is not None:
        raise FeedPairConflict(conflict.label, feed_cable_id, conflict.pair_start, conflict.pair_end)
