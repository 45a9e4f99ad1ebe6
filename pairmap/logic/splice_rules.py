"""Validation rules for manual splice records."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from pairmap.logic.conflicts import ranges_overlap
from pairmap.logic.errors import SplicePairConflict, SpliceRangeError


@dataclass(frozen=True)
class SpliceSide:
    cable_id: object
    pair_start: int
    pair_end: int


@dataclass(frozen=True)
class SpliceCandidate:
    source: SpliceSide
    destination: SpliceSide
    splice_id: object | None = None


def validate_splice_ranges(
    source_start: int,
    source_end: int,
    destination_start: int,
    destination_end: int,
    pon_start: int | None = None,
    pon_end: int | None = None,
) -> None:
    if source_start < 1 or destination_start < 1:
        raise SpliceRangeError("Pair numbers start at 1")
    if source_start > source_end:
        raise SpliceRangeError("Source start pair must be less than or equal to end pair", field="source_pair_end")
    if destination_start > destination_end:
        raise SpliceRangeError(
            "Destination start pair must be less than or equal to end pair",
            field="destination_pair_end",
        )
    if source_end - source_start != destination_end - destination_start:
        raise SpliceRangeError(
            "Source and destination pair ranges must be equal in size",
            field="destination_pair_end",
        )
    if (pon_start is None) != (pon_end is None):
        raise SpliceRangeError("PON range needs both a start and an end", field="pon_end")
    if pon_start is not None and pon_start > pon_end:
        raise SpliceRangeError("PON start must be less than or equal to PON end", field="pon_end")


def _sides(candidate: SpliceCandidate) -> tuple[SpliceSide, SpliceSide]:
    return candidate.source, candidate.destination


def ensure_no_splice_overlap(candidate: SpliceCandidate, existing: Iterable[SpliceCandidate]) -> None:
    """Reject a splice that reuses pairs already claimed on either cable."""
    for other in existing:
        if candidate.splice_id is not None and other.splice_id == candidate.splice_id:
            continue
        for side in _sides(candidate):
            for other_side in _sides(other):
                if side.cable_id != other_side.cable_id:
                    continue
                if ranges_overlap(side.pair_start, side.pair_end, other_side.pair_start, other_side.pair_end):
                    raise SplicePairConflict(
                        f"Pairs {side.pair_start}-{side.pair_end} overlap an existing splice "
                        f"using pairs {other_side.pair_start}-{other_side.pair_end} on the same cable",
                        cable_id=str(side.cable_id),
                        splice_id=str(other.splice_id),
                    )
