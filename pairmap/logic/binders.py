"""Binder arithmetic and the standard 25-pair color code."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_BINDER_SIZE = 25


@dataclass(frozen=True)
class PairColor:
    pair: int
    tip: str
    ring: str


_TIP_COLORS = ("white", "red", "black", "yellow", "violet")
_RING_COLORS = ("blue", "orange", "green", "brown", "slate")

# Pair 1 is white/blue, pair 25 is violet/slate.
PAIR_COLORS: tuple[PairColor, ...] = tuple(
    PairColor(pair=tip_index * 5 + ring_index + 1, tip=tip, ring=ring)
    for tip_index, tip in enumerate(_TIP_COLORS)
    for ring_index, ring in enumerate(_RING_COLORS)
)


@dataclass(frozen=True)
class BinderSegment:
    binder: int
    start_in_binder: int
    end_in_binder: int
    pair_start: int
    pair_end: int

    @property
    def pair_count(self) -> int:
        return self.end_in_binder - self.start_in_binder + 1


def _check_binder_size(binder_size: int) -> None:
    if binder_size < 1:
        raise ValueError(f"Binder size must be positive, got {binder_size}")


def binder_number(pair: int, binder_size: int = DEFAULT_BINDER_SIZE) -> int:
    _check_binder_size(binder_size)
    return -(-pair // binder_size)


def position_in_binder(pair: int, binder_size: int = DEFAULT_BINDER_SIZE) -> int:
    _check_binder_size(binder_size)
    return (pair - 1) % binder_size + 1


def segment_pairs(pair_start: int, pair_end: int, binder_size: int = DEFAULT_BINDER_SIZE) -> list[BinderSegment]:
    """Split a contiguous physical range into per-binder segments.

    ``[20, 30]`` with 25-pair binders gives binder 1 pairs 20-25 and binder 2
    pairs 1-5. The first and last segments may be partial.
    """
    _check_binder_size(binder_size)
    if pair_start < 1:
        raise ValueError(f"Pair numbers start at 1, got {pair_start}")
    if pair_end < pair_start:
        raise ValueError(f"Invalid pair range {pair_start}-{pair_end}")

    segments: list[BinderSegment] = []
    pair = pair_start
    while pair <= pair_end:
        binder = binder_number(pair, binder_size)
        last_in_binder = min(binder * binder_size, pair_end)
        segments.append(
            BinderSegment(
                binder=binder,
                start_in_binder=position_in_binder(pair, binder_size),
                end_in_binder=position_in_binder(last_in_binder, binder_size),
                pair_start=pair,
                pair_end=last_in_binder,
            )
        )
        pair = last_in_binder + 1
    return segments


def pair_color(pair: int) -> PairColor:
    """Tip/ring colors of a physical pair (1-indexed)."""
    return PAIR_COLORS[(pair - 1) % len(PAIR_COLORS)]


def binder_color(binder: int) -> PairColor:
    """Marker colors of a binder, using the same table by binder index."""
    return PAIR_COLORS[(binder - 1) % len(PAIR_COLORS)]
