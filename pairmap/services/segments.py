from pairmap.config import settings
from pairmap.logic.binders import binder_color, segment_pairs


def segment_rows(pair_start: int | None, pair_end: int | None, binder_size: int | None = None) -> list[dict]:
    """Binder segments of a physical range, ready for ``BinderSegmentRead``."""
    if pair_start is None or pair_end is None:
        return []
    rows = []
    for segment in segment_pairs(pair_start, pair_end, binder_size or settings.binder_size):
        color = binder_color(segment.binder)
        rows.append(
            {
                "binder": segment.binder,
                "start_in_binder": segment.start_in_binder,
                "end_in_binder": segment.end_in_binder,
                "pair_start": segment.pair_start,
                "pair_end": segment.pair_end,
                "binder_tip": color.tip,
                "binder_ring": color.ring,
            }
        )
    return rows
