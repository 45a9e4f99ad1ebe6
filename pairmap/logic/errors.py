"""Domain errors raised by the pair allocation core.

Every error is recoverable: callers keep their previous state and report the
condition. ``code`` is stable and is what the HTTP layer exposes.
"""

from __future__ import annotations


class PairMapError(ValueError):
    code = "pairmap_error"

    def __init__(self, message: str, **details: object):
        super().__init__(message)
        self.message = message
        self.details = details


class FormatError(PairMapError):
    """Malformed circuit identifier."""

    code = "invalid_circuit_id"


class OverlapError(PairMapError):
    """Identifier overlaps a sibling circuit under the same prefix."""

    code = "circuit_overlap"


class NoMatchingFeedCircuit(PairMapError):
    code = "no_matching_feed_circuit"

    def __init__(self, prefix: str, start: int, end: int):
        super().__init__(
            f'Could not find a Feed circuit with prefix "{prefix}" that contains the range {start}-{end}',
            prefix=prefix,
            start=start,
            end=end,
        )
        self.prefix = prefix
        self.start = start
        self.end = end


class FeedPairConflict(PairMapError):
    code = "feed_pair_conflict"

    def __init__(self, circuit_label: str, feed_cable_id: object, pair_start: int, pair_end: int):
        super().__init__(
            f'Feed pairs {pair_start}-{pair_end} are already assigned to circuit "{circuit_label}"',
            circuit=circuit_label,
            feed_cable_id=str(feed_cable_id),
            pair_start=pair_start,
            pair_end=pair_end,
        )
        self.circuit_label = circuit_label


class SpliceRangeError(PairMapError):
    """Manual splice ranges are unordered or of unequal length."""

    code = "invalid_splice_range"


class SplicePairConflict(PairMapError):
    code = "splice_pair_conflict"


class SnapshotError(PairMapError):
    """Project snapshot cannot be loaded as given."""

    code = "invalid_snapshot"
