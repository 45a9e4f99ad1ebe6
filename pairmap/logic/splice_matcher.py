"""Match a distribution circuit onto the feed circuit that carries it.

Matching works on logical identifier ranges: a feed circuit qualifies when it
has the same prefix and its numeric range contains the distribution range.
The resulting physical feed pairs are then derived from the offset within the
feed identifier, translated onto the feed circuit's own physical range.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from pairmap.logic.circuit_id import CircuitRange, parse_circuit_id, try_parse_circuit_id
from pairmap.logic.errors import NoMatchingFeedCircuit

logger = logging.getLogger(__name__)

FEED_ROLE = "Feed"


@dataclass(frozen=True)
class FeedMatch:
    feed_circuit: object
    feed_cable_id: object
    feed_pair_start: int
    feed_pair_end: int
    ambiguous_with: tuple = field(default_factory=tuple)


def _role_value(role: object) -> object:
    return getattr(role, "value", role)


def derive_feed_pairs(distribution: CircuitRange, feed: CircuitRange, feed_pair_start: int) -> tuple[int, int]:
    offset_start = distribution.start - feed.start
    offset_end = distribution.end - feed.start
    return feed_pair_start + offset_start, feed_pair_start + offset_end


def find_feed_circuit(
    distribution_id: str | CircuitRange,
    circuits: Iterable[object],
    cable_roles: Mapping[object, object],
) -> FeedMatch:
    """Return the first feed circuit whose identifier contains ``distribution_id``.

    ``circuits`` are records exposing ``cable_id``, ``circuit_id`` and
    ``pair_start``, iterated in the caller's order; the first qualifying
    candidate wins. Circuits whose cable is missing from ``cable_roles`` are
    skipped. Raises ``FormatError`` for a malformed distribution identifier and
    ``NoMatchingFeedCircuit`` when nothing qualifies.
    """
    if isinstance(distribution_id, CircuitRange):
        wanted = distribution_id
    else:
        wanted = parse_circuit_id(distribution_id)

    candidates: list[tuple[object, CircuitRange]] = []
    for circuit in circuits:
        role = cable_roles.get(circuit.cable_id)
        if role is None or _role_value(role) != FEED_ROLE:
            continue
        feed_range = try_parse_circuit_id(circuit.circuit_id)
        if feed_range is None or not feed_range.contains(wanted):
            continue
        candidates.append((circuit, feed_range))

    if not candidates:
        raise NoMatchingFeedCircuit(wanted.prefix, wanted.start, wanted.end)

    feed_circuit, feed_range = candidates[0]
    others = tuple(circuit for circuit, _ in candidates[1:])
    if others:
        logger.warning(
            "Ambiguous feed match for %s: using %s, also contained by %s",
            wanted,
            feed_circuit.circuit_id,
            ", ".join(circuit.circuit_id for circuit in others),
        )
    feed_pair_start, feed_pair_end = derive_feed_pairs(wanted, feed_range, feed_circuit.pair_start)
    return FeedMatch(
        feed_circuit=feed_circuit,
        feed_cable_id=feed_circuit.cable_id,
        feed_pair_start=feed_pair_start,
        feed_pair_end=feed_pair_end,
        ambiguous_with=others,
    )
