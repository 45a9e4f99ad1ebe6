from types import SimpleNamespace

import pytest

from pairmap.logic.conflicts import (
    FeedAssignment,
    assignments_from_circuits,
    ensure_no_feed_conflict,
    find_feed_conflict,
    ranges_overlap,
)
from pairmap.logic.errors import FeedPairConflict


def _assignment(owner, label, feed_cable_id, start, end):
    return FeedAssignment(owner=owner, label=label, feed_cable_id=feed_cable_id, pair_start=start, pair_end=end)


def test_claimed_pair_is_rejected():
    existing = [_assignment("d2", "pon,1-8", "f1", 1, 8)]
    with pytest.raises(FeedPairConflict) as excinfo:
        ensure_no_feed_conflict("f1", 8, 12, existing, exclude="d3")
    assert excinfo.value.circuit_label == "pon,1-8"
    assert "pon,1-8" in excinfo.value.message
    assert excinfo.value.code == "feed_pair_conflict"


def test_adjacent_range_is_free():
    existing = [_assignment("d2", "pon,1-8", "f1", 1, 8)]
    assert find_feed_conflict("f1", 9, 12, existing) is None


def test_other_feed_cable_never_conflicts():
    existing = [_assignment("d2", "pon,1-8", "f2", 1, 8)]
    assert find_feed_conflict("f1", 1, 8, existing) is None


def test_own_assignment_excluded():
    existing = [_assignment("d2", "pon,1-8", "f1", 1, 8)]
    assert find_feed_conflict("f1", 1, 8, existing, exclude="d2") is None


def test_incomplete_assignment_ignored():
    existing = [_assignment("d2", "pon,1-8", "f1", None, None)]
    assert find_feed_conflict("f1", 1, 8, existing) is None


def test_first_conflict_reported():
    existing = [
        _assignment("a", "x,1-2", "f1", 1, 2),
        _assignment("b", "x,3-4", "f1", 3, 4),
    ]
    assert find_feed_conflict("f1", 2, 3, existing).owner == "a"


def test_ranges_overlap_closed_interval():
    assert ranges_overlap(1, 8, 8, 12)
    assert not ranges_overlap(1, 8, 9, 12)
    assert ranges_overlap(5, 5, 1, 10)


def test_assignments_from_circuits_only_spliced():
    spliced = SimpleNamespace(
        id=1, circuit_id="pon,1-8", is_spliced=True, feed_cable_id="f1", feed_pair_start=1, feed_pair_end=8
    )
    unspliced = SimpleNamespace(
        id=2, circuit_id="pon,9-9", is_spliced=False, feed_cable_id=None, feed_pair_start=None, feed_pair_end=None
    )
    flag_only = SimpleNamespace(
        id=3, circuit_id="lg,1-2", is_spliced=True, feed_cable_id=None, feed_pair_start=None, feed_pair_end=None
    )
    assignments = assignments_from_circuits([spliced, unspliced, flag_only])
    assert [a.owner for a in assignments] == [1]
    assert assignments[0].label == "pon,1-8"
