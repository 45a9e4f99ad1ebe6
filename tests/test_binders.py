import pytest

from pairmap.logic.binders import (
    PAIR_COLORS,
    BinderSegment,
    binder_color,
    binder_number,
    pair_color,
    position_in_binder,
    segment_pairs,
)


def test_single_full_binder():
    assert segment_pairs(1, 25, 25) == [
        BinderSegment(binder=1, start_in_binder=1, end_in_binder=25, pair_start=1, pair_end=25)
    ]


def test_range_crossing_one_boundary():
    segments = segment_pairs(20, 30, 25)
    assert [(s.binder, s.start_in_binder, s.end_in_binder) for s in segments] == [(1, 20, 25), (2, 1, 5)]


def test_range_spanning_many_binders():
    segments = segment_pairs(10, 110, 25)
    assert [(s.binder, s.start_in_binder, s.end_in_binder) for s in segments] == [
        (1, 10, 25),
        (2, 1, 25),
        (3, 1, 25),
        (4, 1, 25),
        (5, 1, 10),
    ]
    assert sum(s.pair_count for s in segments) == 101
    assert segments[0].pair_start == 10
    assert segments[-1].pair_end == 110


def test_segments_are_gap_free():
    segments = segment_pairs(3, 77)
    for previous, current in zip(segments, segments[1:]):
        assert current.pair_start == previous.pair_end + 1
        assert current.binder == previous.binder + 1


def test_single_pair():
    assert segment_pairs(26, 26) == [
        BinderSegment(binder=2, start_in_binder=1, end_in_binder=1, pair_start=26, pair_end=26)
    ]


@pytest.mark.parametrize(("pair", "binder", "position"), [(1, 1, 1), (25, 1, 25), (26, 2, 1), (50, 2, 25), (51, 3, 1)])
def test_binder_arithmetic(pair, binder, position):
    assert binder_number(pair) == binder
    assert position_in_binder(pair) == position


def test_other_binder_sizes():
    segments = segment_pairs(1, 12, 5)
    assert [(s.binder, s.start_in_binder, s.end_in_binder) for s in segments] == [(1, 1, 5), (2, 1, 5), (3, 1, 2)]


@pytest.mark.parametrize(("start", "end", "size"), [(0, 5, 25), (5, 4, 25), (1, 5, 0)])
def test_invalid_input(start, end, size):
    with pytest.raises(ValueError):
        segment_pairs(start, end, size)


def test_color_code():
    assert len(PAIR_COLORS) == 25
    assert (pair_color(1).tip, pair_color(1).ring) == ("white", "blue")
    assert (pair_color(8).tip, pair_color(8).ring) == ("red", "green")
    assert (pair_color(25).tip, pair_color(25).ring) == ("violet", "slate")
    assert pair_color(26) == pair_color(1)
    assert (binder_color(2).tip, binder_color(2).ring) == ("white", "orange")
