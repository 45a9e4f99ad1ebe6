import uuid

import pytest
from fastapi import HTTPException

from pairmap.logic.errors import SplicePairConflict, SpliceRangeError
from pairmap.models.cabling import Circuit
from pairmap.schemas.cabling import CircuitCreate, SpliceCreate, SpliceUpdate
from pairmap.services import circuits as circuits_service
from pairmap.services import splices as splices_service

splices = splices_service.splices


def _payload(source, destination, source_range=(1, 8), destination_range=(1, 8), **extra):
    return SpliceCreate(
        source_cable_id=source.id,
        source_pair_start=source_range[0],
        source_pair_end=source_range[1],
        destination_cable_id=destination.id,
        destination_pair_start=destination_range[0],
        destination_pair_end=destination_range[1],
        **extra,
    )


def test_create_splice(db_session, feed_cable, distribution_cable):
    splice = splices.create(
        db_session, _payload(feed_cable, distribution_cable, (26, 33), (1, 8), pon_start=1, pon_end=8)
    )
    assert splice.is_completed is False
    assert (splice.pon_start, splice.pon_end) == (1, 8)
    assert splices.get(db_session, str(splice.id)).id == splice.id


def test_create_splice_rejects_unequal_ranges(db_session, feed_cable, distribution_cable):
    with pytest.raises(SpliceRangeError):
        splices.create(db_session, _payload(feed_cable, distribution_cable, (1, 8), (1, 4)))


def test_create_splice_rejects_half_pon_range(db_session, feed_cable, distribution_cable):
    with pytest.raises(SpliceRangeError):
        splices.create(db_session, _payload(feed_cable, distribution_cable, pon_start=3))


def test_create_splice_rejects_reused_pairs(db_session, feed_cable, distribution_cable, make_cable):
    other = make_cable("D2", pair_count=100, role=distribution_cable.role)
    splices.create(db_session, _payload(feed_cable, distribution_cable, (1, 8), (1, 8)))
    with pytest.raises(SplicePairConflict):
        splices.create(db_session, _payload(feed_cable, other, (5, 12), (1, 8)))
    # Same feed pairs on a disjoint range are fine.
    splices.create(db_session, _payload(feed_cable, other, (9, 16), (1, 8)))


def test_create_splice_rejects_same_cable(db_session, feed_cable):
    with pytest.raises(HTTPException) as excinfo:
        splices.create(db_session, _payload(feed_cable, feed_cable, (1, 4), (5, 8)))
    assert excinfo.value.status_code == 400


def test_create_splice_missing_cable(db_session, feed_cable):
    ghost = type("Ghost", (), {"id": uuid.uuid4()})()
    with pytest.raises(HTTPException) as excinfo:
        splices.create(db_session, _payload(feed_cable, ghost))
    assert excinfo.value.status_code == 404


def test_update_splice(db_session, feed_cable, distribution_cable):
    splice = splices.create(db_session, _payload(feed_cable, distribution_cable))
    updated = splices.update(db_session, str(splice.id), SpliceUpdate(is_completed=True, notes="closure 4"))
    assert updated.is_completed is True
    assert updated.notes == "closure 4"
    # Revalidation ignores the splice's own pairs.
    moved = splices.update(
        db_session,
        str(splice.id),
        SpliceUpdate(source_pair_start=5, source_pair_end=12, destination_pair_start=5, destination_pair_end=12),
    )
    assert (moved.source_pair_start, moved.destination_pair_end) == (5, 12)


def test_update_splice_rejects_bad_range(db_session, feed_cable, distribution_cable):
    splice = splices.create(db_session, _payload(feed_cable, distribution_cable))
    with pytest.raises(SpliceRangeError):
        splices.update(db_session, str(splice.id), SpliceUpdate(source_pair_end=4))
    db_session.refresh(splice)
    assert splice.source_pair_end == 8


def test_list_and_delete_splices(db_session, feed_cable, distribution_cable, make_cable):
    other = make_cable("D2", pair_count=100, role=distribution_cable.role)
    first = splices.create(db_session, _payload(feed_cable, distribution_cable, is_completed=True))
    splices.create(db_session, _payload(feed_cable, other, (9, 16), (1, 8)))

    by_cable = splices.list(db_session, str(other.id), None, "source_pair_start", "asc", 50, 0)
    assert [s.source_pair_start for s in by_cable] == [9]
    completed = splices.list(db_session, None, True, "created_at", "asc", 50, 0)
    assert [s.id for s in completed] == [first.id]
    with pytest.raises(HTTPException):
        splices.list(db_session, None, None, "pon_start", "asc", 50, 0)

    splices.delete(db_session, str(first.id))
    assert splices.list_response(db_session, None, None, "created_at", "asc", 50, 0)["count"] == 1


def test_spliced_circuits_view(db_session, feed_cable, distribution_cable):
    circuits = circuits_service.circuits
    circuits.create(db_session, CircuitCreate(cable_id=feed_cable.id, circuit_id="lg,1-20"))
    circuits.create(db_session, CircuitCreate(cable_id=feed_cable.id, circuit_id="pon,1-24"))
    dist = circuits.create(db_session, CircuitCreate(cable_id=distribution_cable.id, circuit_id="pon,1-8"))
    circuits.create(db_session, CircuitCreate(cable_id=distribution_cable.id, circuit_id="test,1-2"))
    circuits.toggle_splice(db_session, str(dist.id), True)

    rows = splices_service.spliced_circuits(db_session)
    assert len(rows) == 1
    row = rows[0]
    assert row["status"] == "spliced"
    assert row["feed_cable_name"] == "F1"
    assert row["distribution_cable_name"] == "D1"
    # Feed pairs 21-28 straddle binders 1 and 2.
    assert [(s["binder"], s["start_in_binder"], s["end_in_binder"]) for s in row["feed_segments"]] == [
        (1, 21, 25),
        (2, 1, 3),
    ]
    assert [s["binder"] for s in row["distribution_segments"]] == [1]


def test_spliced_circuits_reports_missing_feed_cable(db_session, distribution_cable):
    circuits = circuits_service.circuits
    dist = circuits.create(db_session, CircuitCreate(cable_id=distribution_cable.id, circuit_id="pon,1-8"))
    stored = db_session.get(Circuit, dist.id)
    stored.is_spliced = True
    stored.feed_cable_id = uuid.uuid4()
    stored.feed_pair_start = 1
    stored.feed_pair_end = 8
    db_session.commit()

    rows = splices_service.spliced_circuits(db_session, str(distribution_cable.id))
    assert [row["status"] for row in rows] == ["missing_feed_cable"]
    assert "feed_segments" not in rows[0]


def test_update_splice_ignores_null_for_required_fields(db_session, feed_cable, distribution_cable):
    splice = splices.create(db_session, _payload(feed_cable, distribution_cable, pon_start=1, pon_end=8))
    updated = splices.update(
        db_session, str(splice.id), SpliceUpdate(source_pair_start=None, is_completed=None, notes="checked")
    )
    assert (updated.source_pair_start, updated.source_pair_end) == (1, 8)
    assert updated.is_completed is False
    assert updated.notes == "checked"
    # PON stays nullable, but only as a pair.
    with pytest.raises(SpliceRangeError):
        splices.update(db_session, str(splice.id), SpliceUpdate(pon_end=None))
    cleared = splices.update(db_session, str(splice.id), SpliceUpdate(pon_start=None, pon_end=None))
    assert (cleared.pon_start, cleared.pon_end) == (None, None)
