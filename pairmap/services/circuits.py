"""Circuit mutations.

Every structural change reads the cable's full ordered circuit list, applies
the change, and writes the list back through ``store.replace_circuits`` in a
single commit. Domain errors roll the session back and propagate.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import HTTPException
from sqlalchemy.orm import Session

from pairmap.logic import allocator
from pairmap.logic.circuit_id import normalize_circuit_id
from pairmap.logic.conflicts import FeedAssignment, assignments_from_circuits, ensure_no_feed_conflict, find_feed_conflict
from pairmap.logic.errors import NoMatchingFeedCircuit, PairMapError
from pairmap.logic.splice_matcher import find_feed_circuit
from pairmap.models.cabling import Cable, CableRole, Circuit
from pairmap.schemas.cabling import CircuitCreate, CircuitUpdate
from pairmap.services import store
from pairmap.services.common import apply_pagination, coerce_uuid
from pairmap.services.response import ListResponseMixin
from pairmap.services.segments import segment_rows

logger = logging.getLogger(__name__)


def _get_cable(db: Session, cable_id: object) -> Cable:
    cable = db.get(Cable, coerce_uuid(cable_id))
    if not cable:
        raise HTTPException(status_code=404, detail="Cable not found")
    return cable


def _cable_roles(db: Session) -> dict:
    return {cable.id: cable.role for cable in store.list_cables(db)}


def _clear_feed_link(circuit: Circuit) -> None:
    circuit.is_spliced = False
    circuit.feed_cable_id = None
    circuit.feed_pair_start = None
    circuit.feed_pair_end = None


def _warn_over_capacity(cable: Cable, circuits: list[Circuit]) -> None:
    total = sum(circuit.pair_end - circuit.pair_start + 1 for circuit in circuits)
    if total > cable.pair_count:
        logger.warning("Cable %s assigns %s pairs but has %s", cable.name, total, cable.pair_count)


def refresh_feed_links(db: Session, feed_cable_id: uuid.UUID | None = None) -> int:
    """Re-derive feed links after feed circuits moved, changed or vanished.

    Links pointing at ``feed_cable_id`` (or every link whose feed cable still
    exists, when ``None``) are re-matched; links that no longer match or now
    conflict are cleared. Returns the number of cleared links. Links to
    missing cables are left for the health report.
    """
    cables = store.list_cables(db)
    roles = {cable.id: cable.role for cable in cables}
    circuits = store.list_all_circuits(db)

    def _is_dependent(circuit: Circuit) -> bool:
        if not circuit.is_spliced or circuit.feed_cable_id is None:
            return False
        if feed_cable_id is None:
            return circuit.feed_cable_id in roles
        return circuit.feed_cable_id == feed_cable_id

    dependents = [circuit for circuit in circuits if _is_dependent(circuit)]
    if not dependents:
        return 0
    dependent_ids = {circuit.id for circuit in dependents}
    assignments = [
        assignment
        for assignment in assignments_from_circuits(circuits)
        if assignment.owner not in dependent_ids
    ]

    cleared = 0
    for circuit in dependents:
        try:
            match = find_feed_circuit(circuit.circuit_id, circuits, roles)
        except PairMapError:
            match = None
        if match is not None and find_feed_conflict(
            match.feed_cable_id, match.feed_pair_start, match.feed_pair_end, assignments
        ):
            match = None
        if match is None:
            logger.info("Feed link of circuit %s no longer holds; unspliced", circuit.circuit_id)
            _clear_feed_link(circuit)
            cleared += 1
            continue
        circuit.feed_cable_id = match.feed_cable_id
        circuit.feed_pair_start = match.feed_pair_start
        circuit.feed_pair_end = match.feed_pair_end
        assignments.append(
            FeedAssignment(
                owner=circuit.id,
                label=circuit.circuit_id,
                feed_cable_id=match.feed_cable_id,
                pair_start=match.feed_pair_start,
                pair_end=match.feed_pair_end,
            )
        )
    db.flush()
    return cleared


class Circuits(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload: CircuitCreate) -> Circuit:
        cable = _get_cable(db, payload.cable_id)
        raw = normalize_circuit_id(payload.circuit_id)
        siblings = store.list_circuits_by_cable(db, cable.id)
        try:
            allocator.validate_circuit_id(raw, siblings)
            circuit = Circuit(
                id=uuid.uuid4(),
                cable_id=cable.id,
                circuit_id=raw,
                position=allocator.append_position(len(siblings)),
                is_spliced=False,
            )
            ordered = store.replace_circuits(db, cable.id, [*siblings, circuit])
            db.commit()
        except PairMapError:
            db.rollback()
            raise
        db.refresh(circuit)
        _warn_over_capacity(cable, ordered)
        logger.info("Added circuit %s to cable %s at pairs %s-%s", raw, cable.name, circuit.pair_start, circuit.pair_end)
        return circuit

    @staticmethod
    def get(db: Session, circuit_id: str) -> Circuit:
        circuit = db.get(Circuit, coerce_uuid(circuit_id))
        if not circuit:
            raise HTTPException(status_code=404, detail="Circuit not found")
        return circuit

    @staticmethod
    def list(db: Session, cable_id: str | None, is_spliced: bool | None, limit: int, offset: int) -> list[Circuit]:
        query = db.query(Circuit)
        if cable_id is not None:
            query = query.filter(Circuit.cable_id == coerce_uuid(cable_id))
        if is_spliced is not None:
            query = query.filter(Circuit.is_spliced.is_(is_spliced))
        query = query.order_by(Circuit.cable_id.asc(), Circuit.position.asc())
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def update(db: Session, circuit_id: str, payload: CircuitUpdate) -> Circuit:
        circuit = Circuits.get(db, circuit_id)
        cable = _get_cable(db, circuit.cable_id)
        raw = normalize_circuit_id(payload.circuit_id)
        siblings = store.list_circuits_by_cable(db, cable.id)
        try:
            allocator.validate_circuit_id(raw, siblings, exclude=circuit.id)
            changed = raw != circuit.circuit_id
            circuit.circuit_id = raw
            if changed and circuit.is_spliced:
                # The old feed match was for the old range.
                _clear_feed_link(circuit)
            ordered = store.replace_circuits(db, cable.id, siblings)
            if cable.role == CableRole.Feed:
                refresh_feed_links(db, cable.id)
            db.commit()
        except PairMapError:
            db.rollback()
            raise
        db.refresh(circuit)
        _warn_over_capacity(cable, ordered)
        logger.info("Circuit %s on cable %s now %s", circuit.id, cable.name, raw)
        return circuit

    @staticmethod
    def delete(db: Session, circuit_id: str) -> None:
        circuit = Circuits.get(db, circuit_id)
        cable = _get_cable(db, circuit.cable_id)
        siblings = store.list_circuits_by_cable(db, cable.id)
        index = next(i for i, sibling in enumerate(siblings) if sibling.id == circuit.id)
        remaining = allocator.remove_at(siblings, index)
        label = circuit.circuit_id
        try:
            store.delete_circuit(db, circuit.id)
            store.replace_circuits(db, cable.id, remaining)
            if cable.role == CableRole.Feed:
                refresh_feed_links(db, cable.id)
            db.commit()
        except PairMapError:
            db.rollback()
            raise
        logger.info("Deleted circuit %s from cable %s", label, cable.name)

    @staticmethod
    def move(db: Session, circuit_id: str, direction: allocator.MoveDirection) -> Circuit:
        circuit = Circuits.get(db, circuit_id)
        cable = _get_cable(db, circuit.cable_id)
        siblings = store.list_circuits_by_cable(db, cable.id)
        index = next(i for i, sibling in enumerate(siblings) if sibling.id == circuit.id)
        reordered = allocator.move(siblings, index, direction)
        if [c.id for c in reordered] == [c.id for c in siblings]:
            return circuit
        try:
            store.replace_circuits(db, cable.id, reordered)
            if cable.role == CableRole.Feed:
                refresh_feed_links(db, cable.id)
            db.commit()
        except PairMapError:
            db.rollback()
            raise
        db.refresh(circuit)
        logger.info("Moved circuit %s %s on cable %s", circuit.circuit_id, direction, cable.name)
        return circuit

    @staticmethod
    def toggle_splice(db: Session, circuit_id: str, spliced: bool) -> Circuit:
        """Mark a circuit spliced (matching it onto a feed circuit) or unspliced.

        On a distribution cable, splicing finds the containing feed circuit,
        derives the physical feed pairs and rejects pairs already claimed by
        another circuit. On any other cable only the flag changes.
        """
        circuit = Circuits.get(db, circuit_id)
        cable = _get_cable(db, circuit.cable_id)
        if not spliced:
            _clear_feed_link(circuit)
            db.commit()
            db.refresh(circuit)
            logger.info("Unspliced circuit %s on cable %s", circuit.circuit_id, cable.name)
            return circuit

        if cable.role != CableRole.Distribution:
            circuit.is_spliced = True
            db.commit()
            db.refresh(circuit)
            return circuit

        universe = store.list_all_circuits(db)
        try:
            match = find_feed_circuit(circuit.circuit_id, universe, _cable_roles(db))
            ensure_no_feed_conflict(
                match.feed_cable_id,
                match.feed_pair_start,
                match.feed_pair_end,
                assignments_from_circuits(universe),
                exclude=circuit.id,
            )
        except NoMatchingFeedCircuit as exc:
            logger.info("No feed circuit for %s: %s", circuit.circuit_id, exc.message)
            db.rollback()
            raise
        except PairMapError:
            db.rollback()
            raise
        circuit.is_spliced = True
        circuit.feed_cable_id = match.feed_cable_id
        circuit.feed_pair_start = match.feed_pair_start
        circuit.feed_pair_end = match.feed_pair_end
        db.commit()
        db.refresh(circuit)
        logger.info(
            "Spliced circuit %s onto feed circuit %s pairs %s-%s",
            circuit.circuit_id,
            match.feed_circuit.circuit_id,
            circuit.feed_pair_start,
            circuit.feed_pair_end,
        )
        return circuit

    @staticmethod
    def segments(db: Session, circuit_id: str) -> list[dict]:
        circuit = Circuits.get(db, circuit_id)
        cable = _get_cable(db, circuit.cable_id)
        return segment_rows(circuit.pair_start, circuit.pair_end, cable.binder_size)


circuits = Circuits()
