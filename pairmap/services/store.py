"""Persistence helpers for cables and their ordered circuit lists.

``replace_circuits`` is the only writer of ``position`` and the physical pair
range: it takes the complete ordered list of a cable, runs the allocator and
writes every circuit back.
"""

import uuid

from sqlalchemy.orm import Session

from pairmap.logic.allocator import allocate
from pairmap.models.cabling import Cable, Circuit


def list_cables(db: Session) -> list[Cable]:
    return db.query(Cable).order_by(Cable.name.asc(), Cable.id.asc()).all()


def list_circuits_by_cable(db: Session, cable_id: uuid.UUID) -> list[Circuit]:
    return db.query(Circuit).filter(Circuit.cable_id == cable_id).order_by(Circuit.position.asc()).all()


def list_all_circuits(db: Session) -> list[Circuit]:
    """All circuits in a stable order: cable name, cable id, then position.

    Feed matching picks the first qualifying circuit in this order.
    """
    return (
        db.query(Circuit)
        .outerjoin(Cable, Cable.id == Circuit.cable_id)
        .order_by(Cable.name.asc(), Circuit.cable_id.asc(), Circuit.position.asc())
        .all()
    )


def replace_circuits(db: Session, cable_id: uuid.UUID, circuits: list[Circuit]) -> list[Circuit]:
    """Make ``circuits`` (in order) the full circuit list of ``cable_id``.

    Circuits of the cable missing from the list are deleted. Positions and
    physical ranges are recomputed from scratch.
    """
    allocations = allocate([circuit.circuit_id for circuit in circuits])
    keep = {circuit.id for circuit in circuits if circuit.id is not None}
    for existing in list_circuits_by_cable(db, cable_id):
        if existing.id not in keep:
            db.delete(existing)
    for circuit, allocation in zip(circuits, allocations, strict=True):
        circuit.cable_id = cable_id
        circuit.position = allocation.position
        circuit.pair_start = allocation.pair_start
        circuit.pair_end = allocation.pair_end
        db.add(circuit)
    db.flush()
    return circuits


def upsert_circuit(db: Session, circuit: Circuit) -> Circuit:
    circuit = db.merge(circuit)
    db.flush()
    return circuit


def delete_circuit(db: Session, circuit_id: uuid.UUID) -> None:
    circuit = db.get(Circuit, circuit_id)
    if circuit is not None:
        db.delete(circuit)
        db.flush()
