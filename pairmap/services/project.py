"""Whole-project snapshot export/import, reset and health report."""

import logging
from collections import defaultdict
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pairmap.config import settings
from pairmap.logic import allocator
from pairmap.logic.circuit_id import normalize_circuit_id
from pairmap.logic.errors import PairMapError, SnapshotError
from pairmap.logic.references import find_dangling_references
from pairmap.models.cabling import Cable, Circuit, Splice
from pairmap.schemas.project import ProjectSnapshot
from pairmap.services import store
from pairmap.services.circuits import refresh_feed_links

logger = logging.getLogger(__name__)


def export_filename(now: datetime | None = None) -> str:
    stamp = (now or datetime.now(UTC)).strftime("%Y-%m-%dT%H-%M-%S")
    return f"{settings.export_filename_prefix}-{stamp}.json"


def export_project(db: Session) -> dict:
    return {
        "cables": store.list_cables(db),
        "circuits": db.query(Circuit).order_by(Circuit.cable_id.asc(), Circuit.position.asc()).all(),
        "splices": db.query(Splice).order_by(Splice.created_at.asc()).all(),
    }


def reset_project(db: Session) -> None:
    db.query(Splice).delete(synchronize_session=False)
    db.query(Circuit).delete(synchronize_session=False)
    db.query(Cable).delete(synchronize_session=False)
    db.commit()
    db.expunge_all()
    logger.info("Project reset")


def import_project(db: Session, snapshot: ProjectSnapshot) -> dict:
    """Replace all data with ``snapshot``, keeping its ids.

    Circuits are re-validated and re-allocated per cable in ``position`` order,
    so a reloaded project satisfies the same invariants as one built by hand.
    Records pointing at cables absent from the snapshot are skipped.
    """
    _ensure_unique_ids(snapshot)
    cable_ids = {cable.id for cable in snapshot.cables}
    by_cable: dict = defaultdict(list)
    for circuit in snapshot.circuits:
        if circuit.cable_id not in cable_ids:
            logger.warning("Skipping circuit %s: cable %s not in snapshot", circuit.circuit_id, circuit.cable_id)
            continue
        by_cable[circuit.cable_id].append(circuit)

    try:
        db.query(Splice).delete(synchronize_session=False)
        db.query(Circuit).delete(synchronize_session=False)
        db.query(Cable).delete(synchronize_session=False)
        db.expunge_all()

        for cable in snapshot.cables:
            db.add(Cable(**cable.model_dump()))
        db.flush()

        circuit_count = 0
        for cable_id, entries in by_cable.items():
            ordered: list[Circuit] = []
            for entry in sorted(entries, key=lambda item: item.position):
                raw = normalize_circuit_id(entry.circuit_id)
                allocator.validate_circuit_id(raw, ordered)
                circuit = Circuit(**entry.model_dump(exclude={"position", "pair_start", "pair_end"}))
                circuit.circuit_id = raw
                ordered.append(store.upsert_circuit(db, _with_placeholder_range(circuit)))
            store.replace_circuits(db, cable_id, ordered)
            circuit_count += len(ordered)

        splice_count = 0
        for splice in snapshot.splices:
            if splice.source_cable_id not in cable_ids or splice.destination_cable_id not in cable_ids:
                logger.warning("Skipping splice %s: cable not in snapshot", splice.id)
                continue
            db.add(Splice(**splice.model_dump()))
            splice_count += 1
        db.flush()

        refresh_feed_links(db)
        db.commit()
    except PairMapError:
        db.rollback()
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Project import failed; previous data kept")
        raise

    logger.info("Imported %s cable(s), %s circuit(s), %s splice(s)", len(snapshot.cables), circuit_count, splice_count)
    return {"cables": len(snapshot.cables), "circuits": circuit_count, "splices": splice_count}


def _ensure_unique_ids(snapshot: ProjectSnapshot) -> None:
    for kind, records in (("cable", snapshot.cables), ("circuit", snapshot.circuits), ("splice", snapshot.splices)):
        seen = set()
        for record in records:
            if record.id in seen:
                raise SnapshotError(f"Duplicate {kind} id {record.id} in snapshot", kind=kind, id=str(record.id))
            seen.add(record.id)


def _with_placeholder_range(circuit: Circuit) -> Circuit:
    # Real values are written by replace_circuits before commit.
    circuit.position = -1
    circuit.pair_start = 0
    circuit.pair_end = 0
    return circuit


def project_health(db: Session) -> dict:
    circuits = db.query(Circuit).all()
    dangling = find_dangling_references(circuits, [cable.id for cable in db.query(Cable).all()])
    for reference in dangling:
        logger.warning(
            "Circuit %s has dangling %s -> %s", reference.circuit_id, reference.field, reference.missing_id
        )
    return {
        "ok": not dangling,
        "dangling_references": [
            {
                "circuit": reference.circuit,
                "circuit_id": reference.circuit_id,
                "field": reference.field,
                "missing_id": reference.missing_id,
            }
            for reference in dangling
        ],
    }
