import logging
import uuid

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session

from pairmap.config import settings
from pairmap.logic import allocator
from pairmap.logic.circuit_id import normalize_circuit_id
from pairmap.logic.errors import PairMapError
from pairmap.models.cabling import Cable, CableRole, Circuit, Splice
from pairmap.schemas.cabling import CableCreate, CableUpdate
from pairmap.services import store
from pairmap.services.circuits import refresh_feed_links
from pairmap.services.common import apply_ordering, apply_pagination, coerce_uuid
from pairmap.services.response import ListResponseMixin
from pairmap.services.segments import segment_rows

logger = logging.getLogger(__name__)


class Cables(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload: CableCreate) -> Cable:
        data = payload.model_dump(exclude={"circuit_ids"})
        cable = Cable(id=uuid.uuid4(), binder_size=settings.binder_size, **data)
        circuits: list[Circuit] = []
        try:
            for raw in payload.circuit_ids:
                circuit_id = normalize_circuit_id(raw)
                if not circuit_id:
                    continue
                allocator.validate_circuit_id(circuit_id, circuits)
                circuits.append(Circuit(id=uuid.uuid4(), circuit_id=circuit_id, is_spliced=False))
            db.add(cable)
            db.flush()
            store.replace_circuits(db, cable.id, circuits)
            db.commit()
        except PairMapError:
            db.rollback()
            raise
        db.refresh(cable)
        logger.info("Created %s cable %s with %s circuit(s)", cable.role.value, cable.name, len(circuits))
        return cable

    @staticmethod
    def get(db: Session, cable_id: str) -> Cable:
        cable = db.get(Cable, coerce_uuid(cable_id))
        if not cable:
            raise HTTPException(status_code=404, detail="Cable not found")
        return cable

    @staticmethod
    def list(
        db: Session,
        role: CableRole | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ) -> list[Cable]:
        query = db.query(Cable)
        if role is not None:
            query = query.filter(Cable.role == role)
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {"created_at": Cable.created_at, "name": Cable.name, "pair_count": Cable.pair_count},
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def update(db: Session, cable_id: str, payload: CableUpdate) -> Cable:
        cable = Cables.get(db, cable_id)
        data = payload.model_dump(exclude_unset=True, exclude_none=True)
        previous_role = cable.role
        for key, value in data.items():
            setattr(cable, key, value)
        if cable.role != previous_role:
            # Splice state of its own circuits belonged to the old role.
            for circuit in store.list_circuits_by_cable(db, cable.id):
                circuit.is_spliced = False
                circuit.feed_cable_id = None
                circuit.feed_pair_start = None
                circuit.feed_pair_end = None
            db.flush()
            refresh_feed_links(db, cable.id)
            logger.info("Cable %s role changed to %s", cable.name, cable.role.value)
        db.commit()
        db.refresh(cable)
        return cable

    @staticmethod
    def delete(db: Session, cable_id: str) -> None:
        cable = Cables.get(db, cable_id)
        name = cable.name
        db.query(Splice).filter(
            or_(Splice.source_cable_id == cable.id, Splice.destination_cable_id == cable.id)
        ).delete(synchronize_session=False)
        for circuit in db.query(Circuit).filter(Circuit.feed_cable_id == cable.id).all():
            circuit.is_spliced = False
            circuit.feed_cable_id = None
            circuit.feed_pair_start = None
            circuit.feed_pair_end = None
        db.delete(cable)
        db.commit()
        logger.info("Deleted cable %s", name)

    @staticmethod
    def summary(db: Session, cable_id: str) -> dict:
        cable = Cables.get(db, cable_id)
        circuits = store.list_circuits_by_cable(db, cable.id)
        allocations = [
            allocator.PairAllocation(c.position, c.circuit_id, c.pair_start, c.pair_end) for c in circuits
        ]
        report = allocator.capacity_report(allocations, cable.pair_count)
        return {
            "cable": cable,
            "capacity": {
                "total_assigned": report.total_assigned,
                "capacity": report.capacity,
                "remaining": report.remaining,
                "passed": report.passed,
            },
            "circuits": [
                {"circuit": circuit, "segments": segment_rows(circuit.pair_start, circuit.pair_end, cable.binder_size)}
                for circuit in circuits
            ],
        }


cables = Cables()
