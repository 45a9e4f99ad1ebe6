import logging

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session

from pairmap.logic.errors import PairMapError
from pairmap.logic.references import is_effectively_spliced
from pairmap.logic.splice_rules import (
    SpliceCandidate,
    SpliceSide,
    ensure_no_splice_overlap,
    validate_splice_ranges,
)
from pairmap.models.cabling import Cable, CableRole, Circuit, Splice
from pairmap.schemas.cabling import SpliceCreate, SpliceUpdate
from pairmap.services.common import apply_ordering, apply_pagination, coerce_uuid
from pairmap.services.response import ListResponseMixin
from pairmap.services.segments import segment_rows

logger = logging.getLogger(__name__)

# An explicit null for these leaves the stored value in place.
_NON_NULLABLE_FIELDS = {
    "source_pair_start",
    "source_pair_end",
    "destination_pair_start",
    "destination_pair_end",
    "is_completed",
}


def _candidate(splice: Splice) -> SpliceCandidate:
    return SpliceCandidate(
        source=SpliceSide(splice.source_cable_id, splice.source_pair_start, splice.source_pair_end),
        destination=SpliceSide(
            splice.destination_cable_id, splice.destination_pair_start, splice.destination_pair_end
        ),
        splice_id=splice.id,
    )


def _ensure_cable(db: Session, cable_id: object, label: str) -> Cable:
    cable = db.get(Cable, coerce_uuid(cable_id))
    if not cable:
        raise HTTPException(status_code=404, detail=f"{label} cable not found")
    return cable


def _validate(db: Session, values: dict, splice_id: object | None = None) -> None:
    validate_splice_ranges(
        values["source_pair_start"],
        values["source_pair_end"],
        values["destination_pair_start"],
        values["destination_pair_end"],
        values.get("pon_start"),
        values.get("pon_end"),
    )
    candidate = SpliceCandidate(
        source=SpliceSide(values["source_cable_id"], values["source_pair_start"], values["source_pair_end"]),
        destination=SpliceSide(
            values["destination_cable_id"], values["destination_pair_start"], values["destination_pair_end"]
        ),
        splice_id=splice_id,
    )
    cable_ids = {values["source_cable_id"], values["destination_cable_id"]}
    existing = (
        db.query(Splice)
        .filter(or_(Splice.source_cable_id.in_(cable_ids), Splice.destination_cable_id.in_(cable_ids)))
        .all()
    )
    ensure_no_splice_overlap(candidate, [_candidate(splice) for splice in existing])


class Splices(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload: SpliceCreate) -> Splice:
        _ensure_cable(db, payload.source_cable_id, "Source")
        _ensure_cable(db, payload.destination_cable_id, "Destination")
        if payload.source_cable_id == payload.destination_cable_id:
            raise HTTPException(status_code=400, detail="A splice must join two different cables")
        values = payload.model_dump()
        _validate(db, values)
        splice = Splice(**values)
        db.add(splice)
        db.commit()
        db.refresh(splice)
        logger.info(
            "Spliced pairs %s-%s to %s-%s",
            splice.source_pair_start,
            splice.source_pair_end,
            splice.destination_pair_start,
            splice.destination_pair_end,
        )
        return splice

    @staticmethod
    def get(db: Session, splice_id: str) -> Splice:
        splice = db.get(Splice, coerce_uuid(splice_id))
        if not splice:
            raise HTTPException(status_code=404, detail="Splice not found")
        return splice

    @staticmethod
    def list(
        db: Session,
        cable_id: str | None,
        is_completed: bool | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ) -> list[Splice]:
        query = db.query(Splice)
        if cable_id is not None:
            cable_uuid = coerce_uuid(cable_id)
            query = query.filter(
                or_(Splice.source_cable_id == cable_uuid, Splice.destination_cable_id == cable_uuid)
            )
        if is_completed is not None:
            query = query.filter(Splice.is_completed.is_(is_completed))
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {"created_at": Splice.created_at, "source_pair_start": Splice.source_pair_start},
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def update(db: Session, splice_id: str, payload: SpliceUpdate) -> Splice:
        splice = Splices.get(db, splice_id)
        data = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key not in _NON_NULLABLE_FIELDS
        }
        values = {
            column: getattr(splice, column)
            for column in (
                "source_cable_id",
                "source_pair_start",
                "source_pair_end",
                "destination_cable_id",
                "destination_pair_start",
                "destination_pair_end",
                "pon_start",
                "pon_end",
            )
        }
        values.update({key: value for key, value in data.items() if key in values})
        try:
            _validate(db, values, splice_id=splice.id)
        except PairMapError:
            db.rollback()
            raise
        for key, value in data.items():
            setattr(splice, key, value)
        db.commit()
        db.refresh(splice)
        return splice

    @staticmethod
    def delete(db: Session, splice_id: str) -> None:
        splice = Splices.get(db, splice_id)
        db.delete(splice)
        db.commit()


def spliced_circuits(db: Session, cable_id: str | None = None) -> list[dict]:
    """Distribution circuits marked spliced, with binder segments on both sides.

    A circuit whose feed cable no longer exists is reported as
    ``missing_feed_cable`` instead of failing.
    """
    cables = {cable.id: cable for cable in db.query(Cable).all()}
    query = (
        db.query(Circuit)
        .join(Cable, Cable.id == Circuit.cable_id)
        .filter(Cable.role == CableRole.Distribution, Circuit.is_spliced.is_(True))
    )
    if cable_id is not None:
        query = query.filter(Circuit.cable_id == coerce_uuid(cable_id))
    rows = []
    for circuit in query.order_by(Cable.name.asc(), Circuit.position.asc()).all():
        distribution = cables[circuit.cable_id]
        row = {
            "circuit": circuit,
            "distribution_cable_name": distribution.name,
            "distribution_segments": segment_rows(circuit.pair_start, circuit.pair_end, distribution.binder_size),
        }
        if not is_effectively_spliced(circuit, cables):
            logger.warning("Circuit %s references a missing feed cable %s", circuit.circuit_id, circuit.feed_cable_id)
            row["status"] = "missing_feed_cable"
            rows.append(row)
            continue
        feed = cables[circuit.feed_cable_id]
        row["status"] = "spliced"
        row["feed_cable_name"] = feed.name
        row["feed_segments"] = segment_rows(circuit.feed_pair_start, circuit.feed_pair_end, feed.binder_size)
        rows.append(row)
    return rows


splices = Splices()
