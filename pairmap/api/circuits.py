from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from pairmap.api.deps import get_db
from pairmap.schemas.cabling import (
    BinderSegmentRead,
    CircuitCreate,
    CircuitMove,
    CircuitRead,
    CircuitUpdate,
    SpliceToggle,
)
from pairmap.schemas.common import ListResponse
from pairmap.services import circuits as circuits_service

router = APIRouter(prefix="/circuits")


@router.post(
    "",
    response_model=CircuitRead,
    status_code=status.HTTP_201_CREATED,
    tags=["circuits"],
)
def create_circuit(payload: CircuitCreate, db: Session = Depends(get_db)):
    return circuits_service.circuits.create(db, payload)


@router.get(
    "/{circuit_id}",
    response_model=CircuitRead,
    tags=["circuits"],
)
def get_circuit(circuit_id: str, db: Session = Depends(get_db)):
    return circuits_service.circuits.get(db, circuit_id)


@router.get(
    "",
    response_model=ListResponse[CircuitRead],
    tags=["circuits"],
)
def list_circuits(
    cable_id: str | None = None,
    is_spliced: bool | None = None,
    limit: int = Query(default=200, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return circuits_service.circuits.list_response(db, cable_id, is_spliced, limit, offset)


@router.patch(
    "/{circuit_id}",
    response_model=CircuitRead,
    tags=["circuits"],
)
def update_circuit(circuit_id: str, payload: CircuitUpdate, db: Session = Depends(get_db)):
    return circuits_service.circuits.update(db, circuit_id, payload)


@router.delete(
    "/{circuit_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["circuits"],
)
def delete_circuit(circuit_id: str, db: Session = Depends(get_db)):
    circuits_service.circuits.delete(db, circuit_id)


@router.post(
    "/{circuit_id}/move",
    response_model=CircuitRead,
    tags=["circuits"],
)
def move_circuit(circuit_id: str, payload: CircuitMove, db: Session = Depends(get_db)):
    return circuits_service.circuits.move(db, circuit_id, payload.direction)


@router.post(
    "/{circuit_id}/splice",
    response_model=CircuitRead,
    tags=["circuits"],
)
def toggle_circuit_splice(circuit_id: str, payload: SpliceToggle, db: Session = Depends(get_db)):
    return circuits_service.circuits.toggle_splice(db, circuit_id, payload.spliced)


@router.get(
    "/{circuit_id}/segments",
    response_model=list[BinderSegmentRead],
    tags=["circuits"],
)
def get_circuit_segments(circuit_id: str, db: Session = Depends(get_db)):
    return circuits_service.circuits.segments(db, circuit_id)
