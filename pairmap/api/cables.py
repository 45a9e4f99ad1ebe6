from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from pairmap.api.deps import get_db
from pairmap.models.cabling import CableRole
from pairmap.schemas.cabling import CableCreate, CableRead, CableSummary, CableUpdate
from pairmap.schemas.common import ListResponse
from pairmap.services import cables as cables_service

router = APIRouter(prefix="/cables")


@router.post(
    "",
    response_model=CableRead,
    status_code=status.HTTP_201_CREATED,
    tags=["cables"],
)
def create_cable(payload: CableCreate, db: Session = Depends(get_db)):
    return cables_service.cables.create(db, payload)


@router.get(
    "/{cable_id}",
    response_model=CableRead,
    tags=["cables"],
)
def get_cable(cable_id: str, db: Session = Depends(get_db)):
    return cables_service.cables.get(db, cable_id)


@router.get(
    "",
    response_model=ListResponse[CableRead],
    tags=["cables"],
)
def list_cables(
    role: CableRole | None = None,
    order_by: str = Query(default="name"),
    order_dir: str = Query(default="asc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return cables_service.cables.list_response(db, role, order_by, order_dir, limit, offset)


@router.patch(
    "/{cable_id}",
    response_model=CableRead,
    tags=["cables"],
)
def update_cable(cable_id: str, payload: CableUpdate, db: Session = Depends(get_db)):
    return cables_service.cables.update(db, cable_id, payload)


@router.delete(
    "/{cable_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["cables"],
)
def delete_cable(cable_id: str, db: Session = Depends(get_db)):
    cables_service.cables.delete(db, cable_id)


@router.get(
    "/{cable_id}/summary",
    response_model=CableSummary,
    tags=["cables"],
)
def get_cable_summary(cable_id: str, db: Session = Depends(get_db)):
    return cables_service.cables.summary(db, cable_id)
