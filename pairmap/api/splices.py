from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from pairmap.api.deps import get_db
from pairmap.schemas.cabling import SplicedCircuitRead, SpliceCreate, SpliceRead, SpliceUpdate
from pairmap.schemas.common import ListResponse
from pairmap.services import splices as splices_service

router = APIRouter(prefix="/splices")


@router.get(
    "/spliced-circuits",
    response_model=list[SplicedCircuitRead],
    tags=["splices"],
)
def list_spliced_circuits(cable_id: str | None = None, db: Session = Depends(get_db)):
    return splices_service.spliced_circuits(db, cable_id)


@router.post(
    "",
    response_model=SpliceRead,
    status_code=status.HTTP_201_CREATED,
    tags=["splices"],
)
def create_splice(payload: SpliceCreate, db: Session = Depends(get_db)):
    return splices_service.splices.create(db, payload)


@router.get(
    "/{splice_id}",
    response_model=SpliceRead,
    tags=["splices"],
)
def get_splice(splice_id: str, db: Session = Depends(get_db)):
    return splices_service.splices.get(db, splice_id)


@router.get(
    "",
    response_model=ListResponse[SpliceRead],
    tags=["splices"],
)
def list_splices(
    cable_id: str | None = None,
    is_completed: bool | None = None,
    order_by: str = Query(default="created_at"),
    order_dir: str = Query(default="asc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return splices_service.splices.list_response(db, cable_id, is_completed, order_by, order_dir, limit, offset)


@router.patch(
    "/{splice_id}",
    response_model=SpliceRead,
    tags=["splices"],
)
def update_splice(splice_id: str, payload: SpliceUpdate, db: Session = Depends(get_db)):
    return splices_service.splices.update(db, splice_id, payload)


@router.delete(
    "/{splice_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["splices"],
)
def delete_splice(splice_id: str, db: Session = Depends(get_db)):
    splices_service.splices.delete(db, splice_id)
