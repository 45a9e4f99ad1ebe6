from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from pairmap.api.deps import get_db
from pairmap.schemas.project import ProjectHealth, ProjectImportResult, ProjectSnapshot
from pairmap.services import project as project_service

router = APIRouter(prefix="/project")


@router.get(
    "/export",
    response_model=ProjectSnapshot,
    tags=["project"],
)
def export_project(response: Response, db: Session = Depends(get_db)):
    response.headers["Content-Disposition"] = f'attachment; filename="{project_service.export_filename()}"'
    return project_service.export_project(db)


@router.post(
    "/import",
    response_model=ProjectImportResult,
    tags=["project"],
)
def import_project(payload: ProjectSnapshot, db: Session = Depends(get_db)):
    return project_service.import_project(db, payload)


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["project"],
)
def reset_project(db: Session = Depends(get_db)):
    project_service.reset_project(db)


@router.get(
    "/health",
    response_model=ProjectHealth,
    tags=["project"],
)
def get_project_health(db: Session = Depends(get_db)):
    return project_service.project_health(db)
