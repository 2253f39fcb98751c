from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from protoplan.api.deps import get_db_dependency, get_owned_project
from protoplan.api.auth import get_current_user
from protoplan.core.config import settings
from protoplan.models.project import Project
from protoplan.models.user import User
from protoplan.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate, SortField, SortOrder
from protoplan.schemas.screen import BulkDocumentationUpdate, ScreenRead, ScreenUploadResult, UploadFailure
from protoplan.services import projects as project_service
from protoplan.services import screens as screen_service

router = APIRouter()
logger = logging.getLogger(__name__)


def _name_taken(db: Session, owner: User, name: str, exclude_id: Optional[int] = None) -> bool:
    q = db.query(Project).filter(Project.owner_id == owner.id, Project.name == name)
    if exclude_id is not None:
        q = q.filter(Project.id != exclude_id)
    return q.first() is not None


@router.post("/", response_model=ProjectRead, status_code=201)
def create_project(
    payload: ProjectCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db_dependency)
):
    if _name_taken(db, current_user, payload.name):
        raise HTTPException(status_code=409, detail="Project with this name already exists")
    p = Project(name=payload.name, description=payload.description, owner_id=current_user.id)
    try:
        db.add(p)
        db.commit()
        db.refresh(p)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Project with this name already exists")
    logger.info(f"User {current_user.id} created project {p.id}")
    return ProjectRead.model_validate(p)


@router.get("/", response_model=List[ProjectRead])
def list_projects(
    q: Optional[str] = Query(default=None, description="Case-insensitive search on name and description"),
    sort_by: SortField = Query(default=project_service.DEFAULT_SORT_FIELD),
    order: Optional[SortOrder] = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db_dependency),
):
    items = db.query(Project).filter(Project.owner_id == current_user.id).all()
    items = project_service.filter_projects(items, q)
    items = project_service.sort_projects(items, sort_by, order)
    return [ProjectRead.model_validate(i) for i in items]


@router.get("/{project_id}", response_model=ProjectRead)
def get_project(
    project_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db_dependency)
):
    return ProjectRead.model_validate(get_owned_project(db, project_id, current_user))


@router.patch("/{project_id}", response_model=ProjectRead)
def update_project(
    project_id: int,
    payload: ProjectUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db_dependency)
):
    """Rename a project or change its description."""
    p = get_owned_project(db, project_id, current_user)

    if payload.name and payload.name != p.name and _name_taken(db, current_user, payload.name, exclude_id=p.id):
        raise HTTPException(status_code=409, detail="Project with this name already exists")

    for field, value in payload.model_dump(exclude_unset=True).items():
        if field == "name" and value is None:
            continue
        setattr(p, field, value)

    try:
        db.add(p)
        db.commit()
        db.refresh(p)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Project with this name already exists")
    return ProjectRead.model_validate(p)


@router.delete("/{project_id}")
def delete_project(
    project_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db_dependency)
):
    """Delete a project, its screens and their stored images."""
    p = get_owned_project(db, project_id, current_user)
    project_service.delete_project(db, p)
    return {"detail": "project deleted"}


@router.get("/{project_id}/screens", response_model=List[ScreenRead])
def list_project_screens(
    project_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db_dependency)
):
    """List the screens of a project in upload order."""
    p = get_owned_project(db, project_id, current_user)
    return [ScreenRead.model_validate(s) for s in p.screens]


@router.post("/{project_id}/screens", response_model=ScreenUploadResult, status_code=201)
def upload_screens(
    project_id: int,
    files: List[UploadFile] = File(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db_dependency)
):
    """
    Upload one or more screen images.

    Form data:
    - files: image files (multipart/form-data, repeated field)

    Non-image files are ignored; a request without any image is rejected.
    Files that fail to store are listed under ``failed``.
    """
    p = get_owned_project(db, project_id, current_user)

    uploads = []
    for f in files:
        # one byte past the limit is enough for save_image to reject it
        data = f.file.read(settings.MAX_UPLOAD_SIZE + 1)
        uploads.append(screen_service.Upload(filename=f.filename, content_type=f.content_type, data=data))

    try:
        created, failed = screen_service.create_screens(db, p, uploads)
    except screen_service.WorkflowError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not created:
        raise HTTPException(status_code=400, detail=failed[0][1] if failed else "No screens were uploaded")

    return ScreenUploadResult(
        screens=[ScreenRead.model_validate(s) for s in created],
        failed=[UploadFailure(filename=name, detail=reason) for name, reason in failed],
    )


@router.put("/{project_id}/screens/documentation", response_model=List[ScreenRead])
def save_project_documentation(
    project_id: int,
    payload: BulkDocumentationUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db_dependency)
):
    """Save documentation for all screens of a project; all or nothing."""
    p = get_owned_project(db, project_id, current_user)
    try:
        screens = screen_service.bulk_update_documentation(db, p, payload.documentation)
    except screen_service.WorkflowError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return [ScreenRead.model_validate(s) for s in screens]
