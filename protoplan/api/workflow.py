from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from protoplan.api.deps import get_db_dependency, get_owned_project
from protoplan.api.auth import get_current_user
from protoplan.models.user import User
from protoplan.schemas.workflow import WorkflowState
from protoplan.services import workflow as workflow_service
from protoplan.services.screens import WorkflowError

router = APIRouter()


@router.get("/{project_id}/workflow", response_model=WorkflowState)
def get_workflow(
    project_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db_dependency)
):
    p = get_owned_project(db, project_id, current_user)
    return workflow_service.get_state(p)


@router.post("/{project_id}/workflow/next", response_model=WorkflowState)
def next_step(
    project_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db_dependency)
):
    p = get_owned_project(db, project_id, current_user)
    try:
        p = workflow_service.advance(db, p)
    except WorkflowError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return workflow_service.get_state(p)


@router.post("/{project_id}/workflow/previous", response_model=WorkflowState)
def previous_step(
    project_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db_dependency)
):
    p = get_owned_project(db, project_id, current_user)
    try:
        p = workflow_service.go_back(db, p)
    except WorkflowError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return workflow_service.get_state(p)


@router.post("/{project_id}/workflow/finish", response_model=WorkflowState)
def finish_workflow(
    project_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db_dependency)
):
    """Close the workflow once every screen has a completed plan."""
    p = get_owned_project(db, project_id, current_user)
    try:
        p = workflow_service.finish(db, p)
    except WorkflowError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return workflow_service.get_state(p)
