"""
Three-stage project workflow: upload, documentation, plans.

The current step lives on the project. Transitions are guarded by the state
of the project's screens.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from protoplan.models.project import Project
from protoplan.models.screen import PlanStatus
from protoplan.schemas.workflow import WorkflowScreenState, WorkflowState, WorkflowStepRead
from protoplan.services.screens import WorkflowError

logger = logging.getLogger(__name__)

UPLOAD_STEP = 1
DOCUMENTATION_STEP = 2
PLANS_STEP = 3

STEPS = [
    (UPLOAD_STEP, "Upload Screens"),
    (DOCUMENTATION_STEP, "Add Documentation"),
    (PLANS_STEP, "Create Implementation Plans"),
]


def all_documented(project: Project) -> bool:
    return bool(project.screens) and all(s.has_documentation for s in project.screens)


def all_completed(project: Project) -> bool:
    return bool(project.screens) and all(s.plan_status == PlanStatus.COMPLETED for s in project.screens)


def advance_blocker(project: Project) -> str:
    """Reason the project cannot move to the next step, or "" when it can."""
    step = project.workflow_step
    if step >= PLANS_STEP:
        return "Already at the last step"
    if step == UPLOAD_STEP and not project.screens:
        return "Please upload at least one screen image"
    if step == DOCUMENTATION_STEP and not all_documented(project):
        return "Please add documentation for all screens"
    return ""


def finish_blocker(project: Project) -> str:
    if project.workflow_step != PLANS_STEP:
        return "Finish is only available on the implementation plans step"
    if not all_completed(project):
        return "All screens need a completed implementation plan before finishing"
    return ""


def _step_state(step_id: int, current: int) -> str:
    if current > step_id:
        return "complete"
    if current == step_id:
        return "current"
    return "upcoming"


def get_state(project: Project) -> WorkflowState:
    screens = list(project.screens)
    return WorkflowState(
        project_id=project.id,
        current_step=project.workflow_step,
        steps=[
            WorkflowStepRead(id=step_id, name=name, state=_step_state(step_id, project.workflow_step))
            for step_id, name in STEPS
        ],
        screen_count=len(screens),
        documented_count=sum(1 for s in screens if s.has_documentation),
        completed_count=sum(1 for s in screens if s.plan_status == PlanStatus.COMPLETED),
        can_advance=not advance_blocker(project),
        can_finish=not finish_blocker(project),
        finished_at=project.finished_at,
        screens=[WorkflowScreenState.model_validate(s) for s in screens],
    )


def advance(db: Session, project: Project) -> Project:
    blocker = advance_blocker(project)
    if blocker:
        raise WorkflowError(blocker)
    project.workflow_step += 1
    db.add(project)
    db.commit()
    db.refresh(project)
    logger.info(f"Project {project.id} advanced to step {project.workflow_step}")
    return project


def go_back(db: Session, project: Project) -> Project:
    if project.workflow_step <= UPLOAD_STEP:
        raise WorkflowError("Already at the first step")
    project.workflow_step -= 1
    db.add(project)
    db.commit()
    db.refresh(project)
    return project


def finish(db: Session, project: Project) -> Project:
    blocker = finish_blocker(project)
    if blocker:
        raise WorkflowError(blocker)
    project.finished_at = datetime.now(timezone.utc)
    db.add(project)
    db.commit()
    db.refresh(project)
    logger.info(f"Project {project.id} workflow finished")
    return project

