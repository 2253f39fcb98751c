from typing import List, Optional
from pydantic import BaseModel
from datetime import datetime

from protoplan.models.screen import PlanStatus


class WorkflowStepRead(BaseModel):
    id: int
    name: str
    # "complete", "current" or "upcoming"
    state: str


class WorkflowScreenState(BaseModel):
    id: int
    screen_name: Optional[str] = None
    plan_status: PlanStatus
    has_documentation: bool
    can_generate_plan: bool

    class Config:
        from_attributes = True


class WorkflowState(BaseModel):
    project_id: int
    current_step: int
    steps: List[WorkflowStepRead]
    screen_count: int
    documented_count: int
    completed_count: int
    can_advance: bool
    can_finish: bool
    finished_at: Optional[datetime] = None
    screens: List[WorkflowScreenState]
