from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.orm import Session

from protoplan.api.deps import get_db_dependency, get_owned_screen
from protoplan.api.auth import get_current_user
from protoplan.models.user import User
from protoplan.schemas.screen import (
	ScreenDetailsUpdate,
	ScreenDocumentationUpdate,
	ScreenNameSuggestion,
	ScreenPlanUpdate,
	ScreenRead,
)
from protoplan.services import screens as screen_service
from protoplan.services.planner import suggest_screen_name

router = APIRouter()


@router.get("/{screen_id}", response_model=ScreenRead)
def get_screen(
	screen_id: int,
	current_user: User = Depends(get_current_user),
	db: Session = Depends(get_db_dependency)
):
	return ScreenRead.model_validate(get_owned_screen(db, screen_id, current_user))


@router.patch("/{screen_id}/documentation", response_model=ScreenRead)
def update_screen_documentation(
	screen_id: int,
	payload: ScreenDocumentationUpdate,
	current_user: User = Depends(get_current_user),
	db: Session = Depends(get_db_dependency)
):
	s = get_owned_screen(db, screen_id, current_user)
	try:
		s = screen_service.update_documentation(db, s, payload.documentation)
	except screen_service.WorkflowError as e:
		raise HTTPException(status_code=e.status_code, detail=str(e))
	return ScreenRead.model_validate(s)


@router.patch("/{screen_id}", response_model=ScreenRead)
def update_screen_details(
	screen_id: int,
	payload: ScreenDetailsUpdate,
	current_user: User = Depends(get_current_user),
	db: Session = Depends(get_db_dependency)
):
	"""Update the display name and documentation together."""
	s = get_owned_screen(db, screen_id, current_user)
	try:
		s = screen_service.update_details(db, s, payload.screen_name, payload.documentation)
	except screen_service.WorkflowError as e:
		raise HTTPException(status_code=e.status_code, detail=str(e))
	return ScreenRead.model_validate(s)


@router.post("/{screen_id}/suggest-name", response_model=ScreenNameSuggestion)
def suggest_name(
	screen_id: int,
	current_user: User = Depends(get_current_user),
	db: Session = Depends(get_db_dependency)
):
	"""Suggest a display name from the screen's documentation; nothing is saved."""
	s = get_owned_screen(db, screen_id, current_user)
	position = [x.id for x in s.project.screens].index(s.id) + 1
	return ScreenNameSuggestion(screen_name=suggest_screen_name(s.documentation, position))


@router.post("/{screen_id}/plan", response_model=ScreenRead, status_code=202)
def generate_plan(
	screen_id: int,
	background_tasks: BackgroundTasks,
	current_user: User = Depends(get_current_user),
	db: Session = Depends(get_db_dependency)
):
	"""
	Start generating the implementation plan for a screen.

	Returns the screen in IN_PROGRESS; the plan is stored and the status set
	to COMPLETED once the background task finishes.
	"""
	s = get_owned_screen(db, screen_id, current_user)
	try:
		s = screen_service.start_plan_generation(db, s)
	except screen_service.WorkflowError as e:
		raise HTTPException(status_code=e.status_code, detail=str(e))
	background_tasks.add_task(screen_service.run_plan_generation, s.id)
	return ScreenRead.model_validate(s)


@router.put("/{screen_id}/plan", response_model=ScreenRead)
def store_plan(
	screen_id: int,
	payload: ScreenPlanUpdate,
	current_user: User = Depends(get_current_user),
	db: Session = Depends(get_db_dependency)
):
	s = get_owned_screen(db, screen_id, current_user)
	try:
		s = screen_service.store_plan(db, s, payload.plan, payload.status)
	except screen_service.WorkflowError as e:
		raise HTTPException(status_code=e.status_code, detail=str(e))
	return ScreenRead.model_validate(s)


@router.delete("/{screen_id}/plan", response_model=ScreenRead)
def reset_plan(
	screen_id: int,
	current_user: User = Depends(get_current_user),
	db: Session = Depends(get_db_dependency)
):
	s = get_owned_screen(db, screen_id, current_user)
	return ScreenRead.model_validate(screen_service.reset_plan(db, s))


@router.delete("/{screen_id}")
def delete_screen(
	screen_id: int,
	current_user: User = Depends(get_current_user),
	db: Session = Depends(get_db_dependency)
):
	s = get_owned_screen(db, screen_id, current_user)
	screen_service.delete_screen(db, s)
	return {"detail": "screen deleted"}
