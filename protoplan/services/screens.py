"""
Screen lifecycle: upload, documentation and implementation plans.

Functions here operate on an open SQLAlchemy session and commit their own
changes. Rule violations raise :class:`WorkflowError` subclasses carrying the
HTTP status the API layer should answer with.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from protoplan.core.db import SessionLocal
from protoplan.core.storage import StorageError, delete_object, save_image
from protoplan.core.thumbnail import generate_thumbnail
from protoplan.models.project import Project
from protoplan.models.screen import PlanStatus, Screen
from protoplan.services.planner import generate_screen_plan

logger = logging.getLogger(__name__)


class WorkflowError(Exception):
    """A requested transition is not allowed in the current state."""
    status_code = 422


class PlanInProgressError(WorkflowError):
    status_code = 409


@dataclass
class Upload:
    filename: Optional[str]
    content_type: Optional[str]
    data: bytes


def is_image(upload: Upload) -> bool:
    return bool(upload.content_type and upload.content_type.startswith("image/"))


def _require_text(value: Optional[str], message: str) -> str:
    if value is None or not value.strip():
        raise WorkflowError(message)
    return value


def create_screens(db: Session, project: Project, uploads: Iterable[Upload]) -> Tuple[List[Screen], List[Tuple[Optional[str], str]]]:
    """
    Store each image upload and create a NOT_GENERATED screen for it.

    Non-image uploads are skipped; if none of the uploads is an image the
    whole call is rejected. A failure on one file is reported and does not
    stop the others.

    Returns:
        (created screens, [(filename, reason), ...] for failed files)
    """
    images = [u for u in uploads if is_image(u)]
    if not images:
        raise WorkflowError("Please upload image files only")

    created: List[Screen] = []
    failed: List[Tuple[Optional[str], str]] = []

    for upload in images:
        try:
            stored = save_image(project.id, upload.filename, upload.data)
        except StorageError as e:
            logger.warning(f"Upload of {upload.filename!r} to project {project.id} failed: {e}")
            failed.append((upload.filename, str(e)))
            continue

        thumb_key = generate_thumbnail(stored.key)
        screen = Screen(
            project_id=project.id,
            image_path=stored.key,
            thumbnail_path=thumb_key,
            filename=upload.filename,
            content_type=upload.content_type,
            file_size=stored.size,
            format=stored.format,
            resolution_width=stored.width,
            resolution_height=stored.height,
            plan_status=PlanStatus.NOT_GENERATED,
        )
        db.add(screen)
        created.append(screen)

    if created:
        project_id = project.id
        stored_keys = [key for s in created for key in (s.image_path, s.thumbnail_path)]
        project.touch()
        db.add(project)
        try:
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            for key in stored_keys:
                delete_object(key)
            logger.error(f"Could not save uploaded screens for project {project_id}; stored files removed")
            raise
        for screen in created:
            db.refresh(screen)
        logger.info(f"Created {len(created)} screen(s) in project {project.id}")

    return created, failed


def update_documentation(db: Session, screen: Screen, documentation: str) -> Screen:
    screen.documentation = _require_text(documentation, "Documentation is required")
    screen.project.touch()
    db.add(screen)
    db.commit()
    db.refresh(screen)
    return screen


def bulk_update_documentation(db: Session, project: Project, documentation: Dict[int, str]) -> List[Screen]:
    """
    Save documentation for every screen of a project at once.

    All screens must receive non-blank text; otherwise nothing is written.
    """
    screens = list(project.screens)
    if not screens:
        raise WorkflowError("Please upload at least one screen image")

    known_ids = {s.id for s in screens}
    unknown = set(documentation) - known_ids
    if unknown:
        raise WorkflowError(f"Screens not in this project: {sorted(unknown)}")

    missing = [s.id for s in screens if not (documentation.get(s.id) or "").strip()]
    if missing:
        raise WorkflowError("Please add documentation for all screens")

    for screen in screens:
        screen.documentation = documentation[screen.id]
        db.add(screen)
    project.touch()
    db.add(project)
    db.commit()
    for screen in screens:
        db.refresh(screen)
    return screens


def update_details(db: Session, screen: Screen, screen_name: str, documentation: str) -> Screen:
    screen.screen_name = _require_text(screen_name, "Screen name is required").strip()
    screen.documentation = _require_text(documentation, "Documentation is required")
    screen.project.touch()
    db.add(screen)
    db.commit()
    db.refresh(screen)
    return screen


def start_plan_generation(db: Session, screen: Screen) -> Screen:
    """Move a screen to IN_PROGRESS; generation itself runs in :func:`run_plan_generation`."""
    if screen.plan_status == PlanStatus.IN_PROGRESS:
        raise PlanInProgressError("Plan generation is already in progress for this screen")
    if not screen.has_documentation:
        raise WorkflowError("Documentation is required before generating a plan")

    screen.plan_status = PlanStatus.IN_PROGRESS
    db.add(screen)
    db.commit()
    db.refresh(screen)
    logger.info(f"Screen {screen.id}: plan generation started")
    return screen


def run_plan_generation(screen_id: int, session_factory: Callable[[], Session] = SessionLocal) -> None:
    """
    Generate and store the plan for a screen that is IN_PROGRESS.

    Runs outside the request, so it opens its own session. On failure the
    screen goes back to NOT_GENERATED and keeps its previous plan text.
    """
    db = session_factory()
    try:
        screen = db.get(Screen, screen_id)
        if screen is None or screen.plan_status != PlanStatus.IN_PROGRESS:
            logger.warning(f"Screen {screen_id}: skipping plan generation, not in progress")
            return

        try:
            plan = generate_screen_plan(screen.screen_name, screen.documentation)
            if not plan or not plan.strip():
                raise ValueError("empty plan")
        except Exception as e:
            logger.exception(f"Screen {screen_id}: plan generation failed: {e}")
            screen.plan_status = PlanStatus.NOT_GENERATED
            db.add(screen)
            db.commit()
            return

        screen.implementation_plan = plan
        screen.plan_status = PlanStatus.COMPLETED
        screen.project.touch()
        db.add(screen)
        db.commit()
        logger.info(f"Screen {screen_id}: plan generation completed")
    finally:
        db.close()


def store_plan(db: Session, screen: Screen, plan: str, status: PlanStatus = PlanStatus.COMPLETED) -> Screen:
    if status != PlanStatus.NOT_GENERATED and not screen.has_documentation:
        raise WorkflowError("Documentation is required before storing a plan")
    if status == PlanStatus.COMPLETED and not (plan or "").strip():
        raise WorkflowError("A completed plan needs plan text")
    screen.implementation_plan = plan
    screen.plan_status = status
    screen.project.touch()
    db.add(screen)
    db.commit()
    db.refresh(screen)
    return screen


def reset_plan(db: Session, screen: Screen) -> Screen:
    screen.implementation_plan = None
    screen.plan_status = PlanStatus.NOT_GENERATED
    screen.project.touch()
    db.add(screen)
    db.commit()
    db.refresh(screen)
    logger.info(f"Screen {screen.id}: plan reset")
    return screen


def delete_screen(db: Session, screen: Screen) -> None:
    screen_id, image_key, thumb_key = screen.id, screen.image_path, screen.thumbnail_path
    screen.project.touch()
    db.delete(screen)
    db.commit()
    delete_object(image_key)
    delete_object(thumb_key)
    logger.info(f"Deleted screen {screen_id} ({image_key})")
