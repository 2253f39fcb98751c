"""Project listing (search and sort) and removal."""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from protoplan.core.storage import delete_prefix
from protoplan.models.project import Project
from protoplan.schemas.project import SortField, SortOrder

logger = logging.getLogger(__name__)

DEFAULT_SORT_FIELD = SortField.updated_at


@dataclass(frozen=True)
class SortState:
    field: SortField = DEFAULT_SORT_FIELD
    order: SortOrder = SortOrder.desc


def default_order(field: SortField) -> SortOrder:
    """Names read A-Z; dates newest first."""
    return SortOrder.asc if field == SortField.name else SortOrder.desc


def toggle_sort(current: SortState, field: SortField) -> SortState:
    """Selecting the active field again flips direction; another field starts at its default."""
    if current.field == field:
        flipped = SortOrder.asc if current.order == SortOrder.desc else SortOrder.desc
        return SortState(field, flipped)
    return SortState(field, default_order(field))


def filter_projects(projects: Iterable[Project], query: Optional[str]) -> List[Project]:
    """Case-insensitive substring match on name or description."""
    projects = list(projects)
    needle = (query or "").strip().lower()
    if not needle:
        return projects
    return [
        p for p in projects
        if needle in (p.name or "").lower() or needle in (p.description or "").lower()
    ]


def sort_projects(projects: Iterable[Project], field: SortField, order: Optional[SortOrder] = None) -> List[Project]:
    order = order or default_order(field)
    if field == SortField.name:
        key = lambda p: ((p.name or "").lower(), p.id)
    else:
        key = lambda p: (getattr(p, field.value), p.id)
    return sorted(projects, key=key, reverse=order == SortOrder.desc)


def delete_project(db: Session, project: Project) -> None:
    """Delete a project with its screens and every stored file under its prefix."""
    project_id = project.id
    db.delete(project)
    db.commit()
    delete_prefix(project_id)
    logger.info(f"Deleted project {project_id}")
