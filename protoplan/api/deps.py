from typing import Generator

from fastapi import HTTPException
from sqlalchemy.orm import Session

from protoplan.core.db import get_db
from protoplan.models.project import Project
from protoplan.models.screen import Screen
from protoplan.models.user import User


def get_db_dependency() -> Generator:
	"""Wrapper around protoplan.core.db.get_db for FastAPI dependencies."""
	yield from get_db()


def get_owned_project(db: Session, project_id: int, user: User) -> Project:
	"""Load a project of the current user; other users' projects are reported as missing."""
	p = db.query(Project).filter(Project.id == project_id, Project.owner_id == user.id).first()
	if not p:
		raise HTTPException(status_code=404, detail="Project not found")
	return p


def get_owned_screen(db: Session, screen_id: int, user: User) -> Screen:
	s = (
		db.query(Screen)
		.join(Project, Screen.project_id == Project.id)
		.filter(Screen.id == screen_id, Project.owner_id == user.id)
		.first()
	)
	if not s:
		raise HTTPException(status_code=404, detail="Screen not found")
	return s
