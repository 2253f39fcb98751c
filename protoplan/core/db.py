from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import QueuePool

from protoplan.core.config import settings


DATABASE_URL = settings.DATABASE_URL

engine_kwargs = {"echo": False}
if DATABASE_URL.startswith("sqlite"):
	# Sessions may be opened in the request thread and used from the threadpool
	engine_kwargs["connect_args"] = {"check_same_thread": False}
else:
	engine_kwargs["poolclass"] = QueuePool

engine = create_engine(DATABASE_URL, **engine_kwargs)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base for models
Base = declarative_base()


def get_db() -> Generator:
	db = SessionLocal()
	try:
		yield db
	finally:
		db.close()


def init_db() -> None:
	"""Import models to ensure they are registered on the Base metadata, then create tables."""
	import protoplan.models.user  # noqa: F401
	import protoplan.models.project  # noqa: F401
	import protoplan.models.screen  # noqa: F401

	Base.metadata.create_all(bind=engine)
