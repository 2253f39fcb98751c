import enum
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, Text, Enum, ForeignKey
from sqlalchemy.orm import relationship

from protoplan.core.db import Base


class PlanStatus(str, enum.Enum):
	NOT_GENERATED = "NOT_GENERATED"
	IN_PROGRESS = "IN_PROGRESS"
	COMPLETED = "COMPLETED"


class Screen(Base):
	__tablename__ = "screens"

	id = Column(Integer, primary_key=True, index=True)
	project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), index=True, nullable=False)

	# storage keys, see protoplan.core.storage
	image_path = Column(String(512), nullable=False)
	thumbnail_path = Column(String(512), nullable=True)
	filename = Column(String(255), nullable=True)
	content_type = Column(String(100), nullable=True)
	file_size = Column(Integer, nullable=True)
	format = Column(String(50), nullable=True)
	resolution_width = Column(Integer, nullable=True)
	resolution_height = Column(Integer, nullable=True)

	screen_name = Column(String(255), nullable=True)
	documentation = Column(Text, nullable=True)
	plan_status = Column(
		Enum(PlanStatus, name="plan_status", native_enum=False, length=20),
		default=PlanStatus.NOT_GENERATED,
		nullable=False,
	)
	implementation_plan = Column(Text, nullable=True)

	created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)
	updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc), nullable=False)

	project = relationship("Project", back_populates="screens")

	@property
	def has_documentation(self) -> bool:
		return bool(self.documentation and self.documentation.strip())

	@property
	def can_generate_plan(self) -> bool:
		return self.has_documentation and self.plan_status != PlanStatus.IN_PROGRESS
