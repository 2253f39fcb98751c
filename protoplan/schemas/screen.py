from typing import Dict, List, Optional
from pydantic import BaseModel, computed_field
from datetime import datetime

from protoplan.core.storage import public_url
from protoplan.models.screen import PlanStatus


class ScreenRead(BaseModel):
	id: int
	project_id: int
	image_path: str
	thumbnail_path: Optional[str] = None
	filename: Optional[str] = None
	content_type: Optional[str] = None
	file_size: Optional[int] = None
	format: Optional[str] = None
	resolution_width: Optional[int] = None
	resolution_height: Optional[int] = None
	screen_name: Optional[str] = None
	documentation: Optional[str] = None
	plan_status: PlanStatus
	implementation_plan: Optional[str] = None
	can_generate_plan: bool = False
	created_at: Optional[datetime]
	updated_at: Optional[datetime]

	@computed_field
	@property
	def image_url(self) -> Optional[str]:
		return public_url(self.image_path)

	@computed_field
	@property
	def thumbnail_url(self) -> Optional[str]:
		return public_url(self.thumbnail_path)

	class Config:
		from_attributes = True


class ScreenDocumentationUpdate(BaseModel):
	documentation: str


class BulkDocumentationUpdate(BaseModel):
	"""Documentation text keyed by screen id."""
	documentation: Dict[int, str]


class ScreenDetailsUpdate(BaseModel):
	screen_name: str
	documentation: str


class ScreenPlanUpdate(BaseModel):
	plan: str
	status: PlanStatus = PlanStatus.COMPLETED


class ScreenNameSuggestion(BaseModel):
	screen_name: str


class UploadFailure(BaseModel):
	filename: Optional[str] = None
	detail: str


class ScreenUploadResult(BaseModel):
	screens: List[ScreenRead]
	failed: List[UploadFailure] = []
