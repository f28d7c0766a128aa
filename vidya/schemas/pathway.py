import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from vidya.schemas.common import CamelModel


class PathwayCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    target_role: Optional[str] = Field(None, max_length=255)
    estimated_duration: Optional[str] = Field(None, max_length=50)
    difficulty: Optional[Literal["beginner", "intermediate", "advanced"]] = None
    course_ids: List[str] = Field(default_factory=list)


class PathwayProgressUpdate(CamelModel):
    progress: int = Field(ge=0, le=100)


class PathwayResponse(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    description: Optional[str] = None
    target_role: Optional[str] = None
    estimated_duration: Optional[str] = None
    difficulty: Optional[str] = None
    progress: int
    ai_generated: bool
    course_ids: Optional[List[str]] = None
    created_at: datetime
    updated_at: datetime
