import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from vidya.schemas.common import CamelModel


@dataclass(frozen=True)
class CourseFilters:
    """Optional course filters; every filter that is set is ANDed."""

    category: Optional[str] = None
    skill_level: Optional[str] = None
    nsqf_level: Optional[int] = None
    search: Optional[str] = None


class CourseResponse(CamelModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    provider: str
    duration: Optional[str] = None
    nsqf_level: Optional[int] = None
    skill_level: Optional[str] = None
    category: str
    thumbnail_url: Optional[str] = None
    tags: Optional[List[str]] = None
    is_certified: bool
    created_at: datetime


class EnrollmentCreate(CamelModel):
    course_id: uuid.UUID


class EnrollmentProgressUpdate(CamelModel):
    progress: int = Field(ge=0, le=100)


class EnrollmentResponse(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    course_id: uuid.UUID
    progress: int
    status: str
    enrolled_at: datetime
    completed_at: Optional[datetime] = None
