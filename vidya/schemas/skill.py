import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from vidya.schemas.common import CamelModel


class SkillResponse(CamelModel):
    id: uuid.UUID
    name: str
    category: str
    nsqf_level: Optional[int] = None
    description: Optional[str] = None
    industry_demand: Optional[float] = None


class UserSkillUpsert(CamelModel):
    skill_id: uuid.UUID
    proficiency_level: Literal["beginner", "intermediate", "advanced"]
    proficiency_score: int = Field(ge=0, le=100)


class UserSkillResponse(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    skill_id: uuid.UUID
    proficiency_level: str
    proficiency_score: int
    last_assessed: datetime
    skill_name: Optional[str] = None
    skill_category: Optional[str] = None
