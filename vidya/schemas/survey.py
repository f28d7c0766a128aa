import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from vidya.schemas.common import CamelModel


class SurveySubmit(CamelModel):
    academic_background: str = Field(min_length=1, max_length=200)
    prior_skills_freeform: Optional[str] = None
    socio_economic_context: Optional[str] = Field(None, max_length=200)
    learning_pace: Literal["slow", "moderate", "fast"]
    aspirations: str = Field(min_length=1)
    prior_skill_ids: Optional[List[str]] = None


class SurveyResponse(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    academic_background: str
    prior_skills_freeform: Optional[str] = None
    socio_economic_context: Optional[str] = None
    learning_pace: str
    aspirations: str
    prior_skill_ids: Optional[List[str]] = None
    created_at: datetime
    updated_at: datetime


class SurveySaved(CamelModel):
    message: str
    survey: SurveyResponse


class SurveyStatus(CamelModel):
    completed: bool
    has_basic_info: bool
