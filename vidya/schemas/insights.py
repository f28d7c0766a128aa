import uuid
from datetime import datetime
from typing import Any, Optional

from vidya.schemas.common import CamelModel


class IndustryTrendResponse(CamelModel):
    id: uuid.UUID
    sector: str
    skill_name: str
    demand_growth: Optional[float] = None
    salary_range: Optional[str] = None
    job_count: Optional[int] = None
    location: Optional[str] = None
    updated_at: datetime


class AIAnalysisResponse(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    analysis_type: str
    input: Optional[Any] = None
    output: Optional[Any] = None
    confidence: Optional[float] = None
    created_at: datetime


class DashboardAnalytics(CamelModel):
    total_enrollments: int
    completed_courses: int
    in_progress_courses: int
    total_pathways: int
    total_skills: int
    badges_earned: int
    average_progress: int
    average_skill_score: int
    industry_alignment: int
