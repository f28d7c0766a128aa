import uuid
from typing import Any, List, Literal, Optional

from pydantic import Field, field_validator

from vidya.schemas.common import CamelModel
from vidya.schemas.pathway import PathwayResponse


def _clamp(value: Any, low: int, high: int) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return max(low, min(high, value))
    return value


# ── Model output ─────────────────────────────────────────────────────────────

class SkillGap(CamelModel):
    skill_name: str
    current_level: Literal["none", "beginner", "intermediate", "advanced"] = "none"
    required_level: Literal["beginner", "intermediate", "advanced"]
    priority: Literal["high", "medium", "low"]
    recommendations: List[str] = Field(default_factory=list)


class SkillGapAnalysis(CamelModel):
    skill_gaps: List[SkillGap]
    overall_score: float = Field(ge=0, le=100)
    strengths: List[str] = Field(default_factory=list)
    improvement_areas: List[str] = Field(default_factory=list)
    career_readiness: float = Field(ge=0, le=100)

    @field_validator("overall_score", "career_readiness", mode="before")
    @classmethod
    def clamp_score(cls, v: Any) -> Any:
        return _clamp(v, 0, 100)


class PathwayCourse(CamelModel):
    title: str
    provider: Optional[str] = None
    duration: Optional[str] = None
    nsqf_level: Optional[int] = None
    priority: int = Field(5, ge=1, le=10)
    course_id: Optional[uuid.UUID] = None
    skill_level: Optional[str] = None

    @field_validator("priority", mode="before")
    @classmethod
    def clamp_priority(cls, v: Any) -> Any:
        if isinstance(v, float):
            v = round(v)
        return _clamp(v, 1, 10)


class LearningPathwayDraft(CamelModel):
    title: str
    description: str = ""
    duration: str = ""
    difficulty: Literal["beginner", "intermediate", "advanced"] = "beginner"
    courses: List[PathwayCourse] = Field(default_factory=list)
    milestones: List[str] = Field(default_factory=list)
    expected_outcomes: List[str] = Field(default_factory=list)


class CareerGuidance(CamelModel):
    career_advice: List[str] = Field(default_factory=list)
    industry_insights: List[str] = Field(default_factory=list)
    next_steps: List[str] = Field(default_factory=list)
    salary_expectations: str = ""
    job_market_outlook: str = ""


class ProgressSummary(CamelModel):
    completed_courses: int = 0
    total_skills: int = 0
    average_score: int = 0


# ── Requests / responses ─────────────────────────────────────────────────────

class SkillAnalysisRequest(CamelModel):
    target_role: str = Field(min_length=1, max_length=255)


class GeneratePathwayRequest(CamelModel):
    skill_gap_analysis: SkillGapAnalysis
    target_role: str = Field(min_length=1, max_length=255)


class GeneratePathwayResponse(CamelModel):
    pathway: LearningPathwayDraft
    saved_pathway: PathwayResponse


class QualificationSuggestion(CamelModel):
    type: str = "qualification"
    code: str
    title: str
    nsqf_level: int
    sector: str
    related_program: Optional[str] = None
    related_job_role: Optional[str] = None


class ChatbotRequest(CamelModel):
    message: str = Field(min_length=1, max_length=1000)
    conversation_id: Optional[str] = None


class ChatbotResponse(CamelModel):
    response: str
    suggestions: List[QualificationSuggestion]
    conversation_id: str
