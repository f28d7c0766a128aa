from typing import Optional

from fastapi import APIRouter, Query

from vidya.core.exceptions import NotFoundException
from vidya.dependencies import Advisor, CurrentPrincipal, StorageDep, SurveyCompletedPrincipal
from vidya.schemas.ai import (
    CareerGuidance,
    GeneratePathwayRequest,
    GeneratePathwayResponse,
    SkillAnalysisRequest,
    SkillGapAnalysis,
)
from vidya.schemas.course import CourseResponse
from vidya.schemas.insights import AIAnalysisResponse
from vidya.schemas.pathway import PathwayResponse

router = APIRouter()


async def _load_user(storage, principal):
    user = await storage.get_user(principal.id)
    if not user:
        raise NotFoundException("User not found")
    return user


@router.post("/skill-analysis", response_model=SkillGapAnalysis)
async def skill_analysis(
    payload: SkillAnalysisRequest,
    principal: SurveyCompletedPrincipal,
    storage: StorageDep,
    advisor: Advisor,
):
    user = await _load_user(storage, principal)
    return await advisor.analyze_skill_gap(storage, user, payload.target_role)


@router.post("/generate-pathway", response_model=GeneratePathwayResponse)
async def generate_pathway(
    payload: GeneratePathwayRequest,
    principal: SurveyCompletedPrincipal,
    storage: StorageDep,
    advisor: Advisor,
):
    """Draft a pathway from a skill gap analysis and save it for the user."""
    user = await _load_user(storage, principal)
    draft = await advisor.generate_learning_pathway(
        storage, user, payload.skill_gap_analysis, payload.target_role
    )
    saved = await storage.create_pathway(
        user.id,
        title=draft.title,
        description=draft.description,
        target_role=payload.target_role,
        estimated_duration=draft.duration[:50] or None,
        difficulty=draft.difficulty,
        ai_generated=True,
        course_ids=[str(course.course_id) for course in draft.courses if course.course_id],
    )
    return GeneratePathwayResponse(pathway=draft, saved_pathway=PathwayResponse.model_validate(saved))


@router.get("/course-recommendations", response_model=list[CourseResponse])
async def course_recommendations(
    principal: SurveyCompletedPrincipal,
    storage: StorageDep,
    advisor: Advisor,
    limit: int = Query(10, ge=1, le=50),
):
    user = await _load_user(storage, principal)
    return await advisor.recommend_courses(storage, user, limit)


@router.post("/career-guidance", response_model=CareerGuidance)
async def career_guidance(principal: SurveyCompletedPrincipal, storage: StorageDep, advisor: Advisor):
    user = await _load_user(storage, principal)
    return await advisor.generate_career_guidance(storage, user)


@router.get("/analyses", response_model=list[AIAnalysisResponse])
async def list_analyses(
    principal: CurrentPrincipal,
    storage: StorageDep,
    analysis_type: Optional[str] = Query(None, alias="type"),
    limit: int = Query(50, ge=1, le=200),
):
    return await storage.list_ai_analyses(principal.id, analysis_type, limit)
