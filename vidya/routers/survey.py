from fastapi import APIRouter

from vidya.core.exceptions import NotFoundException
from vidya.dependencies import LearnerPrincipal, StorageDep
from vidya.schemas.survey import SurveyResponse, SurveySaved, SurveyStatus, SurveySubmit

router = APIRouter()


@router.get("/me", response_model=SurveyResponse)
async def get_my_survey(principal: LearnerPrincipal, storage: StorageDep):
    survey = await storage.get_survey(principal.id)
    if not survey:
        raise NotFoundException("Survey not found")
    return survey


@router.post("/me", response_model=SurveySaved)
async def save_my_survey(payload: SurveySubmit, principal: LearnerPrincipal, storage: StorageDep):
    """Create or replace the learner's survey; this unlocks the gated features."""
    survey = await storage.save_survey(principal.id, payload.model_dump())
    return SurveySaved(message="Survey saved successfully", survey=SurveyResponse.model_validate(survey))


@router.get("/status", response_model=SurveyStatus)
async def survey_status(principal: LearnerPrincipal, storage: StorageDep):
    survey = await storage.get_survey(principal.id)
    return SurveyStatus(
        completed=survey is not None,
        has_basic_info=bool(survey and survey.academic_background and survey.aspirations),
    )
