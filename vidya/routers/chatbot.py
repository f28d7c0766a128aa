from fastapi import APIRouter, Depends

from vidya.core.exceptions import ValidationException
from vidya.dependencies import Advisor, StorageDep, SurveyCompletedPrincipal, require_role
from vidya.schemas.ai import ChatbotRequest, ChatbotResponse

router = APIRouter()


@router.post(
    "/career-guidance",
    response_model=ChatbotResponse,
    dependencies=[Depends(require_role("learner"))],
)
async def career_guidance_chat(
    payload: ChatbotRequest,
    principal: SurveyCompletedPrincipal,
    storage: StorageDep,
    advisor: Advisor,
):
    user = await storage.get_user(principal.id)
    survey = await storage.get_survey(principal.id)
    if not user or not survey:
        raise ValidationException("User profile or survey data not found")

    reply = await advisor.chat_career_guidance(
        storage, user, survey, payload.message, payload.conversation_id
    )
    return ChatbotResponse(**reply)
