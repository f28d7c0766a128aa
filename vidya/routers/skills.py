from typing import Optional

from fastapi import APIRouter, Query

from vidya.core.exceptions import NotFoundException
from vidya.dependencies import CurrentPrincipal, StorageDep
from vidya.schemas.skill import SkillResponse, UserSkillResponse, UserSkillUpsert
from vidya.services.achievement_service import AchievementService

router = APIRouter()


@router.get("/skills", response_model=list[SkillResponse])
async def list_skills(storage: StorageDep, category: Optional[str] = Query(None)):
    if category:
        return await storage.list_skills_by_category(category)
    return await storage.list_skills()


@router.get("/user/skills", response_model=list[UserSkillResponse])
async def list_user_skills(principal: CurrentPrincipal, storage: StorageDep):
    return [
        UserSkillResponse.model_validate(user_skill).model_copy(
            update={"skill_name": skill.name, "skill_category": skill.category}
        )
        for user_skill, skill in await storage.list_user_skills(principal.id)
    ]


@router.post("/user/skills", response_model=UserSkillResponse)
async def assess_skill(payload: UserSkillUpsert, principal: CurrentPrincipal, storage: StorageDep):
    skill = await storage.get_skill(payload.skill_id)
    if not skill:
        raise NotFoundException("Skill not found")

    user_skill = await storage.upsert_user_skill(
        principal.id,
        skill.id,
        payload.proficiency_level,
        payload.proficiency_score,
    )
    await AchievementService().evaluate(storage, principal.id)
    return UserSkillResponse.model_validate(user_skill).model_copy(
        update={"skill_name": skill.name, "skill_category": skill.category}
    )
