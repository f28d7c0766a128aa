from fastapi import APIRouter

from vidya.dependencies import CurrentPrincipal, StorageDep
from vidya.schemas.gamification import AchievementResponse, UserAchievementResponse

router = APIRouter()


@router.get("/achievements", response_model=list[AchievementResponse])
async def list_achievements(storage: StorageDep):
    return await storage.list_achievements()


@router.get("/user/achievements", response_model=list[UserAchievementResponse])
async def list_user_achievements(principal: CurrentPrincipal, storage: StorageDep):
    earned = []
    for user_achievement, achievement in await storage.list_user_achievements(principal.id):
        data = AchievementResponse.model_validate(achievement).model_dump()
        earned.append(UserAchievementResponse(**data, earned_at=user_achievement.earned_at))
    return earned
