import logging
import uuid

from vidya.services.storage import Storage

logger = logging.getLogger(__name__)


class AchievementService:
    async def progress_counts(self, storage: Storage, user_id: uuid.UUID) -> dict[str, int]:
        """Current value of every requirement type for the user."""
        enrollments = await storage.enrollment_stats(user_id)
        skills = await storage.skill_stats(user_id)
        return {
            "courses_enrolled": enrollments["total"],
            "courses_completed": enrollments["completed"],
            "skills_assessed": skills["total"],
        }

    async def evaluate(self, storage: Storage, user_id: uuid.UUID) -> list[str]:
        """
        Award every catalog achievement whose requirement the user now meets.
        Awards are idempotent; returns the titles newly earned by this call.
        """
        counts = await self.progress_counts(storage, user_id)
        earned: list[str] = []
        for achievement in await storage.list_achievements():
            requirement = achievement.requirements or {}
            requirement_type = requirement.get("type")
            threshold = requirement.get("threshold")
            if requirement_type not in counts or not isinstance(threshold, int):
                # Manually granted achievement
                continue
            if counts[requirement_type] < threshold:
                continue
            if await storage.award_achievement(user_id, achievement.id):
                logger.info("User %s earned achievement %r", user_id, achievement.title)
                earned.append(achievement.title)
        return earned
