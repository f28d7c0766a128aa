"""
Storage - typed query layer over the relational schema.

One instance wraps the request's session. Mutating operations commit their own
work; there are no transactions spanning several entity writes. The
user-skill, survey and achievement-award writes are single
INSERT ... ON CONFLICT statements so concurrent requests for the same key
cannot race.
"""
import logging
import uuid
from datetime import datetime
from typing import Any, Optional, Sequence

from sqlalchemy import and_, case, func, or_, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidya.core.exceptions import ConflictException
from vidya.database import utcnow
from vidya.models.course import Course, Enrollment
from vidya.models.gamification import Achievement, UserAchievement
from vidya.models.insights import AIAnalysis, IndustryTrend
from vidya.models.ncvet import JobRole, NCVETQualification, TrainingProgram
from vidya.models.pathway import LearningPathway
from vidya.models.skill import Skill, UserSkill
from vidya.models.survey import LearnerSurvey
from vidya.models.user import User
from vidya.schemas.course import CourseFilters

logger = logging.getLogger(__name__)


def enrollment_status_for(progress: int) -> tuple[str, Optional[datetime]]:
    """Status and completion stamp implied by a progress value."""
    if progress >= 100:
        return "completed", utcnow()
    if progress > 0:
        return "in_progress", None
    return "enrolled", None


def _like_pattern(text: str) -> str:
    escaped = text.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class Storage:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _insert(self, model):
        """Dialect-specific INSERT supporting ON CONFLICT."""
        if self.db.get_bind().dialect.name == "sqlite":
            return sqlite.insert(model)
        return postgresql.insert(model)

    # ── Users ────────────────────────────────────────────────────────────────

    async def get_user(self, user_id: uuid.UUID) -> User | None:
        result = await self.db.execute(
            select(User).where(User.id == user_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User)
            .where(User.email == email.lower())
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create_user(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        role: str = "learner",
    ) -> User:
        user = User(
            email=email.lower(),
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            role=role,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException("User already exists with this email")
        await self.db.refresh(user)
        return user

    async def update_user(self, user_id: uuid.UUID, fields: dict[str, Any]) -> User | None:
        user = await self.get_user(user_id)
        if not user:
            return None
        for key, value in fields.items():
            setattr(user, key, value)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def record_failed_login(self, user_id: uuid.UUID) -> None:
        await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(failed_login_count=User.failed_login_count + 1)
        )
        await self.db.commit()

    async def record_successful_login(self, user_id: uuid.UUID) -> None:
        await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(failed_login_count=0, last_login=utcnow())
        )
        await self.db.commit()

    async def reset_failed_logins(self, user_id: uuid.UUID) -> bool:
        result = await self.db.execute(
            update(User).where(User.id == user_id).values(failed_login_count=0)
        )
        await self.db.commit()
        return result.rowcount > 0

    async def mark_survey_completed(self, user_id: uuid.UUID, completed: bool = True) -> None:
        await self.db.execute(
            update(User).where(User.id == user_id).values(survey_completed=completed)
        )
        await self.db.commit()

    # ── Skills ───────────────────────────────────────────────────────────────

    async def list_skills(self) -> Sequence[Skill]:
        result = await self.db.execute(select(Skill).order_by(Skill.name, Skill.id))
        return result.scalars().all()

    async def list_skills_by_category(self, category: str) -> Sequence[Skill]:
        result = await self.db.execute(
            select(Skill).where(Skill.category == category).order_by(Skill.name, Skill.id)
        )
        return result.scalars().all()

    async def get_skill(self, skill_id: uuid.UUID) -> Skill | None:
        return await self.db.get(Skill, skill_id)

    async def list_user_skills(self, user_id: uuid.UUID) -> list[tuple[UserSkill, Skill]]:
        result = await self.db.execute(
            select(UserSkill, Skill)
            .join(Skill, UserSkill.skill_id == Skill.id)
            .where(UserSkill.user_id == user_id)
            .order_by(Skill.name, UserSkill.id)
        )
        return list(result.tuples().all())

    async def upsert_user_skill(
        self,
        user_id: uuid.UUID,
        skill_id: uuid.UUID,
        proficiency_level: str,
        proficiency_score: int,
    ) -> UserSkill:
        now = utcnow()
        stmt = self._insert(UserSkill).values(
            id=uuid.uuid4(),
            user_id=user_id,
            skill_id=skill_id,
            proficiency_level=proficiency_level,
            proficiency_score=proficiency_score,
            last_assessed=now,
            created_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "skill_id"],
            set_={
                "proficiency_level": stmt.excluded.proficiency_level,
                "proficiency_score": stmt.excluded.proficiency_score,
                "last_assessed": stmt.excluded.last_assessed,
            },
        ).returning(UserSkill)
        result = await self.db.execute(stmt, execution_options={"populate_existing": True})
        user_skill = result.scalar_one()
        await self.db.commit()
        return user_skill

    # ── Courses ──────────────────────────────────────────────────────────────

    async def list_courses(self, filters: CourseFilters | None = None) -> Sequence[Course]:
        filters = filters or CourseFilters()
        conditions = []
        if filters.category:
            conditions.append(Course.category == filters.category)
        if filters.skill_level:
            conditions.append(Course.skill_level == filters.skill_level)
        if filters.nsqf_level is not None:
            conditions.append(Course.nsqf_level == filters.nsqf_level)
        if filters.search:
            pattern = _like_pattern(filters.search)
            conditions.append(
                or_(
                    func.lower(Course.title).like(pattern, escape="\\"),
                    func.lower(func.coalesce(Course.description, "")).like(pattern, escape="\\"),
                    func.lower(Course.provider).like(pattern, escape="\\"),
                )
            )

        query = select(Course)
        if conditions:
            query = query.where(and_(*conditions))
        result = await self.db.execute(query.order_by(Course.created_at.desc(), Course.title))
        return result.scalars().all()

    async def get_course(self, course_id: uuid.UUID) -> Course | None:
        return await self.db.get(Course, course_id)

    # ── Enrollments ──────────────────────────────────────────────────────────

    async def list_enrollments(self, user_id: uuid.UUID) -> Sequence[Enrollment]:
        result = await self.db.execute(
            select(Enrollment)
            .where(Enrollment.user_id == user_id)
            .order_by(Enrollment.enrolled_at.desc(), Enrollment.id)
        )
        return result.scalars().all()

    async def create_enrollment(self, user_id: uuid.UUID, course_id: uuid.UUID) -> Enrollment:
        enrollment = Enrollment(user_id=user_id, course_id=course_id)
        self.db.add(enrollment)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException("Already enrolled in this course")
        await self.db.refresh(enrollment)
        return enrollment

    async def update_enrollment_progress(
        self, user_id: uuid.UUID, course_id: uuid.UUID, progress: int
    ) -> Enrollment | None:
        result = await self.db.execute(
            select(Enrollment).where(
                Enrollment.user_id == user_id,
                Enrollment.course_id == course_id,
            )
        )
        enrollment = result.scalar_one_or_none()
        if not enrollment:
            return None
        status, completed_at = enrollment_status_for(progress)
        if status == "completed" and enrollment.status == "completed":
            # Re-reporting completion keeps the original stamp
            completed_at = enrollment.completed_at
        enrollment.progress = progress
        enrollment.status = status
        enrollment.completed_at = completed_at
        await self.db.commit()
        await self.db.refresh(enrollment)
        return enrollment

    async def enrollment_stats(self, user_id: uuid.UUID) -> dict[str, float]:
        result = await self.db.execute(
            select(
                func.count(Enrollment.id),
                func.sum(case((Enrollment.status == "completed", 1), else_=0)),
                func.sum(case((Enrollment.status == "in_progress", 1), else_=0)),
                func.avg(Enrollment.progress),
            ).where(Enrollment.user_id == user_id)
        )
        total, completed, in_progress, avg_progress = result.one()
        return {
            "total": total or 0,
            "completed": int(completed or 0),
            "in_progress": int(in_progress or 0),
            "average_progress": float(avg_progress or 0),
        }

    # ── Learning pathways ────────────────────────────────────────────────────

    async def list_pathways(self, user_id: uuid.UUID) -> Sequence[LearningPathway]:
        result = await self.db.execute(
            select(LearningPathway)
            .where(LearningPathway.user_id == user_id)
            .order_by(LearningPathway.created_at.desc(), LearningPathway.id)
        )
        return result.scalars().all()

    async def create_pathway(self, user_id: uuid.UUID, **fields: Any) -> LearningPathway:
        pathway = LearningPathway(user_id=user_id, **fields)
        self.db.add(pathway)
        await self.db.commit()
        await self.db.refresh(pathway)
        return pathway

    async def update_pathway_progress(
        self, user_id: uuid.UUID, pathway_id: uuid.UUID, progress: int
    ) -> LearningPathway | None:
        result = await self.db.execute(
            select(LearningPathway).where(
                LearningPathway.id == pathway_id,
                LearningPathway.user_id == user_id,
            )
        )
        pathway = result.scalar_one_or_none()
        if not pathway:
            return None
        pathway.progress = progress
        await self.db.commit()
        await self.db.refresh(pathway)
        return pathway

    async def sync_pathway_progress(self, user_id: uuid.UUID) -> None:
        """Recompute pathway progress from the share of referenced courses completed."""
        completed_result = await self.db.execute(
            select(Enrollment.course_id).where(
                Enrollment.user_id == user_id,
                Enrollment.status == "completed",
            )
        )
        completed = {str(course_id) for course_id in completed_result.scalars().all()}

        changed = False
        for pathway in await self.list_pathways(user_id):
            course_ids = pathway.course_ids or []
            if not course_ids:
                continue
            done = sum(1 for course_id in course_ids if str(course_id) in completed)
            progress = round(100 * done / len(course_ids))
            if progress != pathway.progress:
                pathway.progress = progress
                changed = True
        if changed:
            await self.db.commit()

    # ── Achievements ─────────────────────────────────────────────────────────

    async def list_achievements(self) -> Sequence[Achievement]:
        result = await self.db.execute(select(Achievement).order_by(Achievement.title))
        return result.scalars().all()

    async def list_user_achievements(
        self, user_id: uuid.UUID
    ) -> list[tuple[UserAchievement, Achievement]]:
        result = await self.db.execute(
            select(UserAchievement, Achievement)
            .join(Achievement, UserAchievement.achievement_id == Achievement.id)
            .where(UserAchievement.user_id == user_id)
            .order_by(UserAchievement.earned_at.desc(), Achievement.title)
        )
        return list(result.tuples().all())

    async def award_achievement(self, user_id: uuid.UUID, achievement_id: uuid.UUID) -> bool:
        """Insert-if-absent. Returns True only when a new row was written."""
        stmt = (
            self._insert(UserAchievement)
            .values(
                id=uuid.uuid4(),
                user_id=user_id,
                achievement_id=achievement_id,
                earned_at=utcnow(),
            )
            .on_conflict_do_nothing(index_elements=["user_id", "achievement_id"])
            .returning(UserAchievement.id)
        )
        result = await self.db.execute(stmt)
        inserted = result.scalar_one_or_none() is not None
        await self.db.commit()
        return inserted

    async def count_user_achievements(self, user_id: uuid.UUID) -> int:
        result = await self.db.execute(
            select(func.count(UserAchievement.id)).where(UserAchievement.user_id == user_id)
        )
        return result.scalar_one()

    # ── Industry trends ──────────────────────────────────────────────────────

    async def list_industry_trends(self, sector: str | None = None) -> Sequence[IndustryTrend]:
        query = select(IndustryTrend)
        if sector:
            query = query.where(IndustryTrend.sector == sector)
        result = await self.db.execute(
            query.order_by(IndustryTrend.updated_at.desc(), IndustryTrend.skill_name)
        )
        return result.scalars().all()

    # ── AI analysis log ──────────────────────────────────────────────────────

    async def save_ai_analysis(
        self,
        user_id: uuid.UUID,
        analysis_type: str,
        input: dict | None,
        output: dict | None,
        confidence: float,
    ) -> AIAnalysis:
        analysis = AIAnalysis(
            user_id=user_id,
            analysis_type=analysis_type,
            input=input,
            output=output,
            confidence=confidence,
        )
        self.db.add(analysis)
        await self.db.commit()
        await self.db.refresh(analysis)
        return analysis

    async def list_ai_analyses(
        self, user_id: uuid.UUID, analysis_type: str | None = None, limit: int = 50
    ) -> Sequence[AIAnalysis]:
        query = select(AIAnalysis).where(AIAnalysis.user_id == user_id)
        if analysis_type:
            query = query.where(AIAnalysis.analysis_type == analysis_type)
        result = await self.db.execute(
            query.order_by(AIAnalysis.created_at.desc(), AIAnalysis.id).limit(limit)
        )
        return result.scalars().all()

    # ── Learner surveys ──────────────────────────────────────────────────────

    async def get_survey(self, user_id: uuid.UUID) -> LearnerSurvey | None:
        result = await self.db.execute(
            select(LearnerSurvey)
            .where(LearnerSurvey.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def save_survey(self, user_id: uuid.UUID, fields: dict[str, Any]) -> LearnerSurvey:
        """Create or replace the user's single survey and update the survey flag."""
        now = utcnow()
        stmt = self._insert(LearnerSurvey).values(
            id=uuid.uuid4(), user_id=user_id, created_at=now, updated_at=now, **fields
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id"],
            set_={**{key: getattr(stmt.excluded, key) for key in fields}, "updated_at": now},
        ).returning(LearnerSurvey)
        result = await self.db.execute(stmt, execution_options={"populate_existing": True})
        survey = result.scalar_one()
        await self.mark_survey_completed(
            user_id, bool(survey.academic_background and survey.aspirations)
        )
        return survey

    # ── NCVET reference data ─────────────────────────────────────────────────

    async def list_qualifications(self, limit: int = 10) -> Sequence[NCVETQualification]:
        result = await self.db.execute(
            select(NCVETQualification).order_by(NCVETQualification.code).limit(limit)
        )
        return result.scalars().all()

    async def list_training_programs(self, limit: int = 10) -> Sequence[TrainingProgram]:
        result = await self.db.execute(
            select(TrainingProgram).order_by(TrainingProgram.title).limit(limit)
        )
        return result.scalars().all()

    async def list_job_roles(self, limit: int = 10) -> Sequence[JobRole]:
        result = await self.db.execute(select(JobRole).order_by(JobRole.title).limit(limit))
        return result.scalars().all()

    # ── Analytics ────────────────────────────────────────────────────────────

    async def skill_stats(self, user_id: uuid.UUID) -> dict[str, float]:
        result = await self.db.execute(
            select(func.count(UserSkill.id), func.avg(UserSkill.proficiency_score))
            .where(UserSkill.user_id == user_id)
        )
        total, avg_score = result.one()
        return {"total": total or 0, "average_score": float(avg_score or 0)}

    async def dashboard_analytics(self, user_id: uuid.UUID) -> dict[str, int]:
        enrollments = await self.enrollment_stats(user_id)
        skills = await self.skill_stats(user_id)
        pathway_count = await self.db.execute(
            select(func.count(LearningPathway.id)).where(LearningPathway.user_id == user_id)
        )
        return {
            "total_enrollments": enrollments["total"],
            "completed_courses": enrollments["completed"],
            "in_progress_courses": enrollments["in_progress"],
            "total_pathways": pathway_count.scalar_one(),
            "total_skills": skills["total"],
            "badges_earned": await self.count_user_achievements(user_id),
            "average_progress": round(enrollments["average_progress"]),
            "average_skill_score": round(skills["average_score"]),
            "industry_alignment": round(skills["average_score"] * 0.85),
        }
