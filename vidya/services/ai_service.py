"""
AI Service - Wraps Google Gemini (primary) and OpenAI (fallback) for the career advisory operations.

Configure the AI provider via .env:
  GOOGLE_GEMINI_API_KEY=...
  OPENAI_API_KEY=...
  AI_PRIMARY_MODEL=gemini-2.5-flash

Every advisory call is logged to the ai_analysis table with a redacted input
snapshot and a fixed confidence for its analysis type.
"""
import asyncio
import json
import logging
import re
import secrets
import string
import time
from typing import Any, List, Optional

from vidya.config import Settings, settings
from vidya.core.exceptions import AdvisoryUnavailableException
from vidya.models.course import Course
from vidya.models.survey import LearnerSurvey
from vidya.models.user import User
from vidya.schemas.ai import (
    CareerGuidance,
    LearningPathwayDraft,
    ProgressSummary,
    QualificationSuggestion,
    SkillGapAnalysis,
)
from vidya.services.storage import Storage

logger = logging.getLogger(__name__)

SKILL_GAP_CONFIDENCE = 0.85
PATHWAY_CONFIDENCE = 0.90
CAREER_GUIDANCE_CONFIDENCE = 0.88
CHATBOT_CONFIDENCE = 0.85

LEVEL_ORDER = {"beginner": 0, "intermediate": 1, "advanced": 2}
PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}

NCVET_CODE_PATTERN = re.compile(r"[A-Z]{3}/Q\d{4}")
MAX_SUGGESTIONS = 3

CHAT_FALLBACK_REPLY = (
    "I'm here to help with your career questions. "
    "Please tell me more about what you'd like to explore."
)


class AIProviderError(Exception):
    """No configured provider produced a response."""


class LLMClient:
    """Gemini first, OpenAI second; every call bounded by a timeout."""

    def __init__(
        self,
        gemini_api_key: str = "",
        openai_api_key: str = "",
        primary_model: str = "gemini-2.5-flash",
        fallback_model: str = "gpt-4o-mini",
        timeout: float = 30.0,
    ):
        self.gemini_api_key = gemini_api_key
        self.openai_api_key = openai_api_key
        self.primary_model = primary_model
        self.fallback_model = fallback_model
        self.timeout = timeout
        self._gemini_client = None
        self._openai_client = None

    @classmethod
    def from_settings(cls, config: Settings) -> "LLMClient":
        return cls(
            gemini_api_key=config.GOOGLE_GEMINI_API_KEY,
            openai_api_key=config.OPENAI_API_KEY,
            primary_model=config.AI_PRIMARY_MODEL,
            fallback_model=config.AI_FALLBACK_MODEL,
            timeout=config.AI_TIMEOUT_SECONDS,
        )

    def _get_gemini(self):
        if not self._gemini_client and self.gemini_api_key:
            import google.generativeai as genai
            genai.configure(api_key=self.gemini_api_key)
            self._gemini_client = genai.GenerativeModel(self.primary_model)
        return self._gemini_client

    def _get_openai(self):
        if not self._openai_client and self.openai_api_key:
            from openai import AsyncOpenAI
            self._openai_client = AsyncOpenAI(api_key=self.openai_api_key)
        return self._openai_client

    async def complete(self, system_prompt: str, prompt: str, json_mode: bool = True) -> str:
        """Return the first successful provider's text response."""
        gemini = self._get_gemini()
        if gemini:
            generation_config = {"response_mime_type": "application/json"} if json_mode else None
            try:
                response = await asyncio.wait_for(
                    gemini.generate_content_async(
                        f"{system_prompt}\n\n{prompt}",
                        generation_config=generation_config,
                    ),
                    timeout=self.timeout,
                )
                return response.text
            except Exception:
                logger.warning("Gemini request failed, falling back", exc_info=True)

        openai = self._get_openai()
        if openai:
            extra = {"response_format": {"type": "json_object"}} if json_mode else {}
            try:
                response = await asyncio.wait_for(
                    openai.chat.completions.create(
                        model=self.fallback_model,
                        messages=[
                            {"role": "system", "content": system_prompt},
                            {"role": "user", "content": prompt},
                        ],
                        **extra,
                    ),
                    timeout=self.timeout,
                )
                return response.choices[0].message.content or ""
            except Exception:
                logger.warning("OpenAI request failed", exc_info=True)

        raise AIProviderError("AI service is not configured or all providers failed")


def parse_json_response(response: str) -> dict:
    """Decode a model response, tolerating a surrounding markdown fence."""
    cleaned = response.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.split("```")[1]
        if cleaned.startswith("json"):
            cleaned = cleaned[4:]
    data = json.loads(cleaned)
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object from the model")
    return data


def generate_conversation_id() -> str:
    alphabet = string.ascii_lowercase + string.digits
    suffix = "".join(secrets.choice(alphabet) for _ in range(9))
    return f"conv_{int(time.time() * 1000)}_{suffix}"


def _profile(user: User, survey: Optional[LearnerSurvey]) -> dict[str, Optional[str]]:
    """Profile fields, falling back to the learner survey where the profile is blank."""
    return {
        "academic_background": user.academic_background
        or (survey.academic_background if survey else None),
        "current_role": user.current_role,
        "career_aspirations": user.career_aspirations or (survey.aspirations if survey else None),
        "learning_pace": user.learning_pace or (survey.learning_pace if survey else None),
        "socio_economic_context": user.socio_economic_context
        or (survey.socio_economic_context if survey else None),
    }


class AdvisoryService:
    """Career advisory operations over an LLM client.

    Built once at startup; each operation takes the request's Storage for
    catalog reads and audit logging.
    """

    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def _complete_json(self, system_prompt: str, prompt: str) -> dict:
        response = await self.llm.complete(system_prompt, prompt)
        return parse_json_response(response)

    # ── Skill gap ────────────────────────────────────────────────────────────

    async def analyze_skill_gap(
        self, storage: Storage, user: User, target_role: str
    ) -> SkillGapAnalysis:
        """Compare the user's assessed skills with what the target role needs."""
        survey = await storage.get_survey(user.id)
        profile = _profile(user, survey)
        user_skills = await storage.list_user_skills(user.id)
        catalog = await storage.list_skills()

        current = "\n".join(
            f"- {skill.name}: {user_skill.proficiency_level} ({user_skill.proficiency_score}/100)"
            for user_skill, skill in user_skills
        ) or "- None assessed yet"
        available = "\n".join(f"- {skill.name} ({skill.category})" for skill in catalog)

        prompt = f"""Analyze the skill gap for a learner aspiring to become a {target_role}.

User Profile:
- Academic Background: {profile['academic_background'] or 'Not specified'}
- Current Role: {profile['current_role'] or 'Not specified'}
- Career Aspirations: {profile['career_aspirations'] or 'Not specified'}
- Learning Pace: {profile['learning_pace'] or 'moderate'}

Current Skills:
{current}

Available Skills in System:
{available}

Return JSON:
{{
  "skillGaps": [
    {{
      "skillName": "...",
      "currentLevel": "none|beginner|intermediate|advanced",
      "requiredLevel": "beginner|intermediate|advanced",
      "priority": "high|medium|low",
      "recommendations": ["..."]
    }}
  ],
  "overallScore": 0-100,
  "strengths": ["..."],
  "improvementAreas": ["..."],
  "careerReadiness": 0-100
}}

Return ONLY valid JSON.
"""
        try:
            raw = await self._complete_json(
                "You are an expert career counselor and skill assessment specialist. "
                "Provide detailed, actionable skill gap analysis for vocational training "
                "aligned with NSQF standards.",
                prompt,
            )
            analysis = SkillGapAnalysis.model_validate(raw)
        except (AIProviderError, ValueError) as exc:
            logger.exception("Skill gap analysis failed for user %s", user.id)
            raise AdvisoryUnavailableException() from exc

        await storage.save_ai_analysis(
            user_id=user.id,
            analysis_type="skill_gap",
            input={
                "userProfile": {
                    "academicBackground": profile["academic_background"],
                    "currentRole": profile["current_role"],
                    "careerAspirations": profile["career_aspirations"],
                },
                "targetRole": target_role,
                "currentSkills": len(user_skills),
            },
            output=analysis.model_dump(mode="json", by_alias=True),
            confidence=SKILL_GAP_CONFIDENCE,
        )
        return analysis

    # ── Learning pathway ─────────────────────────────────────────────────────

    async def generate_learning_pathway(
        self,
        storage: Storage,
        user: User,
        analysis: SkillGapAnalysis,
        target_role: str,
    ) -> LearningPathwayDraft:
        """Draft a beginner-to-advanced pathway targeting the most urgent gaps."""
        survey = await storage.get_survey(user.id)
        profile = _profile(user, survey)
        courses = await storage.list_courses()

        gaps = sorted(analysis.skill_gaps, key=lambda gap: PRIORITY_ORDER[gap.priority])
        gap_lines = "\n".join(
            f"- {gap.skill_name} ({gap.current_level} -> {gap.required_level}, priority: {gap.priority})"
            for gap in gaps
        ) or "- None identified"
        course_lines = "\n".join(
            f"- {course.title} by {course.provider} ({course.skill_level}, "
            f"NSQF Level {course.nsqf_level}, Duration: {course.duration})"
            for course in courses[:50]
        )

        prompt = f"""Generate a personalized learning pathway for a {target_role} aspirant.

User Profile:
- Academic Background: {profile['academic_background'] or 'Not specified'}
- Learning Pace: {profile['learning_pace'] or 'moderate'}
- Career Aspirations: {profile['career_aspirations'] or 'Not specified'}

Skill Gap Analysis:
- Overall Score: {analysis.overall_score}/100
- Career Readiness: {analysis.career_readiness}/100
- Skill Gaps (most urgent first):
{gap_lines}
- Strengths: {', '.join(analysis.strengths) or 'None listed'}
- Improvement Areas: {', '.join(analysis.improvement_areas) or 'None listed'}

Available Courses (use these exact titles):
{course_lines}

Return JSON:
{{
  "title": "...",
  "description": "...",
  "duration": "e.g. 6 months",
  "difficulty": "beginner|intermediate|advanced",
  "courses": [
    {{"title": "...", "provider": "...", "duration": "...", "nsqfLevel": 4, "priority": 1-10}}
  ],
  "milestones": ["..."],
  "expectedOutcomes": ["..."]
}}

The pathway must be aligned with NSQF standards, progress from basics to advanced,
stay realistic for the learner's pace, and give the highest priority to the
courses that close the high-priority gaps.

Return ONLY valid JSON.
"""
        try:
            raw = await self._complete_json(
                "You are an expert learning path designer with deep knowledge of the NSQF "
                "framework and industry requirements. Create practical, achievable learning pathways.",
                prompt,
            )
            draft = LearningPathwayDraft.model_validate(raw)
        except (AIProviderError, ValueError) as exc:
            logger.exception("Pathway generation failed for user %s", user.id)
            raise AdvisoryUnavailableException() from exc

        self._resolve_pathway_courses(draft, courses)

        await storage.save_ai_analysis(
            user_id=user.id,
            analysis_type="pathway_recommendation",
            input={
                "targetRole": target_role,
                "skillGapAnalysis": {
                    "overallScore": analysis.overall_score,
                    "careerReadiness": analysis.career_readiness,
                    "skillGapsCount": len(analysis.skill_gaps),
                },
                "availableCoursesCount": len(courses),
            },
            output=draft.model_dump(mode="json", by_alias=True),
            confidence=PATHWAY_CONFIDENCE,
        )
        return draft

    @staticmethod
    def _resolve_pathway_courses(draft: LearningPathwayDraft, courses: List[Course]) -> None:
        """Link drafted courses to catalog rows and order them by level, then priority."""
        by_title = {course.title.strip().lower(): course for course in courses}
        for item in draft.courses:
            match = by_title.get(item.title.strip().lower())
            if match:
                item.course_id = match.id
                item.skill_level = match.skill_level
                item.provider = item.provider or match.provider
                item.duration = item.duration or match.duration
                item.nsqf_level = item.nsqf_level or match.nsqf_level
        # Unresolved courses keep their relative order after the catalog ones
        draft.courses.sort(
            key=lambda item: (LEVEL_ORDER.get(item.skill_level or "", len(LEVEL_ORDER)), -item.priority)
        )

    # ── Career guidance ──────────────────────────────────────────────────────

    async def generate_career_guidance(self, storage: Storage, user: User) -> CareerGuidance:
        survey = await storage.get_survey(user.id)
        profile = _profile(user, survey)
        trends = await storage.list_industry_trends()
        enrollments = await storage.enrollment_stats(user.id)
        skills = await storage.skill_stats(user.id)
        progress = ProgressSummary(
            completed_courses=enrollments["completed"],
            total_skills=skills["total"],
            average_score=round(skills["average_score"]),
        )

        trend_lines = "\n".join(
            f"- {trend.skill_name} in {trend.sector}: {trend.demand_growth}% growth, "
            f"Salary: {trend.salary_range}, Jobs: {trend.job_count}"
            for trend in trends[:10]
        )

        prompt = f"""Provide comprehensive career guidance for a learner.

User Profile:
- Academic Background: {profile['academic_background'] or 'Not specified'}
- Current Role: {profile['current_role'] or 'Not specified'}
- Career Aspirations: {profile['career_aspirations'] or 'Not specified'}
- Location Context: {profile['socio_economic_context'] or 'Not specified'}

Learning Progress:
- Completed Courses: {progress.completed_courses}
- Total Skills Assessed: {progress.total_skills}
- Average Skill Score: {progress.average_score}/100

Industry Trends:
{trend_lines}

Return JSON:
{{
  "careerAdvice": ["..."],
  "industryInsights": ["..."],
  "nextSteps": ["..."],
  "salaryExpectations": "...",
  "jobMarketOutlook": "..."
}}

Return ONLY valid JSON.
"""
        try:
            raw = await self._complete_json(
                "You are a senior career counselor with expertise in Indian job market trends "
                "and vocational training. Provide practical, actionable career guidance.",
                prompt,
            )
            guidance = CareerGuidance.model_validate(raw)
        except (AIProviderError, ValueError) as exc:
            logger.exception("Career guidance failed for user %s", user.id)
            raise AdvisoryUnavailableException() from exc

        await storage.save_ai_analysis(
            user_id=user.id,
            analysis_type="career_guidance",
            input={
                "userProgress": progress.model_dump(by_alias=True),
                "industryTrendsCount": len(trends),
            },
            output=guidance.model_dump(mode="json", by_alias=True),
            confidence=CAREER_GUIDANCE_CONFIDENCE,
        )
        return guidance

    # ── Course recommendations ───────────────────────────────────────────────

    async def recommend_courses(self, storage: Storage, user: User, limit: int = 10) -> List[Course]:
        """Rank catalog courses for the user; degrades to aspiration matching on any failure."""
        survey = await storage.get_survey(user.id)
        profile = _profile(user, survey)
        user_skills = await storage.list_user_skills(user.id)
        courses = list(await storage.list_courses())

        skill_lines = "\n".join(
            f"- {skill.name}: {user_skill.proficiency_level} ({user_skill.proficiency_score}/100)"
            for user_skill, skill in user_skills
        ) or "- None assessed yet"
        course_lines = "\n".join(
            f"ID: {course.id} - {course.title} ({course.skill_level}, "
            f"NSQF {course.nsqf_level}, {course.category})"
            for course in courses
        )

        prompt = f"""Recommend the most suitable courses for this learner.

User Profile:
- Academic Background: {profile['academic_background'] or 'Not specified'}
- Career Aspirations: {profile['career_aspirations'] or 'Not specified'}
- Learning Pace: {profile['learning_pace'] or 'moderate'}

Current Skills:
{skill_lines}

Available Courses:
{course_lines}

Return JSON with course IDs in order of relevance, at most {limit}:
{{
  "recommendedCourseIds": ["..."],
  "reasoning": "..."
}}

Return ONLY valid JSON.
"""
        try:
            raw = await self._complete_json(
                "You are an AI learning advisor. Recommend courses that best match the user's "
                "skill level, career goals, and learning preferences.",
                prompt,
            )
            recommended_ids = raw.get("recommendedCourseIds")
            if not isinstance(recommended_ids, list):
                raise ValueError("recommendedCourseIds missing from model response")
        except (AIProviderError, ValueError):
            logger.warning("Course recommendation fell back to aspiration matching", exc_info=True)
            return self._fallback_recommendations(courses, profile["career_aspirations"], limit)

        by_id = {str(course.id): course for course in courses}
        ranked: List[Course] = []
        for course_id in recommended_ids:
            course = by_id.pop(str(course_id), None)
            if course:
                ranked.append(course)
        return ranked[:limit]

    @staticmethod
    def _fallback_recommendations(
        courses: List[Course], aspirations: Optional[str], limit: int
    ) -> List[Course]:
        if not aspirations:
            return courses[:limit]
        needle = aspirations.lower()
        matches = [
            course for course in courses
            if course.description and needle in course.description.lower()
        ]
        return matches[:limit]

    # ── Chatbot ──────────────────────────────────────────────────────────────

    async def chat_career_guidance(
        self,
        storage: Storage,
        user: User,
        survey: LearnerSurvey,
        message: str,
        conversation_id: Optional[str] = None,
    ) -> dict[str, Any]:
        """Free-text career answer plus qualifications it mentions by NCVET code."""
        user_skills = await storage.list_user_skills(user.id)
        qualifications = await storage.list_qualifications(limit=10)
        programs = await storage.list_training_programs(limit=10)
        job_roles = await storage.list_job_roles(limit=10)

        skill_names = ", ".join(skill.name for _, skill in user_skills) or "None assessed yet"
        qualification_lines = "\n".join(
            f"- {q.code}: {q.title} (NSQF Level {q.nsqf_level}, {q.sector})" for q in qualifications
        )
        program_lines = "\n".join(
            f"- {p.title} by {p.provider} ({p.duration}, NSQF Level {p.nsqf_level})" for p in programs
        )
        job_lines = "\n".join(
            f"- {j.title} in {j.sector} (NSQF Level {j.nsqf_level}, Salary: {j.salary_range})"
            for j in job_roles
        )

        prompt = f"""User Profile:
- Academic Background: {survey.academic_background}
- Career Aspirations: {survey.aspirations}
- Learning Pace: {survey.learning_pace}
- Socio-Economic Context: {survey.socio_economic_context or 'Not specified'}
- Prior Skills: {survey.prior_skills_freeform or 'Not specified'}
- Assessed Skills: {skill_names}

Available NCVET Qualifications (sample):
{qualification_lines}

Available Training Programs (sample):
{program_lines}

Job Roles (sample):
{job_lines}

User Message: "{message}"

Give career guidance relevant to the learner's background and aspirations.
Reference specific NCVET qualification codes when relevant, suggest suitable
NSQF levels, recommend training programs from the list, and mention salary
ranges and demand. Use simple, encouraging language suited to Indian learners
and keep the answer under 300 words.
"""
        try:
            answer = await self.llm.complete(
                "You are Vidya Varadhi, a knowledgeable and supportive career guidance assistant "
                "specializing in Indian vocational education and NSQF-aligned career paths.",
                prompt,
                json_mode=False,
            )
        except AIProviderError as exc:
            logger.exception("Career chatbot failed for user %s", user.id)
            raise AdvisoryUnavailableException() from exc

        answer = answer.strip() or CHAT_FALLBACK_REPLY
        suggestions = self._extract_suggestions(answer, qualifications, programs, job_roles)

        await storage.save_ai_analysis(
            user_id=user.id,
            analysis_type="career_guidance",
            input={"messageLength": len(message), "conversationId": conversation_id},
            output={
                "response": answer,
                "suggestions": [s.model_dump(by_alias=True) for s in suggestions],
            },
            confidence=CHATBOT_CONFIDENCE,
        )
        return {
            "response": answer,
            "suggestions": suggestions,
            "conversation_id": conversation_id or generate_conversation_id(),
        }

    @staticmethod
    def _extract_suggestions(answer, qualifications, programs, job_roles) -> List[QualificationSuggestion]:
        by_code = {q.code: q for q in qualifications}
        suggestions: List[QualificationSuggestion] = []
        seen = set()
        for code in NCVET_CODE_PATTERN.findall(answer):
            qualification = by_code.get(code)
            if not qualification or code in seen:
                continue
            seen.add(code)
            program = next((p for p in programs if code in (p.qualification_codes or [])), None)
            job_role = next((j for j in job_roles if code in (j.qualification_codes or [])), None)
            suggestions.append(QualificationSuggestion(
                code=qualification.code,
                title=qualification.title,
                nsqf_level=qualification.nsqf_level,
                sector=qualification.sector,
                related_program=program.title if program else None,
                related_job_role=job_role.title if job_role else None,
            ))
            if len(suggestions) == MAX_SUGGESTIONS:
                break
        return suggestions


def build_advisory_service(config: Settings = settings) -> AdvisoryService:
    return AdvisoryService(LLMClient.from_settings(config))
