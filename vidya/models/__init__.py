from vidya.models.user import User
from vidya.models.skill import Skill, UserSkill
from vidya.models.course import Course, Enrollment
from vidya.models.pathway import LearningPathway
from vidya.models.gamification import Achievement, UserAchievement
from vidya.models.insights import IndustryTrend, AIAnalysis
from vidya.models.survey import LearnerSurvey
from vidya.models.ncvet import NCVETQualification, TrainingProgram, JobRole

__all__ = [
    "User",
    "Skill", "UserSkill",
    "Course", "Enrollment",
    "LearningPathway",
    "Achievement", "UserAchievement",
    "IndustryTrend", "AIAnalysis",
    "LearnerSurvey",
    "NCVETQualification", "TrainingProgram", "JobRole",
]
