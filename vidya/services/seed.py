"""
Reference data loaded at startup: skills, courses, achievements, industry
trends and the NCVET qualification / training program / job role samples.

Each table is seeded only while it is empty, so restarts never duplicate rows
and hand-edited catalog data is left alone.
"""
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidya.models.course import Course
from vidya.models.gamification import Achievement
from vidya.models.insights import IndustryTrend
from vidya.models.ncvet import JobRole, NCVETQualification, TrainingProgram
from vidya.models.skill import Skill

logger = logging.getLogger(__name__)

SKILLS = [
    {"name": "Python Programming", "category": "Programming", "nsqf_level": 5,
     "description": "Programming in Python language", "industry_demand": 95.5},
    {"name": "Data Analysis", "category": "Analytics", "nsqf_level": 6,
     "description": "Analyzing data using statistical methods", "industry_demand": 92.3},
    {"name": "Machine Learning", "category": "AI/ML", "nsqf_level": 7,
     "description": "Building and training ML models", "industry_demand": 88.7},
    {"name": "SQL Database Management", "category": "Database", "nsqf_level": 5,
     "description": "Managing relational databases", "industry_demand": 89.2},
    {"name": "JavaScript Development", "category": "Programming", "nsqf_level": 5,
     "description": "Frontend and backend JavaScript development", "industry_demand": 91.8},
]

COURSES = [
    {
        "title": "Python for Data Analysis",
        "description": "Comprehensive introduction to data analysis using Python and pandas. "
                       "Learn to manipulate, analyze, and visualize data effectively.",
        "provider": "DataCamp",
        "duration": "8 weeks",
        "skill_level": "beginner",
        "nsqf_level": 4,
        "category": "Data Analytics",
        "is_certified": True,
        "tags": ["python", "data analysis", "pandas", "visualization"],
    },
    {
        "title": "Advanced Machine Learning",
        "description": "Deep dive into ML algorithms, neural networks, and practical "
                       "implementation using TensorFlow and PyTorch.",
        "provider": "AI Academy",
        "duration": "12 weeks",
        "skill_level": "advanced",
        "nsqf_level": 7,
        "category": "AI & Machine Learning",
        "is_certified": True,
        "tags": ["machine learning", "tensorflow", "neural networks", "ai"],
    },
    {
        "title": "Web Development Fundamentals",
        "description": "Learn HTML, CSS, JavaScript, and modern web development practices "
                       "including responsive design and frameworks.",
        "provider": "CodeCraft",
        "duration": "10 weeks",
        "skill_level": "intermediate",
        "nsqf_level": 5,
        "category": "Software Development",
        "is_certified": False,
        "tags": ["html", "css", "javascript", "responsive design"],
    },
    {
        "title": "Digital Marketing Strategy",
        "description": "Master digital marketing including SEO, social media marketing, "
                       "content marketing, and analytics.",
        "provider": "Marketing Pro",
        "duration": "6 weeks",
        "skill_level": "beginner",
        "nsqf_level": 3,
        "category": "Digital Marketing",
        "is_certified": True,
        "tags": ["seo", "social media", "content marketing", "analytics"],
    },
    {
        "title": "Cybersecurity Fundamentals",
        "description": "Introduction to cybersecurity principles, threat detection, and "
                       "security best practices for organizations.",
        "provider": "SecureLearn",
        "duration": "8 weeks",
        "skill_level": "intermediate",
        "nsqf_level": 6,
        "category": "Cybersecurity",
        "is_certified": True,
        "tags": ["security", "threat detection", "network security", "compliance"],
    },
    {
        "title": "Cloud Computing with AWS",
        "description": "Learn Amazon Web Services including EC2, S3, Lambda, and cloud "
                       "architecture best practices.",
        "provider": "CloudTech",
        "duration": "10 weeks",
        "skill_level": "intermediate",
        "nsqf_level": 6,
        "category": "Cloud Computing",
        "is_certified": True,
        "tags": ["aws", "cloud computing", "ec2", "lambda"],
    },
]

ACHIEVEMENTS = [
    {"title": "First Steps", "description": "Enroll in your first course",
     "icon": "footprints", "category": "learning", "points": 10,
     "requirements": {"type": "courses_enrolled", "threshold": 1}},
    {"title": "Course Finisher", "description": "Complete your first course",
     "icon": "graduation-cap", "category": "learning", "points": 50,
     "requirements": {"type": "courses_completed", "threshold": 1}},
    {"title": "Dedicated Learner", "description": "Complete three courses",
     "icon": "trophy", "category": "learning", "points": 150,
     "requirements": {"type": "courses_completed", "threshold": 3}},
    {"title": "Curious Mind", "description": "Enroll in five courses",
     "icon": "compass", "category": "exploration", "points": 30,
     "requirements": {"type": "courses_enrolled", "threshold": 5}},
    {"title": "Self Aware", "description": "Assess three of your skills",
     "icon": "target", "category": "skills", "points": 20,
     "requirements": {"type": "skills_assessed", "threshold": 3}},
]

INDUSTRY_TRENDS = [
    {"sector": "Information Technology", "skill_name": "Python Programming",
     "demand_growth": 24.5, "salary_range": "4-12 LPA", "job_count": 45000, "location": "Bengaluru"},
    {"sector": "Information Technology", "skill_name": "Cloud Computing",
     "demand_growth": 31.2, "salary_range": "6-18 LPA", "job_count": 28000, "location": "Hyderabad"},
    {"sector": "Analytics", "skill_name": "Data Analysis",
     "demand_growth": 27.8, "salary_range": "4-10 LPA", "job_count": 32000, "location": "Pune"},
    {"sector": "Analytics", "skill_name": "Machine Learning",
     "demand_growth": 35.4, "salary_range": "8-25 LPA", "job_count": 15000, "location": "Bengaluru"},
    {"sector": "Security", "skill_name": "Cybersecurity",
     "demand_growth": 29.1, "salary_range": "5-15 LPA", "job_count": 12000, "location": "Delhi NCR"},
    {"sector": "Marketing", "skill_name": "Digital Marketing",
     "demand_growth": 18.6, "salary_range": "3-8 LPA", "job_count": 22000, "location": "Mumbai"},
]

QUALIFICATIONS = [
    {"code": "SSC/Q0501", "title": "Software Developer", "sector": "IT-ITeS", "nsqf_level": 5,
     "description": "Designs, codes and tests software modules to specification."},
    {"code": "SSC/Q2101", "title": "Junior Data Associate", "sector": "IT-ITeS", "nsqf_level": 4,
     "description": "Collects, cleans and reports on business data."},
    {"code": "SSC/Q0901", "title": "Security Analyst", "sector": "IT-ITeS", "nsqf_level": 6,
     "description": "Monitors systems for threats and responds to incidents."},
    {"code": "MES/Q0702", "title": "Social Media Executive", "sector": "Media & Entertainment",
     "nsqf_level": 4, "description": "Plans and runs social media campaigns."},
    {"code": "ELE/Q5901", "title": "Field Technician Computing", "sector": "Electronics",
     "nsqf_level": 4, "description": "Installs and services computer hardware at customer sites."},
]

TRAINING_PROGRAMS = [
    {"title": "PMKVY Software Developer Track", "provider": "NSDC Partner Institute",
     "mode": "hybrid", "duration": "6 months", "nsqf_level": 5, "sector": "IT-ITeS",
     "qualification_codes": ["SSC/Q0501"], "is_certified": True},
    {"title": "Data Associate Bootcamp", "provider": "Skill India Digital",
     "mode": "online", "duration": "3 months", "nsqf_level": 4, "sector": "IT-ITeS",
     "qualification_codes": ["SSC/Q2101"], "is_certified": True},
    {"title": "Cyber Defence Foundation", "provider": "IT-ITeS Sector Skill Council",
     "mode": "offline", "duration": "4 months", "nsqf_level": 6, "sector": "IT-ITeS",
     "qualification_codes": ["SSC/Q0901"], "is_certified": True},
    {"title": "Digital Media Marketing", "provider": "MESC Training Partner",
     "mode": "online", "duration": "2 months", "nsqf_level": 4, "sector": "Media & Entertainment",
     "qualification_codes": ["MES/Q0702"], "is_certified": True},
]

JOB_ROLES = [
    {"title": "Junior Software Engineer", "sector": "IT-ITeS", "nsqf_level": 5,
     "qualification_codes": ["SSC/Q0501"], "salary_range": "3.5-7 LPA", "demand_level": "high"},
    {"title": "Data Analyst", "sector": "IT-ITeS", "nsqf_level": 4,
     "qualification_codes": ["SSC/Q2101"], "salary_range": "3-6 LPA", "demand_level": "high"},
    {"title": "SOC Analyst", "sector": "IT-ITeS", "nsqf_level": 6,
     "qualification_codes": ["SSC/Q0901"], "salary_range": "4-9 LPA", "demand_level": "medium"},
    {"title": "Social Media Coordinator", "sector": "Media & Entertainment", "nsqf_level": 4,
     "qualification_codes": ["MES/Q0702"], "salary_range": "2.5-5 LPA", "demand_level": "medium"},
]

REFERENCE_DATA = [
    (Skill, SKILLS),
    (Course, COURSES),
    (Achievement, ACHIEVEMENTS),
    (IndustryTrend, INDUSTRY_TRENDS),
    (NCVETQualification, QUALIFICATIONS),
    (TrainingProgram, TRAINING_PROGRAMS),
    (JobRole, JOB_ROLES),
]


async def seed_reference_data(db: AsyncSession) -> None:
    for model, rows in REFERENCE_DATA:
        existing = await db.execute(select(func.count()).select_from(model))
        if existing.scalar_one():
            continue
        db.add_all([model(**row) for row in rows])
        logger.info("Seeded %d rows into %s", len(rows), model.__tablename__)
    await db.commit()
