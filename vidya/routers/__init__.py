from fastapi import FastAPI

from vidya.routers import (
    auth,
    profile,
    skills,
    courses,
    ai,
    pathways,
    enrollments,
    achievements,
    industry,
    dashboard,
    survey,
    chatbot,
    admin,
)

_API = "/api"

_ROUTES = [
    # (router,               path-suffix,         tags)
    (auth.router,            "/auth",             ["Authentication"]),
    (profile.router,         "",                  ["Profile"]),
    (skills.router,          "",                  ["Skills"]),
    (courses.router,         "/courses",          ["Courses"]),
    (ai.router,              "/ai",               ["AI Advisory"]),
    (pathways.router,        "/pathways",         ["Learning Pathways"]),
    (enrollments.router,     "/enrollments",      ["Enrollments"]),
    (achievements.router,    "",                  ["Achievements"]),
    (industry.router,        "/industry-trends",  ["Industry Trends"]),
    (dashboard.router,       "/dashboard",        ["Dashboard"]),
    (survey.router,          "/survey",           ["Learner Survey"]),
    (chatbot.router,         "/chatbot",          ["Career Chatbot"]),
    (admin.router,           "/admin",            ["Admin"]),
]


def register_routers(app: FastAPI) -> None:
    """Attach every API router to the FastAPI application."""
    for router, suffix, tags in _ROUTES:
        app.include_router(router, prefix=f"{_API}{suffix}", tags=tags)
