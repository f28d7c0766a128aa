import uuid
from typing import Optional

from fastapi import APIRouter, Query

from vidya.core.exceptions import NotFoundException
from vidya.dependencies import StorageDep
from vidya.schemas.course import CourseFilters, CourseResponse

router = APIRouter()


@router.get("", response_model=list[CourseResponse])
async def list_courses(
    storage: StorageDep,
    category: Optional[str] = Query(None),
    skill_level: Optional[str] = Query(None, alias="skillLevel"),
    nsqf_level: Optional[int] = Query(None, alias="nsqfLevel", ge=1, le=10),
    search: Optional[str] = Query(None, max_length=200),
):
    filters = CourseFilters(
        category=category or None,
        skill_level=skill_level or None,
        nsqf_level=nsqf_level,
        search=search.strip() if search and search.strip() else None,
    )
    return await storage.list_courses(filters)


@router.get("/{course_id}", response_model=CourseResponse)
async def get_course(course_id: uuid.UUID, storage: StorageDep):
    course = await storage.get_course(course_id)
    if not course:
        raise NotFoundException("Course not found")
    return course
