import uuid

from fastapi import APIRouter, status

from vidya.core.exceptions import NotFoundException
from vidya.dependencies import CurrentPrincipal, StorageDep
from vidya.schemas.course import EnrollmentCreate, EnrollmentProgressUpdate, EnrollmentResponse
from vidya.services.achievement_service import AchievementService

router = APIRouter()


@router.get("", response_model=list[EnrollmentResponse])
async def list_enrollments(principal: CurrentPrincipal, storage: StorageDep):
    return await storage.list_enrollments(principal.id)


@router.post("", response_model=EnrollmentResponse, status_code=status.HTTP_201_CREATED)
async def enroll(payload: EnrollmentCreate, principal: CurrentPrincipal, storage: StorageDep):
    if not await storage.get_course(payload.course_id):
        raise NotFoundException("Course not found")
    enrollment = await storage.create_enrollment(principal.id, payload.course_id)
    await AchievementService().evaluate(storage, principal.id)
    return enrollment


@router.put("/{course_id}/progress", response_model=EnrollmentResponse)
async def update_progress(
    course_id: uuid.UUID,
    payload: EnrollmentProgressUpdate,
    principal: CurrentPrincipal,
    storage: StorageDep,
):
    """Set progress; status and completion time follow from the new value."""
    enrollment = await storage.update_enrollment_progress(principal.id, course_id, payload.progress)
    if not enrollment:
        raise NotFoundException("Enrollment not found")
    await storage.sync_pathway_progress(principal.id)
    await AchievementService().evaluate(storage, principal.id)
    return enrollment
