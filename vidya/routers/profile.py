from fastapi import APIRouter

from vidya.core.exceptions import NotFoundException
from vidya.dependencies import CurrentPrincipal, StorageDep
from vidya.schemas.user import ProfileUpdate, UserResponse

router = APIRouter()


@router.get("/user", response_model=UserResponse)
async def get_user(principal: CurrentPrincipal, storage: StorageDep):
    user = await storage.get_user(principal.id)
    if not user:
        raise NotFoundException("User not found")
    return user


@router.put("/profile", response_model=UserResponse)
async def update_profile(payload: ProfileUpdate, principal: CurrentPrincipal, storage: StorageDep):
    """Only fields declared on ProfileUpdate can reach the user row."""
    user = await storage.update_user(principal.id, payload.model_dump(exclude_unset=True))
    if not user:
        raise NotFoundException("User not found")
    return user
