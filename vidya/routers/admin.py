import logging
import uuid

from fastapi import APIRouter

from vidya.core.exceptions import NotFoundException
from vidya.dependencies import PolicymakerPrincipal, StorageDep
from vidya.schemas.common import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/users/{user_id}/unlock", response_model=MessageResponse)
async def unlock_user(user_id: uuid.UUID, principal: PolicymakerPrincipal, storage: StorageDep):
    """Clear the failed-login counter; the only way out of a lockout."""
    if not await storage.reset_failed_logins(user_id):
        raise NotFoundException("User not found")
    logger.info("User %s unlocked by %s", user_id, principal.id)
    return MessageResponse(message="Account unlocked")
