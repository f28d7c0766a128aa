import uuid
from dataclasses import dataclass
from typing import Annotated, AsyncIterator

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie
from sqlalchemy.ext.asyncio import AsyncSession

from vidya.config import settings
from vidya.core.exceptions import CredentialsException, ForbiddenException, SurveyRequiredException
from vidya.core.security import decode_access_token
from vidya.services.ai_service import AdvisoryService
from vidya.services.storage import Storage

cookie_scheme = APIKeyCookie(name=settings.AUTH_COOKIE_NAME, auto_error=False)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, re-read from storage on every request."""

    id: uuid.UUID
    email: str
    role: str
    survey_completed: bool


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    async with request.app.state.database.session() as session:
        yield session


def get_storage(db: Annotated[AsyncSession, Depends(get_db)]) -> Storage:
    return Storage(db)


def get_advisor(request: Request) -> AdvisoryService:
    return request.app.state.advisor


async def get_current_principal(
    token: Annotated[str | None, Depends(cookie_scheme)],
    storage: Annotated[Storage, Depends(get_storage)],
) -> Principal:
    if not token:
        raise CredentialsException()
    payload = decode_access_token(token)
    if not payload or not payload.get("sub"):
        raise CredentialsException("Invalid or expired token", clear_cookie=True)
    try:
        user_id = uuid.UUID(payload["sub"])
    except (TypeError, ValueError):
        raise CredentialsException("Invalid or expired token", clear_cookie=True)
    user = await storage.get_user(user_id)
    if not user:
        raise CredentialsException("User not found", clear_cookie=True)
    return Principal(
        id=user.id,
        email=user.email,
        role=user.role,
        survey_completed=user.survey_completed,
    )


def require_role(*roles: str):
    async def _require_role(
        principal: Annotated[Principal, Depends(get_current_principal)],
    ) -> Principal:
        if principal.role not in roles:
            raise ForbiddenException()
        return principal

    return _require_role


async def require_survey_completion(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    # Trainers and policymakers never take the learner survey
    if principal.role == "learner" and not principal.survey_completed:
        raise SurveyRequiredException()
    return principal


StorageDep = Annotated[Storage, Depends(get_storage)]
Advisor = Annotated[AdvisoryService, Depends(get_advisor)]
CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
SurveyCompletedPrincipal = Annotated[Principal, Depends(require_survey_completion)]
LearnerPrincipal = Annotated[Principal, Depends(require_role("learner"))]
PolicymakerPrincipal = Annotated[Principal, Depends(require_role("policymaker"))]
