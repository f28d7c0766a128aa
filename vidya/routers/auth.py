import logging

from fastapi import APIRouter, Response, status

from vidya.config import settings
from vidya.core.exceptions import AccountLockedException, ConflictException, CredentialsException
from vidya.core.security import (
    clear_auth_cookie,
    create_access_token,
    hash_password,
    set_auth_cookie,
    verify_password,
)
from vidya.dependencies import CurrentPrincipal, StorageDep
from vidya.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    PrincipalResponse,
    PublicUser,
    RegisterRequest,
)
from vidya.schemas.common import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, response: Response, storage: StorageDep):
    if await storage.get_user_by_email(payload.email):
        raise ConflictException("User already exists with this email")

    # Self-registration always yields a learner, whatever role the client sent
    user = await storage.create_user(
        email=payload.email,
        password_hash=hash_password(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
        role="learner",
    )
    set_auth_cookie(response, create_access_token(str(user.id)))
    logger.info("Registered user %s", user.id)
    return AuthResponse(message="User registered successfully", user=PublicUser.model_validate(user))


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest, response: Response, storage: StorageDep):
    user = await storage.get_user_by_email(payload.email)
    if not user:
        raise CredentialsException("Invalid email or password")

    # Locked accounts are refused before the password is even checked
    if user.failed_login_count >= settings.MAX_FAILED_LOGINS:
        logger.warning("Login attempt on locked account %s", user.id)
        raise AccountLockedException()

    if not verify_password(payload.password, user.password_hash):
        await storage.record_failed_login(user.id)
        raise CredentialsException("Invalid email or password")

    await storage.record_successful_login(user.id)
    set_auth_cookie(response, create_access_token(str(user.id)))
    user = await storage.get_user(user.id)
    return AuthResponse(message="Login successful", user=PublicUser.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    clear_auth_cookie(response)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=MeResponse)
async def me(principal: CurrentPrincipal):
    return MeResponse(user=PrincipalResponse.model_validate(principal))
