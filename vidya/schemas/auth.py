import uuid
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from vidya.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    # Accepted for client compatibility; the server always assigns "learner"
    role: Optional[str] = None

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters long")
        return v


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class PublicUser(CamelModel):
    id: uuid.UUID
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str
    survey_completed: bool


class AuthResponse(CamelModel):
    message: str
    user: PublicUser


class PrincipalResponse(CamelModel):
    id: uuid.UUID
    email: str
    role: str
    survey_completed: bool


class MeResponse(CamelModel):
    user: PrincipalResponse
