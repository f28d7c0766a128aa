import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, field_validator

from vidya.schemas.common import CamelModel


class ProfileUpdate(CamelModel):
    """Client-settable profile fields only.

    role, password hash, survey flag and login counters are absent on purpose;
    unknown keys in the request body are dropped.
    """

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    profile_image_url: Optional[str] = Field(None, max_length=500)
    academic_background: Optional[str] = Field(None, max_length=200)
    current_role: Optional[str] = Field(None, max_length=100)
    career_aspirations: Optional[str] = Field(None, max_length=500)
    socio_economic_context: Optional[str] = Field(None, max_length=200)
    preferred_language: Optional[str] = Field(None, max_length=10)
    learning_pace: Optional[Literal["slow", "moderate", "fast"]] = None

    @field_validator("preferred_language", "learning_pace")
    @classmethod
    def not_null(cls, v):
        # Omit the field to leave it unchanged; these columns cannot be cleared
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class UserResponse(CamelModel):
    id: uuid.UUID
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: str
    survey_completed: bool
    academic_background: Optional[str] = None
    current_role: Optional[str] = None
    career_aspirations: Optional[str] = None
    socio_economic_context: Optional[str] = None
    preferred_language: Optional[str] = None
    learning_pace: Optional[str] = None
    last_login: Optional[datetime] = None
    created_at: datetime
