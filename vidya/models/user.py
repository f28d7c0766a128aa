import uuid
from datetime import datetime
from sqlalchemy import String, Boolean, Integer, DateTime, Text, Uuid, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from vidya.database import Base, utcnow

APP_ROLE = SAEnum("learner", "trainer", "policymaker", name="app_role", native_enum=False)

LEARNING_PACE = SAEnum("slow", "moderate", "fast", name="learning_pace", native_enum=False)


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    first_name: Mapped[str | None] = mapped_column(String(100))
    last_name: Mapped[str | None] = mapped_column(String(100))
    profile_image_url: Mapped[str | None] = mapped_column(String(500))

    # Authentication (server-managed only)
    role: Mapped[str] = mapped_column(APP_ROLE, nullable=False, default="learner")
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    survey_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    failed_login_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Learner profile
    academic_background: Mapped[str | None] = mapped_column(String(200))
    current_role: Mapped[str | None] = mapped_column(String(100))
    career_aspirations: Mapped[str | None] = mapped_column(Text)
    socio_economic_context: Mapped[str | None] = mapped_column(String(200))
    preferred_language: Mapped[str] = mapped_column(String(10), default="en")
    learning_pace: Mapped[str] = mapped_column(LEARNING_PACE, default="moderate")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
