import uuid
from datetime import datetime
from sqlalchemy import String, DateTime, Text, Uuid, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from vidya.database import Base, JSONType, utcnow


class LearnerSurvey(Base):
    __tablename__ = "learner_surveys"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    academic_background: Mapped[str] = mapped_column(String(200), nullable=False)
    prior_skills_freeform: Mapped[str | None] = mapped_column(Text)
    socio_economic_context: Mapped[str | None] = mapped_column(String(200))
    learning_pace: Mapped[str] = mapped_column(String(20), nullable=False)
    aspirations: Mapped[str] = mapped_column(Text, nullable=False)
    prior_skill_ids: Mapped[list | None] = mapped_column(JSONType)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
