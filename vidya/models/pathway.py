import uuid
from datetime import datetime
from sqlalchemy import String, Boolean, Integer, DateTime, Text, Uuid, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from vidya.database import Base, JSONType, utcnow


class LearningPathway(Base):
    __tablename__ = "learning_pathways"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    target_role: Mapped[str | None] = mapped_column(String(255))
    estimated_duration: Mapped[str | None] = mapped_column(String(50))
    difficulty: Mapped[str | None] = mapped_column(String(20))
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # 0-100
    ai_generated: Mapped[bool] = mapped_column(Boolean, default=False)
    course_ids: Mapped[list | None] = mapped_column(JSONType)  # ordered catalog course ids
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
