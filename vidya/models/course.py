import uuid
from datetime import datetime
from sqlalchemy import String, Boolean, Integer, DateTime, Text, Uuid, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from vidya.database import Base, JSONType, utcnow


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    provider: Mapped[str] = mapped_column(String(255), nullable=False)
    duration: Mapped[str | None] = mapped_column(String(50))
    nsqf_level: Mapped[int | None] = mapped_column(Integer, index=True)
    skill_level: Mapped[str | None] = mapped_column(String(20), index=True)  # beginner | intermediate | advanced
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    thumbnail_url: Mapped[str | None] = mapped_column(String(500))
    tags: Mapped[list | None] = mapped_column(JSONType)
    is_certified: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class Enrollment(Base):
    __tablename__ = "enrollments"
    __table_args__ = (UniqueConstraint("user_id", "course_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # 0-100
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="enrolled")  # enrolled | in_progress | completed | dropped
    enrolled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
