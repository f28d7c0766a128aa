import uuid
from datetime import datetime
from sqlalchemy import String, Integer, Float, DateTime, Uuid, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from vidya.database import Base, JSONType, utcnow


class IndustryTrend(Base):
    __tablename__ = "industry_trends"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    sector: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    skill_name: Mapped[str] = mapped_column(String(255), nullable=False)
    demand_growth: Mapped[float | None] = mapped_column(Float)  # percentage
    salary_range: Mapped[str | None] = mapped_column(String(100))
    job_count: Mapped[int | None] = mapped_column(Integer)
    location: Mapped[str | None] = mapped_column(String(100))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class AIAnalysis(Base):
    """Append-only audit record of one advisory call."""

    __tablename__ = "ai_analysis"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    analysis_type: Mapped[str] = mapped_column(String(50), nullable=False)  # skill_gap | pathway_recommendation | career_guidance
    input: Mapped[dict | None] = mapped_column(JSONType)  # redacted context snapshot
    output: Mapped[dict | None] = mapped_column(JSONType)
    confidence: Mapped[float | None] = mapped_column(Float)  # 0-1, fixed per analysis type
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
