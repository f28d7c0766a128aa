import uuid
from datetime import datetime
from sqlalchemy import String, Boolean, Integer, DateTime, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from vidya.database import Base, JSONType, utcnow


class NCVETQualification(Base):
    __tablename__ = "ncvet_qualifications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)  # e.g. SSC/Q0501
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    sector: Mapped[str] = mapped_column(String(100), nullable=False)
    nsqf_level: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class TrainingProgram(Base):
    __tablename__ = "training_programs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    provider: Mapped[str] = mapped_column(String(255), nullable=False)
    mode: Mapped[str] = mapped_column(String(20), nullable=False)  # online | offline | hybrid
    duration: Mapped[str] = mapped_column(String(50), nullable=False)
    nsqf_level: Mapped[int] = mapped_column(Integer, nullable=False)
    sector: Mapped[str] = mapped_column(String(100), nullable=False)
    qualification_codes: Mapped[list | None] = mapped_column(JSONType)
    is_certified: Mapped[bool] = mapped_column(Boolean, default=True)
    description: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class JobRole(Base):
    __tablename__ = "job_roles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    sector: Mapped[str] = mapped_column(String(100), nullable=False)
    nsqf_level: Mapped[int] = mapped_column(Integer, nullable=False)
    qualification_codes: Mapped[list | None] = mapped_column(JSONType)
    description: Mapped[str | None] = mapped_column(Text)
    salary_range: Mapped[str | None] = mapped_column(String(100))
    demand_level: Mapped[str | None] = mapped_column(String(20))  # high | medium | low
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
