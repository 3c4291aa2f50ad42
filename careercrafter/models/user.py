from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, JSON, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..platform.database import Base


class User(Base):
    """Marketplace user record as owned by the profile/CRUD layer.

    Profile fields are stored raw; the matching component normalizes them per
    request.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    full_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    role: Mapped[Optional[str]] = mapped_column(String, nullable=True, default="job_seeker")

    # Profile
    skills: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    tags: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    desired_job_title: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    current_job_title: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    preferred_job_type: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    preferred_location: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    expected_salary: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    years_of_experience: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    education: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    industry: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    certifications: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    portfolio: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    # AI assistant access
    is_premium: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    ai_credits: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    current_plan: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    last_ai_chat_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )

    match_runs = relationship("MatchRun", back_populates="user")
    credit_ledger_entries = relationship("AiCreditLedger", back_populates="user")
