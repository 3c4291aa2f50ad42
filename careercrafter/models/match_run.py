from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..platform.database import Base


class MatchRun(Base):
    """One execution of the job-matching pipeline. Append-only."""

    __tablename__ = "match_runs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    user_profile = Column(JSON, nullable=False)
    matched_jobs = Column(JSON, nullable=False)
    total_matches = Column(Integer, nullable=False, default=0)
    algorithm = Column(String, nullable=False)  # provider-enhanced | basic-fallback
    provider = Column(String, nullable=True)
    match_date = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    user = relationship("User", back_populates="match_runs")
