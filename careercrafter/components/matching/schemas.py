"""Pydantic models describing match results."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field

from .rules import Recommendation


class FitAnalysis(BaseModel):
    skills: int = Field(default=0, ge=0, le=100)
    experience: int = Field(default=0, ge=0, le=100)
    education: int = Field(default=0, ge=0, le=100)
    salary: int = Field(default=0, ge=0, le=100)
    location: int = Field(default=0, ge=0, le=100)
    culture: int = Field(default=0, ge=0, le=100)


class MatchResult(BaseModel):
    job_id: str = Field(alias="jobId")
    match_score: int = Field(alias="matchScore", ge=0, le=100)
    reasons: List[str] = Field(default_factory=list, max_length=4)
    strengths: List[str] = Field(default_factory=list, max_length=3)
    improvements: List[str] = Field(default_factory=list, max_length=2)
    fit_analysis: FitAnalysis = Field(default_factory=FitAnalysis, alias="fitAnalysis")
    recommendation: Recommendation

    model_config = {"populate_by_name": True}

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
