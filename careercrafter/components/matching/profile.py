"""Canonical user/job attribute sets consumed by the scorer and providers.

Normalization is total: partial or malformed input falls back to policy
defaults instead of raising. Both normalizers accept ORM objects, raw
snake_case mappings, or the camelCase snapshot produced by ``to_dict`` (so a
normalized profile re-normalizes to itself).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from ...shared.utils import read_field
from .rules import (
    DEFAULT_EDUCATION_TIER,
    DEFAULT_EXPERIENCE_TIER,
    EDUCATION_ORDER,
    EDUCATION_SYNONYMS,
    EXPERIENCE_ORDER,
    EXPERIENCE_SYNONYMS,
    EXPERIENCE_YEAR_BOUNDS,
    EducationTier,
    ExperienceTier,
    WorkMode,
)

DEFAULT_DESIRED_TITLE = "Job Seeker"
DEFAULT_JOB_TYPE = "full-time"
DEFAULT_LOCATION = "remote"
DEFAULT_INDUSTRY = "technology"

_LEADING_NUMBER = re.compile(r"^\s*\$?\s*(\d[\d,]*(?:\.\d+)?)")


@dataclass(frozen=True)
class UserProfile:
    skills: tuple[str, ...]
    desired_title: str
    current_title: str
    experience_tier: ExperienceTier
    education_tier: EducationTier
    industry: str
    preferred_job_type: str
    preferred_location: str
    expected_salary: int
    certifications: tuple[str, ...]
    portfolio: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "skills": list(self.skills),
            "desiredJobTitle": self.desired_title,
            "currentJobTitle": self.current_title,
            "yearsOfExperience": self.experience_tier.value,
            "education": self.education_tier.value,
            "industry": self.industry,
            "preferredJobType": self.preferred_job_type,
            "preferredLocation": self.preferred_location,
            "expectedSalary": self.expected_salary,
            "certifications": list(self.certifications),
            "portfolio": self.portfolio,
        }


@dataclass(frozen=True)
class JobPosting:
    id: str
    title: str
    company: str
    description: str
    industry: str
    tags: tuple[str, ...]
    required_skills: tuple[str, ...]
    preferred_skills: tuple[str, ...]
    experience_level: ExperienceTier
    education_level: EducationTier
    salary_min: int
    salary_max: int
    location: str
    work_mode: WorkMode
    job_type: str
    status: str

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    @property
    def all_skills(self) -> tuple[str, ...]:
        return _dedupe(self.required_skills + self.preferred_skills)

    @property
    def searchable_text(self) -> str:
        return " ".join([self.title, self.description, " ".join(self.tags)]).lower()


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------


def _dedupe(values) -> tuple[str, ...]:
    out: list[str] = []
    for value in values:
        if value and value not in out:
            out.append(value)
    return tuple(out)


def normalize_skill_list(value: Any) -> tuple[str, ...]:
    """Lower-case, strip and dedupe a skill list; strings are split on commas."""
    if value is None:
        return ()
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = list(value)
    else:
        return ()
    cleaned = (re.sub(r"\s+", " ", str(item or "")).strip().lower() for item in items)
    return _dedupe(cleaned)


def coerce_salary(value: Any) -> int:
    """Non-negative integer salary; anything non-numeric is 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return max(0, int(value))
    match = _LEADING_NUMBER.match(str(value))
    if not match:
        return 0
    try:
        return max(0, int(float(match.group(1).replace(",", ""))))
    except ValueError:
        return 0


def _clean_text(value: Any, default: str = "") -> str:
    text = re.sub(r"\s+", " ", str(value or "")).strip()
    return text or default


def _contains_term(text: str, term: str) -> bool:
    return re.search(r"(?<![a-z0-9])" + re.escape(term) + r"(?![a-z0-9])", text) is not None


def _years_to_tier(years: float) -> ExperienceTier:
    for upper_bound, tier in EXPERIENCE_YEAR_BOUNDS:
        if years < upper_bound:
            return tier
    return ExperienceTier.EXECUTIVE


def normalize_experience_tier(value: Any, default: ExperienceTier = DEFAULT_EXPERIENCE_TIER) -> ExperienceTier:
    if isinstance(value, ExperienceTier):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _years_to_tier(float(value))
    text = _clean_text(value).lower()
    if not text:
        return default
    number = _LEADING_NUMBER.match(text)
    if number:
        try:
            return _years_to_tier(float(number.group(1).replace(",", "")))
        except ValueError:
            return default
    for tier in EXPERIENCE_ORDER:
        if any(_contains_term(text, term) for term in EXPERIENCE_SYNONYMS[tier]):
            return tier
    return default


def normalize_education_tier(value: Any, default: EducationTier = DEFAULT_EDUCATION_TIER) -> EducationTier:
    if isinstance(value, EducationTier):
        return value
    text = _clean_text(value).lower()
    if not text:
        return default
    for tier in EDUCATION_ORDER:
        if any(_contains_term(text, term) for term in EDUCATION_SYNONYMS[tier]):
            return tier
    return default


def normalize_work_mode(value: Any) -> WorkMode:
    text = _clean_text(value).lower()
    if "remote" in text:
        return WorkMode.REMOTE
    if "hybrid" in text:
        return WorkMode.HYBRID
    return WorkMode.ON_SITE


def _normalize_status(value: Any) -> str:
    text = _clean_text(value, "active").lower()
    return "active" if text == "active" else "closed"


# ---------------------------------------------------------------------------
# Public normalizers
# ---------------------------------------------------------------------------


def normalize_user_profile(raw: Any) -> UserProfile:
    skills = normalize_skill_list(read_field(raw, "skills"))
    if not skills:
        skills = normalize_skill_list(read_field(raw, "tags"))
    return UserProfile(
        skills=skills,
        desired_title=_clean_text(
            read_field(raw, "desired_job_title", "desiredJobTitle", "desired_title"),
            DEFAULT_DESIRED_TITLE,
        ),
        current_title=_clean_text(read_field(raw, "current_job_title", "currentJobTitle", "current_title")),
        experience_tier=normalize_experience_tier(
            read_field(raw, "years_of_experience", "yearsOfExperience", "experience_tier")
        ),
        education_tier=normalize_education_tier(read_field(raw, "education", "education_tier")),
        industry=_clean_text(read_field(raw, "industry"), DEFAULT_INDUSTRY),
        preferred_job_type=_clean_text(
            read_field(raw, "preferred_job_type", "preferredJobType"), DEFAULT_JOB_TYPE
        ).lower(),
        preferred_location=_clean_text(
            read_field(raw, "preferred_location", "preferredLocation"), DEFAULT_LOCATION
        ),
        expected_salary=coerce_salary(read_field(raw, "expected_salary", "expectedSalary")),
        certifications=normalize_skill_list(read_field(raw, "certifications")),
        portfolio=_clean_text(read_field(raw, "portfolio")),
    )


def normalize_job_posting(raw: Any) -> JobPosting:
    salary_min = coerce_salary(read_field(raw, "salary_min", "salaryMin"))
    salary_max = coerce_salary(read_field(raw, "salary_max", "salaryMax"))
    if salary_min > salary_max:
        if salary_max:
            salary_min, salary_max = salary_max, salary_min
        else:
            # Only a floor was posted.
            salary_max = salary_min
    job_id = read_field(raw, "id", "_id", "jobId")
    return JobPosting(
        id=str(job_id) if job_id is not None else "",
        title=_clean_text(read_field(raw, "title"), "Untitled"),
        company=_clean_text(read_field(raw, "company"), "Unknown"),
        description=_clean_text(read_field(raw, "description")),
        industry=_clean_text(read_field(raw, "industry"), "General"),
        tags=normalize_skill_list(read_field(raw, "tags")),
        required_skills=normalize_skill_list(read_field(raw, "required_skills", "requiredSkills")),
        preferred_skills=normalize_skill_list(read_field(raw, "preferred_skills", "preferredSkills")),
        experience_level=normalize_experience_tier(read_field(raw, "experience_level", "experienceLevel")),
        education_level=normalize_education_tier(read_field(raw, "education_level", "educationLevel")),
        salary_min=salary_min,
        salary_max=salary_max,
        location=_clean_text(read_field(raw, "location")),
        work_mode=normalize_work_mode(read_field(raw, "work_mode", "workMode")),
        job_type=_clean_text(read_field(raw, "job_type", "jobType"), DEFAULT_JOB_TYPE).lower(),
        status=_normalize_status(read_field(raw, "status")),
    )


def contains_term(text: str, term: str) -> bool:
    """Whole-token (or whole-phrase) containment on lower-cased text."""
    return _contains_term(text, term)
