"""Deterministic compatibility scorer (basic-fallback algorithm).

Pure functions over normalized profiles; no I/O, always available. The
category rules must stay stable because stored match runs were produced by
them.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Tuple

from ...platform.config import MatchingLimits, settings
from .profile import JobPosting, UserProfile, contains_term
from .rules import (
    CATEGORY_WEIGHTS,
    DEFAULT_IMPROVEMENT,
    DEFAULT_REASON,
    DEFAULT_STRENGTH,
    EDUCATION_BELOW_SCORE,
    EDUCATION_MEETS_SCORE,
    EDUCATION_ORDER,
    EXPERIENCE_FAR_BELOW_SCORE,
    EXPERIENCE_MEETS_SCORE,
    EXPERIENCE_ONE_BELOW_SCORE,
    EXPERIENCE_ORDER,
    GROWTH_CREDIT,
    GROWTH_WEIGHT,
    JOB_TYPE_DEFAULT_SCORE,
    JOB_TYPE_EXACT_SCORE,
    JOB_TYPE_FULL_TIME_SCORE,
    LOCATION_DEFAULT_SCORE,
    LOCATION_FLEXIBLE_SCORE,
    LOCATION_REMOTE_MATCH_SCORE,
    LOCATION_SAME_CITY_SCORE,
    MAX_IMPROVEMENTS,
    MAX_REASONS,
    MAX_STRENGTHS,
    NEUTRAL_SKILLS_SCORE,
    SALARY_ABOVE_MAX_SCORE,
    SALARY_BELOW_MIN_SCORE,
    SALARY_IN_RANGE_SCORE,
    SALARY_OUT_OF_RANGE_SCORE,
    SALARY_TOLERANCE,
    SALARY_UNKNOWN_SCORE,
    SCORE_CAP,
    STRENGTH_PHRASES,
    STRENGTH_THRESHOLD,
    WorkMode,
    recommendation_for,
)
from .schemas import FitAnalysis, MatchResult

logger = logging.getLogger("careercrafter.matching.scorer")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# ---------------------------------------------------------------------------
# Category scores. Each returns (score_0_100, reasons, improvements).
# ---------------------------------------------------------------------------


def _score_skills(profile: UserProfile, job: JobPosting) -> Tuple[float, List[str], List[str]]:
    reasons: List[str] = []
    improvements: List[str] = []
    job_skills = set(job.all_skills)
    job_text = job.searchable_text

    user_skills = profile.skills
    matched = [
        skill for skill in user_skills
        if skill in job_skills or contains_term(job_text, skill)
    ]
    if user_skills:
        score = (len(matched) / len(user_skills)) * 100.0
    else:
        score = float(NEUTRAL_SKILLS_SCORE)
    if matched:
        reasons.append(f"{len(matched)}/{len(user_skills)} skills matched")

    missing_required = [skill for skill in job.required_skills if skill not in user_skills]
    if missing_required:
        improvements.append(f"Build skills in: {', '.join(missing_required[:3])}")
    return score, reasons, improvements


def _score_experience(profile: UserProfile, job: JobPosting) -> Tuple[float, List[str], List[str]]:
    user_index = EXPERIENCE_ORDER.index(profile.experience_tier)
    job_index = EXPERIENCE_ORDER.index(job.experience_level)
    if user_index >= job_index:
        return float(EXPERIENCE_MEETS_SCORE), ["Experience level meets requirements"], []
    if user_index == job_index - 1:
        return float(EXPERIENCE_ONE_BELOW_SCORE), [], ["Gain more experience"]
    return float(EXPERIENCE_FAR_BELOW_SCORE), [], ["Build more experience in this field"]


def _score_education(profile: UserProfile, job: JobPosting) -> Tuple[float, List[str], List[str]]:
    user_index = EDUCATION_ORDER.index(profile.education_tier)
    job_index = EDUCATION_ORDER.index(job.education_level)
    if user_index >= job_index:
        return float(EDUCATION_MEETS_SCORE), [], []
    return float(EDUCATION_BELOW_SCORE), [], []


def _score_salary(profile: UserProfile, job: JobPosting) -> Tuple[float, List[str], List[str]]:
    expected = profile.expected_salary
    low, high = job.salary_min, job.salary_max
    if expected <= 0 or high <= 0:
        return float(SALARY_UNKNOWN_SCORE), [], []
    if low <= expected <= high:
        return float(SALARY_IN_RANGE_SCORE), ["Salary perfectly matched"], []
    if high < expected <= high * (1 + SALARY_TOLERANCE):
        return float(SALARY_ABOVE_MAX_SCORE), ["Salary negotiable"], []
    if low * (1 - SALARY_TOLERANCE) <= expected < low:
        return float(SALARY_BELOW_MIN_SCORE), [], []
    return float(SALARY_OUT_OF_RANGE_SCORE), [], []


def _score_location(profile: UserProfile, job: JobPosting) -> Tuple[float, List[str], List[str]]:
    user_location = profile.preferred_location.lower()
    job_location = job.location.lower()
    if "remote" in user_location and job.work_mode == WorkMode.REMOTE:
        return float(LOCATION_REMOTE_MATCH_SCORE), ["Remote work matched"], []
    if job.work_mode in (WorkMode.REMOTE, WorkMode.HYBRID):
        return float(LOCATION_FLEXIBLE_SCORE), ["Flexible work available"], []
    if user_location and user_location in job_location:
        return float(LOCATION_SAME_CITY_SCORE), ["Location matched"], []
    return float(LOCATION_DEFAULT_SCORE), [], []


def _score_culture(profile: UserProfile, job: JobPosting) -> Tuple[float, List[str], List[str]]:
    user_type = profile.preferred_job_type
    job_type = job.job_type
    if user_type == job_type:
        return float(JOB_TYPE_EXACT_SCORE), [], []
    if "full-time" in user_type and "full-time" in job_type:
        return float(JOB_TYPE_FULL_TIME_SCORE), [], []
    return float(JOB_TYPE_DEFAULT_SCORE), [], []


_CATEGORY_SCORERS = [
    ("skills", _score_skills),
    ("experience", _score_experience),
    ("education", _score_education),
    ("salary", _score_salary),
    ("location", _score_location),
    ("culture", _score_culture),
]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def score_match(profile: UserProfile, job: JobPosting) -> MatchResult:
    """Score one (user, job) pair. Returns the result regardless of threshold."""
    total = 0.0
    reasons: List[str] = []
    improvements: List[str] = []
    fit: dict[str, int] = {}

    for category, scorer in _CATEGORY_SCORERS:
        score, category_reasons, category_improvements = scorer(profile, job)
        fit[category] = _round_half_up(score)
        total += score * CATEGORY_WEIGHTS[category]
        reasons.extend(category_reasons)
        improvements.extend(category_improvements)

    total += GROWTH_CREDIT * GROWTH_WEIGHT
    final_score = max(0, min(_round_half_up(total), SCORE_CAP))

    strengths = [phrase for category, phrase in STRENGTH_PHRASES if fit[category] >= STRENGTH_THRESHOLD]

    return MatchResult(
        job_id=job.id,
        match_score=final_score,
        reasons=(reasons or [DEFAULT_REASON])[:MAX_REASONS],
        strengths=(strengths or [DEFAULT_STRENGTH])[:MAX_STRENGTHS],
        improvements=(improvements or [DEFAULT_IMPROVEMENT])[:MAX_IMPROVEMENTS],
        fit_analysis=FitAnalysis(**fit),
        recommendation=recommendation_for(final_score),
    )


def select_top_matches(results: Iterable[MatchResult], limits: MatchingLimits) -> List[MatchResult]:
    """Apply the retention rule: score >= min, sorted descending, capped."""
    retained = [result for result in results if result.match_score >= limits.min_score]
    retained.sort(key=lambda result: result.match_score, reverse=True)
    return retained[: limits.max_results]


def rank_matches(
    profile: UserProfile,
    jobs: Iterable[JobPosting],
    limits: MatchingLimits | None = None,
) -> List[MatchResult]:
    """Score the candidate pool and keep the best matches.

    Only the first ``fallback_candidates`` jobs are scored. A job whose record
    makes scoring fail is logged and skipped.
    """
    limits = limits or settings.matching_limits
    results: List[MatchResult] = []
    for job in list(jobs)[: limits.fallback_candidates]:
        try:
            results.append(score_match(profile, job))
        except Exception as exc:
            logger.warning("Skipping job %s during basic matching: %s", getattr(job, "id", "?"), exc)
    return select_top_matches(results, limits)
