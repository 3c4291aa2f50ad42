"""Prompt construction for remote matching providers."""

from __future__ import annotations

from typing import Sequence

from .profile import JobPosting, UserProfile

MATCHING_SYSTEM_PROMPT = (
    "You are an expert job matching AI. Analyze user profiles and jobs, then return ONLY a "
    "valid JSON object with matched jobs. Include match scores (60-95), detailed reasons, "
    "strengths, and improvements."
)

_DESCRIPTION_PREVIEW_CHARS = 200

MATCHING_PROMPT = """TASK: Match user with suitable jobs. Return ONLY valid JSON.

USER PROFILE:
- Desired Job: {desired_title}
- Current Job: {current_title}
- Skills: {skills}
- Experience: {experience}
- Education: {education}
- Industry: {industry}
- Job Type: {job_type}
- Location: {location}
- Expected Salary: ${expected_salary}/month
- Certifications: {certifications}

AVAILABLE JOBS ({job_count}):
{job_blocks}

RETURN THIS EXACT JSON FORMAT:
{{
    "matchedJobs": [
        {{
            "jobId": "job_id_here",
            "matchScore": 85,
            "reasons": ["Specific reason 1", "Specific reason 2"],
            "strengths": ["Strength 1", "Strength 2"],
            "improvements": ["Improvement 1"],
            "fitAnalysis": {{
                "skills": 90,
                "experience": 85,
                "education": 75,
                "salary": 80,
                "location": 95,
                "culture": 70
            }},
            "recommendation": "Highly recommended"
        }}
    ]
}}

RULES:
- Only include jobs with matchScore >= {min_score}
- matchScore: {min_score}-95
- Provide 2-4 specific reasons
- Maximum {max_results} jobs
- Use the exact job IDs listed above
- Return ONLY valid JSON
"""

JOB_BLOCK = """JOB {index}:
- ID: {id}
- Title: {title}
- Company: {company}
- Industry: {industry}
- Type: {job_type}
- Work Mode: {work_mode}
- Location: {location}
- Experience: {experience}
- Education: {education}
- Salary: ${salary_min} - ${salary_max}
- Required Skills: {required_skills}
- Preferred Skills: {preferred_skills}
- Description: {description}
"""


def _join_or(values: Sequence[str], fallback: str) -> str:
    return ", ".join(values) if values else fallback


def _description_preview(text: str) -> str:
    if len(text) <= _DESCRIPTION_PREVIEW_CHARS:
        return text
    return text[:_DESCRIPTION_PREVIEW_CHARS] + "..."


def build_matching_prompt(
    profile: UserProfile,
    jobs: Sequence[JobPosting],
    *,
    min_score: int,
    max_results: int,
) -> str:
    job_blocks = "\n".join(
        JOB_BLOCK.format(
            index=index,
            id=job.id,
            title=job.title,
            company=job.company,
            industry=job.industry,
            job_type=job.job_type,
            work_mode=job.work_mode.value,
            location=job.location or "Not specified",
            experience=job.experience_level.value,
            education=job.education_level.value,
            salary_min=job.salary_min,
            salary_max=job.salary_max,
            required_skills=_join_or(job.required_skills, "None"),
            preferred_skills=_join_or(job.preferred_skills, "None"),
            description=_description_preview(job.description),
        )
        for index, job in enumerate(jobs, start=1)
    )
    return MATCHING_PROMPT.format(
        desired_title=profile.desired_title or "Not specified",
        current_title=profile.current_title or "Not specified",
        skills=_join_or(profile.skills, "None"),
        experience=profile.experience_tier.value,
        education=profile.education_tier.value,
        industry=profile.industry,
        job_type=profile.preferred_job_type,
        location=profile.preferred_location,
        expected_salary=profile.expected_salary,
        certifications=_join_or(profile.certifications, "None"),
        job_count=len(jobs),
        job_blocks=job_blocks,
        min_score=min_score,
        max_results=max_results,
    )
