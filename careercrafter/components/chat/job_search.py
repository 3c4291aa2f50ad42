"""Skill-keyword job search used by the assistant's job_search intent."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Sequence

from sqlalchemy.orm import Session

from ...models.job import Job
from ..matching.profile import normalize_skill_list
from .rules import (
    DEFAULT_SEARCH_SKILLS,
    FREE_MESSAGES_FOOTER,
    JOB_SEARCH_LIMIT,
    JOB_SEARCH_PREVIEW,
    NO_JOBS_REPLY,
    SKILL_PATTERNS,
)

logger = logging.getLogger("careercrafter.chat.job_search")


def extract_search_skills(message: str | None) -> List[str]:
    lower = (message or "").lower()
    skills = [
        skill for skill, patterns in SKILL_PATTERNS.items()
        if any(pattern in lower for pattern in patterns)
    ]
    return skills or list(DEFAULT_SEARCH_SKILLS)


def _job_matches(job: Job, skills: Sequence[str], text_pattern: re.Pattern) -> bool:
    job_skills = set(normalize_skill_list(job.required_skills)) | set(normalize_skill_list(job.preferred_skills))
    if job_skills.intersection(skills):
        return True
    return bool(text_pattern.search(job.title or "") or text_pattern.search(job.description or ""))


def _summarize_job(job: Job) -> Dict[str, Any]:
    required = list(normalize_skill_list(job.required_skills))
    return {
        "id": job.id,
        "title": job.title,
        "company": job.company,
        "salary": f"${job.salary_min}-{job.salary_max}" if job.salary_min else "Competitive",
        "location": job.location or "Remote",
        "type": job.job_type or "Full-time",
        "skills": ", ".join(required[:3]) if required else "React, JavaScript",
        "link": f"/job/{job.id}",
        "applyLink": f"/job/{job.id}/apply",
    }


def search_jobs(db: Session, message: str, limit: int = JOB_SEARCH_LIMIT) -> List[Dict[str, Any]]:
    """Newest active jobs matching any extracted skill by skill list, title or description."""
    skills = extract_search_skills(message)
    text_pattern = re.compile("|".join(re.escape(skill) for skill in skills), re.IGNORECASE)
    candidates = (
        db.query(Job)
        .filter(Job.status == "active")
        .order_by(Job.created_at.desc(), Job.id.desc())
        .all()
    )
    found: List[Dict[str, Any]] = []
    for job in candidates:
        if _job_matches(job, skills, text_pattern):
            found.append(_summarize_job(job))
            if len(found) >= limit:
                break
    logger.info("Assistant job search skills=%s found=%d", skills, len(found))
    return found


def _format_job(job: Dict[str, Any]) -> str:
    return (
        f"**{job['title']}** at {job['company']}\n"
        f"  💰 {job['salary']} | 📍 {job['location']}\n"
        f"  🔧 Skills: {job['skills']}\n"
        f"  🔗 [View Job]({job['link']}) | [Apply]({job['applyLink']})"
    )


def format_job_search_reply(jobs: Sequence[Dict[str, Any]], skills: Sequence[str]) -> str:
    if not jobs:
        label = " ".join(skill for skill in skills if skill != "developer") or "developer"
        return NO_JOBS_REPLY.format(search_label=f"{label} developer")

    listing = "\n\n".join(_format_job(job) for job in jobs[:JOB_SEARCH_PREVIEW])
    plural = "s" if len(jobs) > 1 else ""
    reply = f"Great! 🎯 I found **{len(jobs)} matching position{plural}** for you:\n\n{listing}"
    if len(jobs) > JOB_SEARCH_PREVIEW:
        reply += f"\n\n...and {len(jobs) - JOB_SEARCH_PREVIEW} more! [View All Jobs](/jobs)"
    reply += "\n\nWant help with your application or need to refine the search?"
    return reply


def free_messages_footer(remaining: int) -> str:
    return FREE_MESSAGES_FOOTER.format(remaining=max(0, remaining))
