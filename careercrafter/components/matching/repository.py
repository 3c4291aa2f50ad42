"""Job and match-run persistence for the matching component."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from ...models.job import Job
from ...models.match_run import MatchRun
from ...platform.errors import PersistenceError
from ...shared.utils import isoformat_or_none

logger = logging.getLogger("careercrafter.matching.repository")


def list_active_jobs(db: Session) -> List[Job]:
    return db.query(Job).filter(Job.status == "active").order_by(Job.id.asc()).all()


def save_match_run(
    db: Session,
    *,
    user_id: int,
    user_profile: Dict[str, Any],
    matched_jobs: List[Dict[str, Any]],
    algorithm: str,
    provider: str | None = None,
) -> MatchRun:
    run = MatchRun(
        user_id=user_id,
        user_profile=user_profile,
        matched_jobs=matched_jobs,
        total_matches=len(matched_jobs),
        algorithm=algorithm,
        provider=provider,
    )
    db.add(run)
    try:
        db.commit()
    except Exception as exc:
        db.rollback()
        logger.error("Failed to save match run for user_id=%s: %s", user_id, exc)
        raise PersistenceError("Failed to save match results") from exc
    db.refresh(run)
    return run


def list_match_runs(db: Session, user_id: int, limit: int = 10) -> List[MatchRun]:
    return (
        db.query(MatchRun)
        .filter(MatchRun.user_id == user_id)
        .order_by(MatchRun.match_date.desc(), MatchRun.id.desc())
        .limit(max(1, int(limit)))
        .all()
    )


def get_match_run(db: Session, match_id: int | str | None) -> MatchRun | None:
    try:
        resolved = int(str(match_id).strip())
    except (TypeError, ValueError):
        return None
    return db.query(MatchRun).filter(MatchRun.id == resolved).first()


def serialize_match_run(run: MatchRun) -> Dict[str, Any]:
    return {
        "id": run.id,
        "userId": run.user_id,
        "userProfile": run.user_profile or {},
        "matchedJobs": run.matched_jobs or [],
        "totalMatches": run.total_matches,
        "algorithm": run.algorithm,
        "provider": run.provider,
        "matchDate": isoformat_or_none(run.match_date),
    }
