"""Match orchestration: provider chain first, deterministic scorer as fallback."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.orm import Session

from ...models.match_run import MatchRun
from ...platform.config import MatchingLimits, settings
from ...platform.errors import NotFoundError, ValidationError
from ...services.user_store import get_user_by_id
from .chain import MatchingProviderChain
from .profile import normalize_job_posting, normalize_user_profile
from .repository import get_match_run, list_active_jobs, list_match_runs, save_match_run
from .rules import MatchAlgorithm
from .schemas import MatchResult
from .scoring_core import rank_matches

logger = logging.getLogger("careercrafter.matching")


@dataclass(frozen=True)
class MatchRunResult:
    run: MatchRun
    matches: List[MatchResult]
    algorithm: MatchAlgorithm
    provider: Optional[str] = None

    def to_payload(self) -> dict:
        return {
            "matches": [match.to_payload() for match in self.matches],
            "totalMatches": len(self.matches),
            "matchId": self.run.id,
            "algorithm": self.algorithm.value,
        }


class MatchService:
    def __init__(
        self,
        db: Session,
        chain: MatchingProviderChain,
        limits: MatchingLimits | None = None,
    ):
        self.db = db
        self.chain = chain
        self.limits = limits or settings.matching_limits

    def run_match(self, user_id: int | str | None) -> MatchRunResult:
        if user_id is None or (isinstance(user_id, str) and not user_id.strip()):
            raise ValidationError("User ID is required")
        user = get_user_by_id(self.db, user_id)
        if not user:
            raise NotFoundError("User not found")

        profile = normalize_user_profile(user)
        jobs = [normalize_job_posting(job) for job in list_active_jobs(self.db)]
        jobs = [job for job in jobs if job.is_active]

        outcome = self.chain.run(profile, jobs)
        if outcome.exhausted:
            matches = rank_matches(profile, jobs, self.limits)
            algorithm = MatchAlgorithm.BASIC_FALLBACK
        else:
            matches = outcome.matches
            algorithm = MatchAlgorithm.PROVIDER_ENHANCED

        run = save_match_run(
            self.db,
            user_id=user.id,
            user_profile=profile.to_dict(),
            matched_jobs=[match.to_payload() for match in matches],
            algorithm=algorithm.value,
            provider=outcome.provider,
        )
        logger.info(
            "Match run id=%s user_id=%s jobs=%d matches=%d algorithm=%s provider=%s",
            run.id,
            user.id,
            len(jobs),
            len(matches),
            algorithm.value,
            outcome.provider,
        )
        return MatchRunResult(run=run, matches=matches, algorithm=algorithm, provider=outcome.provider)

    def match_history(self, user_id: int | str, limit: int = 10) -> List[MatchRun]:
        try:
            resolved = int(str(user_id).strip())
        except (TypeError, ValueError):
            raise NotFoundError("User not found")
        return list_match_runs(self.db, resolved, limit)

    def get_run(self, match_id: int | str) -> MatchRun:
        run = get_match_run(self.db, match_id)
        if not run:
            raise NotFoundError("Match not found")
        return run
