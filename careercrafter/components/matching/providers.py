"""Remote matching providers.

Every provider exposes ``attempt_match(profile, jobs) -> ProviderResult``.
Failures come back as a ``ProviderResult`` with ``error`` set; nothing a
provider does is allowed to raise into the chain.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol, Sequence

from ...platform.config import MatchingLimits, settings
from ...platform.errors import ProviderError
from ...shared.utils import safe_string_list
from ..integrations.claude.client import ClaudeClient
from ..integrations.groq.client import GroqClient
from .profile import JobPosting, UserProfile
from .prompts import MATCHING_SYSTEM_PROMPT, build_matching_prompt
from .rules import MAX_IMPROVEMENTS, MAX_REASONS, MAX_STRENGTHS, recommendation_for
from .schemas import FitAnalysis, MatchResult
from .scoring_core import select_top_matches

logger = logging.getLogger("careercrafter.matching.providers")

_FIT_KEYS = ("skills", "experience", "education", "salary", "location", "culture")


@dataclass(frozen=True)
class ProviderResult:
    provider: str
    matches: List[MatchResult] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, provider: str, matches: List[MatchResult]) -> "ProviderResult":
        return cls(provider=provider, matches=list(matches))

    @classmethod
    def failure(cls, provider: str, error: str) -> "ProviderResult":
        return cls(provider=provider, error=error)


class MatchingProvider(Protocol):
    name: str

    def attempt_match(self, profile: UserProfile, jobs: Sequence[JobPosting]) -> ProviderResult:
        ...


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------


def _score_0_100(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return None
    return int(round(max(0.0, min(100.0, numeric))))


def _load_json_object(provider: str, raw_text: str) -> dict:
    try:
        payload = json.loads(raw_text)
    except (TypeError, json.JSONDecodeError):
        json_match = re.search(r"\{[\s\S]*\}", raw_text or "")
        if not json_match:
            raise ProviderError(provider, "Provider returned non-JSON content")
        try:
            payload = json.loads(json_match.group())
        except json.JSONDecodeError as exc:
            raise ProviderError(provider, f"Invalid JSON response: {exc}") from exc
    if not isinstance(payload, dict):
        raise ProviderError(provider, "Provider response was not a JSON object")
    return payload


def _parse_match_item(item: Any, known_job_ids: set[str]) -> MatchResult | None:
    if not isinstance(item, dict):
        return None
    job_id = str(item.get("jobId") or item.get("job_id") or "").strip()
    if not job_id or job_id not in known_job_ids:
        return None
    score = _score_0_100(item.get("matchScore", item.get("match_score")))
    if score is None:
        return None
    raw_fit = item.get("fitAnalysis") or item.get("fit_analysis") or {}
    if not isinstance(raw_fit, dict):
        raw_fit = {}
    fit = {key: _score_0_100(raw_fit.get(key)) or 0 for key in _FIT_KEYS}
    return MatchResult(
        job_id=job_id,
        match_score=score,
        reasons=safe_string_list(item.get("reasons"), max_items=MAX_REASONS, max_chars=240),
        strengths=safe_string_list(item.get("strengths"), max_items=MAX_STRENGTHS, max_chars=200),
        improvements=safe_string_list(item.get("improvements"), max_items=MAX_IMPROVEMENTS, max_chars=200),
        fit_analysis=FitAnalysis(**fit),
        recommendation=recommendation_for(score),
    )


def parse_provider_matches(
    provider: str,
    raw_text: str,
    jobs: Sequence[JobPosting],
    limits: MatchingLimits,
) -> List[MatchResult]:
    """Parse a ``{"matchedJobs": [...]}`` answer into retained MatchResults.

    Raises ProviderError when the envelope is malformed. Individual items
    with unknown job ids or no numeric score are dropped.
    """
    payload = _load_json_object(provider, raw_text)
    matched = payload.get("matchedJobs", payload.get("matched_jobs"))
    if not isinstance(matched, list):
        raise ProviderError(provider, "Provider response is missing the matchedJobs list")

    known_job_ids = {job.id for job in jobs}
    parsed: List[MatchResult] = []
    seen: set[str] = set()
    for item in matched:
        result = _parse_match_item(item, known_job_ids)
        if result is None or result.job_id in seen:
            continue
        seen.add(result.job_id)
        parsed.append(result)
    dropped = len(matched) - len(parsed)
    if dropped:
        logger.info("Dropped %d unusable match items from %s", dropped, provider)
    return select_top_matches(parsed, limits)


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------


class _PromptedProvider:
    name = "prompted"

    def __init__(self, *, limits: MatchingLimits | None = None, max_tokens: int | None = None):
        self.limits = limits or settings.matching_limits
        self.max_tokens = max_tokens or settings.MATCH_PROVIDER_MAX_TOKENS

    def _complete(self, prompt: str) -> str:
        raise NotImplementedError

    def attempt_match(self, profile: UserProfile, jobs: Sequence[JobPosting]) -> ProviderResult:
        candidates = list(jobs)[: self.limits.provider_candidates]
        if not candidates:
            return ProviderResult.failure(self.name, "No candidate jobs to match")
        prompt = build_matching_prompt(
            profile,
            candidates,
            min_score=self.limits.min_score,
            max_results=self.limits.max_results,
        )
        try:
            raw_text = self._complete(prompt)
            matches = parse_provider_matches(self.name, raw_text, candidates, self.limits)
        except ProviderError as exc:
            return ProviderResult.failure(self.name, exc.detail)
        except Exception as exc:
            return ProviderResult.failure(self.name, f"{type(exc).__name__}: {exc}")
        return ProviderResult.success(self.name, matches)


class GroqMatchingProvider(_PromptedProvider):
    def __init__(self, client: GroqClient, model: str, **kwargs):
        super().__init__(**kwargs)
        self.client = client
        self.model = model
        self.name = f"groq:{model}"

    def _complete(self, prompt: str) -> str:
        return self.client.chat_completion(
            model=self.model,
            messages=[
                {"role": "system", "content": MATCHING_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=0.3,
            max_tokens=self.max_tokens,
            json_response=True,
        )


class ClaudeMatchingProvider(_PromptedProvider):
    def __init__(self, client: ClaudeClient, **kwargs):
        super().__init__(**kwargs)
        self.client = client
        self.name = f"claude:{client.model}"

    def _complete(self, prompt: str) -> str:
        return self.client.complete(
            system=MATCHING_SYSTEM_PROMPT + " Respond ONLY with valid JSON.",
            messages=[{"role": "user", "content": prompt}],
            max_tokens=self.max_tokens,
            temperature=0.3,
        )
