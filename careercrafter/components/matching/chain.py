"""Ordered chain of remote matching providers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ...platform.config import Settings, settings as default_settings
from ..integrations.claude.client import ClaudeClient
from ..integrations.groq.client import GroqClient
from .profile import JobPosting, UserProfile
from .providers import (
    ClaudeMatchingProvider,
    GroqMatchingProvider,
    MatchingProvider,
    ProviderResult,
)
from .schemas import MatchResult

logger = logging.getLogger("careercrafter.matching.chain")


@dataclass(frozen=True)
class ChainOutcome:
    matches: List[MatchResult] = field(default_factory=list)
    provider: Optional[str] = None
    attempts: List[ProviderResult] = field(default_factory=list)

    @property
    def exhausted(self) -> bool:
        return self.provider is None


class MatchingProviderChain:
    """Try providers one at a time; the first non-empty success wins."""

    def __init__(self, providers: Sequence[MatchingProvider]):
        self.providers = list(providers)

    @property
    def provider_names(self) -> List[str]:
        return [provider.name for provider in self.providers]

    def run(self, profile: UserProfile, jobs: Sequence[JobPosting]) -> ChainOutcome:
        attempts: List[ProviderResult] = []
        for provider in self.providers:
            try:
                result = provider.attempt_match(profile, jobs)
            except Exception as exc:
                result = ProviderResult.failure(provider.name, f"{type(exc).__name__}: {exc}")
            attempts.append(result)

            if not result.ok:
                logger.warning("Matching provider %s failed: %s", result.provider, result.error)
                continue
            if not result.matches:
                logger.info("Matching provider %s returned no qualifying matches", result.provider)
                continue
            logger.info(
                "Matching provider %s returned %d matches",
                result.provider,
                len(result.matches),
            )
            return ChainOutcome(matches=result.matches, provider=result.provider, attempts=attempts)

        if self.providers:
            logger.warning("All %d matching providers exhausted", len(self.providers))
        return ChainOutcome(attempts=attempts)


def build_default_chain(config: Settings | None = None) -> MatchingProviderChain:
    """Build providers from settings, skipping families with no API key."""
    config = config or default_settings
    limits = config.matching_limits
    providers: List[MatchingProvider] = []

    for family in config.match_provider_order:
        if family == "groq":
            if not config.groq_configured:
                logger.info("GROQ_API_KEY not configured; skipping Groq matching providers")
                continue
            client = GroqClient(
                api_key=config.GROQ_API_KEY,
                base_url=config.GROQ_API_BASE_URL,
                timeout=config.MATCH_PROVIDER_TIMEOUT_SECONDS,
            )
            for model in config.groq_match_models:
                providers.append(
                    GroqMatchingProvider(
                        client,
                        model,
                        limits=limits,
                        max_tokens=config.MATCH_PROVIDER_MAX_TOKENS,
                    )
                )
        elif family == "claude":
            if not config.claude_configured:
                logger.info("ANTHROPIC_API_KEY not configured; skipping Claude matching provider")
                continue
            client = ClaudeClient(
                api_key=config.ANTHROPIC_API_KEY,
                model=config.resolved_claude_model,
                timeout=config.MATCH_PROVIDER_TIMEOUT_SECONDS,
            )
            providers.append(
                ClaudeMatchingProvider(
                    client,
                    limits=limits,
                    max_tokens=config.MATCH_PROVIDER_MAX_TOKENS,
                )
            )
        else:
            logger.warning("Unknown matching provider family %r in MATCH_PROVIDER_ORDER", family)

    return MatchingProviderChain(providers)
