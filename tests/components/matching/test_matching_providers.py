from __future__ import annotations

import json
import sys
from types import SimpleNamespace

import httpx
import pytest

from careercrafter.components.integrations.claude.client import ClaudeClient
from careercrafter.components.integrations.groq.client import GroqClient
from careercrafter.components.matching.chain import MatchingProviderChain, build_default_chain
from careercrafter.components.matching.profile import normalize_job_posting, normalize_user_profile
from careercrafter.components.matching.providers import (
    ClaudeMatchingProvider,
    GroqMatchingProvider,
    ProviderResult,
    parse_provider_matches,
)
from careercrafter.components.matching.rules import Recommendation
from careercrafter.components.matching.schemas import FitAnalysis, MatchResult
from careercrafter.platform.config import MatchingLimits, Settings
from careercrafter.platform.errors import ProviderError

LIMITS = MatchingLimits(provider_candidates=20, fallback_candidates=50, max_results=10, min_score=60)
PROFILE = normalize_user_profile({"skills": ["react"], "expected_salary": 5000})
JOBS = [
    normalize_job_posting({"id": 1, "title": "React Developer", "required_skills": ["react"]}),
    normalize_job_posting({"id": 2, "title": "Python Developer", "required_skills": ["python"]}),
]


def _match_item(job_id, score, **extra):
    item = {
        "jobId": job_id,
        "matchScore": score,
        "reasons": ["Strong React background"],
        "strengths": ["Skills"],
        "improvements": ["Learn testing"],
        "fitAnalysis": {"skills": 90, "experience": 80, "education": 70, "salary": 75, "location": 95, "culture": 70},
    }
    item.update(extra)
    return item


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------


def test_parse_keeps_known_jobs_sorted_and_derives_recommendation():
    raw = json.dumps({"matchedJobs": [_match_item("2", 72), _match_item("1", 88)]})
    matches = parse_provider_matches("groq:test", raw, JOBS, LIMITS)

    assert [m.job_id for m in matches] == ["1", "2"]
    assert matches[0].recommendation == Recommendation.HIGHLY_RECOMMENDED
    assert matches[1].recommendation == Recommendation.GOOD_MATCH


def test_parse_drops_unknown_jobs_missing_scores_and_low_scores():
    raw = json.dumps(
        {
            "matchedJobs": [
                _match_item("999", 90),
                _match_item("1", None),
                _match_item("2", 40),
                "not-an-object",
            ]
        }
    )
    assert parse_provider_matches("groq:test", raw, JOBS, LIMITS) == []


def test_parse_clamps_scores_and_caps_lists():
    item = _match_item(
        "1",
        150,
        reasons=["a", "b", "c", "d", "e", "f"],
        fitAnalysis={"skills": 140, "experience": -5},
    )
    matches = parse_provider_matches("groq:test", json.dumps({"matchedJobs": [item]}), JOBS, LIMITS)

    assert matches[0].match_score == 100
    assert len(matches[0].reasons) == 4
    assert matches[0].fit_analysis.skills == 100
    assert matches[0].fit_analysis.experience == 0
    assert matches[0].fit_analysis.culture == 0


def test_parse_extracts_json_wrapped_in_prose():
    raw = "Here are the matches:\n" + json.dumps({"matchedJobs": [_match_item("1", 85)]}) + "\nGood luck!"
    matches = parse_provider_matches("claude:test", raw, JOBS, LIMITS)

    assert [m.job_id for m in matches] == ["1"]


@pytest.mark.parametrize("raw", ["no json here", json.dumps({"results": []}), json.dumps([1, 2])])
def test_parse_rejects_malformed_envelopes(raw):
    with pytest.raises(ProviderError):
        parse_provider_matches("groq:test", raw, JOBS, LIMITS)


# ---------------------------------------------------------------------------
# Groq provider over a mocked transport
# ---------------------------------------------------------------------------


def _groq_client(handler) -> GroqClient:
    return GroqClient(api_key="test-key", timeout=5, transport=httpx.MockTransport(handler))


def test_groq_provider_requests_json_and_parses_matches():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["payload"] = json.loads(request.content)
        captured["auth"] = request.headers.get("Authorization")
        content = json.dumps({"matchedJobs": [_match_item("1", 82)]})
        return httpx.Response(200, json={"choices": [{"message": {"content": content}}], "usage": {}})

    provider = GroqMatchingProvider(_groq_client(handler), "llama-3.3-70b-versatile", limits=LIMITS, max_tokens=4000)
    result = provider.attempt_match(PROFILE, JOBS)

    assert result.ok
    assert result.provider == "groq:llama-3.3-70b-versatile"
    assert [m.job_id for m in result.matches] == ["1"]
    assert captured["auth"] == "Bearer test-key"
    assert captured["payload"]["model"] == "llama-3.3-70b-versatile"
    assert captured["payload"]["response_format"] == {"type": "json_object"}
    assert captured["payload"]["temperature"] == 0.3
    assert captured["payload"]["max_tokens"] == 4000
    assert "React Developer" in captured["payload"]["messages"][1]["content"]


def test_groq_provider_sends_only_the_first_twenty_jobs():
    captured = {}
    jobs = [normalize_job_posting({"id": i, "title": f"Role {i}"}) for i in range(1, 31)]

    def handler(request: httpx.Request) -> httpx.Response:
        captured["prompt"] = json.loads(request.content)["messages"][1]["content"]
        return httpx.Response(200, json={"choices": [{"message": {"content": '{"matchedJobs": []}'}}]})

    provider = GroqMatchingProvider(_groq_client(handler), "m", limits=LIMITS)
    result = provider.attempt_match(PROFILE, jobs)

    assert result.ok and result.matches == []
    assert "AVAILABLE JOBS (20)" in captured["prompt"]
    assert "Role 20" in captured["prompt"]
    assert "Role 21" not in captured["prompt"]


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="upstream exploded"),
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json={"choices": []}),
        httpx.Response(200, json={"choices": [{"message": {"content": "not json at all"}}]}),
    ],
)
def test_groq_provider_failures_become_failed_results(response):
    provider = GroqMatchingProvider(_groq_client(lambda request: response), "m", limits=LIMITS)
    result = provider.attempt_match(PROFILE, JOBS)

    assert not result.ok
    assert result.error


def test_groq_provider_transport_error_is_a_failed_result():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    result = GroqMatchingProvider(_groq_client(handler), "m", limits=LIMITS).attempt_match(PROFILE, JOBS)

    assert not result.ok
    assert "Groq request failed" in result.error


def test_groq_read_timeout_uses_configured_bound_and_chain_moves_on():
    seen_timeouts = []

    def slow_handler(request: httpx.Request) -> httpx.Response:
        seen_timeouts.append(request.extensions["timeout"])
        raise httpx.ReadTimeout("read timed out", request=request)

    def fast_handler(request: httpx.Request) -> httpx.Response:
        content = json.dumps({"matchedJobs": [_match_item("1", 77)]})
        return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})

    slow = GroqMatchingProvider(_groq_client(slow_handler), "slow-model", limits=LIMITS)
    fast = GroqMatchingProvider(_groq_client(fast_handler), "fast-model", limits=LIMITS)

    timed_out = slow.attempt_match(PROFILE, JOBS)
    assert not timed_out.ok
    assert "Groq request failed" in timed_out.error
    assert seen_timeouts[0]["read"] == 5

    outcome = MatchingProviderChain([slow, fast]).run(PROFILE, JOBS)
    assert outcome.provider == "groq:fast-model"
    assert [m.job_id for m in outcome.matches] == ["1"]


# ---------------------------------------------------------------------------
# Claude provider with a fake SDK
# ---------------------------------------------------------------------------


def test_claude_provider_falls_back_to_available_haiku_alias(monkeypatch):
    calls: list[str] = []

    class FakeMessages:
        def create(self, *, model, max_tokens, system, messages, temperature=None):
            calls.append(model)
            if model == "claude-3-5-haiku-latest":
                raise Exception("Error code: 404 - {'type':'error','error':{'type':'not_found_error','message':'model'}}")
            payload = {"matchedJobs": [_match_item("1", 77)]}
            return SimpleNamespace(content=[SimpleNamespace(text=json.dumps(payload))])

    class FakeAnthropic:
        def __init__(self, api_key=None, timeout=None):
            self.messages = FakeMessages()

    monkeypatch.setitem(sys.modules, "anthropic", SimpleNamespace(Anthropic=FakeAnthropic))

    client = ClaudeClient(api_key="test", model="claude-3-5-haiku-latest", timeout=5)
    result = ClaudeMatchingProvider(client, limits=LIMITS).attempt_match(PROFILE, JOBS)

    assert result.ok
    assert calls == ["claude-3-5-haiku-latest", "claude-3-5-haiku-20241022"]
    assert client.last_model_used == "claude-3-5-haiku-20241022"
    assert result.matches[0].match_score == 77


def test_claude_provider_other_errors_fail_without_retrying(monkeypatch):
    calls: list[str] = []

    class FakeMessages:
        def create(self, *, model, **kwargs):
            calls.append(model)
            raise Exception("rate limited")

    class FakeAnthropic:
        def __init__(self, api_key=None, timeout=None):
            self.messages = FakeMessages()

    monkeypatch.setitem(sys.modules, "anthropic", SimpleNamespace(Anthropic=FakeAnthropic))

    client = ClaudeClient(api_key="test", model="claude-3-5-haiku-latest")
    result = ClaudeMatchingProvider(client, limits=LIMITS).attempt_match(PROFILE, JOBS)

    assert not result.ok
    assert "rate limited" in result.error
    assert calls == ["claude-3-5-haiku-latest"]


# ---------------------------------------------------------------------------
# Chain
# ---------------------------------------------------------------------------


def _result(score=80, job_id="1"):
    return MatchResult(
        job_id=job_id,
        match_score=score,
        reasons=["r"],
        fit_analysis=FitAnalysis(),
        recommendation=Recommendation.HIGHLY_RECOMMENDED,
    )


class StubProvider:
    def __init__(self, name, outcome):
        self.name = name
        self.outcome = outcome
        self.calls = 0

    def attempt_match(self, profile, jobs):
        self.calls += 1
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def test_chain_stops_at_first_non_empty_success():
    failing = StubProvider("a", ProviderResult.failure("a", "boom"))
    empty = StubProvider("b", ProviderResult.success("b", []))
    winner = StubProvider("c", ProviderResult.success("c", [_result()]))
    unused = StubProvider("d", ProviderResult.success("d", [_result()]))

    outcome = MatchingProviderChain([failing, empty, winner, unused]).run(PROFILE, JOBS)

    assert not outcome.exhausted
    assert outcome.provider == "c"
    assert len(outcome.attempts) == 3
    assert unused.calls == 0


def test_chain_is_exhausted_when_every_provider_fails_or_raises():
    outcome = MatchingProviderChain(
        [
            StubProvider("a", ProviderResult.failure("a", "boom")),
            StubProvider("b", RuntimeError("unexpected")),
            StubProvider("c", ProviderResult.success("c", [])),
        ]
    ).run(PROFILE, JOBS)

    assert outcome.exhausted
    assert outcome.matches == []
    assert [a.provider for a in outcome.attempts] == ["a", "b", "c"]
    assert "unexpected" in outcome.attempts[1].error


def test_empty_chain_is_exhausted():
    assert MatchingProviderChain([]).run(PROFILE, JOBS).exhausted


def test_default_chain_follows_configured_order_and_skips_missing_keys():
    config = Settings(GROQ_API_KEY="gk", ANTHROPIC_API_KEY="ak", MATCH_PROVIDER_ORDER="claude,groq,unknown")
    names = build_default_chain(config).provider_names

    assert names == [
        "claude:claude-3-5-haiku-latest",
        "groq:llama-3.3-70b-versatile",
        "groq:mixtral-8x7b-32768",
        "groq:llama-3.1-8b-instant",
    ]

    no_keys = Settings(GROQ_API_KEY="", ANTHROPIC_API_KEY="")
    assert build_default_chain(no_keys).provider_names == []


def test_placeholder_keys_build_no_providers_and_match_health():
    config = Settings(GROQ_API_KEY="changeme", ANTHROPIC_API_KEY=" skip ")

    assert build_default_chain(config).provider_names == []
    assert (config.groq_configured, config.claude_configured) == (False, False)
