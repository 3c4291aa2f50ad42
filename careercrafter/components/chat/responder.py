"""Remote LLM replies for non-search assistant turns."""

from __future__ import annotations

import logging
from typing import Dict, List, Protocol, Sequence

from ...platform.config import Settings, settings as default_settings
from ...platform.errors import ProviderError
from ..integrations.claude.client import ClaudeClient
from ..integrations.groq.client import GroqClient
from .rules import CHAT_SYSTEM_PROMPT, EMPTY_COMPLETION_REPLY

logger = logging.getLogger("careercrafter.chat.responder")


class ChatResponder(Protocol):
    def reply(
        self,
        message: str,
        history: Sequence[Dict[str, str]],
        *,
        tier: str,
        remaining_free: int | None,
    ) -> str:
        ...


def format_history(history: Sequence[Dict[str, str]], limit: int) -> str:
    recent = list(history)[-limit:] if limit > 0 else []
    lines = [
        f"{'User' if item.get('role') == 'user' else 'Assistant'}: {item.get('content', '')}"
        for item in recent
    ]
    return "\n".join(lines) or "New conversation"


class LlmChatResponder:
    """Groq chat model first, Claude second. Raises ProviderError when both fail."""

    def __init__(
        self,
        *,
        groq: GroqClient | None = None,
        groq_model: str | None = None,
        claude: ClaudeClient | None = None,
        max_tokens: int = 250,
        history_limit: int = 6,
    ):
        self.groq = groq
        self.groq_model = groq_model
        self.claude = claude
        self.max_tokens = max_tokens
        self.history_limit = history_limit

    @property
    def configured(self) -> bool:
        return bool((self.groq and self.groq_model) or self.claude)

    def reply(
        self,
        message: str,
        history: Sequence[Dict[str, str]],
        *,
        tier: str,
        remaining_free: int | None,
    ) -> str:
        system = CHAT_SYSTEM_PROMPT.format(
            tier=tier,
            remaining=remaining_free if remaining_free else "unlimited",
            history=format_history(history, self.history_limit),
        )
        messages: List[Dict[str, str]] = [{"role": "user", "content": message}]
        errors: List[str] = []

        if self.groq and self.groq_model:
            try:
                return self.groq.chat_completion(
                    model=self.groq_model,
                    messages=[{"role": "system", "content": system}, *messages],
                    temperature=0.8,
                    max_tokens=self.max_tokens,
                ).strip() or EMPTY_COMPLETION_REPLY
            except ProviderError as exc:
                logger.warning("Chat provider %s failed: %s", exc.provider, exc.detail)
                errors.append(exc.detail)

        if self.claude:
            try:
                return self.claude.complete(
                    system=system,
                    messages=messages,
                    max_tokens=self.max_tokens,
                    temperature=0.8,
                ).strip() or EMPTY_COMPLETION_REPLY
            except ProviderError as exc:
                logger.warning("Chat provider %s failed: %s", exc.provider, exc.detail)
                errors.append(exc.detail)

        raise ProviderError("chat", "; ".join(errors) or "No chat provider configured")


def build_default_responder(config: Settings | None = None) -> LlmChatResponder:
    config = config or default_settings
    groq = None
    if config.groq_configured:
        groq = GroqClient(
            api_key=config.GROQ_API_KEY,
            base_url=config.GROQ_API_BASE_URL,
            timeout=config.CHAT_PROVIDER_TIMEOUT_SECONDS,
        )
    claude = None
    if config.claude_configured:
        claude = ClaudeClient(
            api_key=config.ANTHROPIC_API_KEY,
            model=config.resolved_claude_model,
            timeout=config.CHAT_PROVIDER_TIMEOUT_SECONDS,
        )
    return LlmChatResponder(
        groq=groq,
        groq_model=config.GROQ_CHAT_MODEL,
        claude=claude,
        max_tokens=config.CHAT_MAX_TOKENS,
        history_limit=config.CHAT_HISTORY_CONTEXT_MESSAGES,
    )
