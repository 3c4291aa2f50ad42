from __future__ import annotations

import logging

from ....platform.errors import ProviderError
from .model_fallback import candidate_models_for, is_model_not_found_error

logger = logging.getLogger(__name__)


class ClaudeClient:
    """Anthropic Messages API wrapper with model alias fallback."""

    def __init__(self, *, api_key: str, model: str, timeout: float = 20.0):
        self.api_key = api_key
        self.model = (model or "").strip()
        self.timeout = timeout
        self.last_model_used: str | None = None

    def complete(
        self,
        *,
        system: str,
        messages: list[dict[str, str]],
        max_tokens: int = 1024,
        temperature: float | None = None,
    ) -> str:
        """Return the text of the first content block.

        Unavailable models fall through to the next alias; any other failure
        raises ProviderError.
        """
        provider = f"claude:{self.model}"
        try:
            from anthropic import Anthropic

            client = Anthropic(api_key=self.api_key, timeout=self.timeout)
        except Exception as exc:
            raise ProviderError(provider, f"Anthropic client unavailable: {exc}") from exc

        kwargs = {"max_tokens": max_tokens, "system": system, "messages": messages}
        if temperature is not None:
            kwargs["temperature"] = temperature

        response = None
        last_model_error: Exception | None = None
        for candidate_model in candidate_models_for(self.model):
            try:
                response = client.messages.create(model=candidate_model, **kwargs)
                self.last_model_used = candidate_model
                if candidate_model != self.model:
                    logger.warning(
                        "Fell back to Claude model=%s after primary model=%s was unavailable",
                        candidate_model,
                        self.model,
                    )
                break
            except Exception as exc:
                if is_model_not_found_error(exc):
                    last_model_error = exc
                    logger.warning("Claude model unavailable (model=%s): %s", candidate_model, exc)
                    continue
                raise ProviderError(provider, f"Claude request failed: {exc}") from exc

        if response is None:
            raise ProviderError(
                provider,
                f"No Claude model available: {last_model_error}" if last_model_error else "Claude returned no response",
            )

        content = getattr(response, "content", None) or []
        text = getattr(content[0], "text", None) if content else None
        if not isinstance(text, str) or not text.strip():
            raise ProviderError(provider, "Claude response had no text content")
        return text
