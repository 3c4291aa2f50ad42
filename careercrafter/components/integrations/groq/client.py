from __future__ import annotations

import logging
from typing import Any

import httpx

from ....platform.errors import ProviderError

logger = logging.getLogger(__name__)


class GroqClient:
    """Minimal client for Groq's OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = "https://api.groq.com/openai/v1",
        timeout: float = 20.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def chat_completion(
        self,
        *,
        model: str,
        messages: list[dict[str, str]],
        temperature: float = 0.3,
        max_tokens: int = 1024,
        json_response: bool = False,
    ) -> str:
        """Return the first choice's message content.

        Raises ProviderError on transport failures, non-2xx responses, and
        bodies without a message.
        """
        payload: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_response:
            payload["response_format"] = {"type": "json_object"}

        provider = f"groq:{model}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers=self.headers,
                )
        except httpx.HTTPError as exc:
            raise ProviderError(provider, f"Groq request failed: {exc}") from exc

        if response.status_code >= 400:
            raise ProviderError(
                provider,
                f"Groq API error: {response.status_code} - {response.text[:300]}",
            )
        try:
            body = response.json()
        except ValueError as exc:
            raise ProviderError(provider, "Groq returned a non-JSON body") from exc

        choices = body.get("choices") if isinstance(body, dict) else None
        if not choices or not isinstance(choices[0], dict):
            raise ProviderError(provider, "Invalid response format from Groq")
        message = choices[0].get("message") or {}
        content = message.get("content")
        if not isinstance(content, str) or not content.strip():
            raise ProviderError(provider, "Groq response had no message content")

        usage = body.get("usage") or {}
        logger.info(
            "Groq completion model=%s prompt_tokens=%s completion_tokens=%s",
            model,
            usage.get("prompt_tokens"),
            usage.get("completion_tokens"),
        )
        return content
