"""One-shot chat completion calls against the configured model provider."""
from __future__ import annotations

import logging
from typing import Any

import anthropic
import requests
from anthropic import Anthropic

from run_planner.config import LLMConfig


logger = logging.getLogger(__name__)

CHAT_PATH = "/chat/completions"


class LLMClientError(RuntimeError):
    """Raised when the model call fails or returns an unusable payload."""


class ChatCompletionsClient:
    """Client for OpenAI-compatible ``/chat/completions`` endpoints (Groq, OpenAI)."""

    def __init__(self, config: LLMConfig, session: requests.Session | None = None) -> None:
        self.config = config
        self.provider = config.provider
        self._session = session or requests.Session()

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        url = f"{self.config.base_url}{CHAT_PATH}"
        payload = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.config.temperature,
        }
        logger.debug("POST %s | model=%s", url, self.config.model)
        try:
            response = self._session.post(
                url,
                json=payload,
                headers={"Authorization": f"Bearer {self.config.api_key}"},
                timeout=self.config.timeout_seconds,
            )
        except requests.Timeout as err:
            raise LLMClientError(f"{self.provider} request timed out after {self.config.timeout_seconds}s") from err
        except requests.RequestException as err:
            raise LLMClientError(f"{self.provider} request failed: {err}") from err

        if not response.ok:
            raise LLMClientError(f"{self.provider} returned HTTP {response.status_code}: {response.text}")

        try:
            body: dict[str, Any] = response.json()
            return body["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError, TypeError) as err:
            raise LLMClientError(f"{self.provider} returned an unexpected payload") from err


class AnthropicMessagesClient:
    """Client for the Anthropic Messages API."""

    provider = "anthropic"

    def __init__(self, config: LLMConfig) -> None:
        self.config = config
        self.client = Anthropic(api_key=config.api_key, timeout=config.timeout_seconds)

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = self.client.messages.create(
                model=self.config.model,
                max_tokens=2048,
                temperature=self.config.temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except anthropic.APIError as err:
            raise LLMClientError(f"anthropic request failed: {err}") from err

        try:
            return response.content[0].text
        except (AttributeError, IndexError) as err:
            raise LLMClientError("anthropic returned an unexpected payload") from err


def build_llm_client(config: LLMConfig | None) -> ChatCompletionsClient | AnthropicMessagesClient | None:
    """Create the client for ``config``; None means no model is configured."""

    if config is None:
        return None
    if config.provider == "anthropic":
        return AnthropicMessagesClient(config)
    return ChatCompletionsClient(config)
