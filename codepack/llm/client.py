"""Thin text-model client: one prompt in, one text completion out.

Supports OpenAI-compatible chat completions and Gemini generateContent over
httpx, and Anthropic messages through the Anthropic SDK. There is no retry
logic here; a failed call fails the request.
"""

from typing import Any

import anthropic
import httpx
import structlog

from codepack.core.exceptions import LLMProviderError
from codepack.schemas.generation import LLMConfig, LLMProvider

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URLS: dict[str, str] = {
    LLMProvider.OPENAI.value: "https://api.openai.com/v1",
    LLMProvider.GEMINI.value: "https://generativelanguage.googleapis.com/v1beta",
}


class LLMClient:
    """Calls the configured provider and extracts the single text completion.

    Args:
        config: Provider, model, credentials and sampling settings
        default_timeout_s: Used when the config carries no timeout
        transport: Optional httpx transport (tests inject httpx.MockTransport)
    """

    def __init__(
        self,
        config: LLMConfig,
        default_timeout_s: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.timeout_s = config.timeout_s if config.timeout_s is not None else default_timeout_s
        self.transport = transport

    @property
    def base_url(self) -> str:
        return (self.config.base_url or DEFAULT_BASE_URLS.get(self.config.provider, "")).rstrip("/")

    async def generate(self, prompt: str) -> str:
        """Send ``prompt`` and return the completion text.

        Raises:
            LLMProviderError: On unsupported provider, HTTP failure or a response without text
        """
        provider = self.config.provider
        logger.info("llm_request", provider=provider, model=self.config.model, prompt_length=len(prompt))

        if provider == LLMProvider.ANTHROPIC:
            return await self._generate_anthropic(prompt)
        if provider not in (LLMProvider.OPENAI, LLMProvider.GEMINI):
            raise LLMProviderError(provider, "Unsupported LLM provider")

        url, payload, headers = self._build_request(prompt)
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self.transport) as client:
                response = await client.post(url, json=payload, headers=headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise LLMProviderError(provider, f"HTTP {exc.response.status_code} from provider") from exc
        except httpx.HTTPError as exc:
            raise LLMProviderError(provider, f"Request failed: {type(exc).__name__}") from exc
        except ValueError as exc:
            raise LLMProviderError(provider, "Response is not valid JSON") from exc

        return self.parse_response(data)

    def _build_request(self, prompt: str) -> tuple[str, dict[str, Any], dict[str, str]]:
        config = self.config
        if config.provider == LLMProvider.OPENAI:
            return (
                f"{self.base_url}/chat/completions",
                {
                    "model": config.model,
                    "messages": [{"role": "user", "content": prompt}],
                    "temperature": config.temperature,
                },
                {"Authorization": f"Bearer {config.api_key}"},
            )
        return (
            f"{self.base_url}/models/{config.model}:generateContent?key={config.api_key}",
            {
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {"temperature": config.temperature},
            },
            {},
        )

    def parse_response(self, data: Any) -> str:
        """Pull the completion text out of a provider response body."""
        provider = self.config.provider
        try:
            if provider == LLMProvider.OPENAI:
                text = data["choices"][0]["message"]["content"]
            else:
                text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMProviderError(provider, "Failed to parse LLM response") from exc

        if not isinstance(text, str):
            raise LLMProviderError(provider, "Failed to parse LLM response")
        logger.info("llm_response", provider=provider, completion_length=len(text))
        return text

    async def _generate_anthropic(self, prompt: str) -> str:
        client = anthropic.AsyncAnthropic(
            api_key=self.config.api_key,
            base_url=self.config.base_url or None,
            timeout=self.timeout_s,
            max_retries=0,
        )
        try:
            response = await client.messages.create(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as exc:
            raise LLMProviderError(LLMProvider.ANTHROPIC, f"Request failed: {type(exc).__name__}") from exc

        text_blocks = [block.text for block in response.content if getattr(block, "type", None) == "text"]
        if not text_blocks:
            raise LLMProviderError(LLMProvider.ANTHROPIC, "Failed to parse LLM response")
        logger.info("llm_response", provider=LLMProvider.ANTHROPIC.value, completion_length=len(text_blocks[0]))
        return text_blocks[0]
