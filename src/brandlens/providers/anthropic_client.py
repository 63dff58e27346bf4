"""Anthropic messages-API client."""

from __future__ import annotations

from anthropic import AsyncAnthropic

from brandlens.providers.base import BaseProviderClient, Completion, require_api_key
from brandlens.providers.retry import RetryCallback
from brandlens.schemas.config import ProviderSettings, RetryPolicy
from brandlens.schemas.entities import Provider

# The messages API has no JSON mode
JSON_SUFFIX = "\n\nIMPORTANT: Return your response as valid JSON only, with no additional text."


class AnthropicClient(BaseProviderClient):
    provider = Provider.ANTHROPIC

    def __init__(
        self,
        settings: ProviderSettings,
        retry: RetryPolicy | None = None,
        on_retry: RetryCallback | None = None,
        api_key: str | None = None,
    ) -> None:
        super().__init__(settings, retry, on_retry)
        self._client = AsyncAnthropic(
            api_key=require_api_key("ANTHROPIC_API_KEY", api_key),
            timeout=settings.timeout_seconds,
        )

    async def _complete(self, prompt: str, config: ProviderSettings) -> Completion:
        response = await self._client.messages.create(
            model=config.model,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            messages=[{"role": "user", "content": prompt + JSON_SUFFIX}],
        )
        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        usage = getattr(response, "usage", None)
        return Completion(
            text=text,
            input_tokens=getattr(usage, "input_tokens", 0) or 0,
            output_tokens=getattr(usage, "output_tokens", 0) or 0,
            raw=response.model_dump(mode="json"),
        )
