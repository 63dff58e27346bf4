"""OpenAI chat-completions client."""

from __future__ import annotations

from typing import Any

from openai import AsyncOpenAI

from brandlens.providers.base import BaseProviderClient, Completion, require_api_key
from brandlens.providers.retry import RetryCallback
from brandlens.schemas.config import ProviderSettings, RetryPolicy
from brandlens.schemas.entities import Provider


class OpenAIClient(BaseProviderClient):
    provider = Provider.OPENAI

    def __init__(
        self,
        settings: ProviderSettings,
        retry: RetryPolicy | None = None,
        on_retry: RetryCallback | None = None,
        api_key: str | None = None,
    ) -> None:
        super().__init__(settings, retry, on_retry)
        self._client = AsyncOpenAI(
            api_key=require_api_key("OPENAI_API_KEY", api_key),
            timeout=settings.timeout_seconds,
        )

    async def _complete(self, prompt: str, config: ProviderSettings) -> Completion:
        kwargs: dict[str, Any] = {
            "model": config.model,
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
            "response_format": {"type": "json_object"},
        }
        response = await self._client.chat.completions.create(**kwargs)
        usage = getattr(response, "usage", None)
        return Completion(
            text=response.choices[0].message.content or "",
            input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            output_tokens=getattr(usage, "completion_tokens", 0) or 0,
            raw=response.model_dump(mode="json"),
        )
