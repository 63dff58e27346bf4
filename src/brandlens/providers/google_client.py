"""Google Gemini client (google-genai SDK)."""

from __future__ import annotations

from google import genai
from google.genai import types

from brandlens.providers.base import (
    BaseProviderClient,
    Completion,
    estimate_tokens,
    require_api_key,
)
from brandlens.providers.retry import RetryCallback
from brandlens.schemas.config import ProviderSettings, RetryPolicy
from brandlens.schemas.entities import Provider

JSON_SUFFIX = "\n\nReturn your response as valid JSON only."


class GoogleClient(BaseProviderClient):
    provider = Provider.GOOGLE

    def __init__(
        self,
        settings: ProviderSettings,
        retry: RetryPolicy | None = None,
        on_retry: RetryCallback | None = None,
        api_key: str | None = None,
    ) -> None:
        super().__init__(settings, retry, on_retry)
        self._client = genai.Client(
            api_key=require_api_key("GOOGLE_AI_API_KEY", api_key),
            # HttpOptions.timeout is in milliseconds
            http_options=types.HttpOptions(timeout=int(settings.timeout_seconds * 1000)),
        )

    async def _complete(self, prompt: str, config: ProviderSettings) -> Completion:
        full_prompt = prompt + JSON_SUFFIX
        response = await self._client.aio.models.generate_content(
            model=config.model,
            contents=full_prompt,
            config=types.GenerateContentConfig(
                temperature=config.temperature,
                max_output_tokens=config.max_tokens,
                response_mime_type="application/json",
            ),
        )
        text = response.text or ""
        usage = getattr(response, "usage_metadata", None)
        input_tokens = getattr(usage, "prompt_token_count", None) or estimate_tokens(full_prompt)
        output_tokens = getattr(usage, "candidates_token_count", None) or estimate_tokens(text)
        return Completion(
            text=text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            raw=response.model_dump(mode="json", exclude_none=True),
        )
