"""Provider interface and the shared retry/parse/pricing machinery."""

from __future__ import annotations

import logging
import math
import os
from abc import ABC, abstractmethod
from typing import Any, Callable, Protocol

from pydantic import BaseModel

from brandlens.errors import ConfigurationError
from brandlens.providers.parsing import parse_json_response
from brandlens.providers.retry import RetryCallback, retry_with_backoff
from brandlens.schemas.config import ProviderSettings, RetryPolicy
from brandlens.schemas.entities import Provider

logger = logging.getLogger(__name__)

# Raises ModelOutputError when parsed output has the wrong structure
ShapeCheck = Callable[[Any], object]


class Completion(BaseModel):
    """Raw text and usage returned by one upstream call."""

    text: str
    input_tokens: int = 0
    output_tokens: int = 0
    raw: dict[str, Any] = {}


class LLMResponse(BaseModel):
    """Parsed result of ``analyze`` with token and cost accounting."""

    content: Any
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    tokens_used: int = 0
    cost: float = 0.0
    raw: dict[str, Any] = {}


class LLMProvider(Protocol):
    """Anything that can turn a prompt into structured JSON."""

    provider: Provider
    settings: ProviderSettings

    async def analyze(
        self,
        prompt: str,
        config: ProviderSettings | None = None,
        *,
        validate: ShapeCheck | None = None,
    ) -> LLMResponse: ...


def estimate_tokens(text: str) -> int:
    """Rough token count for APIs that don't report usage (4 chars per token)."""
    return math.ceil(len(text) / 4)


def require_api_key(env_var: str, api_key: str | None) -> str:
    key = api_key or os.getenv(env_var)
    if not key:
        raise ConfigurationError(f"{env_var} is not set")
    return key


class BaseProviderClient(ABC):
    """Shared behaviour for the concrete API clients.

    Subclasses implement ``_complete`` — a single upstream call returning raw
    text.  ``analyze`` wraps it with JSON parsing inside the retry loop, so
    malformed output is retried the same way as network errors.
    """

    provider: Provider

    def __init__(
        self,
        settings: ProviderSettings,
        retry: RetryPolicy | None = None,
        on_retry: RetryCallback | None = None,
    ) -> None:
        self.settings = settings
        self.retry = retry or RetryPolicy()
        self.on_retry = on_retry

    @abstractmethod
    async def _complete(self, prompt: str, config: ProviderSettings) -> Completion:
        ...

    def cost_for(
        self, input_tokens: int, output_tokens: int, config: ProviderSettings | None = None
    ) -> float:
        pricing = config or self.settings
        return (
            input_tokens / 1000 * pricing.input_cost_per_1k
            + output_tokens / 1000 * pricing.output_cost_per_1k
        )

    async def analyze(
        self,
        prompt: str,
        config: ProviderSettings | None = None,
        *,
        validate: ShapeCheck | None = None,
    ) -> LLMResponse:
        """Call the model and parse its JSON.

        ``validate`` runs on the parsed content inside the retry loop, so
        well-formed JSON with the wrong structure is retried too.
        """
        config = config or self.settings

        async def _attempt() -> tuple[Completion, Any]:
            completion = await self._complete(prompt, config)
            content = parse_json_response(completion.text)
            if validate is not None:
                validate(content)
            return completion, content

        def _on_retry(attempt: int, exc: BaseException) -> None:
            logger.warning("%s call failed (attempt %d): %s", self.provider.value, attempt, exc)
            if self.on_retry:
                self.on_retry(attempt, exc)

        completion, content = await retry_with_backoff(
            _attempt,
            max_attempts=self.retry.max_attempts,
            delay=self.retry.delay_seconds,
            exponential=self.retry.exponential,
            on_retry=_on_retry,
        )
        return LLMResponse(
            content=content,
            model=config.model,
            input_tokens=completion.input_tokens,
            output_tokens=completion.output_tokens,
            tokens_used=completion.input_tokens + completion.output_tokens,
            cost=self.cost_for(completion.input_tokens, completion.output_tokens, config),
            raw=completion.raw,
        )
