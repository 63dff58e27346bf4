"""Construct provider clients from settings."""

from __future__ import annotations

from brandlens.providers.anthropic_client import AnthropicClient
from brandlens.providers.base import LLMProvider
from brandlens.providers.dryrun import DryRunProvider
from brandlens.providers.google_client import GoogleClient
from brandlens.providers.openai_client import OpenAIClient
from brandlens.providers.retry import RetryCallback
from brandlens.schemas.config import Settings
from brandlens.schemas.entities import ALL_PROVIDERS, Provider


def create_provider(
    provider: Provider,
    settings: Settings,
    *,
    dry_run: bool = False,
    on_retry: RetryCallback | None = None,
) -> LLMProvider:
    """Build the client for one provider.

    Raises ``ConfigurationError`` when its API key is missing.
    """
    provider_settings = settings.providers[provider]
    if dry_run:
        return DryRunProvider(provider, provider_settings)
    if provider is Provider.OPENAI:
        return OpenAIClient(provider_settings, settings.retry, on_retry)
    if provider is Provider.ANTHROPIC:
        return AnthropicClient(provider_settings, settings.retry, on_retry)
    if provider is Provider.GOOGLE:
        return GoogleClient(provider_settings, settings.retry, on_retry)
    raise ValueError(f"Unknown provider: {provider}")


def create_providers(
    settings: Settings,
    *,
    dry_run: bool = False,
    on_retry: RetryCallback | None = None,
) -> dict[Provider, LLMProvider]:
    return {
        provider: create_provider(provider, settings, dry_run=dry_run, on_retry=on_retry)
        for provider in ALL_PROVIDERS
    }
