"""Settings schema — validates brandlens.yml."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from brandlens.schemas.entities import Provider
from brandlens.schemas.report import GridAxes


class ProviderSettings(BaseModel):
    """Model and pricing for one upstream LLM API."""

    model: str
    temperature: float = 0.3
    max_tokens: int = 4000
    timeout_seconds: float = 120.0
    # USD per 1,000 tokens
    input_cost_per_1k: float = 0.0
    output_cost_per_1k: float = 0.0


def _default_providers() -> dict[Provider, ProviderSettings]:
    return {
        Provider.OPENAI: ProviderSettings(
            model="gpt-4o", input_cost_per_1k=0.005, output_cost_per_1k=0.015,
        ),
        Provider.ANTHROPIC: ProviderSettings(
            model="claude-sonnet-4-5-20250929", input_cost_per_1k=0.003, output_cost_per_1k=0.015,
        ),
        Provider.GOOGLE: ProviderSettings(
            model="gemini-1.5-pro", input_cost_per_1k=0.00125, output_cost_per_1k=0.00125,
        ),
    }


class RetryPolicy(BaseModel):
    max_attempts: int = Field(default=3, ge=1)
    delay_seconds: float = Field(default=2.0, ge=0)
    exponential: bool = False


class ScraperSettings(BaseModel):
    max_pages: int = Field(default=10, ge=1)  # main page included
    page_timeout_seconds: float = Field(default=10.0, gt=0)
    user_agent: str = "LLM-Brand-Lens-Bot/1.0 (Brand Analysis Tool)"
    min_content_length: int = 500  # headless scraper quality gate


class StatusSettings(BaseModel):
    poll_interval_seconds: float = Field(default=0.5, gt=0)
    max_lifetime_seconds: float = Field(default=600.0, gt=0)


class Settings(BaseModel):
    """Top-level configuration loaded from brandlens.yml.

    Every section has working defaults; API keys never live here and are
    read from the environment by the provider clients.
    """

    providers: dict[Provider, ProviderSettings] = Field(default_factory=_default_providers)
    retry: RetryPolicy = RetryPolicy()
    scraper: ScraperSettings = ScraperSettings()
    status: StatusSettings = StatusSettings()
    grid: GridAxes = GridAxes()
    database_url: str = "sqlite+aiosqlite:///brandlens.db"

    @model_validator(mode="after")
    def fill_missing_providers(self) -> "Settings":
        # A YAML file that only tunes one provider keeps the defaults for the rest.
        defaults = _default_providers()
        for provider in Provider:
            self.providers.setdefault(provider, defaults[provider])
        return self
