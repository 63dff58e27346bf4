"""Shared test fixtures."""

from __future__ import annotations

import pytest

from brandlens.schemas.config import RetryPolicy, Settings
from brandlens.schemas.entities import ALL_PROVIDERS, Project, Provider
from brandlens.schemas.scrape import Page, ScrapeResult
from brandlens.store.memory import MemoryStore
from fakes import FakeProvider, FakeScraper

SITE_URL = "https://willowcreek.test"

MAIN_CONTENT = (
    "Willow Creek is a master-planned neighborhood with twelve miles of trails, "
    "three parks and new homes by Harbor Builders, building since 1985. "
) * 4


@pytest.fixture
def settings() -> Settings:
    return Settings(retry=RetryPolicy(max_attempts=3, delay_seconds=0))


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def main_page() -> Page:
    return Page(url=SITE_URL, type="MAIN_PAGE", title="Willow Creek", content=MAIN_CONTENT)


@pytest.fixture
def scrape_result(main_page: Page) -> ScrapeResult:
    return ScrapeResult(
        main_page=main_page,
        sub_pages=[
            Page(url=f"{SITE_URL}/about", type="ABOUT", title="About", content="Family owned since 1985."),
            Page(url=f"{SITE_URL}/homes", type="HOMES", title="Homes", content="Plans from 1,800 sq ft."),
        ],
    )


@pytest.fixture
def fake_scraper(scrape_result: ScrapeResult) -> FakeScraper:
    return FakeScraper(scrape_result)


@pytest.fixture
def fake_providers() -> dict[Provider, FakeProvider]:
    return {provider: FakeProvider(provider) for provider in ALL_PROVIDERS}


@pytest.fixture
def project() -> Project:
    return Project(url=SITE_URL)
