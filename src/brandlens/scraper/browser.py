"""Headless-browser scraper for JavaScript-rendered sites (Playwright)."""

from __future__ import annotations

import asyncio
import logging

from playwright.async_api import Browser, async_playwright

from brandlens.schemas.config import ScraperSettings
from brandlens.schemas.entities import SourceType
from brandlens.schemas.scrape import Page, ScrapeResult
from brandlens.scraper.base import discover_links, error_result, extract_page, normalize_url

logger = logging.getLogger(__name__)

# Lazy-loaded content gets this long to settle after the load event
_SETTLE_MS = 2000


class BrowserScraper:
    """Renders each page in Chromium before extracting text.

    Pages whose text is shorter than ``min_content_length`` fail the
    quality gate: for the main page that is reported as an error, for
    sub-pages the page is skipped.
    """

    def __init__(self, settings: ScraperSettings | None = None) -> None:
        self.settings = settings or ScraperSettings()

    async def _render(self, browser: Browser, url: str) -> str:
        page = await browser.new_page(user_agent=self.settings.user_agent)
        try:
            await page.goto(
                url,
                wait_until="networkidle",
                timeout=self.settings.page_timeout_seconds * 1000,
            )
            await page.wait_for_timeout(_SETTLE_MS)
            return await page.content()
        finally:
            await page.close()

    def _passes_quality_gate(self, page: Page) -> bool:
        return len(page.content) >= self.settings.min_content_length

    async def _scrape_sub_page(self, browser: Browser, url: str, page_type: SourceType) -> Page | None:
        try:
            page = extract_page(await self._render(browser, url), url, page_type)
        except Exception as exc:
            logger.warning("Sub-page failed (continuing): %s - %s", url, exc)
            return None
        if not self._passes_quality_gate(page):
            logger.warning("Sub-page quality low (continuing): %s", url)
            return None
        return page

    async def scrape(self, url: str) -> ScrapeResult:
        url = normalize_url(url)
        async with async_playwright() as pw:
            browser = await pw.chromium.launch(headless=True)
            try:
                try:
                    html = await self._render(browser, url)
                except Exception as exc:
                    logger.error("Main page failed: %s - %s", url, exc)
                    return error_result(url, f"Main page inaccessible: {exc}")

                main_page = extract_page(html, url, SourceType.MAIN_PAGE)
                if not self._passes_quality_gate(main_page):
                    return ScrapeResult(
                        main_page=main_page,
                        error=(
                            "Main page quality check failed: content too short "
                            f"({len(main_page.content)} chars)"
                        ),
                    )

                links = discover_links(html, url, self.settings.max_pages - 1)
                results = await asyncio.gather(
                    *(self._scrape_sub_page(browser, link, page_type) for link, page_type in links)
                )
            finally:
                await browser.close()

        sub_pages = [page for page in results if page is not None]
        skipped = len(results) - len(sub_pages)
        return ScrapeResult(
            main_page=main_page,
            sub_pages=sub_pages,
            warning=f"{skipped} page(s) skipped due to low quality or timeout" if skipped else None,
        )
