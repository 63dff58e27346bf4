"""Plain HTTP scraper (httpx + BeautifulSoup)."""

from __future__ import annotations

import asyncio
import logging

import httpx

from brandlens.errors import ScrapeError
from brandlens.schemas.config import ScraperSettings
from brandlens.schemas.entities import SourceType
from brandlens.schemas.scrape import Page, ScrapeResult
from brandlens.scraper.base import discover_links, error_result, extract_page, normalize_url

logger = logging.getLogger(__name__)


class WebScraper:
    """Fetches a main page and up to ``max_pages - 1`` sub-pages.

    Each request is bounded by ``page_timeout_seconds`` of wall-clock time.
    Sub-pages are fetched concurrently; a failed sub-page is dropped and
    counted in the result's ``warning``.
    """

    def __init__(
        self,
        settings: ScraperSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or ScraperSettings()
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self._transport,
            headers={"User-Agent": self.settings.user_agent},
            timeout=self.settings.page_timeout_seconds,
            follow_redirects=True,
        )

    async def _fetch(self, client: httpx.AsyncClient, url: str) -> str:
        # httpx's timeout applies per network operation, so a slow trickle can outlast it
        timeout = self.settings.page_timeout_seconds
        try:
            response = await asyncio.wait_for(client.get(url), timeout)
        except asyncio.TimeoutError as exc:
            raise ScrapeError(f"Timed out after {timeout:g}s") from exc
        if response.status_code >= 400:
            raise ScrapeError(f"HTTP {response.status_code}: {response.reason_phrase}")
        return response.text

    async def _scrape_page(self, client: httpx.AsyncClient, url: str, page_type: SourceType) -> Page:
        html = await self._fetch(client, url)
        return extract_page(html, url, page_type)

    async def scrape(self, url: str) -> ScrapeResult:
        url = normalize_url(url)
        async with self._client() as client:
            try:
                html = await self._fetch(client, url)
            except (ScrapeError, httpx.HTTPError, httpx.InvalidURL) as exc:
                message = str(exc) or type(exc).__name__
                logger.error("Main page failed: %s - %s", url, message)
                return error_result(url, message)

            main_page = extract_page(html, url, SourceType.MAIN_PAGE)
            links = discover_links(html, url, self.settings.max_pages - 1)
            logger.info("Main page scraped: %s (%d chars, %d sub-pages queued)",
                        url, len(main_page.content), len(links))

            results = await asyncio.gather(
                *(self._scrape_page(client, link, page_type) for link, page_type in links),
                return_exceptions=True,
            )

        sub_pages: list[Page] = []
        for (link, _), result in zip(links, results):
            if isinstance(result, BaseException):
                logger.warning("Sub-page failed (continuing): %s - %s", link, result)
                continue
            sub_pages.append(result)

        skipped = len(results) - len(sub_pages)
        return ScrapeResult(
            main_page=main_page,
            sub_pages=sub_pages,
            warning=f"{skipped} page(s) skipped due to errors or timeout" if skipped else None,
        )
