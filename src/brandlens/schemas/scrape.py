"""Scraper output models."""

from __future__ import annotations

from pydantic import BaseModel


class PageMetadata(BaseModel):
    description: str | None = None
    keywords: list[str] = []
    og_title: str | None = None
    og_description: str | None = None


class Page(BaseModel):
    """One scraped page, reduced to readable text."""

    url: str
    type: str = "OTHER"  # MAIN_PAGE, ABOUT, HOMES, AMENITIES, ...
    title: str = ""
    content: str = ""
    excerpt: str = ""
    metadata: PageMetadata = PageMetadata()


class ScrapeResult(BaseModel):
    """Main page plus whatever sub-pages could be fetched.

    A failed main page is reported through ``error`` with a placeholder
    page, never by raising.  Sub-page failures only ever show up in
    ``warning``.
    """

    main_page: Page
    sub_pages: list[Page] = []
    error: str | None = None
    warning: str | None = None

    @property
    def pages(self) -> list[Page]:
        return [self.main_page, *self.sub_pages]
