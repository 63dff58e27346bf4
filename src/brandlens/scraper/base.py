"""Shared HTML extraction and link discovery for the scrapers."""

from __future__ import annotations

import hashlib
import re
from typing import Protocol
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from brandlens.schemas.entities import SourceType
from brandlens.schemas.scrape import Page, PageMetadata, ScrapeResult

EXCERPT_LENGTH = 300

# Checked in order against the URL and the link text; first match wins
LINK_PATTERNS: list[tuple[re.Pattern[str], SourceType]] = [
    (re.compile(r"about", re.I), SourceType.ABOUT),
    (re.compile(r"homes|plans|residences|properties", re.I), SourceType.HOMES),
    (re.compile(r"amenities|features|lifestyle", re.I), SourceType.AMENITIES),
    (re.compile(r"location|neighborhood|community", re.I), SourceType.LOCATION),
    (re.compile(r"contact|connect", re.I), SourceType.CONTACT),
    (re.compile(r"press|news|media", re.I), SourceType.PRESS),
]

# Sub-pages are fetched in this order
TYPE_PRIORITY = [
    SourceType.ABOUT,
    SourceType.HOMES,
    SourceType.AMENITIES,
    SourceType.LOCATION,
    SourceType.CONTACT,
    SourceType.PRESS,
    SourceType.OTHER,
]

_SKIP_EXTENSIONS = re.compile(r"\.(pdf|jpg|jpeg|png|gif|zip|doc|docx)$", re.I)
_BOILERPLATE = "script, style, noscript, nav, header, footer, .cookie-banner, #cookie-notice"
_CONTENT_SELECTORS = ["main", "article", '[role="main"]', ".content", "#content", ".main-content", "body"]


class Scraper(Protocol):
    async def scrape(self, url: str) -> ScrapeResult: ...


def normalize_url(url: str) -> str:
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        url = "https://" + url
    return url


def content_hash(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def make_excerpt(content: str) -> str:
    excerpt = content[:EXCERPT_LENGTH].strip()
    return excerpt + "..." if len(content) > EXCERPT_LENGTH else excerpt


def error_result(url: str, message: str) -> ScrapeResult:
    """Placeholder main page plus an error, for an unreachable site."""
    return ScrapeResult(
        main_page=Page(url=url, type=SourceType.MAIN_PAGE.value, title="Error"),
        error=message,
    )


def _meta(soup: BeautifulSoup, **attrs: str) -> str | None:
    tag = soup.find("meta", attrs=attrs)
    if tag and tag.get("content"):
        return str(tag["content"]).strip()
    return None


def extract_page(html: str, url: str, page_type: SourceType) -> Page:
    """Reduce an HTML document to readable text plus metadata."""
    soup = BeautifulSoup(html, "html.parser")

    keywords = _meta(soup, name="keywords")
    metadata = PageMetadata(
        description=_meta(soup, name="description"),
        keywords=[k.strip() for k in keywords.split(",") if k.strip()] if keywords else [],
        og_title=_meta(soup, property="og:title"),
        og_description=_meta(soup, property="og:description"),
    )

    title = ""
    if soup.title and soup.title.get_text(strip=True):
        title = soup.title.get_text(strip=True)
    elif soup.h1:
        title = soup.h1.get_text(strip=True)

    for tag in soup.select(_BOILERPLATE):
        tag.decompose()

    content = ""
    for selector in _CONTENT_SELECTORS:
        element = soup.select_one(selector)
        if element is not None:
            content = element.get_text(" ")
            break
    if not content:
        content = soup.get_text(" ")
    content = re.sub(r"\s+", " ", content).strip()

    return Page(
        url=url,
        type=page_type.value,
        title=title,
        content=content,
        excerpt=make_excerpt(content),
        metadata=metadata,
    )


def classify_link(url: str, text: str) -> SourceType:
    for pattern, source_type in LINK_PATTERNS:
        if pattern.search(url) or pattern.search(text):
            return source_type
    return SourceType.OTHER


def discover_links(html: str, base_url: str, limit: int) -> list[tuple[str, SourceType]]:
    """Same-host links worth scraping, classified and in priority order.

    Works on the raw HTML so navigation links are still present.
    """
    soup = BeautifulSoup(html, "html.parser")
    base = urlparse(base_url)
    base_key = base_url.split("#")[0].split("?")[0].rstrip("/")
    seen: set[str] = {base_key}
    links: list[tuple[str, SourceType]] = []

    for anchor in soup.find_all("a", href=True):
        href = str(anchor["href"]).strip()
        if not href or "#" in href or "javascript:" in href.lower() or href.startswith("mailto:"):
            continue
        full = urljoin(base_url, href)
        if urlparse(full).hostname != base.hostname:
            continue
        clean = full.split("#")[0].split("?")[0]
        if _SKIP_EXTENSIONS.search(clean):
            continue
        key = clean.rstrip("/")
        if key in seen:
            continue
        seen.add(key)
        links.append((clean, classify_link(clean, anchor.get_text(" ", strip=True))))

    links.sort(key=lambda link: TYPE_PRIORITY.index(link[1]))
    return links[:limit]
