"""Full-page content extraction for sites without a usable feed."""

import logging
from datetime import datetime, timezone
from typing import Optional

from bs4 import BeautifulSoup

from news_curator.adapters.sources.base import HttpSourceAdapter
from news_curator.adapters.sources.http import site_name
from news_curator.core import CandidateItem, SourceQuery
from news_curator.core.candidates import DEFAULT_CATEGORY, DEFAULT_RELEVANCE
from news_curator.core.entities import DateConfidence
from news_curator.core.freshness import UNKNOWN_DATE_SENTINEL, classify_date, is_fresh

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 1000

# Common article content selectors (tried in order)
CONTENT_SELECTORS = [
    "article",
    '[role="main"]',
    ".article-content",
    ".post-content",
    ".entry-content",
    "main",
    "#content",
]

# Meta tags carrying a publication date, most specific first
DATE_META = [
    ("property", "article:published_time"),
    ("itemprop", "datePublished"),
    ("name", "date"),
    ("property", "article:modified_time"),
    ("itemprop", "dateModified"),
    ("property", "og:updated_time"),
]


def extract_published(soup: BeautifulSoup) -> Optional[str]:
    """Publication date from page metadata, or None."""
    for attr, value in DATE_META:
        tag = soup.find("meta", attrs={attr: value})
        if tag and tag.get("content"):
            return tag["content"].strip()
    time_tag = soup.find("time", datetime=True)
    if time_tag:
        return time_tag["datetime"].strip()
    return None


def extract_content(soup: BeautifulSoup) -> str:
    """Main text of the page, truncated."""
    for tag in soup(["script", "style", "nav", "header", "footer", "aside", "form", "iframe"]):
        tag.decompose()

    content = ""
    for selector in CONTENT_SELECTORS:
        element = soup.select_one(selector)
        if element:
            content = element.get_text(separator=" ", strip=True)
            if len(content) > 200:
                break

    if len(content) < 200 and soup.body:
        content = soup.body.get_text(separator=" ", strip=True)

    return content[:MAX_CONTENT_LENGTH]


class WebsiteSource(HttpSourceAdapter):
    """Scrape a single article URL into one candidate item."""

    emoji = "🔥"
    name = "scrape_website"

    async def _fetch(self, query: SourceQuery) -> list[CandidateItem]:
        url = query.term
        async with self._client() as client:
            response = await client.get(url, timeout=self.timeout)
            response.raise_for_status()

        soup = BeautifulSoup(response.text, "html.parser")
        source = site_name(url)

        og_title = soup.find("meta", attrs={"property": "og:title"})
        if og_title and og_title.get("content"):
            title = og_title["content"].strip()
        elif soup.title and soup.title.string:
            title = soup.title.string.strip()
        else:
            title = f"Content from {source}"

        raw_date = extract_published(soup)
        published = classify_date(raw_date or UNKNOWN_DATE_SENTINEL)

        # A known date that is already old rejects the page outright
        if published.confidence is DateConfidence.KNOWN and not is_fresh(
            published,
            now=datetime.now(timezone.utc),
            window=self.window,
            skew_tolerance=self.skew_tolerance,
        ):
            logger.info("Rejected %s: published %s is outside the freshness window", url, raw_date)
            return []

        content = extract_content(soup)
        return [CandidateItem(
            title=title,
            url=url,
            source=source,
            summary=content or "No content extracted",
            relevance=DEFAULT_RELEVANCE,
            category=DEFAULT_CATEGORY,
            published=published,
        )]
