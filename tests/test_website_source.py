"""Tests for the website scraping source."""

import httpx
import pytest
from bs4 import BeautifulSoup
from conftest import ago

from news_curator.adapters.sources import WebsiteSource
from news_curator.adapters.sources.website_source import extract_content, extract_published
from news_curator.core import DateConfidence, SourceQuery


def _page(meta: str = "", body: str = "") -> str:
    return f"""
    <html><head>
      <title>Fallback title</title>
      <meta property="og:title" content="Svelte 5 is here">
      {meta}
    </head><body>
      <nav>Home | Blog</nav>
      <article>{body or "Runes are stable. " * 30}</article>
      <footer>Copyright</footer>
    </body></html>
    """


def _query(url: str = "https://svelte.dev/blog/svelte-5") -> SourceQuery:
    return SourceQuery(source="scrape_website", term=url)


def test_extract_published_order() -> None:
    soup = BeautifulSoup(
        '<meta property="og:updated_time" content="B">'
        '<meta property="article:published_time" content="A">',
        "html.parser",
    )
    assert extract_published(soup) == "A"

    soup = BeautifulSoup('<time datetime="2025-01-06T10:00:00Z">Jan 6</time>', "html.parser")
    assert extract_published(soup) == "2025-01-06T10:00:00Z"

    assert extract_published(BeautifulSoup("<p>nothing</p>", "html.parser")) is None


def test_extract_content_skips_chrome() -> None:
    soup = BeautifulSoup(_page(), "html.parser")
    content = extract_content(soup)

    assert content.startswith("Runes are stable.")
    assert "Home | Blog" not in content
    assert len(content) <= 1000


@pytest.mark.asyncio
async def test_fresh_page(mock_client) -> None:
    meta = f'<meta property="article:published_time" content="{ago(hours=3).isoformat()}">'

    async with mock_client(lambda request: httpx.Response(200, html=_page(meta))) as client:
        result = await WebsiteSource(client).collect(_query())

    assert len(result.items) == 1
    item = result.items[0]
    assert item.title == "Svelte 5 is here"
    assert item.source == "svelte"
    assert item.url == "https://svelte.dev/blog/svelte-5"
    assert item.published.confidence is DateConfidence.KNOWN


@pytest.mark.asyncio
async def test_old_page_is_rejected(mock_client) -> None:
    meta = f'<meta property="article:published_time" content="{ago(days=4).isoformat()}">'

    async with mock_client(lambda request: httpx.Response(200, html=_page(meta))) as client:
        result = await WebsiteSource(client).collect(_query())

    assert result.ok
    assert result.items == []


@pytest.mark.asyncio
async def test_undated_page_is_assumed_fresh(mock_client) -> None:
    async with mock_client(lambda request: httpx.Response(200, html=_page())) as client:
        result = await WebsiteSource(client).collect(_query())

    assert result.items[0].published.raw == "today"
    assert result.items[0].published.confidence is DateConfidence.ASSUMED_FRESH
