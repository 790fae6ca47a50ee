"""Locate the RSS/Atom feed behind an arbitrary website URL."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from news_curator.adapters.sources.http import open_client
from news_curator.core.events import Event, EventHook, log_event

logger = logging.getLogger(__name__)

# Checked in this order; the first advertised type found wins
FEED_LINK_TYPES = (
    "application/rss+xml",
    "application/atom+xml",
    "application/feed+json",
)

COMMON_FEED_PATHS = (
    "/feed",
    "/feed.xml",
    "/rss",
    "/rss.xml",
    "/atom.xml",
    "/atom",
    "/feed/",
    "/rss/",
    "/index.xml",
    "/blog/feed",
    "/blog/rss",
    "/blog/feed.xml",
    "/blog/rss.xml",
    "/blog/atom.xml",
    "/blog/index.xml",
    "/feeds/posts/default",
    "/feeds/posts/default?alt=rss",
    "/.rss",
)

PAGE_TIMEOUT = 8.0
PROBE_TIMEOUT = 5.0


class DiscoveryStrategy(str, Enum):
    """How a feed URL was found."""

    LINK_TAG = "link_tag"
    COMMON_PATH = "common_path"
    SELF = "self"


@dataclass(frozen=True)
class DiscoveryResult:
    """Outcome of a discovery run. ``feed_url`` is None when nothing was found."""

    site_url: str
    feed_url: Optional[str] = None
    strategy: Optional[DiscoveryStrategy] = None

    @property
    def found(self) -> bool:
        return self.feed_url is not None


def normalize_site_url(site_url: str) -> str:
    """Strip trailing slashes and default to https."""
    base = site_url.strip().rstrip("/")
    if not base.startswith("http"):
        base = f"https://{base}"
    return base


def site_origin(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def looks_like_feed(content_type: str, body: str) -> bool:
    """Heuristic used to accept a probed URL as a feed."""
    content_type = (content_type or "").lower()
    if "xml" in content_type or "rss" in content_type or "atom" in content_type:
        return True
    if body.lstrip().startswith("<?xml"):
        return True
    return "<rss" in body or "<feed" in body or "<channel>" in body


def find_feed_link(html: str, page_url: str) -> Optional[str]:
    """Return the first advertised feed URL in an HTML page, resolved absolutely."""
    soup = BeautifulSoup(html, "html.parser")
    links = soup.find_all("link", href=True)

    for feed_type in FEED_LINK_TYPES:
        for link in links:
            if (link.get("type") or "").strip().lower() != feed_type:
                continue
            href = link["href"].strip()
            if href:
                return urljoin(page_url + "/", href)
    return None


class FeedDiscoverer:
    """Try link tags, then common paths, then the URL itself.

    Strategies run sequentially and stop at the first success. Network errors
    only fail the current strategy.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        page_timeout: float = PAGE_TIMEOUT,
        probe_timeout: float = PROBE_TIMEOUT,
        paths: tuple[str, ...] = COMMON_FEED_PATHS,
        hook: Optional[EventHook] = None,
    ) -> None:
        self.client = client
        self.page_timeout = page_timeout
        self.probe_timeout = probe_timeout
        self.paths = paths
        self.hook = hook or log_event

    async def discover(self, site_url: str) -> DiscoveryResult:
        """Find the feed for ``site_url``."""
        base_url = normalize_site_url(site_url)
        strategies: list[tuple[DiscoveryStrategy, Callable[[httpx.AsyncClient, str], Awaitable[Optional[str]]]]] = [
            (DiscoveryStrategy.LINK_TAG, self._from_link_tags),
            (DiscoveryStrategy.COMMON_PATH, self._from_common_paths),
            (DiscoveryStrategy.SELF, self._from_self),
        ]

        async with open_client(self.client, timeout=self.page_timeout) as client:
            for strategy, attempt in strategies:
                feed_url = await attempt(client, base_url)
                if feed_url:
                    self.hook(Event("discovery.found", {
                        "site": base_url, "feed": feed_url, "strategy": strategy.value,
                    }))
                    return DiscoveryResult(site_url=base_url, feed_url=feed_url, strategy=strategy)

        self.hook(Event("discovery.not_found", {"site": base_url}))
        return DiscoveryResult(site_url=base_url)

    async def _get(self, client: httpx.AsyncClient, url: str, timeout: float) -> Optional[httpx.Response]:
        try:
            response = await client.get(url, timeout=timeout)
        except httpx.HTTPError as e:
            logger.debug("Fetch failed for %s: %s", url, e)
            return None
        if not response.is_success:
            logger.debug("Fetch for %s returned HTTP %s", url, response.status_code)
            return None
        return response

    async def _from_link_tags(self, client: httpx.AsyncClient, base_url: str) -> Optional[str]:
        response = await self._get(client, base_url, self.page_timeout)
        if response is None:
            return None
        return find_feed_link(response.text, base_url)

    async def _from_common_paths(self, client: httpx.AsyncClient, base_url: str) -> Optional[str]:
        origin = site_origin(base_url)
        for path in self.paths:
            candidate = f"{origin}{path}"
            response = await self._get(client, candidate, self.probe_timeout)
            if response is None:
                continue
            if looks_like_feed(response.headers.get("content-type", ""), response.text):
                return candidate
        return None

    async def _from_self(self, client: httpx.AsyncClient, base_url: str) -> Optional[str]:
        response = await self._get(client, base_url, self.probe_timeout)
        if response is None:
            return None
        if looks_like_feed(response.headers.get("content-type", ""), response.text):
            return base_url
        return None
