"""Read any website's RSS/Atom feed, discovering it first."""

from typing import Optional

import httpx

from news_curator.adapters.sources.base import HttpSourceAdapter
from news_curator.adapters.sources.feed_discovery import FeedDiscoverer
from news_curator.adapters.sources.http import site_name
from news_curator.core import CandidateItem, ErrorKind, SourceQuery, SourceResult


class RSSFeedSource(HttpSourceAdapter):
    """Discover and read the feed behind a site URL."""

    emoji = "📡"
    name = "read_rss_feed"

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
        discoverer: Optional[FeedDiscoverer] = None,
    ) -> None:
        super().__init__(client, timeout)
        self.discoverer = discoverer or FeedDiscoverer(client=client)

    async def collect(self, query: SourceQuery) -> SourceResult:
        """Discover the feed for ``query.term`` and read it."""
        discovery = await self.discoverer.discover(query.term)
        if not discovery.found:
            return SourceResult.failure(
                query,
                f'Could not find an RSS/Atom feed for "{query.term}". '
                "Try a more specific URL like the blog page or a direct feed URL.",
                ErrorKind.FEED_NOT_FOUND,
            )
        return await self._guarded(query, self.read(discovery.feed_url, query.max_results))

    async def _fetch(self, query: SourceQuery) -> list[CandidateItem]:
        # Direct feed URL, no discovery
        return await self.read(query.term, query.max_results)

    async def read(self, feed_url: str, max_results: int) -> list[CandidateItem]:
        """Fetch a known feed URL and return its fresh entries."""
        async with self._client() as client:
            response = await client.get(feed_url, timeout=self.timeout)
            response.raise_for_status()
            return self._feed_candidates(response.text, max_results, site_name(feed_url))
