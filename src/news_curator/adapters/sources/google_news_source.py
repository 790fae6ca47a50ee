"""Google News RSS search source."""

from news_curator.adapters.sources.base import HttpSourceAdapter
from news_curator.core import CandidateItem, SourceQuery


class GoogleNewsSource(HttpSourceAdapter):
    """Fetch Google News headlines from the past day."""

    emoji = "📰"
    name = "google_news_rss"
    base_url = "https://news.google.com/rss/search"

    async def _fetch(self, query: SourceQuery) -> list[CandidateItem]:
        """Search Google News; the feed's own ``<source>`` names the publisher."""
        params = {
            "q": f"{query.term} when:1d",
            "hl": "en-US",
            "gl": "US",
            "ceid": "US:en",
        }
        async with self._client() as client:
            response = await client.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()

        return self._feed_candidates(response.text, query.max_results, "Google News")
