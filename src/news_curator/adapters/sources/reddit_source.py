"""Reddit search via the public RSS/Atom endpoints."""

import logging
from urllib.parse import quote_plus

import httpx

from news_curator.adapters.sources.base import HttpSourceAdapter
from news_curator.core import CandidateItem, SourceQuery
from news_curator.core.candidates import candidate_from_feed_item
from news_curator.core.feed_parser import parse_atom_entries

logger = logging.getLogger(__name__)


class RedditSource(HttpSourceAdapter):
    """Search a subreddit, falling back to its hot listing."""

    emoji = "🔴"
    name = "reddit_search"
    default_subreddit = "programming"

    def feed_urls(self, subreddit: str, term: str) -> list[str]:
        return [
            f"https://www.reddit.com/r/{subreddit}/search.rss"
            f"?q={quote_plus(term)}&sort=new&t=day&restrict_sr=1",
            f"https://www.reddit.com/r/{subreddit}/hot.rss",
        ]

    async def _fetch(self, query: SourceQuery) -> list[CandidateItem]:
        subreddit = query.options.get("subreddit") or self.default_subreddit
        label = f"r/{subreddit}"

        async with self._client() as client:
            for url in self.feed_urls(subreddit, query.term):
                try:
                    response = await client.get(url, timeout=self.timeout)
                except httpx.HTTPError as e:
                    logger.debug("Reddit feed %s failed: %s", url, e)
                    continue
                if not response.is_success:
                    continue

                entries = parse_atom_entries(response.text, query.max_results * 2, label)
                items = self._keep_fresh(candidate_from_feed_item(e) for e in entries)[: query.max_results]
                if items:
                    return items

        return []
