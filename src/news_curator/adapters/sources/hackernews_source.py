"""Hacker News search via the Algolia API."""

import time

from news_curator.adapters.sources.base import HttpSourceAdapter
from news_curator.adapters.sources.http import API_UA
from news_curator.core import CandidateItem, SourceQuery
from news_curator.core.candidates import DEFAULT_CATEGORY, DEFAULT_RELEVANCE
from news_curator.core.freshness import classify_date


class HackerNewsSource(HttpSourceAdapter):
    """Search recent Hacker News stories."""

    emoji = "🔶"
    name = "hackernews_search"
    user_agent = API_UA
    api_url = "https://hn.algolia.com/api/v1/search_by_date"

    async def _fetch(self, query: SourceQuery) -> list[CandidateItem]:
        since = int(time.time() - self.window.total_seconds())
        params = {
            "query": query.term,
            "tags": "story",
            "numericFilters": f"created_at_i>{since}",
            "hitsPerPage": query.max_results,
        }
        async with self._client() as client:
            response = await client.get(self.api_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()

        items = []
        for hit in data.get("hits", []):
            title = (hit.get("title") or "").strip()
            if not title:
                continue

            points = hit.get("points") or 0
            comments = hit.get("num_comments") or 0
            items.append(CandidateItem(
                title=title,
                url=hit.get("url") or f"https://news.ycombinator.com/item?id={hit.get('objectID', '')}",
                source="Hacker News",
                summary=f"{points} points, {comments} comments",
                relevance=DEFAULT_RELEVANCE,
                category=DEFAULT_CATEGORY,
                published=classify_date(hit.get("created_at") or ""),
            ))

        # The API filter is by creation time; re-check against our own window
        return self._keep_fresh(items)[: query.max_results]
