"""Lobste.rs stories by tag."""

import re

from news_curator.adapters.sources.base import HttpSourceAdapter
from news_curator.adapters.sources.http import API_UA
from news_curator.core import CandidateItem, SourceQuery
from news_curator.core.candidates import DEFAULT_CATEGORY, DEFAULT_RELEVANCE
from news_curator.core.freshness import classify_date


class LobstersSource(HttpSourceAdapter):
    """Browse Lobste.rs, falling back to the newest listing."""

    emoji = "🦞"
    name = "lobsters_search"
    user_agent = API_UA
    base_url = "https://lobste.rs"

    async def _fetch(self, query: SourceQuery) -> list[CandidateItem]:
        tag = re.sub(r"[^a-z0-9]", "", query.term.lower())
        urls = [f"{self.base_url}/t/{tag}.json", f"{self.base_url}/newest.json"] if tag else [
            f"{self.base_url}/newest.json"
        ]
        stories: list = []

        async with self._client() as client:
            for url in urls:
                response = await client.get(url, timeout=self.timeout)
                if response.is_success:
                    stories = response.json() or []
                    if stories:
                        break

        items = []
        for story in stories:
            if not isinstance(story, dict) or not story.get("title"):
                continue
            tags = story.get("tags") or []
            items.append(CandidateItem(
                title=story["title"].strip(),
                url=story.get("url") or f"{self.base_url}/s/{story.get('short_id', '')}",
                source="Lobste.rs",
                summary=f"{story.get('score', 0)} points, {story.get('comment_count', 0)} comments",
                relevance=DEFAULT_RELEVANCE,
                category=tags[0] if tags else DEFAULT_CATEGORY,
                published=classify_date(story.get("created_at") or ""),
                technologies=tuple(tags),
            ))

        return self._keep_fresh(items)[: query.max_results]
