"""Dev.to articles by tag."""

from news_curator.adapters.sources.base import HttpSourceAdapter
from news_curator.adapters.sources.http import API_UA
from news_curator.core import CandidateItem, SourceQuery
from news_curator.core.candidates import DEFAULT_CATEGORY, DEFAULT_RELEVANCE
from news_curator.core.freshness import classify_date


class DevToSource(HttpSourceAdapter):
    """Fetch recent Dev.to articles for a tag."""

    emoji = "🔷"
    name = "devto_articles"
    user_agent = API_UA
    api_url = "https://dev.to/api/articles"

    def endpoints(self, tag: str, per_page: int) -> list[dict]:
        """Parameter sets tried in order until one returns articles."""
        return [
            {"per_page": per_page, "top": 1, "tag": tag},
            {"per_page": per_page, "tag": tag},
            {"per_page": per_page, "state": "fresh"},
        ]

    async def _fetch(self, query: SourceQuery) -> list[CandidateItem]:
        words = query.term.split()
        tag = words[0].lower() if words else ""
        articles: list = []

        async with self._client() as client:
            for params in self.endpoints(tag, query.max_results):
                response = await client.get(self.api_url, params=params, timeout=self.timeout)
                if response.is_success:
                    articles = response.json() or []
                    if articles:
                        break

        items = []
        for article in articles:
            if not isinstance(article, dict) or not article.get("title"):
                continue
            tags = article.get("tag_list") or []
            if isinstance(tags, str):
                tags = [t.strip() for t in tags.split(",") if t.strip()]
            author = (article.get("user") or {}).get("name", "")

            items.append(CandidateItem(
                title=article["title"].strip(),
                url=article.get("url") or "",
                source="Dev.to",
                summary=article.get("description") or (f"By {author}" if author else ""),
                relevance=DEFAULT_RELEVANCE,
                category=tags[0] if tags else DEFAULT_CATEGORY,
                published=classify_date(article.get("published_at") or ""),
                technologies=tuple(tags),
            ))

        return self._keep_fresh(items)[: query.max_results]
