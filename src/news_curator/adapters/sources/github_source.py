"""GitHub source for repositories trending over the last day."""

from datetime import date, timedelta
from typing import Optional

import httpx

from news_curator.adapters.sources.base import HttpSourceAdapter
from news_curator.adapters.sources.http import API_UA
from news_curator.core import CandidateItem, SourceQuery
from news_curator.core.candidates import DEFAULT_CATEGORY, DEFAULT_RELEVANCE
from news_curator.core.freshness import classify_date


class GitHubTrendingSource(HttpSourceAdapter):
    """Most-starred repositories pushed to since yesterday."""

    emoji = "🐙"
    name = "github_trending"
    user_agent = API_UA
    max_repos = 10

    def __init__(
        self,
        token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(client, timeout)
        self.token = token
        self.api_base = "https://api.github.com"

    def build_query(self, language: str, today: date) -> str:
        """Search qualifier; ``term`` is an optional language filter."""
        since = (today - timedelta(days=1)).isoformat()
        scope = f"language:{language}" if language else "stars:>100"
        return f"{scope} pushed:>{since}"

    async def _fetch(self, query: SourceQuery) -> list[CandidateItem]:
        language = query.term.strip().lower()
        params = {
            "q": self.build_query(language, date.today()),
            "sort": "stars",
            "order": "desc",
            "per_page": self.max_repos,
        }

        async with self._client() as client:
            response = await client.get(
                f"{self.api_base}/search/repositories",
                headers=self._get_headers(),
                params=params,
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()

        items = []
        for repo in (data.get("items") or [])[: self.max_repos]:
            item = self._create_item_from_search_result(repo)
            if item:
                items.append(item)
        return items

    def _create_item_from_search_result(self, repo: dict) -> Optional[CandidateItem]:
        """Create item from search API result (no additional requests)."""
        full_name = repo.get("full_name")
        if not full_name:
            return None

        description = repo.get("description") or "No description"
        stars = repo.get("stargazers_count", 0)
        language = repo.get("language") or ""

        return CandidateItem(
            title=full_name,
            url=repo.get("html_url") or f"https://github.com/{full_name}",
            source="GitHub",
            summary=f"{description} ({stars} stars)",
            relevance=DEFAULT_RELEVANCE,
            category=language or DEFAULT_CATEGORY,
            published=classify_date(repo.get("pushed_at") or ""),
            technologies=(language,) if language else (),
        )

    def _get_headers(self) -> dict[str, str]:
        """Get headers for GitHub API requests."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        return headers
