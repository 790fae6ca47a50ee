"""DuckDuckGo web and news search via the HTML endpoint."""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import parse_qs, urlparse

from bs4 import BeautifulSoup

from news_curator.adapters.sources.base import HttpSourceAdapter
from news_curator.core import CandidateItem, SourceQuery
from news_curator.core.candidates import DEFAULT_CATEGORY, DEFAULT_RELEVANCE
from news_curator.core.freshness import UNKNOWN_DATE_SENTINEL, classify_date

_RELATIVE = re.compile(r"(\d+)\s+(minute|hour|day|week)s?\s+ago", re.IGNORECASE)


def resolve_result_url(href: str) -> str:
    """Unwrap DuckDuckGo's ``/l/?uddg=`` redirect links."""
    if not href:
        return ""
    if href.startswith("//"):
        href = f"https:{href}"
    parsed = urlparse(href)
    if parsed.path.startswith("/l/"):
        target = parse_qs(parsed.query).get("uddg")
        if target:
            return target[0]
    return href


def relative_to_iso(text: str, now: Optional[datetime] = None) -> str:
    """Turn ``"3 hours ago"`` into an ISO timestamp; other text is returned as-is."""
    match = _RELATIVE.search(text or "")
    if not match:
        return (text or "").strip()
    now = now or datetime.now(timezone.utc)
    amount = int(match.group(1))
    unit = match.group(2).lower()
    delta = {
        "minute": timedelta(minutes=amount),
        "hour": timedelta(hours=amount),
        "day": timedelta(days=amount),
        "week": timedelta(weeks=amount),
    }[unit]
    return (now - delta).isoformat()


class DuckDuckGoSearchSource(HttpSourceAdapter):
    """Web search results (title, url, snippet)."""

    emoji = "🦆"
    name = "duckduckgo_search"
    search_url = "https://html.duckduckgo.com/html/"
    source_label = "DuckDuckGo"
    # Date recorded for results that carry no timestamp
    undated = ""

    def search_params(self, term: str) -> dict:
        return {"q": term}

    async def _fetch(self, query: SourceQuery) -> list[CandidateItem]:
        async with self._client() as client:
            response = await client.get(
                self.search_url, params=self.search_params(query.term), timeout=self.timeout
            )
            response.raise_for_status()

        items = self.parse_results(response.text)
        return self._keep_fresh(items)[: query.max_results]

    def parse_results(self, html: str) -> list[CandidateItem]:
        """Extract result blocks from the HTML results page."""
        soup = BeautifulSoup(html, "html.parser")
        items = []

        for result in soup.select("div.result"):
            link = result.select_one("a.result__a")
            if link is None:
                continue
            title = link.get_text(" ", strip=True)
            if not title:
                continue

            snippet = result.select_one(".result__snippet")
            timestamp = result.select_one(".result__timestamp")
            published = relative_to_iso(timestamp.get_text(strip=True)) if timestamp else self.undated

            items.append(CandidateItem(
                title=title,
                url=resolve_result_url(link.get("href", "")),
                source=self.source_label,
                summary=snippet.get_text(" ", strip=True) if snippet else "",
                relevance=DEFAULT_RELEVANCE,
                category=DEFAULT_CATEGORY,
                published=classify_date(published),
            ))
        return items


class DuckDuckGoNewsSource(DuckDuckGoSearchSource):
    """Same endpoint restricted to the past day."""

    emoji = "📰"
    name = "duckduckgo_news"
    source_label = "DuckDuckGo News"
    # df=d already limits results to the past day
    undated = UNKNOWN_DATE_SENTINEL

    def search_params(self, term: str) -> dict:
        return {"q": f"{term} news", "df": "d"}
