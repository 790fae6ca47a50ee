"""YouTube Data API v3 sources."""

from typing import Optional

import httpx

from news_curator.adapters.sources.base import HttpSourceAdapter
from news_curator.core import CandidateItem, MissingCredentialError, SourceQuery
from news_curator.core.candidates import DEFAULT_CATEGORY, DEFAULT_RELEVANCE
from news_curator.core.freshness import classify_date

# The API quota is small; never ask for more than this per call
MAX_VIDEOS = 5


class YouTubeSearchSource(HttpSourceAdapter):
    """Search recent videos by query."""

    emoji = "🎥"
    name = "youtube_search"
    api_url = "https://www.googleapis.com/youtube/v3/search"

    def __init__(
        self,
        api_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(client, timeout)
        self.api_key = api_key

    def search_params(self, query: SourceQuery) -> dict:
        return {"q": query.term}

    async def _fetch(self, query: SourceQuery) -> list[CandidateItem]:
        if not self.api_key:
            raise MissingCredentialError("YOUTUBE_API_KEY")

        params = {
            "part": "snippet",
            "type": "video",
            "order": "date",
            "maxResults": min(query.max_results, MAX_VIDEOS),
            "key": self.api_key,
            **self.search_params(query),
        }
        async with self._client() as client:
            response = await client.get(self.api_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()

        items = []
        for video in data.get("items", []):
            snippet = video.get("snippet") or {}
            video_id = (video.get("id") or {}).get("videoId")
            title = (snippet.get("title") or "").strip()
            if not video_id or not title:
                continue

            channel = snippet.get("channelTitle") or ""
            description = snippet.get("description") or ""
            items.append(CandidateItem(
                title=title,
                url=f"https://www.youtube.com/watch?v={video_id}",
                source="YouTube",
                summary=f"{channel}: {description}" if channel else description,
                relevance=DEFAULT_RELEVANCE,
                category=DEFAULT_CATEGORY,
                published=classify_date(snippet.get("publishedAt") or ""),
            ))

        return self._keep_fresh(items)


class YouTubeChannelSource(YouTubeSearchSource):
    """Latest videos from one channel id."""

    emoji = "📺"
    name = "youtube_channel_videos"

    def search_params(self, query: SourceQuery) -> dict:
        channel_id = query.term
        if channel_id.startswith("youtube:"):
            channel_id = channel_id[len("youtube:"):]
        return {"channelId": channel_id}
