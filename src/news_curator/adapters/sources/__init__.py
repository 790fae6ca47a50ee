"""Source adapters for fetching items."""

from datetime import timedelta
from typing import Optional

import httpx

from news_curator.adapters.sources.base import HttpSourceAdapter
from news_curator.adapters.sources.devto_source import DevToSource
from news_curator.adapters.sources.duckduckgo_source import DuckDuckGoNewsSource, DuckDuckGoSearchSource
from news_curator.adapters.sources.feed_discovery import DiscoveryResult, FeedDiscoverer
from news_curator.adapters.sources.github_source import GitHubTrendingSource
from news_curator.adapters.sources.google_news_source import GoogleNewsSource
from news_curator.adapters.sources.hackernews_source import HackerNewsSource
from news_curator.adapters.sources.lobsters_source import LobstersSource
from news_curator.adapters.sources.reddit_source import RedditSource
from news_curator.adapters.sources.rss_feed_source import RSSFeedSource
from news_curator.adapters.sources.website_source import WebsiteSource
from news_curator.adapters.sources.youtube_source import YouTubeChannelSource, YouTubeSearchSource
from news_curator.config import Settings
from news_curator.core import EventHook, SourceAdapter


def build_adapters(
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
    hook: Optional[EventHook] = None,
) -> dict[str, SourceAdapter]:
    """Instantiate every known adapter, keyed by its tool name."""
    timeout = settings.http.request_timeout
    discoverer = FeedDiscoverer(
        client=client,
        page_timeout=settings.http.page_timeout,
        probe_timeout=settings.http.probe_timeout,
        hook=hook,
    )

    adapters: list[SourceAdapter] = [
        DuckDuckGoSearchSource(client, timeout),
        DuckDuckGoNewsSource(client, timeout),
        GoogleNewsSource(client, timeout),
        HackerNewsSource(client, timeout),
        RedditSource(client, timeout),
        DevToSource(client, timeout),
        LobstersSource(client, timeout),
        RSSFeedSource(client, timeout, discoverer),
        GitHubTrendingSource(settings.github_token, client, timeout),
        YouTubeSearchSource(settings.youtube_api_key, client, timeout),
        YouTubeChannelSource(settings.youtube_api_key, client, timeout),
        WebsiteSource(client, timeout),
    ]
    window = timedelta(hours=settings.curation.window_hours)
    skew_tolerance = timedelta(minutes=settings.curation.skew_tolerance_minutes)
    for adapter in adapters:
        if isinstance(adapter, HttpSourceAdapter):
            adapter.set_window(window, skew_tolerance)
    return {adapter.name: adapter for adapter in adapters}


__all__ = [
    "DevToSource",
    "DiscoveryResult",
    "DuckDuckGoNewsSource",
    "DuckDuckGoSearchSource",
    "FeedDiscoverer",
    "GitHubTrendingSource",
    "GoogleNewsSource",
    "HackerNewsSource",
    "LobstersSource",
    "RSSFeedSource",
    "RedditSource",
    "WebsiteSource",
    "YouTubeChannelSource",
    "YouTubeSearchSource",
    "build_adapters",
]
