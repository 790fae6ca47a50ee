"""Base class for adapters that talk HTTP."""

from datetime import timedelta
from typing import Iterable, Optional

import httpx

from news_curator.adapters.sources.filters import feed_candidates, keep_fresh
from news_curator.adapters.sources.http import BROWSER_UA, DEFAULT_TIMEOUT, open_client
from news_curator.core import CandidateItem, SourceAdapter
from news_curator.core.freshness import SKEW_TOLERANCE, WINDOW


class HttpSourceAdapter(SourceAdapter):
    """Source adapter with an optional shared ``httpx.AsyncClient``."""

    user_agent = BROWSER_UA
    window = WINDOW
    skew_tolerance = SKEW_TOLERANCE

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.client = client
        self.timeout = timeout

    def set_window(self, window: timedelta, skew_tolerance: timedelta) -> None:
        """Override the freshness window used when filtering fetched items."""
        self.window = window
        self.skew_tolerance = skew_tolerance

    def _client(self):
        return open_client(self.client, timeout=self.timeout, user_agent=self.user_agent)

    def _keep_fresh(self, items: Iterable[CandidateItem]) -> list[CandidateItem]:
        return keep_fresh(items, window=self.window, skew_tolerance=self.skew_tolerance)

    def _feed_candidates(self, xml: str, max_results: int, source: str) -> list[CandidateItem]:
        return feed_candidates(
            xml, max_results, source, window=self.window, skew_tolerance=self.skew_tolerance
        )
