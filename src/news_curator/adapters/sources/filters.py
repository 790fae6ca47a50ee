"""Shared filtering utilities for sources."""

from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from news_curator.core.candidates import candidate_from_feed_item
from news_curator.core.entities import CandidateItem, FeedItem
from news_curator.core.feed_parser import parse_feed
from news_curator.core.freshness import SKEW_TOLERANCE, WINDOW, classify_date, is_fresh


def keep_fresh(
    items: Iterable[CandidateItem],
    now: Optional[datetime] = None,
    window: timedelta = WINDOW,
    skew_tolerance: timedelta = SKEW_TOLERANCE,
) -> list[CandidateItem]:
    """
    Drop items whose known date falls outside the freshness window.

    Missing or unparseable dates are kept: the reranker makes the final call.
    """
    now = now or datetime.now(timezone.utc)
    return [
        item for item in items
        if is_fresh(item.published, now=now, window=window, skew_tolerance=skew_tolerance)
    ]


def read_feed(
    xml: str,
    max_results: int,
    source: str,
    now: Optional[datetime] = None,
    window: timedelta = WINDOW,
    skew_tolerance: timedelta = SKEW_TOLERANCE,
) -> list[FeedItem]:
    """
    Parse a feed document and keep only fresh entries.

    Parses three times the requested amount first so that filtering out old
    entries still leaves enough to fill ``max_results``.
    """
    now = now or datetime.now(timezone.utc)
    items = parse_feed(xml, max_results * 3, source)
    fresh = [
        item for item in items
        if is_fresh(classify_date(item.published_at), now=now, window=window, skew_tolerance=skew_tolerance)
    ]
    return fresh[:max_results]


def feed_candidates(
    xml: str,
    max_results: int,
    source: str,
    now: Optional[datetime] = None,
    window: timedelta = WINDOW,
    skew_tolerance: timedelta = SKEW_TOLERANCE,
) -> list[CandidateItem]:
    """``read_feed`` lifted into candidate items."""
    return [
        candidate_from_feed_item(item)
        for item in read_feed(xml, max_results, source, now, window, skew_tolerance)
    ]
