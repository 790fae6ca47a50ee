"""Tolerant RSS 2.0 / Atom parsing into FeedItems.

Extraction is pattern based rather than a strict XML parse: real-world feeds
are frequently malformed, and a single bad entity must not lose the whole
feed.
"""

import html
import re
from typing import Optional

from news_curator.core.entities import FeedItem

_FLAGS = re.DOTALL | re.IGNORECASE

_RSS_ITEM = re.compile(r"<item(?:\s[^>]*)?>(.*?)</item>", _FLAGS)
_ATOM_ENTRY = re.compile(r"<entry(?:\s[^>]*)?>(.*?)</entry>", _FLAGS)

_TITLE = re.compile(r"<title[^>]*>(.*?)</title>", _FLAGS)
_LINK_TEXT = re.compile(r"<link[^>]*>(.*?)</link>", _FLAGS)
_LINK_TAG = re.compile(r"<link\b([^>]*?)/?>", _FLAGS)
_HREF = re.compile(r"""href\s*=\s*["']([^"']*)["']""", _FLAGS)
_REL = re.compile(r"""rel\s*=\s*["']([^"']*)["']""", _FLAGS)
_PUB_DATE = re.compile(r"<pubDate[^>]*>(.*?)</pubDate>", _FLAGS)
_DC_DATE = re.compile(r"<dc:date[^>]*>(.*?)</dc:date>", _FLAGS)
_UPDATED = re.compile(r"<updated[^>]*>(.*?)</updated>", _FLAGS)
_PUBLISHED = re.compile(r"<published[^>]*>(.*?)</published>", _FLAGS)
_SOURCE = re.compile(r"<source[^>]*>(.*?)</source>", _FLAGS)
_DESCRIPTION = re.compile(r"<description[^>]*>(.*?)</description>", _FLAGS)
_SUMMARY = re.compile(r"<summary[^>]*>(.*?)</summary>", _FLAGS)
_CONTENT = re.compile(r"<content[^>]*>(.*?)</content>", _FLAGS)

_CDATA = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)
_TAGS = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")

SUMMARY_MAX_CHARS = 500


def clean_text(value: str) -> str:
    """Unwrap CDATA sections and decode HTML entities."""
    value = _CDATA.sub(r"\1", value)
    return html.unescape(value).strip()


def _strip_markup(value: str) -> str:
    # Descriptions are often entity-escaped HTML, so decode before stripping tags
    text = _TAGS.sub(" ", clean_text(value))
    text = _WHITESPACE.sub(" ", text).strip()
    if len(text) > SUMMARY_MAX_CHARS:
        text = text[:SUMMARY_MAX_CHARS].rstrip() + "..."
    return text


def _first(block: str, *patterns: re.Pattern) -> str:
    for pattern in patterns:
        match = pattern.search(block)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return ""


def _atom_link(block: str) -> str:
    """Pick the entry's link, preferring rel="alternate" (or no rel)."""
    fallback = ""
    for match in _LINK_TAG.finditer(block):
        attrs = match.group(1)
        href = _HREF.search(attrs)
        if not href:
            continue
        rel = _REL.search(attrs)
        if rel is None or rel.group(1).lower() == "alternate":
            return html.unescape(href.group(1).strip())
        if not fallback:
            fallback = html.unescape(href.group(1).strip())
    if fallback:
        return fallback
    return clean_text(_first(block, _LINK_TEXT))


def parse_rss_items(xml: str, max_items: int, source: str) -> list[FeedItem]:
    """Extract RSS 2.0 ``<item>`` blocks."""
    items: list[FeedItem] = []
    for match in _RSS_ITEM.finditer(xml):
        if len(items) >= max_items:
            break
        block = match.group(1)

        title = clean_text(_first(block, _TITLE))
        if not title:
            continue

        items.append(FeedItem(
            title=title,
            url=clean_text(_first(block, _LINK_TEXT)),
            published_at=clean_text(_first(block, _PUB_DATE, _DC_DATE)),
            source=clean_text(_first(block, _SOURCE)) or source,
            summary=_strip_markup(_first(block, _DESCRIPTION)),
        ))
    return items


def parse_atom_entries(xml: str, max_items: int, source: str) -> list[FeedItem]:
    """Extract Atom ``<entry>`` blocks."""
    items: list[FeedItem] = []
    for match in _ATOM_ENTRY.finditer(xml):
        if len(items) >= max_items:
            break
        block = match.group(1)

        title = clean_text(_first(block, _TITLE))
        if not title:
            continue

        items.append(FeedItem(
            title=title,
            url=_atom_link(block),
            published_at=clean_text(_first(block, _UPDATED, _PUBLISHED)),
            source=source,
            summary=_strip_markup(_first(block, _SUMMARY, _CONTENT)),
        ))
    return items


def parse_feed(xml: Optional[str], max_items: int, source: str) -> list[FeedItem]:
    """Parse RSS, falling back to Atom when no ``<item>`` is recovered.

    Never raises: an unusable document yields an empty list.
    """
    if not xml or max_items <= 0:
        return []

    items = parse_rss_items(xml, max_items, source)
    if not items:
        items = parse_atom_entries(xml, max_items, source)
    return items
