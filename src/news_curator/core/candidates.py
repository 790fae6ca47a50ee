"""Ingestion boundary for untrusted candidate payloads.

Everything produced by the extraction step (or any other loosely-typed
producer) passes through ``parse_candidate_payload`` and
``normalize_candidate`` exactly once. Downstream code only sees fully-populated
``CandidateItem`` values.
"""

import json
import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from news_curator.core.entities import CandidateItem, FeedItem, ImpactLevel
from news_curator.core.freshness import classify_date

logger = logging.getLogger(__name__)

DEFAULT_RELEVANCE = 5
DEFAULT_TITLE = "No Title"
DEFAULT_SOURCE = "Unknown"
DEFAULT_CATEGORY = "General"


def fix_json(text: str) -> str:
    """Try to fix common JSON issues."""
    # Remove trailing commas before } or ]
    return re.sub(r",(\s*[}\]])", r"\1", text)


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences around a JSON document."""
    text = re.sub(r"```(?:json)?\s*\n?", "", text)
    return text.strip()


def parse_candidate_payload(text: Optional[str]) -> list[dict[str, Any]]:
    """Decode a JSON array of candidate records from free-form model output.

    Falls back to the outermost ``[...]`` block when the whole text is not
    valid JSON. Anything that is not a list of objects degrades to ``[]``.
    """
    if not text or not text.strip():
        return []

    cleaned = strip_code_fences(text)
    parsed: Any = None
    try:
        parsed = json.loads(fix_json(cleaned))
    except json.JSONDecodeError:
        match = re.search(r"\[.*\]", cleaned, re.DOTALL)
        if match:
            try:
                parsed = json.loads(fix_json(match.group(0)))
            except json.JSONDecodeError as e:
                logger.warning("Candidate payload is not valid JSON: %s", e)
                return []

    if isinstance(parsed, Mapping):
        # Some models wrap the array: {"items": [...]}
        for key in ("items", "newsItems", "results"):
            if isinstance(parsed.get(key), list):
                parsed = parsed[key]
                break

    if not isinstance(parsed, list):
        logger.warning("Candidate payload is not an array (got %s)", type(parsed).__name__)
        return []

    return [entry for entry in parsed if isinstance(entry, Mapping)]


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def _strings(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value.strip(),) if value.strip() else ()
    if isinstance(value, Iterable) and not isinstance(value, Mapping):
        return tuple(s for s in (_text(v) for v in value) if s)
    return ()


def _relevance(*values: Any) -> int:
    """First usable numeric score, rounded; DEFAULT_RELEVANCE otherwise."""
    for value in values:
        if isinstance(value, bool) or value is None:
            continue
        try:
            score = float(value)
        except (TypeError, ValueError):
            continue
        if score != score or score in (float("inf"), float("-inf")):
            continue
        if score == 0:
            continue
        return int(round(score))
    return DEFAULT_RELEVANCE


def _impact(value: Any) -> Optional[ImpactLevel]:
    if isinstance(value, ImpactLevel):
        return value
    text = _text(value).lower()
    try:
        return ImpactLevel(text) if text else None
    except ValueError:
        return None


def normalize_candidate(raw: Mapping[str, Any]) -> Optional[CandidateItem]:
    """Build a CandidateItem from one loosely-typed record.

    Returns None for anything that is not a mapping.
    """
    if not isinstance(raw, Mapping):
        return None

    technologies = _strings(raw.get("technologies"))
    category = technologies[0] if technologies else (_text(raw.get("category")) or DEFAULT_CATEGORY)

    is_major = raw.get("is_major_announcement") is True
    asserted = _impact(raw.get("impactLevel", raw.get("impact_level")))
    if asserted is None and is_major:
        asserted = ImpactLevel.CRITICAL

    relevance = _relevance(raw.get("importance_score"), raw.get("relevance"))
    published_raw = raw.get("published_at") or raw.get("publishedAt") or ""

    return CandidateItem(
        title=_text(raw.get("title")) or DEFAULT_TITLE,
        url=_text(raw.get("url")),
        source=_text(raw.get("source")) or DEFAULT_SOURCE,
        summary=_text(raw.get("summary")),
        relevance=relevance,
        category=category,
        published=classify_date(_text(published_raw)),
        impact_level=asserted,
        base_relevance=relevance,
        asserted_impact=asserted,
        target_audience=_strings(raw.get("target_audience")),
        technologies=technologies,
        primary_role=_text(raw.get("primary_role")),
        relevant_roles=_strings(raw.get("relevant_roles")),
        is_major_announcement=is_major,
    )


def normalize_candidates(records: Iterable[Any]) -> list[CandidateItem]:
    """Normalize a batch, silently skipping non-mapping entries."""
    items = []
    for record in records:
        item = normalize_candidate(record)
        if item is not None:
            items.append(item)
    return items


def candidate_from_feed_item(item: FeedItem, relevance: int = DEFAULT_RELEVANCE) -> CandidateItem:
    """Lift a parsed feed item into the candidate shape."""
    return CandidateItem(
        title=item.title,
        url=item.url,
        source=item.source,
        summary=item.summary,
        relevance=relevance,
        category=DEFAULT_CATEGORY,
        published=classify_date(item.published_at),
        base_relevance=relevance,
    )
