"""Tests for parsing and normalizing extracted candidate payloads."""

import json

from news_curator.core import DateConfidence, ImpactLevel
from news_curator.core.candidates import (
    DEFAULT_CATEGORY,
    DEFAULT_RELEVANCE,
    DEFAULT_SOURCE,
    DEFAULT_TITLE,
    fix_json,
    normalize_candidate,
    normalize_candidates,
    parse_candidate_payload,
)


def test_parse_payload_from_markdown() -> None:
    """Test extracting an array from a markdown code block."""
    text = '```json\n[{"title": "A", "url": "https://a.dev"}]\n```'
    assert parse_candidate_payload(text) == [{"title": "A", "url": "https://a.dev"}]


def test_parse_payload_with_prefix_text() -> None:
    """Test extracting the array when there's text around it."""
    text = 'Here are the items:\n[{"title": "A"}, {"title": "B"}]\nHope this helps.'
    assert [r["title"] for r in parse_candidate_payload(text)] == ["A", "B"]


def test_parse_payload_wrapped_object() -> None:
    text = json.dumps({"items": [{"title": "A"}]})
    assert parse_candidate_payload(text) == [{"title": "A"}]


def test_parse_payload_skips_non_objects() -> None:
    text = '[{"title": "A"}, "junk", 3, null]'
    assert parse_candidate_payload(text) == [{"title": "A"}]


def test_parse_payload_garbage() -> None:
    """Test fallback for plain text without JSON."""
    assert parse_candidate_payload("This is just plain text") == []
    assert parse_candidate_payload("[not json at all]") == []
    assert parse_candidate_payload("") == []
    assert parse_candidate_payload(None) == []
    assert parse_candidate_payload('{"title": "not an array"}') == []


def test_fix_json_trailing_comma() -> None:
    """Test fixing trailing comma in JSON."""
    parsed = json.loads(fix_json('{"title": "A", "url": "x",}'))
    assert parsed["title"] == "A"


def test_fix_json_trailing_comma_in_array() -> None:
    """Test fixing trailing comma in JSON array."""
    parsed = json.loads(fix_json('["item1", "item2", "item3",]'))
    assert len(parsed) == 3


def test_normalize_candidate_defaults() -> None:
    item = normalize_candidate({})

    assert item.title == DEFAULT_TITLE
    assert item.url == ""
    assert item.source == DEFAULT_SOURCE
    assert item.category == DEFAULT_CATEGORY
    assert item.relevance == DEFAULT_RELEVANCE
    assert item.base_relevance == DEFAULT_RELEVANCE
    assert item.impact_level is None
    assert item.published.confidence is DateConfidence.MISSING


def test_normalize_candidate_full_record() -> None:
    item = normalize_candidate({
        "title": "  Next.js 15  ",
        "url": "https://nextjs.org/blog/next-15",
        "summary": "Turbopack stable",
        "importance_score": 8.6,
        "technologies": ["next.js", "react"],
        "category": "Frameworks",
        "published_at": "2025-01-06T10:00:00Z",
        "is_major_announcement": True,
        "relevant_roles": ["frontend_engineer"],
        "source": "Vercel",
    })

    assert item.title == "Next.js 15"
    assert item.relevance == 9
    assert item.category == "next.js"
    assert item.impact_level is ImpactLevel.CRITICAL
    assert item.asserted_impact is ImpactLevel.CRITICAL
    assert item.relevant_roles == ("frontend_engineer",)
    assert item.published.confidence is DateConfidence.KNOWN


def test_normalize_candidate_score_fallbacks() -> None:
    assert normalize_candidate({"relevance": 7}).relevance == 7
    assert normalize_candidate({"importance_score": 0, "relevance": 6}).relevance == 6
    assert normalize_candidate({"importance_score": "high"}).relevance == DEFAULT_RELEVANCE
    assert normalize_candidate({"importance_score": True}).relevance == DEFAULT_RELEVANCE


def test_normalize_candidate_explicit_impact_wins() -> None:
    item = normalize_candidate({"impactLevel": "medium", "is_major_announcement": True})
    assert item.asserted_impact is ImpactLevel.MEDIUM

    assert normalize_candidate({"impactLevel": "huge"}).asserted_impact is None


def test_normalize_candidate_sentinel_date() -> None:
    item = normalize_candidate({"title": "A", "publishedAt": "today"})
    assert item.published.confidence is DateConfidence.ASSUMED_FRESH


def test_normalize_candidates_skips_non_mappings() -> None:
    items = normalize_candidates([{"title": "A"}, "junk", None, {"title": "B"}])
    assert [i.title for i in items] == ["A", "B"]
