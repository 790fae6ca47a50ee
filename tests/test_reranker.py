"""Tests for scoring, filtering and deduplication."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from news_curator.core import CandidateItem, EventRecorder, ImpactLevel, Reranker, StalenessPolicy
from news_curator.core.freshness import classify_date
from news_curator.core.reranker import clamp, dedup_key, deduplicate, impact_for_score, is_noise, rerank

NOW = datetime(2025, 1, 6, 12, 0, tzinfo=timezone.utc)


def make_item(
    title: str,
    url: str = "",
    relevance: int = 5,
    hours_ago: Optional[float] = 1,
    published: Optional[str] = None,
    impact: Optional[ImpactLevel] = None,
    summary: str = "",
) -> CandidateItem:
    """Create a candidate the way the ingestion boundary would."""
    if published is None:
        published = (NOW - timedelta(hours=hours_ago)).isoformat() if hours_ago is not None else ""
    return CandidateItem(
        title=title,
        url=url,
        source="Test",
        summary=summary,
        relevance=relevance,
        category="General",
        published=classify_date(published),
        impact_level=impact,
        base_relevance=relevance,
        asserted_impact=impact,
    )


@pytest.fixture
def reranker() -> Reranker:
    return Reranker(policy=StalenessPolicy.HARD_EXCLUDE)


@pytest.fixture
def lenient_reranker() -> Reranker:
    return Reranker(policy=StalenessPolicy.KEEP_WITH_PENALTY)


def test_impact_for_score() -> None:
    assert impact_for_score(10) is ImpactLevel.HIGH
    assert impact_for_score(8) is ImpactLevel.HIGH
    assert impact_for_score(7) is ImpactLevel.MEDIUM
    assert impact_for_score(5) is ImpactLevel.MEDIUM
    assert impact_for_score(4) is ImpactLevel.LOW
    assert impact_for_score(1) is ImpactLevel.LOW


def test_clamp() -> None:
    assert clamp(15) == 10
    assert clamp(-4) == 1
    assert clamp(6) == 6


def test_is_noise() -> None:
    assert is_noise("CEO steps down after layoffs")
    assert is_noise("Startup raises funding round")
    assert not is_noise("Kubernetes 1.32 adds sidecar containers")
    # Word boundaries
    assert not is_noise("Recipe for ceosselin")


def test_dedup_key() -> None:
    assert dedup_key(make_item("A", url="https://X.com/a/")) == ("url", "https://x.com/a")
    assert dedup_key(make_item("A", url="  ")) == ("title", "A")


def test_deduplicate_keeps_first() -> None:
    items = [make_item("First", url="https://x.com/a"), make_item("Second", url="https://x.com/a/")]
    assert [i.title for i in deduplicate(items)] == ["First"]


def test_scenario_fresh_item_beats_stale_duplicate(reranker: Reranker) -> None:
    """A fresh item survives; its stale twin with a higher score does not."""
    fresh = make_item("Next.js 15 released", url="https://nextjs.org/blog/next-15", relevance=6, hours_ago=2)
    stale = make_item("Next.js 15 released", url="https://nextjs.org/blog/next-15", relevance=9, hours_ago=72)

    result = reranker.rerank([stale, fresh], now=NOW)

    assert len(result) == 1
    assert result[0].published == fresh.published
    assert result[0].relevance == 6
    assert result[0].impact_level is ImpactLevel.MEDIUM


def test_scenario_fresh_item_beats_stale_duplicate_with_penalty(lenient_reranker: Reranker) -> None:
    fresh = make_item("Next.js 15 released", url="https://nextjs.org/blog/next-15", relevance=6, hours_ago=2)
    stale = make_item("Next.js 15 released", url="https://nextjs.org/blog/next-15", relevance=9, hours_ago=72)

    result = lenient_reranker.rerank([stale, fresh], now=NOW)

    assert len(result) == 1
    assert result[0].published == fresh.published
    assert result[0].impact_level is ImpactLevel.MEDIUM


def test_scenario_title_fallback_dedup(reranker: Reranker) -> None:
    """Items without URLs are deduplicated by title."""
    items = [make_item("Rust 1.80 ships"), make_item("Rust 1.80 ships")]
    assert len(reranker.rerank(items, now=NOW)) == 1


def test_trailing_slash_dedup_keeps_higher_score(reranker: Reranker) -> None:
    low = make_item("Low", url="https://x.com/a", relevance=4)
    high = make_item("High", url="https://x.com/a/", relevance=8)

    result = reranker.rerank([low, high], now=NOW)

    assert [i.title for i in result] == ["High"]
    assert result[0].relevance == 8


def test_score_clamped_to_ten(reranker: Reranker) -> None:
    item = make_item("Big", relevance=15, impact=ImpactLevel.CRITICAL)
    assert reranker.rerank([item], now=NOW)[0].relevance == 10


def test_score_clamped_to_one(reranker: Reranker) -> None:
    item = make_item("CEO says hello", relevance=1)
    result = reranker.rerank([item], now=NOW)
    assert result[0].relevance == 1
    assert result[0].impact_level is ImpactLevel.LOW


def test_stale_score_clamped_to_one_with_penalty(lenient_reranker: Reranker) -> None:
    item = make_item("Old news", relevance=2, hours_ago=48)
    result = lenient_reranker.rerank([item], now=NOW)
    assert result[0].relevance == 1


def test_noise_penalty_applies_once(reranker: Reranker) -> None:
    one = make_item("CEO interview", url="https://x.com/1", relevance=7)
    two = make_item("CEO talks IPO plans", url="https://x.com/2", relevance=7)
    clean = make_item("Deno 2 released", url="https://x.com/3", relevance=7)

    scores = {i.url: i.relevance for i in reranker.rerank([one, two, clean], now=NOW)}

    assert scores["https://x.com/1"] == 4
    assert scores["https://x.com/2"] == 4
    assert scores["https://x.com/3"] == 7


def test_impact_bonus(reranker: Reranker) -> None:
    items = [
        make_item("Critical", url="https://x.com/c", impact=ImpactLevel.CRITICAL),
        make_item("High", url="https://x.com/h", impact=ImpactLevel.HIGH),
        make_item("Medium", url="https://x.com/m", impact=ImpactLevel.MEDIUM),
        make_item("Low", url="https://x.com/l", impact=ImpactLevel.LOW),
    ]
    scores = [(i.title, i.relevance) for i in reranker.rerank(items, now=NOW)]
    assert scores == [("Critical", 8), ("High", 7), ("Medium", 6), ("Low", 5)]


def test_hard_exclude_drops_stale(reranker: Reranker) -> None:
    items = [
        make_item("Fresh", url="https://x.com/1"),
        make_item("Stale", url="https://x.com/2", hours_ago=30),
        make_item("Future", url="https://x.com/3", hours_ago=-2),
    ]
    assert [i.title for i in reranker.rerank(items, now=NOW)] == ["Fresh"]


def test_keep_with_penalty_keeps_stale(lenient_reranker: Reranker) -> None:
    items = [
        make_item("Stale", url="https://x.com/2", relevance=9, hours_ago=30),
        make_item("Fresh", url="https://x.com/1", relevance=5),
    ]
    result = lenient_reranker.rerank(items, now=NOW)
    assert [(i.title, i.relevance) for i in result] == [("Fresh", 5), ("Stale", 4)]


def test_strict_dates_reject_missing_and_unparseable(reranker: Reranker) -> None:
    items = [
        make_item("No date", url="https://x.com/1", hours_ago=None),
        make_item("Bad date", url="https://x.com/2", published="last tuesday"),
        make_item("Sentinel", url="https://x.com/3", published="today"),
    ]
    assert [i.title for i in reranker.rerank(items, now=NOW)] == ["Sentinel"]


def test_lenient_dates_keep_missing() -> None:
    reranker = Reranker(strict_dates=False)
    items = [
        make_item("No date", url="https://x.com/1", hours_ago=None),
        make_item("Bad date", url="https://x.com/2", published="last tuesday"),
    ]
    assert len(reranker.rerank(items, now=NOW)) == 2


def test_stable_sort_for_equal_scores(reranker: Reranker) -> None:
    items = [make_item(f"Item {n}", url=f"https://x.com/{n}") for n in range(5)]
    assert [i.title for i in reranker.rerank(items, now=NOW)] == [f"Item {n}" for n in range(5)]


@pytest.mark.parametrize("policy", list(StalenessPolicy))
def test_rerank_is_idempotent(policy: StalenessPolicy) -> None:
    reranker = Reranker(policy=policy)
    items = [
        make_item("Next.js 15", url="https://x.com/a", relevance=6, impact=ImpactLevel.HIGH),
        make_item("CEO drama", url="https://x.com/b", relevance=9),
        make_item("Old", url="https://x.com/c", relevance=7, hours_ago=40),
        make_item("Dup", url="https://x.com/a/", relevance=3),
        make_item("Sentinel", url="https://x.com/d", published="today"),
    ]

    once = reranker.rerank(items, now=NOW)
    twice = reranker.rerank(once, now=NOW)

    assert [(i.url, i.relevance, i.impact_level) for i in twice] == [
        (i.url, i.relevance, i.impact_level) for i in once
    ]


def test_empty_input(reranker: Reranker) -> None:
    assert reranker.rerank([], now=NOW) == []


def test_events_are_emitted() -> None:
    recorder = EventRecorder()
    reranker = Reranker(hook=recorder)

    reranker.rerank([make_item("Fresh"), make_item("Old", url="https://x.com/o", hours_ago=48)], now=NOW)

    assert recorder.names() == ["rerank.stale", "rerank.completed"]
    completed = recorder.of("rerank.completed")[0]
    assert completed.fields["input"] == 2
    assert completed.fields["output"] == 1
    assert completed.fields["stale"] == 1


def test_module_level_rerank() -> None:
    result = rerank([make_item("A", hours_ago=30), make_item("B")], now=NOW)
    assert [i.title for i in result] == ["B"]
