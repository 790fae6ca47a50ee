"""Score, filter, sort and deduplicate candidate items."""

import dataclasses
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Iterable, Optional

from news_curator.core.entities import CandidateItem, DateConfidence, ImpactLevel
from news_curator.core.events import Event, EventHook, log_event
from news_curator.core.freshness import SKEW_TOLERANCE, WINDOW, is_fresh

MIN_SCORE = 1
MAX_SCORE = 10
STALE_SCORE = 0
STALE_PENALTY = 5
NOISE_PENALTY = 3

IMPACT_BONUS = {
    ImpactLevel.CRITICAL: 3,
    ImpactLevel.HIGH: 2,
    ImpactLevel.MEDIUM: 1,
}

# Business, financial and political coverage that is off-topic for engineers
NOISE_PATTERNS = [
    re.compile(r"\bceo\b", re.IGNORECASE),
    re.compile(r"\bacquisition\b", re.IGNORECASE),
    re.compile(r"\bIPO\b", re.IGNORECASE),
    re.compile(r"\blayoff", re.IGNORECASE),
    re.compile(r"\bfund(?:ing|raise)", re.IGNORECASE),
    re.compile(r"\bvaluation\b", re.IGNORECASE),
    re.compile(r"\bstock\s*price", re.IGNORECASE),
    re.compile(r"\bshares?\s*(?:drop|rise|fell|surge)", re.IGNORECASE),
    re.compile(r"\bdrama\b", re.IGNORECASE),
    re.compile(r"\bcontroversy\b", re.IGNORECASE),
    re.compile(r"\bscandal\b", re.IGNORECASE),
    re.compile(r"\blawsuit\b", re.IGNORECASE),
    re.compile(r"\bregulat(?:ion|ory)\b", re.IGNORECASE),
    re.compile(r"\blobby", re.IGNORECASE),
    re.compile(r"\bpolitics?\b", re.IGNORECASE),
    re.compile(r"\belection", re.IGNORECASE),
    re.compile(r"\bbillionaire", re.IGNORECASE),
    re.compile(r"\brich\s*list", re.IGNORECASE),
    re.compile(r"\bnet\s*worth", re.IGNORECASE),
]


class StalenessPolicy(str, Enum):
    """What happens to items outside the freshness window."""

    HARD_EXCLUDE = "hard-exclude"
    KEEP_WITH_PENALTY = "keep-with-penalty"


@dataclass(frozen=True)
class ScoredItem:
    """Intermediate scoring result for one candidate."""

    item: CandidateItem
    score: int
    fresh: bool
    noisy: bool


def is_noise(text: str) -> bool:
    """True if the text matches any off-topic pattern."""
    return any(pattern.search(text) for pattern in NOISE_PATTERNS)


def clamp(score: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, score))


def impact_for_score(score: int) -> ImpactLevel:
    """Derive the final impact label purely from the clamped score."""
    if score >= 8:
        return ImpactLevel.HIGH
    if score <= 4:
        return ImpactLevel.LOW
    return ImpactLevel.MEDIUM


def dedup_key(item: CandidateItem) -> tuple[str, str]:
    """Canonical URL, or the raw title when the item has no URL."""
    url = item.url.strip().lower().rstrip("/")
    if url:
        return ("url", url)
    return ("title", item.title)


def deduplicate(items: Iterable[CandidateItem]) -> list[CandidateItem]:
    """Keep the first occurrence of every dedup key."""
    seen: set[tuple[str, str]] = set()
    unique = []
    for item in items:
        key = dedup_key(item)
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


class Reranker:
    """Turn an untrusted candidate list into the final ranked list.

    Pure and deterministic for a given ``now``: no I/O, no shared state.
    Scoring always starts from the values an item arrived with
    (``base_relevance``/``asserted_impact``), so reranking an already reranked
    list yields the same list.
    """

    def __init__(
        self,
        policy: StalenessPolicy = StalenessPolicy.HARD_EXCLUDE,
        strict_dates: bool = True,
        window: timedelta = WINDOW,
        skew_tolerance: timedelta = SKEW_TOLERANCE,
        hook: Optional[EventHook] = None,
    ) -> None:
        self.policy = StalenessPolicy(policy)
        self.strict_dates = strict_dates
        self.window = window
        self.skew_tolerance = skew_tolerance
        self.hook = hook or log_event

    def score(self, item: CandidateItem, now: datetime) -> ScoredItem:
        """Compute freshness and final score for a single item."""
        fresh = is_fresh(
            item.published,
            now=now,
            strict=self.strict_dates,
            window=self.window,
            skew_tolerance=self.skew_tolerance,
        )

        score = item.base_relevance
        if not fresh:
            if self.policy is StalenessPolicy.HARD_EXCLUDE:
                score = STALE_SCORE
            else:
                score -= STALE_PENALTY

        score += IMPACT_BONUS.get(item.asserted_impact, 0)

        text = f"{item.title} {item.summary} {item.category}"
        noisy = is_noise(text)
        if noisy:
            score -= NOISE_PENALTY

        return ScoredItem(item=item, score=clamp(score), fresh=fresh, noisy=noisy)

    def rerank(
        self, items: Iterable[CandidateItem], now: Optional[datetime] = None
    ) -> list[CandidateItem]:
        """Score, drop stale items, sort by score and deduplicate."""
        now = now or datetime.now(timezone.utc)
        candidates = list(items)

        scored = [self.score(item, now) for item in candidates]

        stale = [s for s in scored if not s.fresh]
        for s in stale:
            self.hook(Event("rerank.stale", {
                "title": s.item.title[:80],
                "published_at": s.item.published.raw,
                "confidence": s.item.published.confidence.value,
                "policy": self.policy.value,
            }))

        if self.policy is StalenessPolicy.HARD_EXCLUDE:
            scored = [s for s in scored if s.fresh]

        # sorted() is stable: equal scores keep input order
        scored = sorted(scored, key=lambda s: s.score, reverse=True)

        ranked = [
            dataclasses.replace(
                s.item,
                relevance=s.score,
                impact_level=impact_for_score(s.score),
            )
            for s in scored
        ]
        result = deduplicate(ranked)

        self.hook(Event("rerank.completed", {
            "input": len(candidates),
            "output": len(result),
            "stale": len(stale),
            "assumed_fresh": sum(
                1 for item in candidates
                if item.published.confidence is DateConfidence.ASSUMED_FRESH
            ),
            "top": [f"[{i.relevance}] {i.title[:60]}" for i in result[:3]],
        }))
        return result


def rerank(
    items: Iterable[CandidateItem],
    now: Optional[datetime] = None,
    policy: StalenessPolicy = StalenessPolicy.HARD_EXCLUDE,
) -> list[CandidateItem]:
    """Module-level convenience wrapper around ``Reranker``."""
    return Reranker(policy=policy).rerank(items, now=now)
