"""Business logic use cases."""

import asyncio
import dataclasses
import json
import logging
import time
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

import httpx

from news_curator.adapters.curated import map_to_internal_role
from news_curator.config import CurationConfig, SourcesConfig
from news_curator.core import (
    CandidateExtractor,
    CandidateItem,
    CuratedSource,
    CuratedSourceProvider,
    CurationError,
    DateConfidence,
    ErrorKind,
    Event,
    EventHook,
    InvalidRequestError,
    Reranker,
    SourceAdapter,
    SourceQuery,
    SourceResult,
)
from news_curator.core.candidates import normalize_candidates, parse_candidate_payload
from news_curator.core.events import log_event
from news_curator.core.freshness import UNKNOWN_DATE_SENTINEL, classify_date

logger = logging.getLogger(__name__)

# Keep the number of topic fan-out queries bounded
MAX_TOPICS = 3

# Raw tool output handed to the extractor is cut at this length
MAX_RAW_OUTPUT_CHARS = 60000

NEWS_SOURCES = ("duckduckgo_news", "duckduckgo_search", "google_news_rss", "hackernews_search")
COMMUNITY_SOURCES = ("devto_articles", "lobsters_search")


@dataclass
class CurationReport:
    """Result of one curation request."""

    role: str
    items: list[CandidateItem]
    results: list[SourceResult] = field(default_factory=list)
    elapsed: float = 0.0
    extracted: bool = False

    @property
    def errors(self) -> list[SourceResult]:
        return [r for r in self.results if not r.ok]

    def to_dict(self) -> dict[str, Any]:
        return {
            "role": self.role,
            "items": [item.to_dict() for item in self.items],
            "sources": [
                {
                    "source": r.source,
                    "term": r.query.term,
                    "items": len(r.items),
                    "error": r.error,
                    "kind": r.error_kind.value if r.error_kind else None,
                }
                for r in self.results
            ],
            "elapsed": round(self.elapsed, 2),
            "extracted": self.extracted,
        }


def _context_keywords(context: Optional[str]) -> list[str]:
    if not context:
        return []
    return [part.strip() for part in context.split(",") if part.strip()]


def plan_queries(
    role: str,
    context: Optional[str],
    curated_sources: list[CuratedSource],
    sources_config: SourcesConfig,
    max_results: int = 50,
) -> list[SourceQuery]:
    """Build the list of adapter calls for a role.

    Topics come from the role profile in config (or the defaults), with any
    comma-separated context keywords appended. Curated feeds and channels are
    read directly.
    """
    internal_role = map_to_internal_role(role)
    profile = sources_config.role_topics.get(internal_role or "", {})

    topics = list(profile.get("topics") or sources_config.default_topics)[:MAX_TOPICS]
    topics.extend(k for k in _context_keywords(context) if k not in topics)
    subreddits = list(profile.get("subreddits") or sources_config.default_subreddits)
    language = profile.get("language") or ""
    headline = topics[0] if topics else role

    queries: list[SourceQuery] = []
    for topic in topics:
        for source in NEWS_SOURCES:
            queries.append(SourceQuery(source=source, term=topic, max_results=max_results))
        for source in COMMUNITY_SOURCES:
            queries.append(SourceQuery(source=source, term=topic, max_results=max_results))

    for subreddit in subreddits:
        queries.append(SourceQuery(
            source="reddit_search",
            term=headline,
            max_results=max_results,
            options={"subreddit": subreddit},
        ))

    queries.append(SourceQuery(source="github_trending", term=language, max_results=max_results))
    queries.append(SourceQuery(source="youtube_search", term=f"{headline} {role}", max_results=max_results))

    feeds = list(curated_sources)
    if not feeds:
        feeds = [CuratedSource(name=url, url=url, type="rss") for url in profile.get("feeds", [])]

    for feed in feeds:
        if feed.type == "youtube" or feed.url.startswith("youtube:"):
            queries.append(SourceQuery(
                source="youtube_channel_videos", term=feed.url, max_results=max_results
            ))
        else:
            queries.append(SourceQuery(source="read_rss_feed", term=feed.url, max_results=max_results))

    enabled = set(sources_config.enabled)
    planned = []
    seen = set()
    for query in queries:
        key = (query.source, query.term, tuple(sorted(query.options.items())))
        if query.source not in enabled or key in seen:
            continue
        seen.add(key)
        planned.append(query)
    return planned


def scrape_fallbacks(results: list[SourceResult], enabled: list[str]) -> list[SourceQuery]:
    """Page-scrape queries for sites whose feed could not be found."""
    if "scrape_website" not in enabled:
        return []
    return [
        SourceQuery(source="scrape_website", term=r.query.term, max_results=r.query.max_results)
        for r in results
        if r.source == "read_rss_feed" and r.error_kind is ErrorKind.FEED_NOT_FOUND
    ]


def assume_fresh(items: list[CandidateItem]) -> list[CandidateItem]:
    """Mark undated items with the optimistic sentinel.

    Used when no extraction step ran to supply dates. Adapters have already
    dropped items whose known date is outside the window.
    """
    return [
        dataclasses.replace(item, published=classify_date(UNKNOWN_DATE_SENTINEL))
        if item.published.confidence is DateConfidence.MISSING else item
        for item in items
    ]


def format_raw_outputs(results: list[SourceResult]) -> str:
    """Render adapter results as the text block given to the extractor."""
    blocks = []
    for result in results:
        header = f"--- {result.source} ({result.query.term or 'default'}) ---"
        blocks.append(f"{header}\n{json.dumps(result.to_payload(), ensure_ascii=False)}")
    return "\n\n".join(blocks)[:MAX_RAW_OUTPUT_CHARS]


class CurationService:
    """Service for collecting, extracting and ranking news for a job role."""

    def __init__(
        self,
        adapters: dict[str, SourceAdapter],
        reranker: Reranker,
        extractor: Optional[CandidateExtractor] = None,
        curated_provider: Optional[CuratedSourceProvider] = None,
        curation: Optional[CurationConfig] = None,
        sources: Optional[SourcesConfig] = None,
        hook: Optional[EventHook] = None,
    ) -> None:
        self.adapters = adapters
        self.reranker = reranker
        self.extractor = extractor
        self.curated_provider = curated_provider
        self.curation = curation or CurationConfig()
        self.sources = sources or SourcesConfig()
        self.hook = hook or log_event

    async def curate(self, role: str, context: Optional[str] = None) -> CurationReport:
        """Run the full pipeline for one role."""
        if not role or not role.strip():
            raise InvalidRequestError("Job role is required")
        role = role.strip()
        started = time.monotonic()

        curated = await self._curated_sources(role)
        queries = plan_queries(
            role,
            context,
            curated,
            self.sources,
            max_results=self.curation.max_results_per_source,
        )
        self.hook(Event("curation.started", {
            "role": role, "queries": len(queries), "curated": len(curated),
        }))

        results = await self.collect(queries)
        fallbacks = scrape_fallbacks(results, self.sources.enabled)
        if fallbacks:
            remaining = self.curation.request_deadline - (time.monotonic() - started)
            results += await self.collect(fallbacks, deadline=max(remaining, 0))
        direct_items = [item for result in results for item in result.items]

        candidates, extracted = await self._extract(role, results, direct_items)
        items = self.reranker.rerank(candidates)

        elapsed = time.monotonic() - started
        self.hook(Event("curation.completed", {
            "role": role,
            "collected": len(direct_items),
            "candidates": len(candidates),
            "items": len(items),
            "errors": sum(1 for r in results if not r.ok),
            "elapsed": round(elapsed, 2),
        }))
        return CurationReport(
            role=role, items=items, results=results, elapsed=elapsed, extracted=extracted
        )

    async def collect(
        self, queries: list[SourceQuery], deadline: Optional[float] = None
    ) -> list[SourceResult]:
        """Run every query concurrently under the overall deadline.

        Results keep the order of ``queries``. Calls still running at the
        deadline are cancelled and reported as transient failures.
        """
        if not queries:
            return []

        if deadline is None:
            deadline = self.curation.request_deadline
        tasks = [asyncio.create_task(self._run_one(query)) for query in queries]
        done, pending = await asyncio.wait(tasks, timeout=deadline)

        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.warning(
                "%d source calls cancelled at the %.0fs deadline",
                len(pending), deadline,
            )

        results = []
        for query, task in zip(queries, tasks):
            if task in done:
                result = task.result()
            else:
                result = SourceResult.failure(query, "Deadline exceeded", ErrorKind.TRANSIENT)
            self.hook(Event("source.completed", {
                "source": result.source,
                "term": query.term,
                "items": len(result.items),
                "error": result.error_kind.value if result.error_kind else None,
            }))
            results.append(result)
        return results

    async def _run_one(self, query: SourceQuery) -> SourceResult:
        adapter = self.adapters.get(query.source)
        if adapter is None:
            return SourceResult.failure(
                query, f"Unknown source: {query.source}", ErrorKind.CONFIGURATION
            )
        try:
            return await adapter.collect(query)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception("%s crashed for %r", query.source, query.term)
            return SourceResult.failure(query, str(e) or type(e).__name__, ErrorKind.TRANSIENT)

    async def _curated_sources(self, role: str) -> list[CuratedSource]:
        if self.curated_provider is None:
            return []
        return await self.curated_provider.get_sources(role)

    async def _extract(
        self, role: str, results: list[SourceResult], direct_items: list[CandidateItem]
    ) -> tuple[list[CandidateItem], bool]:
        """Candidates from the extractor, or the adapter items when that is not possible."""
        if self.extractor is None or not self.curation.use_llm_extraction or not direct_items:
            return assume_fresh(direct_items), False

        raw_outputs = format_raw_outputs(results)
        try:
            text = await self.extractor.extract_candidates(role, raw_outputs, date.today().isoformat())
        except (CurationError, httpx.HTTPError, KeyError, IndexError, ValueError) as e:
            logger.warning("Extraction failed, using adapter items directly: %s", e)
            return assume_fresh(direct_items), False

        candidates = normalize_candidates(parse_candidate_payload(text))
        if not candidates:
            logger.warning("Extraction returned no usable items, using adapter items directly")
            return assume_fresh(direct_items), False

        logger.info("Extracted %d candidates from %d raw items", len(candidates), len(direct_items))
        return candidates, True
