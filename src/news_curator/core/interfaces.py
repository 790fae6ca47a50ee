"""Core interfaces for adapters."""

import logging
from abc import ABC, abstractmethod
from typing import Awaitable

import httpx

from news_curator.core.entities import (
    CandidateItem,
    CuratedSource,
    ErrorKind,
    SourceQuery,
    SourceResult,
)
from news_curator.core.errors import MissingCredentialError

logger = logging.getLogger(__name__)


class SourceAdapter(ABC):
    """Interface for one external news source.

    Subclasses implement ``_fetch``; callers use ``collect``, which never
    raises.
    """

    name: str = ""
    emoji: str = "•"

    @abstractmethod
    async def _fetch(self, query: SourceQuery) -> list[CandidateItem]:
        """Fetch and normalize items for a query."""
        pass

    async def collect(self, query: SourceQuery) -> SourceResult:
        """Run the query and turn any failure into a structured error result."""
        return await self._guarded(query, self._fetch(query))

    async def _guarded(
        self, query: SourceQuery, fetch: Awaitable[list[CandidateItem]]
    ) -> SourceResult:
        try:
            items = await fetch
        except MissingCredentialError as e:
            logger.warning("%s: %s", self.name, e)
            return SourceResult.failure(query, str(e), ErrorKind.CONFIGURATION)
        except httpx.HTTPError as e:
            logger.warning("%s failed for %r: %s", self.name, query.term, e)
            return SourceResult.failure(query, str(e) or type(e).__name__, ErrorKind.TRANSIENT)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("%s returned an unexpected payload for %r: %s", self.name, query.term, e)
            return SourceResult.failure(query, str(e), ErrorKind.PARSE)

        logger.info("%s: %d items for %r", self.name, len(items), query.term)
        return SourceResult(source=self.name, query=query, items=items)


class CandidateExtractor(ABC):
    """Interface for the step that turns raw source output into candidates."""

    @abstractmethod
    async def extract_candidates(self, role: str, raw_outputs: str, today: str) -> str:
        """Return free-form text expected to contain a JSON array of items."""
        pass


class CuratedSourceProvider(ABC):
    """Interface for the curated sources lookup."""

    @abstractmethod
    async def get_sources(self, role: str) -> list[CuratedSource]:
        """Return curated endpoints for a job role (may be empty)."""
        pass
