"""Core domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class DateConfidence(str, Enum):
    """How much we know about an item's publication date."""

    KNOWN = "known"
    ASSUMED_FRESH = "assumed_fresh"
    MISSING = "missing"
    UNPARSEABLE = "unparseable"


class ImpactLevel(str, Enum):
    """Impact label attached to a candidate item."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ErrorKind(str, Enum):
    """Category of a source-level failure."""

    TRANSIENT = "transient"
    CONFIGURATION = "configuration"
    FEED_NOT_FOUND = "feed_not_found"
    PARSE = "parse"


@dataclass(frozen=True)
class PublishedDate:
    """Raw date string plus what could be made of it."""

    raw: str
    confidence: DateConfidence
    timestamp: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.confidence is DateConfidence.KNOWN and self.timestamp is None:
            raise ValueError("KNOWN date requires a timestamp")


@dataclass(frozen=True)
class FeedItem:
    """Article record recovered from an RSS or Atom feed."""

    title: str
    url: str
    published_at: str
    source: str
    summary: str = ""

    def __post_init__(self) -> None:
        if not self.title:
            raise ValueError("Title cannot be empty")


@dataclass(frozen=True)
class CandidateItem:
    """News item one step before reranking."""

    title: str
    url: str
    source: str
    summary: str
    relevance: int
    category: str
    published: PublishedDate
    impact_level: Optional[ImpactLevel] = None

    # Values the item arrived with; scoring always starts from these
    base_relevance: int = 5
    asserted_impact: Optional[ImpactLevel] = None

    target_audience: tuple[str, ...] = ()
    technologies: tuple[str, ...] = ()
    primary_role: str = ""
    relevant_roles: tuple[str, ...] = ()
    is_major_announcement: bool = False

    @property
    def published_at(self) -> str:
        return self.published.raw

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase shape consumed by the presentation layer."""
        return {
            "title": self.title,
            "source": self.source,
            "summary": self.summary,
            "url": self.url,
            "relevance": self.relevance,
            "publishedAt": self.published.raw,
            "category": self.category,
            "impactLevel": self.impact_level.value if self.impact_level else None,
            "target_audience": list(self.target_audience),
            "technologies": list(self.technologies),
            "primary_role": self.primary_role,
            "relevant_roles": list(self.relevant_roles),
            "is_major_announcement": self.is_major_announcement,
        }


@dataclass(frozen=True)
class CuratedSource:
    """Named endpoint returned by the curated sources lookup."""

    name: str
    url: str
    type: str


@dataclass(frozen=True)
class SourceQuery:
    """One adapter call.

    The meaning of ``term`` depends on the adapter: a search query, a site URL,
    a language filter or a channel id.
    """

    source: str
    term: str = ""
    max_results: int = 50
    options: dict[str, str] = field(default_factory=dict)


@dataclass
class SourceResult:
    """Outcome of one adapter call."""

    source: str
    query: SourceQuery
    items: list[CandidateItem] = field(default_factory=list)
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, query: SourceQuery, error: str, kind: ErrorKind) -> "SourceResult":
        return cls(source=query.source, query=query, error=error, error_kind=kind)

    def to_payload(self) -> dict[str, Any]:
        """Compact payload handed to the extraction step."""
        if not self.ok:
            return {"error": self.error, "kind": self.error_kind.value if self.error_kind else None}
        return {
            "items": [
                {
                    "title": item.title,
                    "url": item.url,
                    "summary": item.summary,
                    "source": item.source,
                    "publishedAt": item.published.raw,
                }
                for item in self.items
            ]
        }
