"""Core domain layer."""

from news_curator.core.entities import (
    CandidateItem,
    CuratedSource,
    DateConfidence,
    ErrorKind,
    FeedItem,
    ImpactLevel,
    PublishedDate,
    SourceQuery,
    SourceResult,
)
from news_curator.core.errors import CurationError, InvalidRequestError, MissingCredentialError
from news_curator.core.events import Event, EventHook, EventRecorder
from news_curator.core.interfaces import CandidateExtractor, CuratedSourceProvider, SourceAdapter
from news_curator.core.reranker import Reranker, StalenessPolicy

__all__ = [
    "CandidateItem",
    "CuratedSource",
    "DateConfidence",
    "ErrorKind",
    "FeedItem",
    "ImpactLevel",
    "PublishedDate",
    "SourceQuery",
    "SourceResult",
    "CurationError",
    "InvalidRequestError",
    "MissingCredentialError",
    "Event",
    "EventHook",
    "EventRecorder",
    "CandidateExtractor",
    "CuratedSourceProvider",
    "SourceAdapter",
    "Reranker",
    "StalenessPolicy",
]
