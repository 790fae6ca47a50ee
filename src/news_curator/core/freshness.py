"""Trailing 24-hour freshness window shared by every pipeline stage."""

from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

from news_curator.core.entities import DateConfidence, PublishedDate

WINDOW = timedelta(hours=24)
SKEW_TOLERANCE = timedelta(minutes=30)

# Emitted by the extraction step when a source gave no date
UNKNOWN_DATE_SENTINEL = "today"


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse ISO-8601, RFC-2822 or epoch-seconds strings into aware UTC datetimes.

    Returns None when the value cannot be parsed. Naive values are assumed UTC.
    """
    text = (value or "").strip()
    if not text:
        return None

    if text.isdigit():
        try:
            return datetime.fromtimestamp(int(text), tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError, IndexError):
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def classify_date(raw: Optional[str]) -> PublishedDate:
    """Tag a raw date string with its confidence state."""
    text = (raw or "").strip()
    if not text:
        return PublishedDate(raw="", confidence=DateConfidence.MISSING)
    if text.lower() == UNKNOWN_DATE_SENTINEL:
        return PublishedDate(raw=text, confidence=DateConfidence.ASSUMED_FRESH)

    timestamp = parse_timestamp(text)
    if timestamp is None:
        return PublishedDate(raw=text, confidence=DateConfidence.UNPARSEABLE)
    return PublishedDate(raw=text, confidence=DateConfidence.KNOWN, timestamp=timestamp)


def hours_since(timestamp: datetime, now: datetime) -> float:
    """Elapsed hours between timestamp and now (negative if in the future)."""
    return (now - timestamp).total_seconds() / 3600


def is_within_window(
    timestamp: datetime,
    now: datetime,
    window: timedelta = WINDOW,
    skew_tolerance: timedelta = SKEW_TOLERANCE,
) -> bool:
    """True if ``-skew_tolerance <= now - timestamp < window``."""
    elapsed = now - timestamp
    return -skew_tolerance <= elapsed < window


def is_fresh(
    published: PublishedDate,
    now: Optional[datetime] = None,
    strict: bool = False,
    window: timedelta = WINDOW,
    skew_tolerance: timedelta = SKEW_TOLERANCE,
) -> bool:
    """Decide whether an item may be kept.

    With ``strict=False`` missing and unparseable dates are kept so that parsing
    gaps do not lose real content. With ``strict=True`` only a parsed, in-window
    timestamp or the optimistic sentinel passes.
    """
    if published.confidence is DateConfidence.ASSUMED_FRESH:
        return True
    if published.confidence is DateConfidence.KNOWN:
        now = now or datetime.now(timezone.utc)
        return is_within_window(published.timestamp, now, window, skew_tolerance)
    return not strict


def is_fresh_string(raw: Optional[str], now: Optional[datetime] = None, strict: bool = False) -> bool:
    """Shortcut for ``is_fresh(classify_date(raw), ...)``."""
    return is_fresh(classify_date(raw), now=now, strict=strict)
