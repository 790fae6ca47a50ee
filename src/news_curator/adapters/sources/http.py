"""Shared HTTP helpers for source adapters."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from urllib.parse import urlparse

import httpx

DEFAULT_TIMEOUT = 10.0
BROWSER_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
API_UA = "TechTrendAgent/1.0"
FEED_ACCEPT = "application/rss+xml, application/atom+xml, application/xml, text/xml, */*"


@asynccontextmanager
async def open_client(
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str = BROWSER_UA,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client, or a short-lived one owned by this block."""
    if client is not None:
        yield client
        return

    headers = {"User-Agent": user_agent, "Accept": FEED_ACCEPT}
    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True, headers=headers) as owned:
        yield owned


def site_name(url: str) -> str:
    """Short human-readable name for a site (``blog.rust-lang.org`` -> ``blog.rust-lang``)."""
    host = urlparse(url).hostname or url
    if host.startswith("www."):
        host = host[4:]
    for suffix in (".com", ".org", ".io", ".dev"):
        if host.endswith(suffix):
            return host[: -len(suffix)]
    return host
