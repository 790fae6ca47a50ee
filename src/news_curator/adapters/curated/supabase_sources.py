"""Curated sources stored in a Supabase ``sources`` table."""

import logging
from typing import Optional

import httpx

from news_curator.adapters.sources.http import open_client
from news_curator.core import CuratedSource, CuratedSourceProvider

logger = logging.getLogger(__name__)

# Substring rules, checked in order
ROLE_RULES: list[tuple[tuple[str, ...], str]] = [
    (("frontend",), "frontend_engineer"),
    (("backend",), "backend_engineer"),
    (("ai", "ml", "data scientist"), "ai_engineer"),
    (("devops", "sre"), "devops_engineer"),
    (("ux", "ui", "designer"), "ui_ux_designer"),
    (("mobile", "ios", "android"), "mobile_developer"),
]


def map_to_internal_role(role: str) -> Optional[str]:
    """Map a free-form job title to one of the internal role keys."""
    lowered = (role or "").lower()
    for needles, internal in ROLE_RULES:
        if any(needle in lowered for needle in needles):
            return internal
    return None


class SupabaseSourceProvider(CuratedSourceProvider):
    """Read active sources tagged with the caller's role."""

    def __init__(
        self,
        url: Optional[str],
        key: Optional[str],
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ) -> None:
        self.url = (url or "").rstrip("/")
        self.key = key
        self.client = client
        self.timeout = timeout

    async def get_sources(self, role: str) -> list[CuratedSource]:
        if not self.url or not self.key:
            logger.info("Supabase credentials missing, skipping curated sources")
            return []

        internal_role = map_to_internal_role(role)
        if internal_role is None:
            logger.info("No internal role for %r, skipping curated sources", role)
            return []

        params = {
            "select": "name,url,type",
            "active": "eq.true",
            "roles": f'cs.{{"{internal_role}"}}',
        }
        headers = {
            "apikey": self.key,
            "Authorization": f"Bearer {self.key}",
        }

        try:
            async with open_client(self.client, timeout=self.timeout) as client:
                response = await client.get(
                    f"{self.url}/rest/v1/sources",
                    params=params,
                    headers=headers,
                    timeout=self.timeout,
                )
                response.raise_for_status()
                rows = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Failed to fetch curated sources for %s: %s", internal_role, e)
            return []

        if not isinstance(rows, list):
            logger.warning("Unexpected curated sources payload: %r", rows)
            return []

        sources = []
        for row in rows:
            if not isinstance(row, dict) or not row.get("url"):
                continue
            sources.append(CuratedSource(
                name=str(row.get("name") or row["url"]),
                url=str(row["url"]),
                type=str(row.get("type") or "rss"),
            ))

        logger.info("Found %d curated sources for %s", len(sources), internal_role)
        return sources
