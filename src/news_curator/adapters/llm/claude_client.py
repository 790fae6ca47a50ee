"""Claude API client for turning raw source output into candidate items."""

import asyncio
import logging
from typing import Optional

import httpx

from news_curator.config import Settings
from news_curator.core import CandidateExtractor, MissingCredentialError

logger = logging.getLogger(__name__)


class ClaudeClient(CandidateExtractor):
    """Claude API client implementation."""

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None) -> None:
        self.settings = settings
        self.api_key = settings.anthropic_api_key
        self.model = settings.claude.model
        self.max_tokens = settings.claude.max_tokens
        self.temperature = settings.claude.temperature
        self.timeout = settings.claude.timeout
        self.base_url = "https://api.anthropic.com/v1"
        self.max_retries = settings.claude.max_retries
        self.initial_retry_delay = settings.claude.initial_retry_delay
        self.client = client

    async def extract_candidates(self, role: str, raw_outputs: str, today: str) -> str:
        """Ask the model for a JSON array of news items found in ``raw_outputs``."""
        if not self.api_key:
            raise MissingCredentialError("ANTHROPIC_API_KEY")

        prompt_template = self.settings.prompts.extraction.get("user", "")
        system_prompt = self.settings.prompts.extraction.get("system", "")

        prompt = prompt_template.format(role=role, today=today, raw_outputs=raw_outputs)
        return await self._call_api(prompt=prompt, system=system_prompt)

    async def _call_api(self, prompt: str, system: str) -> str:
        """Call Claude API with retry logic."""
        last_exception = None

        for attempt in range(self.max_retries):
            try:
                response = await self._post(prompt, system)

                # Success case
                if response.status_code == 200:
                    data = response.json()
                    return data["content"][0]["text"]

                # Rate limit - retry with backoff
                if response.status_code == 429:
                    retry_after = self._get_retry_delay(response, attempt)
                    logger.warning(
                        "Rate limit hit, retrying after %.1fs (attempt %d/%d)",
                        retry_after, attempt + 1, self.max_retries,
                    )
                    await asyncio.sleep(retry_after)
                    continue

                # Server errors - retry with backoff
                if response.status_code >= 500:
                    retry_delay = self.initial_retry_delay * (2 ** attempt)
                    logger.warning("Server error %d, retrying after %.1fs", response.status_code, retry_delay)
                    await asyncio.sleep(retry_delay)
                    continue

                # Other errors - raise immediately
                response.raise_for_status()

            except httpx.HTTPStatusError as e:
                last_exception = e
                if attempt < self.max_retries - 1 and e.response.status_code >= 500:
                    retry_delay = self.initial_retry_delay * (2 ** attempt)
                    logger.warning("HTTP error, retrying after %.1fs", retry_delay)
                    await asyncio.sleep(retry_delay)
                    continue
                raise
            except httpx.RequestError as e:
                last_exception = e
                if attempt < self.max_retries - 1:
                    retry_delay = self.initial_retry_delay * (2 ** attempt)
                    logger.warning("Network error, retrying after %.1fs", retry_delay)
                    await asyncio.sleep(retry_delay)
                    continue
                raise

        # If we exhausted all retries
        if last_exception:
            raise last_exception
        raise RuntimeError("Failed to call API after all retries")

    async def _post(self, prompt: str, system: str) -> httpx.Response:
        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "system": system,
            "messages": [
                {"role": "user", "content": prompt}
            ],
        }
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": "2023-06-01",
            "content-type": "application/json",
        }

        if self.client is not None:
            return await self.client.post(
                f"{self.base_url}/messages", headers=headers, json=payload, timeout=self.timeout
            )
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(f"{self.base_url}/messages", headers=headers, json=payload)

    def _get_retry_delay(self, response: httpx.Response, attempt: int) -> float:
        """Calculate retry delay from response headers or use exponential backoff."""
        # Check for Retry-After header
        retry_after = response.headers.get("retry-after")
        if retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass

        # Exponential backoff
        return self.initial_retry_delay * (2 ** attempt)
