"""Tests for Claude client."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from news_curator.adapters.llm import ClaudeClient
from news_curator.config import Settings
from news_curator.core import MissingCredentialError


@pytest.fixture
def mock_settings() -> Settings:
    """Create mock settings."""
    settings = Settings(anthropic_api_key="test-key")
    # Set values directly in claude config object
    settings.claude.max_retries = 3
    settings.claude.initial_retry_delay = 0.01  # Faster for tests
    return settings


def _ok(text: str) -> MagicMock:
    response = MagicMock()
    response.status_code = 200
    response.json.return_value = {"content": [{"text": text}]}
    return response


@pytest.mark.asyncio
async def test_extract_candidates_success(mock_settings: Settings) -> None:
    """Test the prompt is formatted and the raw text returned."""
    client = ClaudeClient(mock_settings)

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.__aenter__.return_value = mock_client
        mock_client.post.return_value = _ok('[{"title": "A"}]')
        mock_client_class.return_value = mock_client

        result = await client.extract_candidates("Frontend Engineer", "--- raw ---", "2025-01-06")

        assert result == '[{"title": "A"}]'
        payload = mock_client.post.call_args.kwargs["json"]
        prompt = payload["messages"][0]["content"]
        assert 'Job role: "Frontend Engineer"' in prompt
        assert "Today: 2025-01-06" in prompt
        assert "--- raw ---" in prompt
        assert payload["system"] == mock_settings.prompts.extraction["system"]
        assert payload["temperature"] == 0.0


@pytest.mark.asyncio
async def test_retry_on_429(mock_settings: Settings) -> None:
    """Test retry logic on 429 error."""
    client = ClaudeClient(mock_settings)

    with patch("httpx.AsyncClient") as mock_client_class:
        # First call returns 429, second succeeds
        mock_response_429 = MagicMock()
        mock_response_429.status_code = 429
        mock_response_429.headers = {"retry-after": "0"}

        mock_client = AsyncMock()
        mock_client.__aenter__.return_value = mock_client
        mock_client.post.side_effect = [mock_response_429, _ok("[]")]
        mock_client_class.return_value = mock_client

        result = await client.extract_candidates("Backend", "raw", "2025-01-06")

        assert result == "[]"
        assert mock_client.post.call_count == 2


@pytest.mark.asyncio
async def test_retry_on_server_error(mock_settings: Settings) -> None:
    """Test retry logic on 5xx errors."""
    client = ClaudeClient(mock_settings)

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_response_500 = MagicMock()
        mock_response_500.status_code = 529

        mock_client = AsyncMock()
        mock_client.__aenter__.return_value = mock_client
        mock_client.post.side_effect = [mock_response_500, mock_response_500, _ok("[]")]
        mock_client_class.return_value = mock_client

        result = await client.extract_candidates("Backend", "raw", "2025-01-06")

        assert result == "[]"
        assert mock_client.post.call_count == 3


@pytest.mark.asyncio
async def test_network_error_raises_after_retries(mock_settings: Settings) -> None:
    """Test network errors are retried, then propagated."""
    client = ClaudeClient(mock_settings)

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.__aenter__.return_value = mock_client
        mock_client.post.side_effect = httpx.ConnectError("refused")
        mock_client_class.return_value = mock_client

        with pytest.raises(httpx.ConnectError):
            await client.extract_candidates("Backend", "raw", "2025-01-06")

        assert mock_client.post.call_count == 3


@pytest.mark.asyncio
async def test_client_error_is_not_retried(mock_client) -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(400, json={"error": {"message": "bad request"}})

    settings = Settings(anthropic_api_key="test-key")
    async with mock_client(handler) as client:
        with pytest.raises(httpx.HTTPStatusError):
            await ClaudeClient(settings, client=client).extract_candidates("Backend", "raw", "2025-01-06")

    assert calls == 1


@pytest.mark.asyncio
async def test_injected_client_headers(mock_client) -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["key"] = request.headers["x-api-key"]
        seen["version"] = request.headers["anthropic-version"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"content": [{"type": "text", "text": "[]"}]})

    settings = Settings(anthropic_api_key="test-key")
    async with mock_client(handler) as client:
        result = await ClaudeClient(settings, client=client).extract_candidates("Backend", "raw", "2025-01-06")

    assert result == "[]"
    assert seen["key"] == "test-key"
    assert seen["version"] == "2023-06-01"
    assert seen["body"]["model"] == settings.claude.model


@pytest.mark.asyncio
async def test_missing_api_key() -> None:
    with pytest.raises(MissingCredentialError, match="ANTHROPIC_API_KEY"):
        await ClaudeClient(Settings()).extract_candidates("Backend", "raw", "2025-01-06")


def test_retry_delay_from_header(mock_settings: Settings) -> None:
    client = ClaudeClient(mock_settings)
    response = MagicMock()
    response.headers = {"retry-after": "7"}
    assert client._get_retry_delay(response, 0) == 7.0

    response.headers = {}
    assert client._get_retry_delay(response, 2) == pytest.approx(0.04)
