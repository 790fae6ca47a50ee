"""Shared test helpers."""

from datetime import datetime, timedelta, timezone
from typing import Callable

import httpx
import pytest


def ago(**delta: float) -> datetime:
    """A UTC timestamp ``delta`` before the real current time."""
    return datetime.now(timezone.utc) - timedelta(**delta)


def rfc2822(moment: datetime) -> str:
    return moment.strftime("%a, %d %b %Y %H:%M:%S +0000")


@pytest.fixture
def mock_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Build an AsyncClient whose requests are answered by ``handler``."""

    def build(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)

    return build
