"""
Pytest configuration and fixtures
"""
import json

import httpx
import pytest

from gateway.core.cache import cache
from gateway.core.config import settings


class Upstream:
    """Scripted model endpoint: answers each call from a list of (status, body)."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append((request.url.path, json.loads(request.content)))
        status, body = self.replies[min(len(self.calls), len(self.replies)) - 1]
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def upstream():
    """Factory for a scripted upstream; the last reply repeats."""
    return Upstream


@pytest.fixture(autouse=True)
def clean_state(monkeypatch):
    """Offline providers and an empty preference cache for every test"""
    monkeypatch.setattr(settings, "CHAT_PROVIDER", "mock")
    monkeypatch.setattr(settings, "WAREHOUSE_PROVIDER", "mock")
    monkeypatch.setattr(settings, "PREDICT_FINAL_ATTEMPT", True)
    cache.clear()
    yield
    cache.clear()
