"""Shared pytest fixtures for IDD Search Gateway tests."""

import asyncio
import os
import sys
import json
import pytest
from typing import Any, Dict, List, Optional

import httpx

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set test environment variables before importing app modules
os.environ["SEARCH_API_URL"] = "https://search.test/chat/completions"
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ.pop("LANGFUSE_PUBLIC_KEY", None)
os.environ.pop("LANGFUSE_SECRET_KEY", None)

from agents.search_agent import QueryOutcome  # noqa: E402

SEARCH_API_URL = "https://search.test/chat/completions"


# ---------------------------------------------------------------------------
# Upstream payload fixtures
# ---------------------------------------------------------------------------

def make_chat_completion(content: str, citations: Optional[List[Any]] = None) -> Dict[str, Any]:
    """Build an upstream chat-completion body."""
    payload: Dict[str, Any] = {
        "id": "cmpl-test",
        "model": "llama-3.1-sonar-large-128k-online",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ],
    }
    if citations is not None:
        payload["citations"] = citations
    return payload


def query_of(request: httpx.Request) -> str:
    """Extract the user query from an outbound upstream request."""
    body = json.loads(request.content)
    return body["messages"][1]["content"]


@pytest.fixture
def chat_completion_payload():
    """Upstream success body with two citations."""
    return make_chat_completion(
        "ACME Corp was fined in 2019 for export violations.",
        ["https://a", "https://b"],
    )


@pytest.fixture
def search_results_payload():
    """Upstream body in the search-result-list shape."""
    return {
        "results": [
            {"title": "Court filing", "url": "https://courts.example/1", "snippet": "Case dismissed."},
            {"title": "Sanctions list", "url": "https://sanctions.example/2", "content": "No entry found."},
        ]
    }


@pytest.fixture
def sample_queries():
    """Sample batch of due-diligence queries."""
    return [
        "ACME Corp corruption allegations",
        "John Doe sanctions",
        "Globex fraud investigation",
    ]


# ---------------------------------------------------------------------------
# Client fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def search_client():
    """SearchClient pointed at the mocked upstream URL."""
    from agents.search_agent import SearchClient
    return SearchClient(api_url=SEARCH_API_URL, timeout=5.0, error_body_max_chars=50)


class FakeSearchClient:
    """Search client stand-in with per-query delays and failures."""

    def __init__(self, delays: Optional[Dict[str, float]] = None, failures: Optional[Dict[str, str]] = None):
        self.delays = delays or {}
        self.failures = failures or {}
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def session(self) -> httpx.AsyncClient:
        return httpx.AsyncClient()

    async def fetch(self, query, credential, http_client=None):
        self.calls.append(query)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(query, 0))
        finally:
            self.in_flight -= 1

        if query in self.failures:
            return QueryOutcome.failed(query, self.failures[query])
        return QueryOutcome.succeeded(query, f"answer for {query}", [f"https://src.example/{len(query)}"])


@pytest.fixture
def fake_search_client():
    """Factory for FakeSearchClient instances."""
    return FakeSearchClient


@pytest.fixture
def make_completion():
    """Factory for upstream chat-completion bodies."""
    return make_chat_completion


@pytest.fixture
def upstream_query():
    """Extracts the user query from a captured upstream request."""
    return query_of
