"""Upstream search client: one HTTP call per query, normalized into a QueryOutcome."""

import logging
from typing import Any, Dict, Optional

import httpx

from .models import QueryOutcome
from .normalizer import MalformedResponseError, normalize_response
from .prompts import SEARCH_SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class SearchClient:
    """Client for a chat-completion style search API (Perplexity-compatible)."""

    def __init__(
        self,
        api_url: str,
        model: str = "llama-3.1-sonar-large-128k-online",
        temperature: float = 0.2,
        max_tokens: int = 1000,
        timeout: float = 30.0,
        error_body_max_chars: int = 500,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the search client.

        Args:
            api_url: Chat completions endpoint of the upstream API
            model: Upstream model name
            temperature: Sampling temperature (kept low for factual answers)
            max_tokens: Maximum tokens in each answer
            timeout: Per-call timeout in seconds
            error_body_max_chars: Upstream error bodies are truncated to this length
            transport: Optional httpx transport (used by tests and proxies)
        """
        self.api_url = api_url
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.error_body_max_chars = error_body_max_chars
        self.transport = transport
        logger.info(f"SearchClient initialized with model: {model}")

    def session(self) -> httpx.AsyncClient:
        """Create an HTTP session; callers must close it (use ``async with``)."""
        return httpx.AsyncClient(timeout=httpx.Timeout(self.timeout), transport=self.transport)

    def build_payload(self, query: str) -> Dict[str, Any]:
        """Build the upstream request body for one query."""
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SEARCH_SYSTEM_PROMPT},
                {"role": "user", "content": query},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "return_citations": True,
            "return_related_questions": False,
        }

    async def fetch(
        self,
        query: str,
        credential: str,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> QueryOutcome:
        """Run one query against the upstream API.

        Upstream failures never raise: bad statuses, transport errors and
        malformed bodies are returned as an outcome with ``error`` set.

        Args:
            query: Free-text research query
            credential: Caller's API key, sent as a bearer token
            http_client: Shared session; a private one is opened and closed if omitted

        Returns:
            QueryOutcome for the query
        """
        if http_client is None:
            async with self.session() as owned_client:
                return await self._fetch(query, credential, owned_client)
        return await self._fetch(query, credential, http_client)

    async def _fetch(self, query: str, credential: str, http_client: httpx.AsyncClient) -> QueryOutcome:
        logger.info(f"Searching: {query[:100]}...")
        headers = {
            "Authorization": f"Bearer {credential}",
            "Content-Type": "application/json",
        }

        try:
            response = await http_client.post(self.api_url, headers=headers, json=self.build_payload(query))
        except httpx.HTTPError as e:
            logger.warning(f"Upstream request failed for query {query[:50]!r}: {type(e).__name__}")
            return QueryOutcome.failed(query, f"Upstream request failed: {type(e).__name__}: {e}")
        except UnicodeEncodeError:
            # Header values are ASCII-only; the message must not echo the credential.
            logger.warning(f"Upstream request not sent for query {query[:50]!r}: credential is not ASCII")
            return QueryOutcome.failed(query, "Upstream request failed: credential contains non-ASCII characters")

        if not response.is_success:
            body = response.text[: self.error_body_max_chars]
            logger.warning(f"Search API returned {response.status_code} for query {query[:50]!r}")
            return QueryOutcome.failed(query, f"Search API error: {response.status_code} - {body}")

        try:
            payload = response.json()
        except ValueError:
            return QueryOutcome.failed(query, "Malformed upstream response: body is not valid JSON")

        try:
            return normalize_response(query, payload)
        except MalformedResponseError as e:
            logger.warning(f"Malformed search response for query {query[:50]!r}: {e}")
            return QueryOutcome.failed(query, f"Malformed upstream response: {e}")
