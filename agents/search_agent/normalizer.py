"""Normalization of upstream search API responses.

The upstream API family answers in one of two shapes:

* ``CHAT_COMPLETION``: ``{"choices": [{"message": {"content": ...}}], "citations": [...]}``
* ``SEARCH_RESULTS``: ``{"results": [{"title": ..., "url": ..., "snippet": ...}]}``

The shape is detected from the payload's top-level keys and then parsed by
the matching function; nothing is read speculatively across shapes.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from .models import QueryOutcome

logger = logging.getLogger(__name__)


class ResponseShape(str, Enum):
    """Known upstream response layouts."""
    CHAT_COMPLETION = "chat_completion"
    SEARCH_RESULTS = "search_results"


class MalformedResponseError(ValueError):
    """Upstream answered with a success status but an unexpected body."""


def detect_shape(payload: Any) -> Optional[ResponseShape]:
    """Return the response shape of ``payload``, or None if unrecognized."""
    if not isinstance(payload, dict):
        return None
    if "choices" in payload:
        return ResponseShape.CHAT_COMPLETION
    if "results" in payload:
        return ResponseShape.SEARCH_RESULTS
    return None


def _citation_urls(entries: Any, field: str) -> List[str]:
    """Extract URLs from a citation list of strings or ``{"url": ...}`` objects."""
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise MalformedResponseError(f"'{field}' is not a list")

    urls: List[str] = []
    for position, entry in enumerate(entries):
        if isinstance(entry, str):
            urls.append(entry)
        elif isinstance(entry, dict) and isinstance(entry.get("url"), str):
            urls.append(entry["url"])
        else:
            raise MalformedResponseError(f"'{field}[{position}]' has no URL")
    return urls


def _parse_chat_completion(query: str, payload: Dict[str, Any]) -> QueryOutcome:
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        raise MalformedResponseError("missing choices")

    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    if not isinstance(message, dict) or "content" not in message:
        raise MalformedResponseError("missing choices[0].message.content")

    content = message["content"]
    if not isinstance(content, str):
        raise MalformedResponseError("choices[0].message.content is not text")

    if "citations" in payload:
        citations = _citation_urls(payload["citations"], "citations")
    else:
        citations = _citation_urls(payload.get("search_results"), "search_results")

    return QueryOutcome.succeeded(query, content, citations)


def _parse_search_results(query: str, payload: Dict[str, Any]) -> QueryOutcome:
    results = payload.get("results")
    if not isinstance(results, list):
        raise MalformedResponseError("'results' is not a list")

    sections: List[str] = []
    citations: List[str] = []
    for position, item in enumerate(results):
        if not isinstance(item, dict):
            raise MalformedResponseError(f"'results[{position}]' is not an object")

        title = item.get("title")
        snippet = item.get("snippet", item.get("content"))
        if title and snippet:
            sections.append(f"{title}: {snippet}")
        elif title or snippet:
            sections.append(str(title or snippet))

        url = item.get("url")
        if isinstance(url, str) and url:
            citations.append(url)

    return QueryOutcome.succeeded(query, "\n\n".join(sections), citations)


def normalize_response(query: str, payload: Any) -> QueryOutcome:
    """Convert a decoded upstream success body into a QueryOutcome.

    Args:
        query: The query the body answers (echoed into the outcome)
        payload: Decoded JSON body

    Returns:
        Successful QueryOutcome

    Raises:
        MalformedResponseError: If the body matches no known shape or a known
            shape is missing required fields
    """
    shape = detect_shape(payload)
    if shape is ResponseShape.CHAT_COMPLETION:
        return _parse_chat_completion(query, payload)
    if shape is ResponseShape.SEARCH_RESULTS:
        return _parse_search_results(query, payload)

    logger.debug(f"Unrecognized upstream payload type: {type(payload).__name__}")
    raise MalformedResponseError("unrecognized response shape")
