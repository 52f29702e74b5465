"""Search Agent - due-diligence queries against the upstream search API."""

from .client import SearchClient
from .models import QueryOutcome
from .normalizer import MalformedResponseError, ResponseShape, detect_shape, normalize_response
from .prompts import SEARCH_SYSTEM_PROMPT

__all__ = [
    "SearchClient",
    "QueryOutcome",
    "MalformedResponseError",
    "ResponseShape",
    "detect_shape",
    "normalize_response",
    "SEARCH_SYSTEM_PROMPT",
]
