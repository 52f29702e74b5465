"""
Search Router: validates a batch of research queries, fans them out to the
upstream search API and returns one outcome per query, in input order.
"""

import json
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from app.config import settings
from app.dispatch import BatchDispatcher
from app.models.schemas import BatchRequest, BatchResponse, BatchValidationError, ErrorResponse
from app.utils.cors import preflight_headers
from app.utils.langfuse_tracker import LangfuseTracker
from app.utils.observers import CompositeObserver, DispatchObserver, LoggingObserver

from agents.search_agent import SearchClient


logger = logging.getLogger(__name__)
router = APIRouter()

# ---- Initialize shared components (module-level singletons) ----
search_client = SearchClient(
    api_url=settings.SEARCH_API_URL,
    model=settings.SEARCH_MODEL,
    temperature=settings.SEARCH_TEMPERATURE,
    max_tokens=settings.SEARCH_MAX_TOKENS,
    timeout=settings.SEARCH_TIMEOUT_SECONDS,
    error_body_max_chars=settings.ERROR_BODY_MAX_CHARS,
)

observers: List[DispatchObserver] = [LoggingObserver()]
if settings.langfuse_enabled:
    observers.append(
        LangfuseTracker(
            public_key=settings.LANGFUSE_PUBLIC_KEY,
            secret_key=settings.LANGFUSE_SECRET_KEY,
            host=settings.LANGFUSE_HOST,
        )
    )

dispatcher = BatchDispatcher(
    search_client=search_client,
    observer=CompositeObserver(observers),
    max_concurrency=settings.MAX_CONCURRENT_QUERIES,
)

SERVER_ERROR_MESSAGE = "Search request could not be completed"
SERVER_ERROR_DETAILS = "Failed to process search request"


def _error(status_code: int, message: str, **extra: Any) -> JSONResponse:
    body: Dict[str, Any] = {"error": message}
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body)


@router.options("", include_in_schema=False)
async def preflight() -> Response:
    """Answer a cross-origin preflight."""
    return Response(status_code=200, headers=preflight_headers(settings.CORS_ALLOW_ORIGINS))


@router.api_route("", methods=["GET", "HEAD", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def method_not_allowed() -> JSONResponse:
    return _error(405, "Method not allowed")


@router.post(
    "",
    response_model=BatchResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def search(request: Request):
    """
    Batch search endpoint.

    Body: ``{"queries": [str, ...], "apiKey": str}``. Individual upstream
    failures are reported inside ``results``; the status stays 200.
    """
    raw_body = await request.body()
    try:
        payload = json.loads(raw_body)
    except ValueError:
        logger.info("Rejected search request: body is not valid JSON")
        return _error(400, "Invalid JSON")

    try:
        batch = BatchRequest.from_payload(payload)
    except BatchValidationError as e:
        logger.info(f"Rejected search request: {e.message}")
        return _error(400, e.message)

    logger.info(f"Received search batch of {len(batch.queries)} queries")

    try:
        outcomes = await dispatcher.dispatch(batch.queries, batch.api_key.get_secret_value())
    except Exception as e:
        logger.exception(f"Unhandled error while processing search batch: {type(e).__name__}")
        return _error(500, SERVER_ERROR_MESSAGE, details=SERVER_ERROR_DETAILS)

    return BatchResponse(results=outcomes)
