"""Pydantic models for API schemas."""

from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator
from typing import Any, List, Optional

from agents.search_agent import QueryOutcome

NO_QUERIES = "No queries provided"
INVALID_QUERY = "Each query must be a non-empty string"
API_KEY_REQUIRED = "API key required"


class BatchValidationError(ValueError):
    """Inbound batch request failed validation; the message is client-facing."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BatchRequest(BaseModel):
    """Request model for the batch search endpoint."""

    queries: List[str] = Field(..., min_length=1)
    api_key: SecretStr = Field(..., alias="apiKey")

    @field_validator("queries")
    @classmethod
    def validate_queries_not_blank(cls, v: List[str]) -> List[str]:
        """Reject whitespace-only queries; accepted queries are kept verbatim."""
        if any(not q.strip() for q in v):
            raise ValueError(INVALID_QUERY)
        return v

    @field_validator("api_key")
    @classmethod
    def validate_api_key_present(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value():
            raise ValueError(API_KEY_REQUIRED)
        return v

    @classmethod
    def from_payload(cls, payload: Any) -> "BatchRequest":
        """Build a request from a decoded JSON body.

        Raises:
            BatchValidationError: With the client-facing reason of the first
                failing check (queries before credential)
        """
        if not isinstance(payload, dict):
            payload = {}
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise BatchValidationError(_first_reason(e)) from None


def _first_reason(error: ValidationError) -> str:
    query_errors = []
    key_errors = []
    for detail in error.errors():
        loc = detail.get("loc", ())
        if loc and loc[0] == "queries":
            query_errors.append(detail)
        elif loc and loc[0] in ("apiKey", "api_key"):
            key_errors.append(detail)

    if query_errors:
        # Whole-field problems (missing, not a list, empty) versus bad entries.
        for detail in query_errors:
            if len(detail["loc"]) == 1 and detail["type"] != "value_error":
                return NO_QUERIES
        return INVALID_QUERY
    if key_errors:
        return API_KEY_REQUIRED
    return NO_QUERIES


class BatchResponse(BaseModel):
    """Response model for the batch search endpoint."""
    results: List[QueryOutcome]


class ErrorResponse(BaseModel):
    """Error body returned for rejected or failed requests."""
    error: str
    details: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    timestamp: str
    upstream: str
