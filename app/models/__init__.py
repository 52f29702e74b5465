"""Pydantic models for request/response validation."""

from .schemas import BatchRequest, BatchResponse, BatchValidationError, ErrorResponse, HealthResponse

__all__ = ["BatchRequest", "BatchResponse", "BatchValidationError", "ErrorResponse", "HealthResponse"]
