"""Normalized per-query result record."""

from typing import List, Optional

from pydantic import BaseModel, Field


class QueryOutcome(BaseModel):
    """Outcome of one dispatched query, successful or failed."""
    query: str
    content: Optional[str] = None
    citations: List[str] = Field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def succeeded(cls, query: str, content: str, citations: Optional[List[str]] = None) -> "QueryOutcome":
        return cls(query=query, content=content, citations=list(citations or []))

    @classmethod
    def failed(cls, query: str, error: str) -> "QueryOutcome":
        return cls(query=query, content=None, citations=[], error=error)

    @property
    def ok(self) -> bool:
        return self.error is None
