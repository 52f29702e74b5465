"""Langfuse monitoring utility."""

import logging
from typing import Any, Dict, Sequence
from langfuse import Langfuse
from datetime import datetime

from agents.search_agent import QueryOutcome

logger = logging.getLogger(__name__)


class LangfuseTracker:
    """Langfuse tracker for search batches.

    Implements the dispatch observer interface: one span per batch, with a
    child span per query.
    """

    def __init__(
        self,
        public_key: str,
        secret_key: str,
        host: str = "https://cloud.langfuse.com"
    ):
        """Initialize Langfuse tracker.

        Args:
            public_key: Langfuse public key
            secret_key: Langfuse secret key
            host: Langfuse host URL
        """
        self.client = Langfuse(
            public_key=public_key,
            secret_key=secret_key,
            host=host
        )
        self._spans: Dict[str, Any] = {}
        logger.info("LangfuseTracker initialized")

    def batch_started(self, batch_id: str, queries: Sequence[str]):
        """Open the batch span.

        Args:
            batch_id: Batch correlation id
            queries: Queries in the batch
        """
        self._spans[batch_id] = self.client.start_span(
            name="search_batch",
            input={"queries": list(queries)},
            metadata={"batch_id": batch_id, "started_at": datetime.now().isoformat()}
        )

    def query_finished(self, batch_id: str, index: int, outcome: QueryOutcome, elapsed_seconds: float):
        """Record one query as a child span of its batch.

        Args:
            batch_id: Batch correlation id
            index: Position of the query in the batch
            outcome: Normalized query outcome
            elapsed_seconds: Wall time of the upstream call
        """
        batch_span = self._spans.get(batch_id)
        if batch_span is None:
            return
        span = batch_span.start_span(
            name="search_query",
            input={"query": outcome.query, "index": index},
            metadata={"success": outcome.ok, "elapsed_seconds": elapsed_seconds}
        )
        if outcome.ok:
            span.update(output={"content": outcome.content, "citations": outcome.citations})
        else:
            span.update(output={"error": outcome.error})
        span.end()

    def batch_finished(self, batch_id: str, outcomes: Sequence[QueryOutcome], elapsed_seconds: float):
        """Close the batch span with summary counts.

        Args:
            batch_id: Batch correlation id
            outcomes: All outcomes, in query order
            elapsed_seconds: Wall time of the batch
        """
        batch_span = self._spans.pop(batch_id, None)
        if batch_span is None:
            return
        failed = sum(1 for outcome in outcomes if not outcome.ok)
        batch_span.update(
            output={"succeeded": len(outcomes) - failed, "failed": failed},
            metadata={"elapsed_seconds": elapsed_seconds, "completed_at": datetime.now().isoformat()}
        )
        batch_span.end()

    def batch_failed(self, batch_id: str, error: BaseException):
        """Close the batch span with the failure type.

        Args:
            batch_id: Batch correlation id
            error: Exception that aborted the batch
        """
        batch_span = self._spans.pop(batch_id, None)
        if batch_span is None:
            return
        batch_span.update(
            output={"error": type(error).__name__},
            metadata={"completed_at": datetime.now().isoformat()}
        )
        batch_span.end()
