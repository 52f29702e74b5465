"""Batch dispatcher: concurrent fan-out of queries with positional aggregation."""

import asyncio
import logging
import time
import uuid
from contextlib import nullcontext
from typing import List, Optional, Sequence

import httpx

from agents.search_agent import QueryOutcome, SearchClient
from app.utils.observers import CompositeObserver, DispatchObserver, LoggingObserver

logger = logging.getLogger(__name__)


class DispatchError(RuntimeError):
    """The batch could not be scheduled or supervised."""


class BatchDispatcher:
    """Runs one upstream search per query concurrently and joins them all.

    Per-query failures come back as outcomes with ``error`` set and never
    affect sibling queries. Only a failure of the task group itself (an
    exception escaping a per-query task) aborts the batch, as DispatchError.
    """

    def __init__(
        self,
        search_client: SearchClient,
        observer: Optional[DispatchObserver] = None,
        max_concurrency: int = 0,
    ):
        """Initialize the dispatcher.

        Args:
            search_client: Upstream client used for every query
            observer: Receives batch lifecycle events (defaults to logging); failures are isolated
            max_concurrency: Upper bound on in-flight upstream calls per batch; 0 means unbounded
        """
        self.search_client = search_client
        if observer is None:
            observer = LoggingObserver()
        if not isinstance(observer, CompositeObserver):
            observer = CompositeObserver([observer])
        self.observer = observer
        self.max_concurrency = max_concurrency

    async def dispatch(self, queries: Sequence[str], credential: str) -> List[QueryOutcome]:
        """Dispatch every query and return outcomes in input order.

        Args:
            queries: Ordered, non-empty sequence of queries
            credential: Caller's upstream API key, shared read-only by all calls

        Returns:
            One QueryOutcome per query; ``result[i]`` answers ``queries[i]``

        Raises:
            DispatchError: If the concurrent batch itself fails
        """
        batch_id = uuid.uuid4().hex[:12]
        outcomes: List[Optional[QueryOutcome]] = [None] * len(queries)
        limiter = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency > 0 else None

        self.observer.batch_started(batch_id, list(queries))
        started = time.perf_counter()

        try:
            async with self.search_client.session() as http_client:
                async with asyncio.TaskGroup() as task_group:
                    for index, query in enumerate(queries):
                        task_group.create_task(
                            self._run_query(batch_id, index, query, credential, http_client, limiter, outcomes)
                        )
        except Exception as e:
            self.observer.batch_failed(batch_id, e)
            raise DispatchError(f"Batch {batch_id} could not be completed") from e

        results = [outcome for outcome in outcomes if outcome is not None]
        if len(results) != len(queries):
            raise DispatchError(f"Batch {batch_id} finished with {len(queries) - len(results)} unjoined queries")

        self.observer.batch_finished(batch_id, results, time.perf_counter() - started)
        return results

    async def _run_query(
        self,
        batch_id: str,
        index: int,
        query: str,
        credential: str,
        http_client: httpx.AsyncClient,
        limiter: Optional[asyncio.Semaphore],
        outcomes: List[Optional[QueryOutcome]],
    ) -> None:
        async with limiter or nullcontext():
            started = time.perf_counter()
            outcome = await self.search_client.fetch(query, credential, http_client)

        # Slot by input position; completion order is irrelevant.
        outcomes[index] = outcome
        self.observer.query_finished(batch_id, index, outcome, time.perf_counter() - started)
