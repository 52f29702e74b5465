"""Dispatch observability: observer protocol plus logging and fan-out observers."""

import logging
from typing import Any, List, Protocol, Sequence

from agents.search_agent import QueryOutcome

logger = logging.getLogger(__name__)


class DispatchObserver(Protocol):
    """Receives batch lifecycle events from the dispatcher.

    Observers only ever see queries and outcomes, never the credential.
    """

    def batch_started(self, batch_id: str, queries: Sequence[str]) -> None: ...

    def query_finished(self, batch_id: str, index: int, outcome: QueryOutcome, elapsed_seconds: float) -> None: ...

    def batch_finished(self, batch_id: str, outcomes: Sequence[QueryOutcome], elapsed_seconds: float) -> None: ...

    def batch_failed(self, batch_id: str, error: BaseException) -> None: ...


class LoggingObserver:
    """Writes leveled log lines for each dispatch event."""

    def batch_started(self, batch_id: str, queries: Sequence[str]) -> None:
        logger.info(f"[{batch_id}] Dispatching {len(queries)} queries")

    def query_finished(self, batch_id: str, index: int, outcome: QueryOutcome, elapsed_seconds: float) -> None:
        if outcome.ok:
            logger.info(
                f"[{batch_id}] Query {index} done in {elapsed_seconds:.2f}s "
                f"citations={len(outcome.citations)} query_preview={outcome.query[:100]!r}"
            )
        else:
            logger.warning(
                f"[{batch_id}] Query {index} failed in {elapsed_seconds:.2f}s: {outcome.error}"
            )

    def batch_finished(self, batch_id: str, outcomes: Sequence[QueryOutcome], elapsed_seconds: float) -> None:
        failed = sum(1 for outcome in outcomes if not outcome.ok)
        logger.info(
            f"[{batch_id}] Batch complete in {elapsed_seconds:.2f}s: "
            f"{len(outcomes) - failed} succeeded, {failed} failed"
        )

    def batch_failed(self, batch_id: str, error: BaseException) -> None:
        logger.error(f"[{batch_id}] Batch aborted: {type(error).__name__}: {error}")


class CompositeObserver:
    """Forwards every event to each wrapped observer, in order.

    A failing observer is logged and skipped; it never reaches the dispatcher
    or stops the observers after it.
    """

    def __init__(self, observers: List[DispatchObserver]):
        self.observers = list(observers)

    def _notify(self, event: str, *args: Any) -> None:
        for observer in self.observers:
            try:
                getattr(observer, event)(*args)
            except Exception:
                logger.exception(f"Observer {type(observer).__name__} failed on {event}")

    def batch_started(self, batch_id: str, queries: Sequence[str]) -> None:
        self._notify("batch_started", batch_id, queries)

    def query_finished(self, batch_id: str, index: int, outcome: QueryOutcome, elapsed_seconds: float) -> None:
        self._notify("query_finished", batch_id, index, outcome, elapsed_seconds)

    def batch_finished(self, batch_id: str, outcomes: Sequence[QueryOutcome], elapsed_seconds: float) -> None:
        self._notify("batch_finished", batch_id, outcomes, elapsed_seconds)

    def batch_failed(self, batch_id: str, error: BaseException) -> None:
        self._notify("batch_failed", batch_id, error)
