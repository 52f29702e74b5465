"""Tests for the Langfuse tracker."""

import pytest
from unittest.mock import MagicMock, patch

from agents.search_agent import QueryOutcome


@pytest.fixture
def tracker():
    """LangfuseTracker with a mocked Langfuse client."""
    with patch("app.utils.langfuse_tracker.Langfuse") as mock_langfuse:
        from app.utils.langfuse_tracker import LangfuseTracker

        tracker = LangfuseTracker(public_key="pk", secret_key="sk", host="https://langfuse.test")
        tracker.mock_langfuse = mock_langfuse
        yield tracker


class TestLangfuseTracker:
    """Test cases for LangfuseTracker."""

    def test_initialization(self, tracker):
        tracker.mock_langfuse.assert_called_once_with(
            public_key="pk", secret_key="sk", host="https://langfuse.test"
        )

    def test_batch_span_wraps_query_spans(self, tracker):
        batch_span = MagicMock()
        tracker.client.start_span.return_value = batch_span
        ok = QueryOutcome.succeeded("a", "text", ["https://a"])
        bad = QueryOutcome.failed("b", "Search API error: 500 - x")

        tracker.batch_started("b1", ["a", "b"])
        tracker.query_finished("b1", 0, ok, 0.1)
        tracker.query_finished("b1", 1, bad, 0.2)
        tracker.batch_finished("b1", [ok, bad], 0.3)

        tracker.client.start_span.assert_called_once()
        assert tracker.client.start_span.call_args.kwargs["input"] == {"queries": ["a", "b"]}
        assert batch_span.start_span.call_count == 2
        batch_span.update.assert_called_once()
        assert batch_span.update.call_args.kwargs["output"] == {"succeeded": 1, "failed": 1}
        batch_span.end.assert_called_once()

    def test_failed_query_span_records_error(self, tracker):
        batch_span = MagicMock()
        query_span = MagicMock()
        batch_span.start_span.return_value = query_span
        tracker.client.start_span.return_value = batch_span

        tracker.batch_started("b1", ["q"])
        tracker.query_finished("b1", 0, QueryOutcome.failed("q", "boom"), 0.1)

        query_span.update.assert_called_once_with(output={"error": "boom"})
        query_span.end.assert_called_once()

    def test_batch_failed_closes_span(self, tracker):
        batch_span = MagicMock()
        tracker.client.start_span.return_value = batch_span

        tracker.batch_started("b1", ["q"])
        tracker.batch_failed("b1", RuntimeError("x"))

        assert batch_span.update.call_args.kwargs["output"] == {"error": "RuntimeError"}
        batch_span.end.assert_called_once()

    def test_unknown_batch_is_ignored(self, tracker):
        tracker.query_finished("missing", 0, QueryOutcome.succeeded("q", "a"), 0.1)
        tracker.batch_finished("missing", [], 0.1)

        tracker.client.start_span.assert_not_called()
