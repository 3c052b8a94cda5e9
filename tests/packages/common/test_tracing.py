"""Tests for correlation ID tracking."""

import logging

import pytest

from packages.common.logging import CorrelationIdFilter
from packages.common.tracing import TracingContext, clear_correlation_id, get_correlation_id


@pytest.fixture(autouse=True)
def _reset_correlation_id() -> None:
    clear_correlation_id()


@pytest.mark.unit
def test_context_generates_and_clears_id() -> None:
    with TracingContext() as correlation_id:
        assert get_correlation_id() == correlation_id
        assert len(correlation_id) == 36

    assert get_correlation_id() is None


@pytest.mark.unit
def test_context_uses_given_id_and_restores_previous() -> None:
    with TracingContext("outer"):
        with TracingContext("inner") as inner:
            assert inner == "inner"
            assert get_correlation_id() == "inner"
        assert get_correlation_id() == "outer"


@pytest.mark.unit
def test_log_filter_injects_correlation_id() -> None:
    record = logging.LogRecord("orb", logging.INFO, __file__, 1, "msg", None, None)

    with TracingContext("req-123"):
        assert CorrelationIdFilter().filter(record) is True

    assert record.correlation_id == "req-123"
