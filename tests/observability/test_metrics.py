"""Tests for observability metrics definitions."""

from prometheus_client import Counter, Histogram

from elastic_graph.observability.metrics import (
    BACKEND_ERRORS,
    OPERATION_DURATION,
    OPERATION_ERRORS,
    OPERATION_LATENCY_BUCKETS,
    SEARCH_HITS,
)


class TestMetricDefinitions:
    """Verify metric objects are properly defined."""

    def test_operation_duration_is_histogram(self) -> None:
        assert isinstance(OPERATION_DURATION, Histogram)

    def test_operation_duration_labels(self) -> None:
        assert OPERATION_DURATION._labelnames == ("operation",)

    def test_operation_errors_labels(self) -> None:
        assert isinstance(OPERATION_ERRORS, Counter)
        assert OPERATION_ERRORS._labelnames == ("operation", "code")

    def test_backend_errors_labels(self) -> None:
        assert isinstance(BACKEND_ERRORS, Counter)
        assert BACKEND_ERRORS._labelnames == ("operation", "error")

    def test_search_hits_labels(self) -> None:
        assert isinstance(SEARCH_HITS, Counter)
        assert SEARCH_HITS._labelnames == ("kind",)

    def test_bucket_configuration_exists(self) -> None:
        assert len(OPERATION_LATENCY_BUCKETS) > 0
        assert list(OPERATION_LATENCY_BUCKETS) == sorted(OPERATION_LATENCY_BUCKETS)
