"""Tests for the graph store error taxonomy."""

from __future__ import annotations

from elastic_graph.errors import (
    BackendUnavailableError,
    DeleteElementsError,
    DuplicateElementError,
    ElementNotFoundError,
    GraphStoreError,
    InvalidPropertyError,
)
from elastic_graph.models.elements import Vertex


class TestErrorCodes:
    def test_codes_distinguish_failures(self) -> None:
        assert ElementNotFoundError("vertex", "p1").code == "element_not_found"
        assert BackendUnavailableError("down").code == "backend_unavailable"
        assert InvalidPropertyError("k", "bad").code == "invalid_property"
        assert DuplicateElementError("vertex", "p1", "graph").code == "duplicate_element"

    def test_only_backend_errors_are_retryable_by_default(self) -> None:
        assert BackendUnavailableError("down").retryable is True
        assert BackendUnavailableError("down", retryable=False).retryable is False
        assert ElementNotFoundError("vertex", "p1").retryable is False

    def test_all_share_a_base(self) -> None:
        assert issubclass(DeleteElementsError, GraphStoreError)


class TestLogExtra:
    def test_structured_fields(self) -> None:
        exc = ElementNotFoundError("edge", 7, operation="get")
        assert exc.to_log_extra() == {
            "error_code": "element_not_found",
            "operation": "get",
            "kind": "edge",
            "element_id": "7",
            "retryable": False,
        }


class TestDeleteElementsError:
    def test_message_names_failed_ids(self) -> None:
        failures = [(Vertex("a", "person"), BackendUnavailableError("down"))]
        exc = DeleteElementsError(failures)
        assert exc.failures == failures
        assert "a" in str(exc)
