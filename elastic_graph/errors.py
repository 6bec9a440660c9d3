"""Error taxonomy for graph store operations.

Every error carries enough structure (``code``, ``operation``, ``kind``,
``element_id``) for callers to tell "not found" from "backend failure" from
"validation failure" without parsing messages.
"""

from __future__ import annotations

from typing import Any


class GraphStoreError(Exception):
    """Base class for all graph store errors."""

    code = "graph_store_error"

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        operation: str | None = None,
        kind: str | None = None,
        element_id: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.retryable = retryable
        self.operation = operation
        self.kind = kind
        self.element_id = element_id

    def to_log_extra(self) -> dict[str, Any]:
        """Structured fields for ``logger.*(..., extra=...)``."""
        return {
            "error_code": self.code,
            "operation": self.operation,
            "kind": self.kind,
            "element_id": None if self.element_id is None else str(self.element_id),
            "retryable": self.retryable,
        }


class ValidationError(GraphStoreError):
    """A property key or value was rejected before any backend call."""

    code = "invalid_property"


class InvalidPropertyError(ValidationError):
    def __init__(self, key: Any, reason: str, **kwargs: Any) -> None:
        super().__init__(f"Invalid property '{key}': {reason}", **kwargs)
        self.key = key
        self.reason = reason


class DuplicateElementError(GraphStoreError):
    code = "duplicate_element"

    def __init__(self, kind: str, element_id: Any, index: str, **kwargs: Any) -> None:
        super().__init__(
            f"{kind} with id '{element_id}' already exists in index '{index}'",
            kind=kind,
            element_id=element_id,
            **kwargs,
        )
        self.index = index


class ElementNotFoundError(GraphStoreError):
    code = "element_not_found"

    def __init__(self, kind: str, element_id: Any, **kwargs: Any) -> None:
        super().__init__(
            f"{kind} with id '{element_id}' does not exist",
            kind=kind,
            element_id=element_id,
            **kwargs,
        )


class RoutingError(GraphStoreError):
    """The schema provider could not place an element or scope a query."""

    code = "routing_error"


class BackendUnavailableError(GraphStoreError):
    """The storage backend could not be reached or timed out."""

    code = "backend_unavailable"

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)


class InitializationError(GraphStoreError):
    """Connection or schema provider setup failed; the service cannot start."""

    code = "initialization_error"


class DeleteElementsError(GraphStoreError):
    """One or more deletions in a batch failed.

    Every element of the batch was attempted; ``failures`` holds the
    ``(element, error)`` pairs in iteration order.
    """

    code = "delete_failed"

    def __init__(self, failures: list[tuple[Any, Exception]]) -> None:
        ids = ", ".join(str(getattr(element, "id", element)) for element, _ in failures)
        super().__init__(
            f"Failed to delete {len(failures)} element(s): {ids}",
            operation="delete_elements",
        )
        self.failures = failures
