"""Element service and query handlers."""

from .element_service import AddElementResponse, ElementService
from .query_handler import DocumentQueryHandler, QueryHandler
from .validation import validate_key, validate_label, validate_property

__all__ = [
    "AddElementResponse",
    "DocumentQueryHandler",
    "ElementService",
    "QueryHandler",
    "validate_key",
    "validate_label",
    "validate_property",
]
