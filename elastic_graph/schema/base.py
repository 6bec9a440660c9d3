"""Schema provider abstractions.

A schema provider decides where graph elements live in the document store:
which index a new element is written to, which index holds an existing
element, and which indices plus filter scope a query to one element kind.
Providers never perform writes themselves.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .. import filters
from ..errors import InitializationError, RoutingError
from ..filters import Filter
from ..models.elements import (
    IN_ID,
    IN_LABEL,
    KIND_FIELD,
    LABEL_FIELD,
    OUT_ID,
    OUT_LABEL,
    Element,
    ElementKind,
)

if TYPE_CHECKING:
    from ..adapters.document_store import DocumentStore
    from ..config.settings import Settings

_KEYWORD = {"type": "keyword"}

GRAPH_MAPPINGS: dict[str, Any] = {
    # Exact-match semantics for string properties so term filters behave
    # like graph equality.
    "dynamic_templates": [
        {
            "strings_as_keywords": {
                "match_mapping_type": "string",
                "mapping": _KEYWORD,
            }
        }
    ],
    "properties": {
        KIND_FIELD: _KEYWORD,
        LABEL_FIELD: _KEYWORD,
        OUT_ID: _KEYWORD,
        IN_ID: _KEYWORD,
        OUT_LABEL: _KEYWORD,
        IN_LABEL: _KEYWORD,
    },
}


@dataclass(frozen=True, slots=True)
class AddElementResult:
    index: str
    fields: dict[str, Any]


@dataclass(frozen=True, slots=True)
class SearchResult:
    indices: list[str]
    filter: Filter


class SchemaProvider(ABC):
    """Routing strategy between graph elements and document indices."""

    def __init__(self) -> None:
        self.base_index = "graph"
        self.allowed_labels: frozenset[str] = frozenset()
        self._store: DocumentStore | None = None

    def init(self, store: DocumentStore, settings: Settings) -> None:
        """Ensure every index this strategy routes to exists.

        Raises InitializationError on any failure.
        """
        self._store = store
        self.base_index = settings.target_index
        self.allowed_labels = frozenset(settings.allowed_labels)
        try:
            for index in self.indices():
                store.ensure_index(index, GRAPH_MAPPINGS)
        except Exception as exc:
            raise InitializationError(
                f"{type(self).__name__} failed to prepare indices: {exc}",
                operation="init",
            ) from exc

    @abstractmethod
    def indices(self) -> list[str]:
        """Every index this strategy may route to."""
        ...

    @abstractmethod
    def add_element(
        self,
        label: str,
        element_id: Any,
        kind: ElementKind,
        key_values: Mapping[str, Any],
    ) -> AddElementResult:
        ...

    @abstractmethod
    def index_for(self, element_or_id: Element | Any, kind: ElementKind | None = None) -> str:
        ...

    @abstractmethod
    def search(
        self,
        filter: Filter | None,
        kind: ElementKind,
        labels: list[str] | None = None,
    ) -> SearchResult:
        ...

    def doc_id(self, element_id: Any, kind: ElementKind) -> str | None:
        """Stored document id for an element id; None lets the backend assign one."""
        return None if element_id is None else str(element_id)

    def element_id(self, doc_id: str, kind: ElementKind) -> str:
        """Inverse of :meth:`doc_id`."""
        return doc_id

    def close(self) -> None:
        self._store = None

    # --- helpers shared by strategies ---

    def check_label(self, label: str) -> None:
        if self.allowed_labels and label not in self.allowed_labels:
            raise RoutingError(
                f"label '{label}' is not routable by {type(self).__name__}",
                operation="route",
            )

    def stored_fields(
        self, label: str, kind: ElementKind, key_values: Mapping[str, Any]
    ) -> dict[str, Any]:
        fields = dict(key_values)
        fields[KIND_FIELD] = kind.value
        fields[LABEL_FIELD] = label
        return fields

    def scoped_filter(
        self,
        filter: Filter | None,
        kind: ElementKind,
        labels: list[str] | None,
    ) -> Filter:
        label_clause = None
        if labels:
            for label in labels:
                self.check_label(label)
            label_clause = filters.terms(LABEL_FIELD, labels)
        return filters.and_(filter, filters.term(KIND_FIELD, kind.value), label_clause)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_index={self.base_index!r})"
