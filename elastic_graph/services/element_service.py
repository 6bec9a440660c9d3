"""Element lifecycle against the document store.

The element service turns graph operations into document store requests,
routes every request through the schema provider, and maps responses back
into vertices and edges. It holds no per-call state, so one instance can be
shared across threads.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from opentelemetry import trace

from ..adapters.document_store import (
    DocumentExistsError,
    DocumentMissingError,
    DocumentRef,
    DocumentStore,
    SearchHit,
    StoredDocument,
)
from ..errors import (
    DeleteElementsError,
    DuplicateElementError,
    ElementNotFoundError,
    GraphStoreError,
    InvalidPropertyError,
)
from ..filters import Filter
from ..models.elements import (
    EDGE_ENDPOINT_FIELDS,
    IN_ID,
    IN_LABEL,
    INTERNAL_FIELDS,
    KIND_FIELD,
    LABEL_FIELD,
    OUT_ID,
    OUT_LABEL,
    Edge,
    Element,
    ElementKind,
    Vertex,
)
from ..observability.metrics import OPERATION_ERRORS, SEARCH_HITS
from ..observability.timing import TimingAccessor
from ..schema.base import SchemaProvider
from .validation import validate_key, validate_label, validate_property

if TYPE_CHECKING:
    from .query_handler import QueryHandler

logger = logging.getLogger(__name__)
tracer = trace.get_tracer("elastic-graph.element_service")


@dataclass(frozen=True, slots=True)
class AddElementResponse:
    id: str
    index: str


class ElementService:
    """Stateless orchestrator over a store, a schema provider and timers."""

    def __init__(
        self,
        store: DocumentStore,
        schema_provider: SchemaProvider,
        timing: TimingAccessor | None = None,
        refresh: bool = False,
        batch_size: int = 500,
    ) -> None:
        self.store = store
        self.schema_provider = schema_provider
        self.timing = timing or TimingAccessor()
        self.refresh = refresh
        self.batch_size = batch_size
        # Query handler that returned elements call back into.
        self.handler: QueryHandler | None = None
        self._closed = False

    @contextmanager
    def _operation(
        self,
        name: str,
        kind: ElementKind | None = None,
        element_id: Any = None,
    ) -> Iterator[trace.Span]:
        """Timer span plus trace span; both end exactly once, errors included."""
        with self.timing.timer(name), tracer.start_as_current_span(
            f"element_service.{name.replace(' ', '_')}"
        ) as span:
            if kind is not None:
                span.set_attribute("kind", kind.value)
            if element_id is not None:
                span.set_attribute("element_id", str(element_id))
            try:
                yield span
            except GraphStoreError as exc:
                if exc.operation is None:
                    exc.operation = name
                OPERATION_ERRORS.labels(operation=name, code=exc.code).inc()
                logger.warning("element_service.operation_failed", extra=exc.to_log_extra())
                raise

    # --- writes ---

    def add_element(
        self,
        label: str,
        element_id: Any,
        kind: ElementKind,
        key_values: Mapping[str, Any],
        endpoints: Mapping[str, Any] | None = None,
    ) -> AddElementResponse:
        """Validate, route and create one element.

        A supplied id is written create-only and a clash raises
        DuplicateElementError; without an id one is assigned. ``endpoints``
        carries the edge endpoint fields; user properties may not use those
        keys when it is given.
        """
        with self._operation("add element", kind, element_id):
            validate_label(label)
            for key, value in key_values.items():
                validate_property(key, value)
                if endpoints is not None and key in EDGE_ENDPOINT_FIELDS:
                    raise InvalidPropertyError(
                        key, "edge endpoints come from the vertices", kind=kind.value
                    )
            fields = {**key_values, **(endpoints or {})}

            routing = self.schema_provider.add_element(label, element_id, kind, fields)
            doc_id = self.schema_provider.doc_id(element_id, kind)
            try:
                stored_id = self.store.write(routing.index, doc_id, routing.fields, create_only=True)
            except DocumentExistsError as exc:
                raise DuplicateElementError(
                    kind.value, element_id, routing.index, operation="add element"
                ) from exc
            assigned = self.schema_provider.element_id(stored_id, kind)

        logger.debug(
            "element_service.element_added",
            extra={"kind": kind.value, "label": label, "element_id": assigned, "index": routing.index},
        )
        return AddElementResponse(assigned, routing.index)

    def _doc_id(self, element: Element) -> str:
        return str(self.schema_provider.doc_id(element.id, element.kind))

    def delete_element(self, element: Element) -> None:
        """Delete one element. An already-absent document counts as deleted."""
        with self._operation("remove element", element.kind, element.id):
            index = self.schema_provider.index_for(element, element.kind)
            if not self.store.delete(index, self._doc_id(element)):
                logger.debug(
                    "element_service.delete_absent",
                    extra={"kind": element.kind.value, "element_id": str(element.id)},
                )

    def delete_elements(self, elements: Iterable[Element]) -> None:
        """Delete elements in iteration order.

        Every element is attempted; failures are collected and raised together
        as DeleteElementsError once the sequence is exhausted.
        """
        failures: list[tuple[Element, Exception]] = []
        for element in elements:
            try:
                self.delete_element(element)
            except GraphStoreError as exc:
                failures.append((element, exc))
        if failures:
            raise DeleteElementsError(failures)

    def add_property(self, element: Element, key: str, value: Any) -> None:
        with self._operation("update property", element.kind, element.id):
            validate_property(key, value)
            self._check_mutable(element, key)
            index = self.schema_provider.index_for(element, element.kind)
            try:
                self.store.update_fields(index, self._doc_id(element), set_fields={key: value})
            except DocumentMissingError as exc:
                raise ElementNotFoundError(
                    element.kind.value, element.id, operation="update property"
                ) from exc

    def remove_property(self, element: Element, key: str) -> None:
        """Remove one key from the stored document; a missing key is a no-op."""
        with self._operation("remove property", element.kind, element.id):
            validate_key(key)
            self._check_mutable(element, key)
            index = self.schema_provider.index_for(element, element.kind)
            try:
                self.store.update_fields(index, self._doc_id(element), unset_keys=[key])
            except DocumentMissingError as exc:
                raise ElementNotFoundError(
                    element.kind.value, element.id, operation="remove property"
                ) from exc

    @staticmethod
    def _check_mutable(element: Element, key: str) -> None:
        if element.kind == ElementKind.EDGE and key in EDGE_ENDPOINT_FIELDS:
            raise InvalidPropertyError(
                key,
                "edge endpoints are fixed at creation",
                kind=element.kind.value,
                element_id=element.id,
            )

    # --- reads ---

    def get_vertices(self, ids: Iterable[Any] | None) -> list[Vertex]:
        return [
            self._vertex_from(doc.doc_id, doc.source)
            for doc in self._get(ids, ElementKind.VERTEX)
        ]

    def get_edges(self, ids: Iterable[Any] | None) -> list[Edge]:
        return [
            self._edge_from(doc.doc_id, doc.source)
            for doc in self._get(ids, ElementKind.EDGE)
        ]

    def _get(self, ids: Iterable[Any] | None, kind: ElementKind) -> list[StoredDocument]:
        id_list = list(ids) if ids is not None else []
        if not id_list:
            return []

        with self._operation("get", kind) as span:
            span.set_attribute("id_count", len(id_list))
            refs = [
                DocumentRef(
                    self.schema_provider.index_for(element_id, kind),
                    str(self.schema_provider.doc_id(element_id, kind)),
                )
                for element_id in id_list
            ]
            documents = self.store.multi_get(refs)
            for element_id, doc in zip(id_list, documents):
                # A document of the other kind under the same id is not a match.
                if not doc.found or doc.source.get(KIND_FIELD) != kind.value:
                    raise ElementNotFoundError(kind.value, element_id, operation="get")
            return documents

    def search_vertices(
        self,
        filter: Filter | None = None,
        labels: list[str] | None = None,
        limit: int | None = None,
    ) -> Iterator[Vertex]:
        """Lazily map matching documents to vertices.

        The first page is requested eagerly and later pages as the iterator
        advances; the returned iterator is single-pass.
        """
        hits = self._search(filter, ElementKind.VERTEX, labels, limit)
        return (self._vertex_from(hit.doc_id, hit.source) for hit in hits)

    def search_edges(
        self,
        filter: Filter | None = None,
        labels: list[str] | None = None,
        limit: int | None = None,
    ) -> Iterator[Edge]:
        hits = self._search(filter, ElementKind.EDGE, labels, limit)
        return (self._edge_from(hit.doc_id, hit.source) for hit in hits)

    def _search(
        self,
        filter: Filter | None,
        kind: ElementKind,
        labels: list[str] | None,
        limit: int | None,
    ) -> Iterator[SearchHit]:
        """Page through every match, ``batch_size`` hits per request."""
        labels = [label for label in labels or [] if label is not None]
        with self._operation("search", kind) as span:
            routing = self.schema_provider.search(filter, kind, labels)
            if limit is not None and limit <= 0:
                return iter(())
            if self.refresh:
                self.store.refresh(routing.indices)
            span.set_attribute("page_size", self.batch_size)
            hits = self.store.search(routing.indices, routing.filter, self.batch_size, limit)
        return self._counted(hits, kind)

    @staticmethod
    def _counted(hits: Iterator[SearchHit], kind: ElementKind) -> Iterator[SearchHit]:
        counter = SEARCH_HITS.labels(kind=kind.value)
        for hit in hits:
            counter.inc()
            yield hit

    # --- response mapping ---

    def _vertex_from(self, doc_id: str, source: Mapping[str, Any]) -> Vertex:
        vertex = Vertex(
            self.schema_provider.element_id(doc_id, ElementKind.VERTEX),
            source.get(LABEL_FIELD),
            {},
            handler=self.handler,
        )
        for key, value in source.items():
            if key not in INTERNAL_FIELDS:
                vertex.add_property_local(key, value)
        return vertex

    def _edge_from(self, doc_id: str, source: Mapping[str, Any]) -> Edge:
        edge = Edge(
            self.schema_provider.element_id(doc_id, ElementKind.EDGE),
            source.get(LABEL_FIELD),
            source.get(OUT_ID),
            source.get(IN_ID),
            {},
            handler=self.handler,
            out_label=source.get(OUT_LABEL),
            in_label=source.get(IN_LABEL),
        )
        for key, value in source.items():
            if key not in INTERNAL_FIELDS and key not in EDGE_ENDPOINT_FIELDS:
                edge.add_property_local(key, value)
        return edge

    # --- meta ---

    def collect_data(self) -> None:
        self.timing.print_report()

    def close(self) -> None:
        """Release the schema provider and the store, then flush timers."""
        if self._closed:
            return
        self._closed = True
        try:
            self.schema_provider.close()
        finally:
            self.store.close()
            self.timing.print_report()

    def __repr__(self) -> str:
        return f"ElementService(schema={self.schema_provider!r}, store={self.store!r})"
