"""Graph-level query contract and its document-backed implementation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from .. import filters
from ..filters import Filter
from ..models.elements import (
    IN_ID,
    IN_LABEL,
    OUT_ID,
    OUT_LABEL,
    Direction,
    Edge,
    Element,
    ElementKind,
    Vertex,
)
from ..predicates import DocIdMapper, Predicates
from .element_service import ElementService

logger = logging.getLogger(__name__)


class QueryHandler(ABC):
    """Operations a graph front end needs from its storage."""

    @abstractmethod
    def vertices(self, ids: Iterable[Any] | None = None) -> Iterator[Vertex]:
        """All vertices, or exactly the given ids (fails if any is missing)."""

    @abstractmethod
    def edges(self, ids: Iterable[Any] | None = None) -> Iterator[Edge]:
        """All edges, or exactly the given ids (fails if any is missing)."""

    @abstractmethod
    def vertices_matching(self, predicates: Predicates) -> Iterator[Vertex]:
        """Vertices satisfying every has-container in ``predicates``."""

    @abstractmethod
    def edges_matching(self, predicates: Predicates) -> Iterator[Edge]:
        """Edges satisfying every has-container in ``predicates``."""

    @abstractmethod
    def vertex_edges(
        self,
        vertex: Vertex,
        direction: Direction,
        labels: list[str] | None = None,
        predicates: Predicates | None = None,
    ) -> Iterator[Edge]:
        """Edges incident to ``vertex`` in ``direction``."""

    @abstractmethod
    def add_vertex(
        self, element_id: Any, label: str, properties: Mapping[str, Any] | None = None
    ) -> Vertex:
        """Create a vertex and return it."""

    @abstractmethod
    def add_edge(
        self,
        element_id: Any,
        label: str,
        out_vertex: Vertex,
        in_vertex: Vertex,
        properties: Mapping[str, Any] | None = None,
    ) -> Edge:
        """Create an edge from ``out_vertex`` to ``in_vertex`` and return it."""

    @abstractmethod
    def vertex(self, vertex_id: Any, label: str | None, edge: Edge, direction: Direction) -> Vertex:
        """The endpoint vertex of ``edge``, resolved lazily."""

    @abstractmethod
    def remove_element(self, element: Element) -> None: ...

    @abstractmethod
    def set_property(self, element: Element, key: str, value: Any) -> None: ...

    @abstractmethod
    def remove_property(self, element: Element, key: str) -> None: ...

    @abstractmethod
    def close(self) -> None: ...

    def __enter__(self) -> QueryHandler:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def direction_filter(vertex_id: Any, direction: Direction) -> Filter:
    vertex_id = str(vertex_id)
    if direction == Direction.OUT:
        return filters.term(OUT_ID, vertex_id)
    if direction == Direction.IN:
        return filters.term(IN_ID, vertex_id)
    return filters.or_(filters.term(OUT_ID, vertex_id), filters.term(IN_ID, vertex_id))


class DocumentQueryHandler(QueryHandler):
    """Query handler over an :class:`ElementService`.

    Elements it returns hold a reference back to this handler so that
    ``element.set_property(...)`` and ``edge.out_vertex()`` work without the
    caller threading the handler through.
    """

    def __init__(self, service: ElementService) -> None:
        self.service = service
        service.handler = self

    def _doc_ids(self, kind: ElementKind) -> DocIdMapper:
        schema = self.service.schema_provider
        return lambda element_id: schema.doc_id(element_id, kind)

    def vertices(self, ids: Iterable[Any] | None = None) -> Iterator[Vertex]:
        if ids is None:
            return self.service.search_vertices()
        return iter(self.service.get_vertices(ids))

    def edges(self, ids: Iterable[Any] | None = None) -> Iterator[Edge]:
        if ids is None:
            return self.service.search_edges()
        return iter(self.service.get_edges(ids))

    def vertices_matching(self, predicates: Predicates) -> Iterator[Vertex]:
        return self.service.search_vertices(
            predicates.to_filter(self._doc_ids(ElementKind.VERTEX)),
            predicates.labels(),
            predicates.limit,
        )

    def edges_matching(self, predicates: Predicates) -> Iterator[Edge]:
        return self.service.search_edges(
            predicates.to_filter(self._doc_ids(ElementKind.EDGE)),
            predicates.labels(),
            predicates.limit,
        )

    def vertex_edges(
        self,
        vertex: Vertex,
        direction: Direction,
        labels: list[str] | None = None,
        predicates: Predicates | None = None,
    ) -> Iterator[Edge]:
        query = direction_filter(vertex.id, direction)
        labels = [label for label in labels or [] if label is not None]
        limit = None
        if predicates is not None:
            query = filters.and_(query, predicates.to_filter(self._doc_ids(ElementKind.EDGE)))
            limit = predicates.limit
            predicate_labels = predicates.labels()
            if labels and predicate_labels:
                labels = [label for label in labels if label in predicate_labels]
                if not labels:
                    # Disjoint label restrictions can't match anything.
                    return iter(())
            else:
                labels = labels or predicate_labels
        return self.service.search_edges(query, labels, limit)

    def add_vertex(
        self, element_id: Any, label: str, properties: Mapping[str, Any] | None = None
    ) -> Vertex:
        properties = dict(properties or {})
        response = self.service.add_element(label, element_id, ElementKind.VERTEX, properties)
        return Vertex(response.id, label, properties, handler=self)

    def add_edge(
        self,
        element_id: Any,
        label: str,
        out_vertex: Vertex,
        in_vertex: Vertex,
        properties: Mapping[str, Any] | None = None,
    ) -> Edge:
        properties = dict(properties or {})
        endpoints = {OUT_ID: str(out_vertex.id), IN_ID: str(in_vertex.id)}
        if out_vertex.label is not None:
            endpoints[OUT_LABEL] = out_vertex.label
        if in_vertex.label is not None:
            endpoints[IN_LABEL] = in_vertex.label

        response = self.service.add_element(
            label, element_id, ElementKind.EDGE, properties, endpoints=endpoints
        )
        return Edge(
            response.id,
            label,
            endpoints[OUT_ID],
            endpoints[IN_ID],
            properties,
            handler=self,
            out_label=out_vertex.label,
            in_label=in_vertex.label,
        )

    def vertex(self, vertex_id: Any, label: str | None, edge: Edge, direction: Direction) -> Vertex:
        if direction == Direction.BOTH:
            raise ValueError("an edge endpoint needs direction OUT or IN")
        if vertex_id is None:
            vertex_id = edge.out_id if direction == Direction.OUT else edge.in_id
        return Vertex(vertex_id, label, None, handler=self)

    def remove_element(self, element: Element) -> None:
        self.service.delete_element(element)

    def set_property(self, element: Element, key: str, value: Any) -> None:
        self.service.add_property(element, key, value)

    def remove_property(self, element: Element, key: str) -> None:
        self.service.remove_property(element, key)

    def collect_data(self) -> None:
        self.service.collect_data()

    def close(self) -> None:
        logger.info("query_handler.close")
        self.service.close()

    def __repr__(self) -> str:
        return f"DocumentQueryHandler({self.service!r})"
