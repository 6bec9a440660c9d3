"""In-memory graph elements built from stored documents."""

from __future__ import annotations

import enum
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any, cast

if TYPE_CHECKING:
    from ..predicates import Predicates
    from ..services.query_handler import QueryHandler

# Reserved document fields. The "~" prefix keeps them out of the user key space.
KIND_FIELD = "~kind"
LABEL_FIELD = "~label"

# Edge endpoint fields, written once at creation.
OUT_ID = "outId"
IN_ID = "inId"
OUT_LABEL = "outLabel"
IN_LABEL = "inLabel"
EDGE_ENDPOINT_FIELDS = (OUT_ID, IN_ID, OUT_LABEL, IN_LABEL)

INTERNAL_FIELDS = (KIND_FIELD, LABEL_FIELD)


class ElementKind(str, enum.Enum):
    VERTEX = "vertex"
    EDGE = "edge"


class Direction(str, enum.Enum):
    OUT = "out"
    IN = "in"
    BOTH = "both"


class Element:
    """Base for vertices and edges.

    ``properties`` holds only the user fields present in the backend response.
    An element created without properties is a lazy stub; its properties are
    fetched through the owning query handler on first access.
    """

    kind: ElementKind

    def __init__(
        self,
        element_id: Any,
        label: str | None,
        properties: Mapping[str, Any] | None = None,
        handler: QueryHandler | None = None,
    ) -> None:
        self.id = element_id
        self.label = label
        self._properties: dict[str, Any] | None = (
            dict(properties) if properties is not None else None
        )
        self._handler = handler

    @property
    def loaded(self) -> bool:
        return self._properties is not None

    @property
    def properties(self) -> dict[str, Any]:
        if self._properties is None:
            self._load()
        # _load always populates _properties or raises.
        return cast("dict[str, Any]", self._properties)

    def keys(self) -> set[str]:
        return set(self.properties)

    def value(self, key: str, default: Any = None) -> Any:
        return self.properties.get(key, default)

    def add_property_local(self, key: str, value: Any) -> None:
        """Attach an already-known property without a backend write."""
        if self._properties is None:
            self._properties = {}
        self._properties[key] = value

    def set_property(self, key: str, value: Any) -> None:
        self._require_handler().set_property(self, key, value)
        self.add_property_local(key, value)

    def remove_property(self, key: str) -> None:
        self._require_handler().remove_property(self, key)
        if self._properties is not None:
            self._properties.pop(key, None)

    def remove(self) -> None:
        self._require_handler().remove_element(self)

    def _require_handler(self) -> QueryHandler:
        if self._handler is None:
            raise RuntimeError(f"{self!r} is not attached to a query handler")
        return self._handler

    def _load(self) -> None:
        raise NotImplementedError

    def _adopt(self, other: Element) -> None:
        self._properties = dict(other.properties)
        if self.label is None:
            self.label = other.label

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        return self.kind == other.kind and str(self.id) == str(other.id)

    def __hash__(self) -> int:
        return hash((self.kind, str(self.id)))


class Vertex(Element):
    kind = ElementKind.VERTEX

    def _load(self) -> None:
        found = next(iter(self._require_handler().vertices([self.id])))
        self._adopt(found)

    def edges(
        self,
        direction: Direction = Direction.BOTH,
        labels: list[str] | None = None,
        predicates: Predicates | None = None,
    ) -> Iterator[Edge]:
        return self._require_handler().vertex_edges(self, direction, labels, predicates)

    def __repr__(self) -> str:
        return f"v[{self.id}]"


class Edge(Element):
    kind = ElementKind.EDGE

    def __init__(
        self,
        element_id: Any,
        label: str | None,
        out_id: Any,
        in_id: Any,
        properties: Mapping[str, Any] | None = None,
        handler: QueryHandler | None = None,
        out_label: str | None = None,
        in_label: str | None = None,
    ) -> None:
        super().__init__(element_id, label, properties, handler)
        self.out_id = out_id
        self.in_id = in_id
        self.out_label = out_label
        self.in_label = in_label

    def _load(self) -> None:
        found = next(iter(self._require_handler().edges([self.id])))
        self._adopt(found)

    def out_vertex(self) -> Vertex:
        return self._require_handler().vertex(self.out_id, self.out_label, self, Direction.OUT)

    def in_vertex(self) -> Vertex:
        return self._require_handler().vertex(self.in_id, self.in_label, self, Direction.IN)

    def vertices(self, direction: Direction = Direction.BOTH) -> list[Vertex]:
        if direction == Direction.OUT:
            return [self.out_vertex()]
        if direction == Direction.IN:
            return [self.in_vertex()]
        return [self.out_vertex(), self.in_vertex()]

    def __repr__(self) -> str:
        return f"e[{self.id}][{self.out_id}-{self.label}->{self.in_id}]"
