"""One index per element kind: ``{base}-vertex`` and ``{base}-edge``."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..errors import RoutingError
from ..filters import Filter
from ..models.elements import Element, ElementKind
from .base import AddElementResult, SchemaProvider, SearchResult


class KindIndexSchemaProvider(SchemaProvider):
    def kind_index(self, kind: ElementKind) -> str:
        return f"{self.base_index}-{kind.value}"

    def indices(self) -> list[str]:
        return [self.kind_index(kind) for kind in ElementKind]

    def add_element(
        self,
        label: str,
        element_id: Any,
        kind: ElementKind,
        key_values: Mapping[str, Any],
    ) -> AddElementResult:
        self.check_label(label)
        return AddElementResult(self.kind_index(kind), self.stored_fields(label, kind, key_values))

    def index_for(self, element_or_id: Element | Any, kind: ElementKind | None = None) -> str:
        if isinstance(element_or_id, Element):
            return self.kind_index(element_or_id.kind)
        if kind is None:
            raise RoutingError(
                f"cannot route bare id '{element_or_id}' without an element kind",
                operation="route",
                element_id=element_or_id,
            )
        return self.kind_index(kind)

    def search(
        self,
        filter: Filter | None,
        kind: ElementKind,
        labels: list[str] | None = None,
    ) -> SearchResult:
        return SearchResult([self.kind_index(kind)], self.scoped_filter(filter, kind, labels))
