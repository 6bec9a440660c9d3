"""All elements in one index, discriminated by kind."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Any

from ..filters import Filter
from ..models.elements import Element, ElementKind
from .base import AddElementResult, SchemaProvider, SearchResult


class SharedIndexSchemaProvider(SchemaProvider):
    """Vertices and edges share ``base_index``.

    Element ids are only unique within a kind, so stored ids are
    kind-qualified (``vertex:1``, ``edge:1``). Ids are generated here rather
    than by the backend so the qualified form is always known.
    """

    def indices(self) -> list[str]:
        return [self.base_index]

    def add_element(
        self,
        label: str,
        element_id: Any,
        kind: ElementKind,
        key_values: Mapping[str, Any],
    ) -> AddElementResult:
        self.check_label(label)
        return AddElementResult(self.base_index, self.stored_fields(label, kind, key_values))

    def index_for(self, element_or_id: Element | Any, kind: ElementKind | None = None) -> str:
        return self.base_index

    def doc_id(self, element_id: Any, kind: ElementKind) -> str:
        if element_id is None:
            element_id = uuid.uuid4().hex
        return f"{kind.value}:{element_id}"

    def element_id(self, doc_id: str, kind: ElementKind) -> str:
        return doc_id.removeprefix(f"{kind.value}:")

    def search(
        self,
        filter: Filter | None,
        kind: ElementKind,
        labels: list[str] | None = None,
    ) -> SearchResult:
        return SearchResult([self.base_index], self.scoped_filter(filter, kind, labels))
