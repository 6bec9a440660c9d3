"""Tests for the shared-index and per-kind-index schema providers."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from elastic_graph import filters
from elastic_graph.adapters.memory_store import InMemoryDocumentStore
from elastic_graph.config import Settings
from elastic_graph.errors import InitializationError, RoutingError
from elastic_graph.models.elements import KIND_FIELD, LABEL_FIELD, ElementKind, Vertex
from elastic_graph.schema.base import GRAPH_MAPPINGS, SchemaProvider
from elastic_graph.schema.kind_index import KindIndexSchemaProvider
from elastic_graph.schema.shared_index import SharedIndexSchemaProvider


class TestSchemaProviderABC:
    def test_cannot_instantiate_abc(self) -> None:
        with pytest.raises(TypeError, match="abstract"):
            SchemaProvider()  # type: ignore[abstract]

    def test_abc_defines_required_methods(self) -> None:
        assert SchemaProvider.__abstractmethods__ == {
            "indices",
            "add_element",
            "index_for",
            "search",
        }


class TestSharedIndexSchemaProvider:
    def test_init_creates_index_with_mappings(self, store, schema_provider) -> None:
        assert schema_provider.indices() == ["graph"]
        assert store.mappings("graph") == GRAPH_MAPPINGS

    def test_add_element_adds_reserved_fields(self, schema_provider) -> None:
        result = schema_provider.add_element("person", "p1", ElementKind.VERTEX, {"name": "Ann"})
        assert result.index == "graph"
        assert result.fields == {"name": "Ann", KIND_FIELD: "vertex", LABEL_FIELD: "person"}

    def test_add_element_does_not_mutate_input(self, schema_provider) -> None:
        key_values = {"name": "Ann"}
        schema_provider.add_element("person", "p1", ElementKind.VERTEX, key_values)
        assert key_values == {"name": "Ann"}

    def test_index_for_element_and_bare_id(self, schema_provider) -> None:
        assert schema_provider.index_for(Vertex("p1", "person")) == "graph"
        assert schema_provider.index_for("p1", ElementKind.EDGE) == "graph"

    def test_search_scopes_kind(self, schema_provider) -> None:
        result = schema_provider.search(None, ElementKind.VERTEX)
        assert result.indices == ["graph"]
        assert result.filter == filters.term(KIND_FIELD, "vertex")

    def test_search_ands_filter_kind_and_labels(self, schema_provider) -> None:
        caller = filters.range_("age", gte=18)
        result = schema_provider.search(caller, ElementKind.VERTEX, ["person"])
        assert result.filter == {
            "bool": {
                "filter": [
                    caller,
                    filters.term(KIND_FIELD, "vertex"),
                    filters.terms(LABEL_FIELD, ["person"]),
                ]
            }
        }

    def test_doc_ids_are_kind_qualified(self, schema_provider) -> None:
        assert schema_provider.doc_id("1", ElementKind.VERTEX) == "vertex:1"
        assert schema_provider.doc_id(7, ElementKind.EDGE) == "edge:7"
        assert schema_provider.element_id("edge:7", ElementKind.EDGE) == "7"

    def test_missing_id_is_generated(self, schema_provider) -> None:
        doc_id = schema_provider.doc_id(None, ElementKind.VERTEX)
        assert doc_id.startswith("vertex:")
        assert len(schema_provider.element_id(doc_id, ElementKind.VERTEX)) == 32

    def test_uses_configured_target_index(self, store) -> None:
        provider = SharedIndexSchemaProvider()
        provider.init(store, Settings(target_index="people"))
        assert provider.indices() == ["people"]
        assert store.count("people") == 0


class TestKindIndexSchemaProvider:
    def test_init_creates_one_index_per_kind(self, store, kind_schema_provider) -> None:
        assert kind_schema_provider.indices() == ["graph-vertex", "graph-edge"]
        assert store.mappings("graph-vertex") == GRAPH_MAPPINGS
        assert store.mappings("graph-edge") == GRAPH_MAPPINGS

    def test_routes_by_kind(self, kind_schema_provider) -> None:
        vertex = kind_schema_provider.add_element("person", "p1", ElementKind.VERTEX, {})
        edge = kind_schema_provider.add_element("knows", "e1", ElementKind.EDGE, {})
        assert vertex.index == "graph-vertex"
        assert edge.index == "graph-edge"
        assert kind_schema_provider.index_for("e1", ElementKind.EDGE) == "graph-edge"

    def test_bare_id_without_kind_cannot_be_routed(self, kind_schema_provider) -> None:
        with pytest.raises(RoutingError):
            kind_schema_provider.index_for("p1")

    def test_doc_ids_pass_through(self, kind_schema_provider) -> None:
        assert kind_schema_provider.doc_id(1, ElementKind.EDGE) == "1"
        assert kind_schema_provider.doc_id(None, ElementKind.EDGE) is None
        assert kind_schema_provider.element_id("abc", ElementKind.EDGE) == "abc"

    def test_search_targets_kind_index(self, kind_schema_provider) -> None:
        assert kind_schema_provider.search(None, ElementKind.EDGE).indices == ["graph-edge"]


class TestAllowedLabels:
    @pytest.fixture
    def strict(self) -> SharedIndexSchemaProvider:
        provider = SharedIndexSchemaProvider()
        provider.init(InMemoryDocumentStore(), Settings(allowed_labels=["person"]))
        return provider

    def test_known_label_routes(self, strict) -> None:
        assert strict.add_element("person", None, ElementKind.VERTEX, {}).index == "graph"

    def test_unknown_label_on_write(self, strict) -> None:
        with pytest.raises(RoutingError, match="robot"):
            strict.add_element("robot", None, ElementKind.VERTEX, {})

    def test_unknown_label_on_search(self, strict) -> None:
        with pytest.raises(RoutingError):
            strict.search(None, ElementKind.VERTEX, ["robot"])


class TestInitFailures:
    def test_store_failure_becomes_initialization_error(self) -> None:
        store = MagicMock()
        store.ensure_index.side_effect = RuntimeError("cluster red")
        with pytest.raises(InitializationError, match="cluster red"):
            SharedIndexSchemaProvider().init(store, Settings())
