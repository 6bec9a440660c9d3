"""Shared test fixtures and configuration."""

import os

import pytest

# Set up test environment BEFORE importing modules that use get_settings
os.environ["GRAPH_STORAGE_BACKEND"] = "memory"
os.environ.pop("ELASTICSEARCH_CLUSTER_NAME", None)
os.environ.pop("GRAPH_ALLOWED_LABELS", None)

from elastic_graph.adapters.memory_store import InMemoryDocumentStore  # noqa: E402
from elastic_graph.config import Settings, get_settings  # noqa: E402
from elastic_graph.observability.timing import TimingAccessor  # noqa: E402
from elastic_graph.schema.kind_index import KindIndexSchemaProvider  # noqa: E402
from elastic_graph.schema.shared_index import SharedIndexSchemaProvider  # noqa: E402
from elastic_graph.services.element_service import ElementService  # noqa: E402
from elastic_graph.services.query_handler import DocumentQueryHandler  # noqa: E402

# Clear the lru_cache on get_settings to pick up test env vars
get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Settings for an in-memory graph under the ``graph`` index."""
    return Settings(
        storage_backend="memory",
        target_index="graph",
        schema_strategy="shared",
        allowed_labels=[],
        cluster_name=None,
        refresh_on_search=False,
        batch_size=500,
    )


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore(record_requests=True)


@pytest.fixture
def schema_provider(store, settings) -> SharedIndexSchemaProvider:
    provider = SharedIndexSchemaProvider()
    provider.init(store, settings)
    return provider


@pytest.fixture
def kind_schema_provider(store, settings) -> KindIndexSchemaProvider:
    provider = KindIndexSchemaProvider()
    provider.init(store, settings)
    return provider


@pytest.fixture
def timing() -> TimingAccessor:
    return TimingAccessor()


@pytest.fixture
def service(store, schema_provider, timing) -> ElementService:
    return ElementService(store, schema_provider, timing=timing)


@pytest.fixture
def handler(service) -> DocumentQueryHandler:
    return DocumentQueryHandler(service)
