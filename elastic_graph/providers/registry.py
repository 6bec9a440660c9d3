"""Central registry wiring the graph stack from runtime settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..adapters.store_factory import create_document_store
from ..config import get_settings
from ..errors import GraphStoreError, InitializationError
from ..logging import configure_logging
from ..observability.timing import TimingAccessor
from ..observability.tracing import configure_tracing
from ..schema.factory import create_schema_provider
from ..services.element_service import ElementService
from ..services.query_handler import DocumentQueryHandler

if TYPE_CHECKING:
    from ..adapters.document_store import DocumentStore
    from ..config.settings import Settings
    from ..schema.base import SchemaProvider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Resolve store, schema and service implementations from settings."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def get_document_store(self) -> DocumentStore:
        """Return a connected store, verified against ``cluster_name`` if set."""
        store = create_document_store(self._settings)
        expected = self._settings.cluster_name
        if not expected:
            return store

        try:
            actual = store.info().get("cluster_name")
        except GraphStoreError as exc:
            store.close()
            raise InitializationError(
                f"Could not reach cluster '{expected}': {exc}", operation="init"
            ) from exc
        if actual != expected:
            store.close()
            raise InitializationError(
                f"Connected to cluster '{actual}', expected '{expected}'",
                operation="init",
            )
        logger.info("registry.cluster_verified", extra={"cluster_name": actual})
        return store

    def get_schema_provider(self, store: DocumentStore) -> SchemaProvider:
        """Return the configured schema provider, initialized against ``store``."""
        provider = create_schema_provider(self._settings)
        provider.init(store, self._settings)
        return provider

    def get_timing_accessor(self) -> TimingAccessor:
        return TimingAccessor()

    def get_element_service(self, timing: TimingAccessor | None = None) -> ElementService:
        store = self.get_document_store()
        try:
            schema_provider = self.get_schema_provider(store)
        except InitializationError:
            store.close()
            raise
        return ElementService(
            store,
            schema_provider,
            timing=timing or self.get_timing_accessor(),
            refresh=self._settings.refresh_on_search,
            batch_size=self._settings.batch_size,
        )

    def get_query_handler(self, timing: TimingAccessor | None = None) -> DocumentQueryHandler:
        handler = DocumentQueryHandler(self.get_element_service(timing))
        logger.info(
            "registry.query_handler_ready",
            extra={
                "backend": self._settings.storage_backend,
                "strategy": self._settings.schema_strategy,
                "target_index": self._settings.target_index,
            },
        )
        return handler


def get_provider_registry(settings: Settings | None = None) -> ProviderRegistry:
    return ProviderRegistry(settings or get_settings())


def open_query_handler(
    settings: Settings | None = None, *, configure: bool = False
) -> DocumentQueryHandler:
    """Build a ready query handler; the caller closes it.

    With ``configure`` set, process-wide logging and tracing are set up from
    ``settings`` first. Embedding applications that own those leave it off.
    """
    settings = settings or get_settings()
    if configure:
        configure_logging(settings.log_level, settings.service_name)
        if settings.otel_exporter_otlp_endpoint:
            configure_tracing(settings.service_name, settings.otel_exporter_otlp_endpoint)
    return get_provider_registry(settings).get_query_handler()
