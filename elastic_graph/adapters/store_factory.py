"""Factory for creating DocumentStore instances based on configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..errors import InitializationError

if TYPE_CHECKING:
    from ..config.settings import Settings
    from .document_store import DocumentStore

logger = logging.getLogger(__name__)


def create_document_store(settings: Settings) -> DocumentStore:
    """Create the DocumentStore selected by ``settings.storage_backend``."""
    backend = settings.storage_backend.lower()

    if backend == "memory":
        from .memory_store import InMemoryDocumentStore

        logger.info("document_store.memory")
        return InMemoryDocumentStore()

    if backend == "elasticsearch":
        from .elasticsearch_store import ElasticsearchDocumentStore

        logger.info(
            "document_store.elasticsearch",
            extra={
                "hosts": settings.storage_hosts,
                "cluster_name": settings.cluster_name,
                "request_timeout": settings.request_timeout,
            },
        )
        try:
            return ElasticsearchDocumentStore(
                hosts=settings.storage_hosts,
                request_timeout=settings.request_timeout,
            )
        except ValueError as exc:
            raise InitializationError(
                f"Invalid Elasticsearch address '{settings.storage_address}': {exc}",
                operation="init",
            ) from exc

    raise InitializationError(
        f"Unsupported storage backend configured: {settings.storage_backend}",
        operation="init",
    )
