"""Storage backend adapters."""

from .document_store import (
    DocumentExistsError,
    DocumentMissingError,
    DocumentRef,
    DocumentStore,
    SearchHit,
    StoredDocument,
)
from .store_factory import create_document_store

__all__ = [
    "DocumentExistsError",
    "DocumentMissingError",
    "DocumentRef",
    "DocumentStore",
    "SearchHit",
    "StoredDocument",
    "create_document_store",
]
