"""Document store adapter abstractions.

The graph layer talks to its storage backend only through this interface:
point writes, point deletes, partial updates, multi-get, paged search,
visibility refresh and index administration.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


class DocumentStoreError(Exception):
    """Base class for store-level outcomes the graph layer must translate."""

    def __init__(self, index: str, doc_id: str, message: str) -> None:
        super().__init__(message)
        self.index = index
        self.doc_id = doc_id


class DocumentExistsError(DocumentStoreError):
    """A create-only write hit an existing document."""

    def __init__(self, index: str, doc_id: str) -> None:
        super().__init__(index, doc_id, f"document '{doc_id}' already exists in '{index}'")


class DocumentMissingError(DocumentStoreError):
    """A partial update targeted a document that does not exist."""

    def __init__(self, index: str, doc_id: str) -> None:
        super().__init__(index, doc_id, f"document '{doc_id}' not found in '{index}'")


@dataclass(frozen=True, slots=True)
class DocumentRef:
    index: str
    doc_id: str


@dataclass(slots=True)
class StoredDocument:
    """One entry of a multi-get response."""

    doc_id: str
    index: str
    found: bool
    source: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class SearchHit:
    doc_id: str
    index: str
    source: dict[str, Any] = field(default_factory=dict)


class DocumentStore(ABC):
    """Abstract storage backend for graph documents."""

    @abstractmethod
    def write(
        self,
        index: str,
        doc_id: str | None,
        fields: dict[str, Any],
        create_only: bool = True,
    ) -> str:
        """Index a document and return its id.

        With ``create_only`` and an explicit id, raises DocumentExistsError
        instead of overwriting. Without an id the backend generates one.
        """
        ...

    @abstractmethod
    def delete(self, index: str, doc_id: str) -> bool:
        """Delete a document. Returns False if it was already absent."""
        ...

    @abstractmethod
    def update_fields(
        self,
        index: str,
        doc_id: str,
        set_fields: dict[str, Any] | None = None,
        unset_keys: list[str] | None = None,
    ) -> None:
        """Partially update a document, touching only the given keys.

        Raises DocumentMissingError if the document does not exist.
        """
        ...

    @abstractmethod
    def multi_get(self, refs: list[DocumentRef]) -> list[StoredDocument]:
        """Fetch many documents in a single round trip, in request order."""
        ...

    @abstractmethod
    def search(
        self,
        indices: list[str],
        query: dict[str, Any],
        page_size: int,
        limit: int | None = None,
    ) -> Iterator[SearchHit]:
        """Run a filter query over the indices and stream every hit.

        The first page of ``page_size`` hits is requested before this returns;
        later pages are fetched as the iterator advances. ``limit`` caps the
        total number of hits. The iterator is single-pass.
        """
        ...

    @abstractmethod
    def refresh(self, indices: list[str]) -> None:
        """Make recent writes on the indices visible to search."""
        ...

    @abstractmethod
    def ensure_index(self, name: str, mappings: dict[str, Any] | None = None) -> bool:
        """Create the index if missing. Returns True if it was created."""
        ...

    @abstractmethod
    def info(self) -> dict[str, Any]:
        """Return backend identity (cluster name, version)."""
        ...

    @abstractmethod
    def close(self) -> None:
        ...
