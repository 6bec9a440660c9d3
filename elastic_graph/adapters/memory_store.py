"""Process-local document store for development and tests."""

from __future__ import annotations

import copy
import logging
import threading
import uuid
from collections.abc import Iterator
from typing import Any

from .document_store import (
    DocumentExistsError,
    DocumentMissingError,
    DocumentRef,
    DocumentStore,
    SearchHit,
    StoredDocument,
)

logger = logging.getLogger(__name__)

_MISSING = object()


def _values(source: dict[str, Any], field: str) -> list[Any]:
    value = source.get(field, _MISSING)
    if value is _MISSING or value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [v for v in value if v is not None]
    return [value]


def _in_range(value: Any, bounds: dict[str, Any]) -> bool:
    try:
        if "gt" in bounds and not value > bounds["gt"]:
            return False
        if "gte" in bounds and not value >= bounds["gte"]:
            return False
        if "lt" in bounds and not value < bounds["lt"]:
            return False
        if "lte" in bounds and not value <= bounds["lte"]:
            return False
    except TypeError:
        return False
    return True


def matches(query: dict[str, Any], doc_id: str, source: dict[str, Any]) -> bool:
    """Evaluate the supported query DSL subset against one document."""
    if len(query) != 1:
        raise ValueError(f"query must have exactly one clause: {query!r}")
    (clause, body), = query.items()

    if clause == "match_all":
        return True
    if clause == "term":
        (field, expected), = body.items()
        if isinstance(expected, dict):
            expected = expected["value"]
        return expected in _values(source, field)
    if clause == "terms":
        (field, expected), = body.items()
        return any(v in expected for v in _values(source, field))
    if clause == "ids":
        return doc_id in [str(v) for v in body["values"]]
    if clause == "exists":
        return bool(_values(source, body["field"]))
    if clause == "range":
        (field, bounds), = body.items()
        return any(_in_range(v, bounds) for v in _values(source, field))
    if clause == "constant_score":
        return matches(body["filter"], doc_id, source)
    if clause == "bool":
        return _matches_bool(body, doc_id, source)
    raise ValueError(f"unsupported query clause: {clause}")


def _clauses(body: dict[str, Any], key: str) -> list[dict[str, Any]]:
    value = body.get(key, [])
    return value if isinstance(value, list) else [value]


def _matches_bool(body: dict[str, Any], doc_id: str, source: dict[str, Any]) -> bool:
    for key in ("filter", "must"):
        if not all(matches(q, doc_id, source) for q in _clauses(body, key)):
            return False
    if any(matches(q, doc_id, source) for q in _clauses(body, "must_not")):
        return False
    should = _clauses(body, "should")
    if should:
        # Matches Elasticsearch: should clauses are optional once filter/must exist.
        default_min = 0 if ("filter" in body or "must" in body) else 1
        minimum = int(body.get("minimum_should_match", default_min))
        if sum(1 for q in should if matches(q, doc_id, source)) < minimum:
            return False
    return True


class InMemoryDocumentStore(DocumentStore):
    """Thread-safe dict-backed store.

    With ``near_real_time`` enabled, search only sees documents as of the last
    ``refresh`` while gets stay realtime, which mirrors Elasticsearch.
    With ``record_requests`` enabled, every backend round trip is appended to
    ``requests`` (including one ``scroll`` per page after the first).
    """

    def __init__(
        self,
        near_real_time: bool = False,
        cluster_name: str = "memory",
        record_requests: bool = False,
    ) -> None:
        self.near_real_time = near_real_time
        self.cluster_name = cluster_name
        self.record_requests = record_requests
        self.requests: list[str] = []
        self.closed = False
        self._indices: dict[str, dict[str, dict[str, Any]]] = {}
        self._visible: dict[str, dict[str, dict[str, Any]]] = {}
        self._mappings: dict[str, dict[str, Any] | None] = {}
        self._lock = threading.RLock()

    def _record(self, operation: str) -> None:
        if self.record_requests:
            self.requests.append(operation)

    def write(
        self,
        index: str,
        doc_id: str | None,
        fields: dict[str, Any],
        create_only: bool = True,
    ) -> str:
        with self._lock:
            self._record("write")
            docs = self._indices.setdefault(index, {})
            if doc_id is None:
                doc_id = uuid.uuid4().hex
            elif create_only and doc_id in docs:
                raise DocumentExistsError(index, doc_id)
            docs[doc_id] = copy.deepcopy(fields)
            return doc_id

    def delete(self, index: str, doc_id: str) -> bool:
        with self._lock:
            self._record("delete")
            docs = self._indices.get(index, {})
            return docs.pop(doc_id, None) is not None

    def update_fields(
        self,
        index: str,
        doc_id: str,
        set_fields: dict[str, Any] | None = None,
        unset_keys: list[str] | None = None,
    ) -> None:
        with self._lock:
            self._record("update")
            source = self._indices.get(index, {}).get(doc_id)
            if source is None:
                raise DocumentMissingError(index, doc_id)
            source.update(copy.deepcopy(set_fields or {}))
            for key in unset_keys or []:
                source.pop(key, None)

    def multi_get(self, refs: list[DocumentRef]) -> list[StoredDocument]:
        if not refs:
            return []
        with self._lock:
            self._record("multi_get")
            result = []
            for ref in refs:
                source = self._indices.get(ref.index, {}).get(ref.doc_id)
                result.append(
                    StoredDocument(
                        doc_id=ref.doc_id,
                        index=ref.index,
                        found=source is not None,
                        source=copy.deepcopy(source) if source is not None else {},
                    )
                )
            return result

    def search(
        self,
        indices: list[str],
        query: dict[str, Any],
        page_size: int,
        limit: int | None = None,
    ) -> Iterator[SearchHit]:
        # Matches are snapshotted up front, like a scroll context.
        with self._lock:
            self._record("search")
            space = self._visible if self.near_real_time else self._indices
            hits: list[SearchHit] = []
            for index in indices:
                for doc_id, source in space.get(index, {}).items():
                    if limit is not None and len(hits) >= limit:
                        break
                    if matches(query, doc_id, source):
                        hits.append(SearchHit(doc_id, index, copy.deepcopy(source)))
        return self._pages(hits, max(1, page_size))

    def _pages(self, hits: list[SearchHit], page_size: int) -> Iterator[SearchHit]:
        for position, hit in enumerate(hits):
            if position and position % page_size == 0:
                self._record("scroll")
            yield hit

    def refresh(self, indices: list[str]) -> None:
        with self._lock:
            self._record("refresh")
            for index in indices:
                if index in self._indices:
                    self._visible[index] = copy.deepcopy(self._indices[index])

    def ensure_index(self, name: str, mappings: dict[str, Any] | None = None) -> bool:
        with self._lock:
            self._record("ensure_index")
            if name in self._indices:
                return False
            self._indices[name] = {}
            self._mappings[name] = mappings
            logger.info("memory_store.index_created", extra={"index": name})
            return True

    def info(self) -> dict[str, Any]:
        return {"cluster_name": self.cluster_name, "version": "memory"}

    def close(self) -> None:
        self.closed = True

    def mappings(self, name: str) -> dict[str, Any] | None:
        return self._mappings.get(name)

    def count(self, index: str) -> int:
        with self._lock:
            return len(self._indices.get(index, {}))
