"""Elasticsearch 8.x document store."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from elasticsearch import (
    ApiError,
    BadRequestError,
    ConflictError,
    Elasticsearch,
    NotFoundError,
    TransportError,
)

from ..errors import BackendUnavailableError, GraphStoreError
from ..observability.metrics import BACKEND_ERRORS
from .document_store import (
    DocumentExistsError,
    DocumentMissingError,
    DocumentRef,
    DocumentStore,
    SearchHit,
    StoredDocument,
)

logger = logging.getLogger(__name__)

# Keys are bound through params.*; nothing user supplied is spliced into the source.
UPDATE_SCRIPT = """
boolean changed = false;
for (entry in params.set.entrySet()) {
  ctx._source[entry.getKey()] = entry.getValue();
  changed = true;
}
for (key in params.unset) {
  if (ctx._source.containsKey(key)) {
    ctx._source.remove(key);
    changed = true;
  }
}
if (!changed) {
  ctx.op = 'noop';
}
""".strip()


class ElasticsearchDocumentStore(DocumentStore):
    """Document store backed by an Elasticsearch cluster.

    No retries are configured: a failed request surfaces immediately as
    BackendUnavailableError and retry policy is left to callers.
    """

    def __init__(
        self,
        hosts: list[str] | None = None,
        request_timeout: float = 10.0,
        client: Elasticsearch | None = None,
        scroll_keep_alive: str = "1m",
    ) -> None:
        self.hosts = hosts or ["http://localhost:9200"]
        self.request_timeout = request_timeout
        self.scroll_keep_alive = scroll_keep_alive
        self.client = client or Elasticsearch(
            self.hosts,
            request_timeout=request_timeout,
            max_retries=0,
            retry_on_timeout=False,
        )

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except ApiError as exc:
            BACKEND_ERRORS.labels(operation=operation, error=str(exc.error)).inc()
            if exc.meta.status >= 500:
                raise BackendUnavailableError(
                    f"Elasticsearch {operation} failed with status {exc.meta.status}: {exc.error}",
                    operation=operation,
                ) from exc
            raise GraphStoreError(
                f"Elasticsearch rejected {operation}: {exc.error}",
                operation=operation,
            ) from exc
        except TransportError as exc:
            BACKEND_ERRORS.labels(operation=operation, error=type(exc).__name__).inc()
            logger.warning(
                "elasticsearch.unavailable",
                extra={"operation": operation, "hosts": self.hosts, "error": str(exc)},
            )
            raise BackendUnavailableError(
                f"Elasticsearch unreachable during {operation}: {exc}",
                operation=operation,
            ) from exc

    def write(
        self,
        index: str,
        doc_id: str | None,
        fields: dict[str, Any],
        create_only: bool = True,
    ) -> str:
        with self._translate_errors("write"):
            if doc_id is None:
                response = self.client.index(index=index, document=fields)
            else:
                try:
                    response = self.client.index(
                        index=index,
                        id=doc_id,
                        document=fields,
                        op_type="create" if create_only else "index",
                    )
                except ConflictError as exc:
                    raise DocumentExistsError(index, doc_id) from exc
            return str(response["_id"])

    def delete(self, index: str, doc_id: str) -> bool:
        with self._translate_errors("delete"):
            try:
                self.client.delete(index=index, id=doc_id)
            except NotFoundError:
                logger.debug(
                    "elasticsearch.delete_absent",
                    extra={"index": index, "doc_id": doc_id},
                )
                return False
            return True

    def update_fields(
        self,
        index: str,
        doc_id: str,
        set_fields: dict[str, Any] | None = None,
        unset_keys: list[str] | None = None,
    ) -> None:
        with self._translate_errors("update"):
            try:
                if unset_keys:
                    self.client.update(
                        index=index,
                        id=doc_id,
                        script={
                            "source": UPDATE_SCRIPT,
                            "lang": "painless",
                            "params": {"set": set_fields or {}, "unset": list(unset_keys)},
                        },
                    )
                elif set_fields:
                    self.client.update(index=index, id=doc_id, doc=set_fields)
            except NotFoundError as exc:
                raise DocumentMissingError(index, doc_id) from exc

    def multi_get(self, refs: list[DocumentRef]) -> list[StoredDocument]:
        if not refs:
            return []
        with self._translate_errors("multi_get"):
            response = self.client.mget(
                docs=[{"_index": ref.index, "_id": ref.doc_id} for ref in refs]
            )
        documents = []
        for doc in response["docs"]:
            error = doc.get("error")
            if error is not None:
                error_type = error.get("type") if isinstance(error, dict) else str(error)
                if error_type != "index_not_found_exception":
                    raise GraphStoreError(
                        f"multi_get failed for '{doc.get('_id')}': {error_type}",
                        operation="multi_get",
                        element_id=doc.get("_id"),
                    )
            documents.append(
                StoredDocument(
                    doc_id=str(doc["_id"]),
                    index=doc.get("_index", ""),
                    found=bool(doc.get("found", False)),
                    source=doc.get("_source") or {},
                )
            )
        return documents

    def search(
        self,
        indices: list[str],
        query: dict[str, Any],
        page_size: int,
        limit: int | None = None,
    ) -> Iterator[SearchHit]:
        if limit is not None:
            page_size = max(1, min(page_size, limit))
        with self._translate_errors("search"):
            response = self.client.search(
                index=indices,
                query={"constant_score": {"filter": query}},
                size=page_size,
                scroll=self.scroll_keep_alive,
                ignore_unavailable=True,
                allow_no_indices=True,
            )
        return self._scroll(response, page_size, limit)

    def _scroll(
        self, response: Any, page_size: int, limit: int | None
    ) -> Iterator[SearchHit]:
        scroll_id = response["_scroll_id"]
        returned = 0
        try:
            while True:
                hits = response["hits"]["hits"]
                for hit in hits:
                    if limit is not None and returned >= limit:
                        return
                    returned += 1
                    yield SearchHit(
                        doc_id=str(hit["_id"]),
                        index=hit["_index"],
                        source=hit.get("_source") or {},
                    )
                if len(hits) < page_size or (limit is not None and returned >= limit):
                    return
                with self._translate_errors("scroll"):
                    response = self.client.scroll(
                        scroll_id=scroll_id, scroll=self.scroll_keep_alive
                    )
                scroll_id = response["_scroll_id"]
        finally:
            self._clear_scroll(scroll_id)

    def _clear_scroll(self, scroll_id: str) -> None:
        # Scroll contexts expire after keep-alive; a failed clear is only logged.
        try:
            self.client.clear_scroll(scroll_id=scroll_id)
        except (ApiError, TransportError) as exc:
            BACKEND_ERRORS.labels(operation="clear_scroll", error=type(exc).__name__).inc()
            logger.warning(
                "elasticsearch.clear_scroll_failed",
                extra={"hosts": self.hosts, "error": str(exc)},
            )

    def refresh(self, indices: list[str]) -> None:
        with self._translate_errors("refresh"):
            self.client.indices.refresh(
                index=indices, ignore_unavailable=True, allow_no_indices=True
            )

    def ensure_index(self, name: str, mappings: dict[str, Any] | None = None) -> bool:
        with self._translate_errors("ensure_index"):
            if self.client.indices.exists(index=name):
                return False
            try:
                self.client.indices.create(index=name, mappings=mappings)
            except BadRequestError as exc:
                # Lost a creation race with another process.
                if exc.error == "resource_already_exists_exception":
                    return False
                raise
        logger.info("elasticsearch.index_created", extra={"index": name})
        return True

    def info(self) -> dict[str, Any]:
        with self._translate_errors("info"):
            response = self.client.info()
        return {
            "cluster_name": response["cluster_name"],
            "version": response["version"]["number"],
        }

    def close(self) -> None:
        self.client.close()

    def __repr__(self) -> str:
        return f"ElasticsearchDocumentStore(hosts={self.hosts!r})"
