import os
from functools import lru_cache

from pydantic import BaseModel


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str) -> list[str]:
    raw = os.getenv(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseModel):
    env: str = os.getenv("ENV", "dev")
    log_level: str = os.getenv("LOG_LEVEL", "info")
    service_name: str = os.getenv("SERVICE_NAME", "elastic-graph")

    # Storage backend: "elasticsearch" (cluster) or "memory" (local dev / tests)
    storage_backend: str = os.getenv("GRAPH_STORAGE_BACKEND", "elasticsearch")

    # Elasticsearch connection
    # Comma separated list, e.g. "http://es-1:9200,http://es-2:9200"
    storage_address: str = os.getenv("ELASTICSEARCH_ADDRESS", "http://localhost:9200")
    # When set, init refuses to talk to a cluster with a different name
    cluster_name: str | None = os.getenv("ELASTICSEARCH_CLUSTER_NAME")
    request_timeout: float = float(os.getenv("ELASTICSEARCH_REQUEST_TIMEOUT", "10.0"))

    # Graph layout
    target_index: str = os.getenv("GRAPH_INDEX_NAME", "graph")
    schema_strategy: str = os.getenv("GRAPH_SCHEMA_STRATEGY", "shared")
    # Empty means any label is accepted
    allowed_labels: list[str] = _env_list("GRAPH_ALLOWED_LABELS")

    # Query behaviour
    refresh_on_search: bool = _env_bool("GRAPH_REFRESH_ON_SEARCH")
    # Rows fetched per search round trip; results page past it
    batch_size: int = int(os.getenv("GRAPH_BATCH_SIZE", "500"))

    # Observability
    otel_exporter_otlp_endpoint: str | None = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")

    @property
    def storage_hosts(self) -> list[str]:
        return [h.strip() for h in self.storage_address.split(",") if h.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
